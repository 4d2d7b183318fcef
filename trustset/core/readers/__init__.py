"""Collaborator contracts and adapters.

Container parsing, signature validation and EXIF decoding live outside the
indicator pipeline. This package defines the small contracts the pipeline
needs and the default adapters (Pillow for tags, c2pa-python for manifests).
"""

from .c2pa_reader import (
    C2paManifestReader,
    ReportedManifestStore,
    default_manifest_reader,
    store_from_report,
    validation_from_report,
)
from .contracts import ManifestReader, TagReader
from .file_info import TEXT_EXTENSIONS, AssetInfo, FileInfo, sniff_asset, sniff_file_info
from .tags import PillowTagReader

__all__ = [
    "ManifestReader",
    "TagReader",
    "AssetInfo",
    "FileInfo",
    "TEXT_EXTENSIONS",
    "sniff_asset",
    "sniff_file_info",
    "PillowTagReader",
    "C2paManifestReader",
    "ReportedManifestStore",
    "default_manifest_reader",
    "store_from_report",
    "validation_from_report",
]
