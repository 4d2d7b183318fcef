from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from trustset.core.indicators import generate_indicator_set, summarize_manifest
from trustset.core.models import ValidationResult
from trustset.core.readers import ManifestReader, TagReader, default_manifest_reader, sniff_asset

log = logging.getLogger("trustset.core")

UNSUPPORTED_FORMAT = "Unsupported file format for C2PA processing"


def _new_info() -> Dict[str, Any]:
    return {
        "hasManifestStore": False,
        "manifestCount": 0,
        "validationStatus": "not_applicable",
        "manifests": [],
        "error": None,
        "fileFormat": "unknown",
        "indicatorSet": None,
    }


def _validation_summary(result: ValidationResult) -> Dict[str, Any]:
    errors = result.validation_errors if isinstance(result.validation_errors, list) else []
    return {
        "isValid": bool(result.is_valid),
        "error": result.error or None,
        "validationErrors": [str(e) for e in errors],
    }


async def process_manifest_store(
    file_bytes: bytes,
    as_indicator_set: bool = False,
    *,
    reader: Optional[ManifestReader] = None,
    tag_reader: Optional[TagReader] = None,
) -> Dict[str, Any]:
    """Detect, read and validate the C2PA manifest store of an asset.

    Returns a C2PA info record. With as_indicator_set the record carries a
    JPEG Trust indicator set; otherwise it lists flat manifest summaries.

    Never raises: unsupported formats, missing manifests and collaborator
    failures are reported in the record.

    """

    info = _new_info()

    asset = sniff_asset(file_bytes)
    if asset is None:
        log.info("unsupported_file_format", extra={"size_bytes": len(file_bytes)})
        info["error"] = UNSUPPORTED_FORMAT
        return info
    info["fileFormat"] = asset.format

    if reader is None:
        try:
            reader = default_manifest_reader()
        except RuntimeError as e:
            # Asset hash and metadata need no manifest reader.
            log.warning("manifest_reader_unavailable", extra={"error": str(e)})
            info["error"] = str(e)
            info["validationStatus"] = "error"
            if as_indicator_set:
                info["indicatorSet"] = generate_indicator_set(
                    None, None, file_bytes, tag_reader=tag_reader
                )
            return info

    try:
        container = reader.extract(asset)
        if not container:
            if as_indicator_set:
                info["indicatorSet"] = generate_indicator_set(
                    None, None, file_bytes, tag_reader=tag_reader
                )
            return info

        info["hasManifestStore"] = True
        info["manifestCount"] = 1

        try:
            store = reader.read(container)
            info["manifestCount"] = len(store.manifests)

            validation = await reader.validate(store, asset)

            if as_indicator_set:
                info["indicatorSet"] = generate_indicator_set(
                    store, validation, file_bytes, tag_reader=tag_reader
                )
            else:
                info["manifests"] = [summarize_manifest(m) for m in store.manifests]

            info["validationStatus"] = _validation_summary(validation)
        except Exception as e:
            # Keep a well-formed validation record when the store cannot be read.
            log.warning("manifest_processing_failed", extra={"error": type(e).__name__})
            degraded = ValidationResult(
                is_valid=False,
                error=type(e).__name__,
                validation_errors=[str(e)],
            )
            info["validationStatus"] = _validation_summary(degraded)
            if as_indicator_set:
                info["indicatorSet"] = generate_indicator_set(
                    None, degraded, file_bytes, tag_reader=tag_reader
                )
    except Exception as e:
        message = str(e)
        if "No manifest found" in message or "not found" in message:
            info["validationStatus"] = "no_manifest"
        else:
            log.warning("c2pa_processing_error", extra={"error": message})
            info["error"] = message
            info["validationStatus"] = "error"

    return info


def process_manifest_store_sync(
    file_bytes: bytes,
    as_indicator_set: bool = False,
    *,
    reader: Optional[ManifestReader] = None,
    tag_reader: Optional[TagReader] = None,
) -> Dict[str, Any]:
    """Blocking wrapper around process_manifest_store."""

    return asyncio.run(
        process_manifest_store(
            file_bytes, as_indicator_set, reader=reader, tag_reader=tag_reader
        )
    )
