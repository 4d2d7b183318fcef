from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from trustset.core.readers.contracts import TagReader

log = logging.getLogger("trustset.core")

METADATA_SOURCE = "exifreader"

# Keys describing the image itself rather than its provenance.
CONTENT_KEYS: Tuple[str, ...] = (
    "imageWidth",
    "imageHeight",
    "bitDepth",
    "colorType",
    "compression",
    "filter",
    "interlace",
    "fileType",
)

_WORD_BREAK = re.compile(r"[_\s]+([a-zA-Z])")


def camel_case_key(name: str) -> str:
    """Turn a human-readable tag name into a camelCase key.

    "Image Width" -> "imageWidth", "ICC Description" -> "ICCDescription".
    """

    key = _WORD_BREAK.sub(lambda m: m.group(1).upper(), name)
    key = re.sub(r"^([A-Z])", lambda m: m.group(1).lower(), key)
    key = key.replace("/", "")
    if key.startswith("iCC"):
        key = "ICC" + key[3:]
    if key.startswith("jFIF"):
        key = "JFIF" + key[4:]
    return key


def normalize_tags(tags: Mapping[str, Any]) -> Dict[str, Any]:
    """Flatten a `{name: {"value": ...}}` tag map into `{camelKey: value}`."""

    out: Dict[str, Any] = {}
    for name, tag in tags.items():
        if not isinstance(tag, Mapping) or "value" not in tag:
            continue
        value = tag["value"]
        if isinstance(value, str) and value == "":
            continue
        out[camel_case_key(str(name))] = value
    return out


def extract_metadata(file_bytes: Optional[bytes], tag_reader: Optional[TagReader] = None) -> Dict[str, Any]:
    """Read and normalize file metadata.

    Never raises: a failing tag reader yields a small diagnostic object so
    indicator-set generation can continue.

    """

    if not file_bytes:
        return {}

    if tag_reader is None:
        from trustset.core.readers.tags import PillowTagReader

        tag_reader = PillowTagReader()

    try:
        return normalize_tags(tag_reader.read_tags(file_bytes))
    except Exception as e:
        # Tag readers parse untrusted bytes with third-party code.
        log.warning("metadata_extraction_failed", extra={"error": str(e)})
        return {
            "extractedAt": datetime.now(UTC).isoformat(),
            "source": METADATA_SOURCE,
            "error": f"Failed to extract metadata: {e}",
        }


def split_content(metadata: Mapping[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Move the content-describing keys out of `metadata`.

    Returns (metadata, content) as new dicts.
    """

    remaining = dict(metadata)
    content: Dict[str, Any] = {}
    for key in CONTENT_KEYS:
        if key in remaining:
            content[key] = remaining.pop(key)
    return remaining, content
