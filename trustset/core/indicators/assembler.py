from __future__ import annotations

import base64
import hashlib
from typing import Any, Dict, List, Mapping, Optional

from trustset.core.models import ManifestStore, ValidationResult
from trustset.core.readers.contracts import TagReader

from .manifest import build_manifest_indicator
from .metadata import extract_metadata, split_content

JPEG_TRUST_VOCAB = "https://jpeg.org/jpegtrust"
JPEG_TRUST_EXTRAS = "https://jpeg.org/jpegtrust/extras"
VALIDATION_STATUS_KEY = "extras:validation_status"

_REQUIRED_KEYS = ("@context", "asset_info", "metadata", "content", "manifests")


def build_context() -> Dict[str, str]:
    return {"@vocab": JPEG_TRUST_VOCAB, "extras": JPEG_TRUST_EXTRAS}


def build_asset_info(file_bytes: Optional[bytes]) -> Dict[str, Any]:
    """SHA-256 of the whole file, base64-encoded."""

    if not file_bytes:
        return {}
    digest = hashlib.sha256(file_bytes).digest()
    return {"alg": "sha256", "hash": base64.b64encode(digest).decode("ascii")}


def build_validation_status(result: ValidationResult) -> Dict[str, Any]:
    errors = result.validation_errors if isinstance(result.validation_errors, list) else []
    return {
        "isValid": bool(result.is_valid),
        "error": result.error or None,
        "validationErrors": [str(e) for e in errors],
        "entries": [
            {
                "code": e.code,
                "message": e.message,
                "url": e.url or None,
                "severity": e.severity or "info",
            }
            for e in result.status_entries
        ],
    }


def generate_indicator_set(
    manifest_store: Optional[ManifestStore],
    validation_result: Optional[ValidationResult],
    file_bytes: Optional[bytes],
    *,
    tag_reader: Optional[TagReader] = None,
) -> Dict[str, Any]:
    """Assemble a JPEG Trust indicator set.

    `manifest_store` is None when no store could be parsed; the document
    then carries no manifests but still describes the asset. A validation
    result, if given, is attached as "extras:validation_status" in both
    cases.

    Performs no I/O.

    """

    metadata, content = split_content(extract_metadata(file_bytes, tag_reader))

    manifests: List[Dict[str, Any]] = []
    if manifest_store is not None:
        entries = validation_result.to_representation() if validation_result is not None else []
        for manifest in manifest_store.manifests:
            manifests.append(build_manifest_indicator(manifest, entries))

    indicator_set: Dict[str, Any] = {
        "@context": build_context(),
        "asset_info": build_asset_info(file_bytes),
        "metadata": metadata,
        "content": content,
        "manifests": manifests,
    }
    if validation_result is not None:
        indicator_set[VALIDATION_STATUS_KEY] = build_validation_status(validation_result)

    validate_indicator_set(indicator_set)
    return indicator_set


def validate_indicator_set(doc: Mapping[str, Any]) -> None:
    """Shape validator for an indicator set. Raises ValueError."""

    if not isinstance(doc, Mapping):
        raise ValueError("indicator set must be a mapping")
    for key in _REQUIRED_KEYS:
        if key not in doc:
            raise ValueError(f"indicator set missing field: {key}")

    ctx = doc["@context"]
    if not isinstance(ctx, Mapping) or ctx.get("@vocab") != JPEG_TRUST_VOCAB:
        raise ValueError("indicator set @context mismatch")
    for key in ("asset_info", "metadata", "content"):
        if not isinstance(doc[key], Mapping):
            raise ValueError(f"indicator set {key} must be a mapping")
    if not isinstance(doc["manifests"], list):
        raise ValueError("indicator set manifests must be a list")

    for m in doc["manifests"]:
        if not isinstance(m, Mapping):
            raise ValueError("manifest indicator must be a mapping")
        if ("claim" in m) == ("claim.v2" in m):
            raise ValueError("manifest indicator needs exactly one of claim / claim.v2")
        if "status" not in m:
            raise ValueError("manifest indicator missing status")
