"""Indicator set generation.

Turns a parsed, validated C2PA manifest store plus raw file metadata into a
JPEG Trust (ISO 21617-1) indicator set.

Notes:
- Everything here is a pure transform over collaborator output; no I/O.
- Optional collaborator fields are defaulted at each read site.
"""

from .assembler import (
    JPEG_TRUST_EXTRAS,
    JPEG_TRUST_VOCAB,
    VALIDATION_STATUS_KEY,
    build_asset_info,
    build_validation_status,
    generate_indicator_set,
    validate_indicator_set,
)
from .assertions import project_assertion, project_assertions
from .identity import (
    encode_hash_fields,
    hashed_uri_to_json,
    hashed_uris_to_json,
    parse_distinguished_name,
    signature_algorithm_name,
)
from .manifest import build_manifest_indicator, claim_key, summarize_manifest
from .metadata import CONTENT_KEYS, camel_case_key, extract_metadata, normalize_tags, split_content
from .status import assertion_status, classify_status, first_code

__all__ = [
    "JPEG_TRUST_VOCAB",
    "JPEG_TRUST_EXTRAS",
    "VALIDATION_STATUS_KEY",
    "generate_indicator_set",
    "validate_indicator_set",
    "build_asset_info",
    "build_validation_status",
    "project_assertion",
    "project_assertions",
    "encode_hash_fields",
    "hashed_uri_to_json",
    "hashed_uris_to_json",
    "parse_distinguished_name",
    "signature_algorithm_name",
    "build_manifest_indicator",
    "claim_key",
    "summarize_manifest",
    "CONTENT_KEYS",
    "camel_case_key",
    "extract_metadata",
    "normalize_tags",
    "split_content",
    "assertion_status",
    "classify_status",
    "first_code",
]
