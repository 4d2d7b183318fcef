from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from trustset.core.models import INTERNAL_ASSERTION_KEYS, Assertion, AssertionStore

from .identity import encode_hash_fields


def _record(assertion: Any) -> Optional[Mapping[str, Any]]:
    if isinstance(assertion, Assertion):
        return assertion.as_record()
    if isinstance(assertion, Mapping):
        return assertion
    return None


def project_assertion(assertion: Any) -> Dict[str, Any]:
    """Strip bookkeeping fields and base64-encode nested hashes."""

    record = _record(assertion) or {}
    rest = {k: v for k, v in record.items() if k not in INTERNAL_ASSERTION_KEYS}
    return encode_hash_fields(rest)


def project_assertions(store: Optional[AssertionStore]) -> Dict[str, Dict[str, Any]]:
    """Project a manifest's assertions into a label-keyed map.

    Unlabeled assertions land under "unknown"; a repeated label keeps the
    last assertion.
    """

    out: Dict[str, Dict[str, Any]] = {}
    if store is None or not store.assertions:
        return out

    for assertion in store.assertions:
        record = _record(assertion)
        if record is None:
            continue
        out[record.get("label") or "unknown"] = project_assertion(record)
    return out
