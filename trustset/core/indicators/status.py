from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Union

UNKNOWN = "unknown"

SIGNATURE_CODE = "claimSignature."
ASSERTION_CODE = "assertion"
DATA_HASH_CODE = "assertion.dataHash"
BMFF_HASH_CODE = "assertion.hash.bmff"
TRUST_CODE = "signingCredential"


def _code(entry: Mapping[str, Any]) -> str:
    code = entry.get("code")
    return code if isinstance(code, str) else ""


def first_code(entries: Sequence[Mapping[str, Any]], needle: str) -> Optional[str]:
    """Return the first code containing `needle`, in validator order."""

    for entry in entries:
        code = _code(entry)
        if needle in code:
            return code
    return None


def assertion_status(entries: Sequence[Mapping[str, Any]]) -> Dict[str, str]:
    """Map the last url segment of every assertion entry to its code.

    Later entries for the same assertion overwrite earlier ones.
    """

    codes: Dict[str, str] = {}
    for entry in entries:
        code = _code(entry)
        if ASSERTION_CODE in code:
            url = entry.get("url") or ""
            codes[str(url).split("/")[-1]] = code
    return codes


def classify_status(entries: Sequence[Mapping[str, Any]]) -> Dict[str, Union[str, Dict[str, str]]]:
    """Derive the signature/assertion/content/trust status block.

    `trust` falls back to an empty string, the others to "unknown".
    """

    return {
        "signature": first_code(entries, SIGNATURE_CODE) or UNKNOWN,
        "assertion": assertion_status(entries) or UNKNOWN,
        "content": first_code(entries, DATA_HASH_CODE)
        or first_code(entries, BMFF_HASH_CODE)
        or UNKNOWN,
        "trust": first_code(entries, TRUST_CODE) or "",
    }
