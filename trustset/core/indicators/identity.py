from __future__ import annotations

import base64
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from trustset.core.models import HashedURI, SignatureAlgorithm

# COSE algorithm identifiers (RFC 9053) used by C2PA signers.
COSE_ALGORITHM_NAMES: Dict[int, str] = {
    -7: "ES256",
    -35: "ES384",
    -36: "ES512",
    -37: "PS256",
    -38: "PS384",
    -39: "PS512",
    -8: "Ed25519",
}


def parse_distinguished_name(dn: Any) -> Dict[str, str]:
    """Parse a DN string like "CN=Example,O=Org,C=US" into a mapping.

    Segments without "=" or with an empty key are dropped. No DN validation
    is performed (escaped commas are not understood).

    """

    if not isinstance(dn, str):
        return {}

    out: Dict[str, str] = {}
    for part in dn.split(","):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition("=")
        key = key.strip()
        if key and sep:
            out[key] = value.strip()
    return out


def signature_algorithm_name(algorithm: Union[SignatureAlgorithm, int, None]) -> str:
    """Decode a COSE signature algorithm into its canonical name."""

    if isinstance(algorithm, SignatureAlgorithm):
        ident = algorithm.cose_identifier
    else:
        ident = algorithm
    if isinstance(ident, bool) or not isinstance(ident, int):
        return "Unknown"
    return COSE_ALGORITHM_NAMES.get(ident, "Unknown")


def _is_byte_like(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return True
    if isinstance(value, (list, tuple)):
        return all(
            isinstance(n, int) and not isinstance(n, bool) and 0 <= n <= 255 for n in value
        )
    return False


def _b64(value: Any) -> str:
    return base64.b64encode(bytes(value)).decode("ascii")


def encode_hash_fields(value: Any) -> Any:
    """Return a copy of `value` with every byte-like `hash` field base64-encoded.

    Walks mappings and lists to any depth. The input is not modified.

    """

    if isinstance(value, Mapping):
        out: Dict[str, Any] = {}
        for k, v in value.items():
            if k == "hash" and _is_byte_like(v):
                out[k] = _b64(v)
            else:
                out[k] = encode_hash_fields(v)
        return out
    if isinstance(value, (list, tuple)):
        return [encode_hash_fields(v) for v in value]
    return value


def hashed_uri_to_json(hashed_uri: Any) -> Dict[str, Any]:
    """JSON view of a HashedURI: {url, hash (base64), alg?}."""

    if isinstance(hashed_uri, HashedURI):
        uri, digest, alg = hashed_uri.uri, hashed_uri.hash, hashed_uri.alg
    elif isinstance(hashed_uri, Mapping):
        uri = hashed_uri.get("uri") or hashed_uri.get("url")
        digest = hashed_uri.get("hash")
        alg = hashed_uri.get("alg")
    else:
        return {}

    result: Dict[str, Any] = {
        "url": uri or None,
        "hash": _b64(digest) if _is_byte_like(digest) else None,
    }
    if alg is not None:
        result["alg"] = alg
    return result


def hashed_uris_to_json(hashed_uris: Optional[Iterable[Any]]) -> List[Dict[str, Any]]:
    if not isinstance(hashed_uris, (list, tuple)):
        return []
    return [hashed_uri_to_json(h) for h in hashed_uris]

