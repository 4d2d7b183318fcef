from __future__ import annotations

import base64
import binascii
import io
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from trustset.core.models import (
    Assertion,
    AssertionStore,
    CertificateInfo,
    Claim,
    HashedURI,
    Manifest,
    ManifestStore,
    Signature,
    SignatureAlgorithm,
    SignatureData,
    StatusEntry,
    ValidationResult,
)

from .file_info import AssetInfo

log = logging.getLogger("trustset.core")

# Algorithm names as reported by c2pa-rs, mapped back to COSE identifiers.
_COSE_IDS: Dict[str, int] = {
    "es256": -7,
    "es384": -35,
    "es512": -36,
    "ps256": -37,
    "ps384": -38,
    "ps512": -39,
    "ed25519": -8,
}

# Report section -> severity. Failures come first so they win first-match scans.
_RESULT_SECTIONS = (("failure", "error"), ("informational", "info"), ("success", "info"))


@dataclass
class ReportedManifestStore(ManifestStore):
    """ManifestStore that keeps the c2pa JSON report it was built from."""

    report: Dict[str, Any] = field(default_factory=dict)


def _dn(**parts: Optional[str]) -> Optional[str]:
    items = [f"{k}={v}" for k, v in parts.items() if v]
    return ",".join(items) or None


def _hash_bytes(value: Any) -> Any:
    """Decode a base64 hash string from the detailed report.

    Byte lists and anything that is not valid base64 are returned unchanged.
    """

    if not isinstance(value, str):
        return value
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return value


def _decode_hash_fields(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: _hash_bytes(v) if k == "hash" else _decode_hash_fields(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_decode_hash_fields(v) for v in value]
    return value


def _hashed_uris(items: Any) -> List[HashedURI]:
    if not isinstance(items, list):
        return []
    return [
        HashedURI(uri=h.get("url") or h.get("uri"), hash=_hash_bytes(h.get("hash")), alg=h.get("alg"))
        for h in items
        if isinstance(h, Mapping)
    ]


def _claim(m: Mapping[str, Any], detailed: Mapping[str, Any]) -> Claim:
    c: Mapping[str, Any] = detailed.get("claim") or {}
    version = m.get("claim_version")
    if version is None:
        version = c.get("claim_version")
    return Claim(
        version=version,
        title=m.get("title") or c.get("dc:title"),
        instance_id=m.get("instance_id") or c.get("instanceID"),
        claim_generator_info=m.get("claim_generator_info") or c.get("claim_generator_info"),
        claim_generator_name=m.get("claim_generator") or c.get("claim_generator"),
        default_algorithm=c.get("alg") or m.get("alg"),
        signature_ref=c.get("signature"),
        # v1 claims list their assertions under "assertions".
        assertions=_hashed_uris(c.get("created_assertions") or c.get("assertions")),
        gathered_assertions=_hashed_uris(c.get("gathered_assertions")),
        redacted_assertions=_hashed_uris(c.get("redacted_assertions")),
    )


def _assertions(m: Mapping[str, Any], detailed: Mapping[str, Any]) -> List[Assertion]:
    store = detailed.get("assertion_store")
    if isinstance(store, Mapping):
        items = [(label, data) for label, data in store.items()]
    else:
        items = [
            (a.get("label"), a.get("data"))
            for a in m.get("assertions") or []
            if isinstance(a, Mapping)
        ]

    out: List[Assertion] = []
    for label, data in items:
        data = _decode_hash_fields(data)
        out.append(
            Assertion(
                label=label,
                content=data,
                fields=dict(data) if isinstance(data, Mapping) else {"data": data},
            )
        )
    return out


def _manifest_from_report(
    label: str,
    m: Mapping[str, Any],
    detailed: Optional[Mapping[str, Any]] = None,
) -> Manifest:
    d: Mapping[str, Any] = detailed or {}
    sig: Mapping[str, Any] = m.get("signature_info") or d.get("signature") or {}
    alg = sig.get("alg") if isinstance(sig.get("alg"), str) else None

    return Manifest(
        label=m.get("label") or label,
        claim=_claim(m, d),
        signature=Signature(
            signature_data=SignatureData(
                algorithm=SignatureAlgorithm(
                    cose_identifier=_COSE_IDS.get(alg.lower()) if alg else None,
                    name=alg,
                ),
                certificate=CertificateInfo(
                    serial_number=sig.get("cert_serial_number"),
                    issuer=_dn(O=sig.get("issuer")),
                    subject=_dn(CN=sig.get("common_name"), O=sig.get("issuer")),
                ),
            )
        ),
        assertions=AssertionStore(assertions=_assertions(m, d)),
    )


def _status_entries(report: Mapping[str, Any]) -> List[StatusEntry]:
    results = report.get("validation_results")
    active = results.get("activeManifest") if isinstance(results, Mapping) else None

    raw: List[tuple[Mapping[str, Any], str]] = []
    if isinstance(active, Mapping):
        for section, severity in _RESULT_SECTIONS:
            raw.extend((s, severity) for s in active.get(section) or [])
    else:
        # Older reports only list failures.
        raw.extend((s, "error") for s in report.get("validation_status") or [])

    return [
        StatusEntry(
            code=str(s.get("code") or ""),
            url=s.get("url"),
            message=s.get("explanation"),
            severity=severity,
        )
        for s, severity in raw
        if isinstance(s, Mapping)
    ]


@dataclass
class C2paManifestReader:
    """ManifestReader backed by c2pa-python.

    c2pa-rs locates, parses and validates the store in one pass. The container
    handed to read() holds both of its reports: the summary report carries the
    validation results and signer fields, the detailed report carries the
    claim (hashed assertion references, signature reference, algorithm) and
    the full assertion store.

    """

    def __post_init__(self) -> None:
        import c2pa

        self._c2pa = c2pa

    def extract(self, asset: AssetInfo) -> Optional[Dict[str, Any]]:
        try:
            with self._c2pa.Reader(asset.mime_type, io.BytesIO(asset.data)) as reader:
                return {
                    "report": json.loads(reader.json()),
                    "detailed": json.loads(reader.detailed_json()),
                }
        except self._c2pa.C2paError as e:
            if "ManifestNotFound" in type(e).__name__ or "not found" in str(e).lower():
                log.info("c2pa_manifest_not_found", extra={"format": asset.format})
                return None
            raise

    def read(self, container: Mapping[str, Any]) -> ReportedManifestStore:
        return store_from_report(container["report"], container.get("detailed"))

    async def validate(self, store: ManifestStore, asset: AssetInfo) -> ValidationResult:
        report = store.report if isinstance(store, ReportedManifestStore) else {}
        return validation_from_report(report)


def store_from_report(
    report: Mapping[str, Any],
    detailed: Optional[Mapping[str, Any]] = None,
) -> ReportedManifestStore:
    """Build a ManifestStore from c2pa's JSON report.

    `detailed` is the matching detailed report; without it claims carry no
    assertion references and only the summary assertions are known.
    """

    manifests = report.get("manifests") or {}
    if not isinstance(manifests, Mapping):
        raise ValueError("c2pa report manifests must be a mapping")
    detailed_manifests = (detailed or {}).get("manifests") or {}
    if not isinstance(detailed_manifests, Mapping):
        raise ValueError("c2pa detailed report manifests must be a mapping")

    return ReportedManifestStore(
        manifests=[
            _manifest_from_report(label, m, detailed_manifests.get(label))
            for label, m in manifests.items()
        ],
        report=dict(report),
    )


def validation_from_report(report: Mapping[str, Any]) -> ValidationResult:
    """Build a ValidationResult from a c2pa JSON report."""

    entries = _status_entries(report)
    failures = [e for e in entries if e.severity == "error"]
    return ValidationResult(
        is_valid=not failures and report.get("validation_state") != "Invalid",
        error=failures[0].code if failures else None,
        validation_errors=[f"{e.code}: {e.message or ''} ({e.url or ''})" for e in failures],
        status_entries=entries,
    )


def default_manifest_reader() -> C2paManifestReader:
    """Return the c2pa-python backed reader.

    Raises RuntimeError when c2pa-python is not installed.
    """

    try:
        return C2paManifestReader()
    except ImportError as e:
        raise RuntimeError(f"c2pa-python is required to read manifests: {e}") from e
