from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from trustset.core.models import CertificateInfo, Claim, Manifest, SignatureData

from .assertions import project_assertions
from .identity import hashed_uris_to_json, parse_distinguished_name, signature_algorithm_name
from .status import classify_status


def claim_key(claim: Optional[Claim]) -> str:
    """Output key for a manifest's claim view.

    Version 1 claims are emitted under "claim.v2" and everything else under
    "claim". Keep this mapping; downstream consumers rely on it.
    """

    if claim is not None and claim.version == 1:
        return "claim.v2"
    return "claim"


def _claim_generator(claim: Claim) -> Any:
    if claim.claim_generator_info:
        return claim.claim_generator_info
    return claim.claim_generator_name or None


def build_claim_view(claim: Optional[Claim]) -> Dict[str, Any]:
    c = claim or Claim()
    return {
        "dc:title": c.title or None,
        "instanceID": c.instance_id or None,
        "claim_generator": _claim_generator(c),
        "alg": c.default_algorithm or None,
        "signature": c.signature_ref or None,
        "created_assertions": hashed_uris_to_json(c.assertions),
        "gathered_assertions": hashed_uris_to_json(c.gathered_assertions),
        "redacted_assertions": hashed_uris_to_json(c.redacted_assertions),
    }


def _signature_data(manifest: Manifest) -> SignatureData:
    if manifest.signature is None or manifest.signature.signature_data is None:
        return SignatureData()
    return manifest.signature.signature_data


def build_signature_view(manifest: Manifest) -> Dict[str, Any]:
    data = _signature_data(manifest)
    cert = data.certificate or CertificateInfo()
    return {
        "algorithm": signature_algorithm_name(data.algorithm),
        "serial_number": cert.serial_number or None,
        "issuer": parse_distinguished_name(cert.issuer),
        "subject": parse_distinguished_name(cert.subject),
        "validity": {
            "not_before": cert.not_before or None,
            "not_after": cert.not_after or None,
        },
    }


def build_manifest_indicator(
    manifest: Manifest,
    entries: Sequence[Mapping[str, Any]],
) -> Dict[str, Any]:
    """Compose one ManifestIndicator.

    `entries` is the validation result's representation; it is shared by
    every manifest of the store.
    """

    return {
        "label": manifest.label or None,
        "assertions": project_assertions(manifest.assertions),
        claim_key(manifest.claim): build_claim_view(manifest.claim),
        "claim_signature": build_signature_view(manifest),
        "status": classify_status(entries),
    }


def summarize_manifest(manifest: Manifest) -> Dict[str, Any]:
    """Flat manifest summary without status classification."""

    claim = manifest.claim or Claim()
    data = _signature_data(manifest)
    cert = data.certificate or CertificateInfo()
    labels = []
    if manifest.assertions is not None:
        for assertion in manifest.assertions.assertions or []:
            label = assertion.get("label") if isinstance(assertion, Mapping) else getattr(assertion, "label", None)
            labels.append({"label": label or None})

    return {
        "label": manifest.label or None,
        "assertionCount": manifest.assertion_count,
        "assertions": labels,
        "claim": {
            "version": claim.version or None,
            "title": claim.title or None,
            "instanceID": claim.instance_id or None,
            "claimGenerator": _claim_generator(claim),
            "defaultAlgorithm": claim.default_algorithm or None,
            "signatureRef": claim.signature_ref or None,
        },
        "signature": {
            "algorithm": signature_algorithm_name(data.algorithm) if data.algorithm else None,
            "certificate": {
                "issuer": cert.issuer or None,
                "subject": cert.subject or None,
                "serialNumber": cert.serial_number or None,
                "notBefore": cert.not_before or None,
                "notAfter": cert.not_after or None,
            },
        },
    }
