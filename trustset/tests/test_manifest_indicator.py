from datetime import UTC, datetime

from trustset.core.indicators import build_manifest_indicator, claim_key, summarize_manifest
from trustset.core.models import Claim, Manifest


def test_manifest_indicator_shape(manifest_store, validation_result) -> None:
    manifest = manifest_store.manifests[0]
    mi = build_manifest_indicator(manifest, validation_result.to_representation())

    assert list(mi) == ["label", "assertions", "claim", "claim_signature", "status"]
    assert mi["label"] == "urn:uuid:active"

    claim = mi["claim"]
    assert claim["dc:title"] == "photo.jpg"
    assert claim["instanceID"] == "xmp:iid:1234"
    assert claim["claim_generator"] == "trustset-tests/1.0"
    assert claim["alg"] == "sha256"
    assert claim["signature"] == "self#jumbf=c2pa.signature"
    assert claim["created_assertions"][0] == {
        "url": "self#jumbf=c2pa.assertions/c2pa.actions.v2",
        "hash": "AAECAwQFBgcICQoLDA0ODw==",
        "alg": "sha256",
    }
    assert "alg" not in claim["created_assertions"][1]
    assert claim["gathered_assertions"] == []
    assert claim["redacted_assertions"] == []

    sig = mi["claim_signature"]
    assert sig["algorithm"] == "ES256"
    assert sig["serial_number"] == "0a1b2c"
    assert sig["issuer"] == {"CN": "Test CA", "O": "Trust Org", "C": "US"}
    assert sig["subject"] == {"CN": "Signer", "O": "Example Corp"}
    assert sig["validity"] == {
        "not_before": datetime(2024, 1, 1, tzinfo=UTC),
        "not_after": datetime(2026, 1, 1, tzinfo=UTC),
    }

    assert mi["status"] == {
        "signature": "claimSignature.validated",
        "assertion": {"c2pa.actions.v2": "assertion.dataHash.mismatch"},
        "content": "assertion.dataHash.mismatch",
        "trust": "signingCredential.trusted",
    }


def test_version_one_claim_uses_v2_key(manifest_factory) -> None:
    mi = build_manifest_indicator(manifest_factory(version=1), [])
    assert "claim.v2" in mi
    assert "claim" not in mi


def test_claim_key_mapping() -> None:
    assert claim_key(Claim(version=1)) == "claim.v2"
    assert claim_key(Claim(version=2)) == "claim"
    assert claim_key(Claim()) == "claim"
    assert claim_key(None) == "claim"


def test_bare_manifest_defaults() -> None:
    mi = build_manifest_indicator(Manifest(), [])

    assert mi["label"] is None
    assert mi["assertions"] == {}
    assert mi["claim"] == {
        "dc:title": None,
        "instanceID": None,
        "claim_generator": None,
        "alg": None,
        "signature": None,
        "created_assertions": [],
        "gathered_assertions": [],
        "redacted_assertions": [],
    }
    assert mi["claim_signature"] == {
        "algorithm": "Unknown",
        "serial_number": None,
        "issuer": {},
        "subject": {},
        "validity": {"not_before": None, "not_after": None},
    }
    assert mi["status"]["signature"] == "unknown"
    assert mi["status"]["trust"] == ""


def test_claim_generator_info_preferred_over_name() -> None:
    info = [{"name": "Camera App", "version": "2.1"}]
    manifest = Manifest(claim=Claim(claim_generator_info=info, claim_generator_name="legacy/1.0"))
    assert build_manifest_indicator(manifest, [])["claim"]["claim_generator"] == info


def test_summarize_manifest(manifest_store) -> None:
    summary = summarize_manifest(manifest_store.manifests[0])

    assert summary["label"] == "urn:uuid:active"
    assert summary["assertionCount"] == 2
    assert summary["assertions"] == [{"label": "c2pa.actions.v2"}, {"label": "c2pa.hash.data"}]
    assert summary["claim"]["version"] == 2
    assert summary["claim"]["claimGenerator"] == "trustset-tests/1.0"
    assert summary["signature"]["algorithm"] == "ES256"
    assert summary["signature"]["certificate"]["issuer"] == "CN=Test CA, O=Trust Org, C=US"
    assert summary["signature"]["certificate"]["serialNumber"] == "0a1b2c"


def test_summarize_bare_manifest() -> None:
    summary = summarize_manifest(Manifest())
    assert summary["assertionCount"] == 0
    assert summary["assertions"] == []
    assert summary["signature"]["algorithm"] is None
