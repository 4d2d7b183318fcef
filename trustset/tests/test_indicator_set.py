import base64
import hashlib

import pytest

from trustset.core.indicators import (
    VALIDATION_STATUS_KEY,
    build_asset_info,
    generate_indicator_set,
    validate_indicator_set,
)
from trustset.core.models import ManifestStore, StatusEntry, ValidationResult


def test_indicator_set_end_to_end(manifest_store, validation_result, png_bytes) -> None:
    doc = generate_indicator_set(manifest_store, validation_result, png_bytes)

    assert list(doc) == [
        "@context",
        "asset_info",
        "metadata",
        "content",
        "manifests",
        VALIDATION_STATUS_KEY,
    ]
    assert doc["@context"] == {
        "@vocab": "https://jpeg.org/jpegtrust",
        "extras": "https://jpeg.org/jpegtrust/extras",
    }
    assert doc["asset_info"] == {
        "alg": "sha256",
        "hash": base64.b64encode(hashlib.sha256(png_bytes).digest()).decode("ascii"),
    }
    assert doc["content"]["imageWidth"] == 4
    assert doc["content"]["fileType"] == "png"
    assert "imageWidth" not in doc["metadata"]

    assert len(doc["manifests"]) == 1
    status = doc["manifests"][0]["status"]
    assert status["content"] == "assertion.dataHash.mismatch"
    assert status["assertion"] == {"c2pa.actions.v2": "assertion.dataHash.mismatch"}

    extras = doc[VALIDATION_STATUS_KEY]
    assert extras["isValid"] is False
    assert extras["validationErrors"] == ["assertion.dataHash.mismatch"]
    assert [e["code"] for e in extras["entries"]] == [
        "claimSignature.validated",
        "assertion.dataHash.mismatch",
        "signingCredential.trusted",
    ]
    assert extras["entries"][0]["severity"] == "info"
    assert extras["entries"][1]["severity"] == "error"


def test_no_store_gives_empty_manifests(png_bytes) -> None:
    doc = generate_indicator_set(None, None, png_bytes)
    assert doc["manifests"] == []
    assert VALIDATION_STATUS_KEY not in doc
    assert doc["asset_info"]["alg"] == "sha256"


def test_no_store_keeps_validation_status(png_bytes) -> None:
    result = ValidationResult(is_valid=False, error="ValueError", validation_errors=["bad box"])
    doc = generate_indicator_set(None, result, png_bytes)
    assert doc["manifests"] == []
    assert doc[VALIDATION_STATUS_KEY] == {
        "isValid": False,
        "error": "ValueError",
        "validationErrors": ["bad box"],
        "entries": [],
    }


def test_every_manifest_shares_status(manifest_factory, validation_result, png_bytes) -> None:
    store = ManifestStore(
        manifests=[manifest_factory(label="urn:uuid:a"), manifest_factory(label="urn:uuid:b", version=1)]
    )
    doc = generate_indicator_set(store, validation_result, png_bytes)

    assert [m["label"] for m in doc["manifests"]] == ["urn:uuid:a", "urn:uuid:b"]
    assert "claim" in doc["manifests"][0]
    assert "claim.v2" in doc["manifests"][1]
    assert doc["manifests"][0]["status"] == doc["manifests"][1]["status"]


def test_missing_validation_result_gives_unknown_status(manifest_store, png_bytes) -> None:
    doc = generate_indicator_set(manifest_store, None, png_bytes)
    assert doc["manifests"][0]["status"] == {
        "signature": "unknown",
        "assertion": "unknown",
        "content": "unknown",
        "trust": "",
    }


def test_failing_tag_reader_does_not_abort(manifest_store, validation_result, png_bytes, failing_tag_reader) -> None:
    doc = generate_indicator_set(manifest_store, validation_result, png_bytes, tag_reader=failing_tag_reader)
    assert doc["metadata"]["source"] == "exifreader"
    assert doc["content"] == {}
    assert len(doc["manifests"]) == 1


def test_bmff_only_content_status(manifest_store, png_bytes) -> None:
    result = ValidationResult(
        is_valid=True,
        status_entries=[StatusEntry(code="assertion.hash.bmff.match", url="self#jumbf=c2pa.hash.bmff.v2")],
    )
    doc = generate_indicator_set(manifest_store, result, png_bytes)
    assert doc["manifests"][0]["status"]["content"] == "assertion.hash.bmff.match"


def test_build_asset_info_empty() -> None:
    assert build_asset_info(b"") == {}
    assert build_asset_info(None) == {}


def test_validate_indicator_set_rejects_bad_shapes() -> None:
    good = {
        "@context": {"@vocab": "https://jpeg.org/jpegtrust"},
        "asset_info": {},
        "metadata": {},
        "content": {},
        "manifests": [{"claim": {}, "status": {}}],
    }
    validate_indicator_set(good)

    with pytest.raises(ValueError, match="missing field: manifests"):
        validate_indicator_set({k: v for k, v in good.items() if k != "manifests"})
    with pytest.raises(ValueError, match="@context"):
        validate_indicator_set({**good, "@context": {"@vocab": "x"}})
    with pytest.raises(ValueError, match="exactly one"):
        validate_indicator_set({**good, "manifests": [{"claim": {}, "claim.v2": {}, "status": {}}]})
    with pytest.raises(ValueError, match="missing status"):
        validate_indicator_set({**good, "manifests": [{"claim": {}}]})
    with pytest.raises(ValueError, match="must be a list"):
        validate_indicator_set({**good, "manifests": {}})
