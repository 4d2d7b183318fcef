from __future__ import annotations

import io
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, List, Optional

import pytest
from PIL import Image, PngImagePlugin

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

HASH_16 = list(range(16))


@dataclass
class FakeManifestReader:
    """In-memory ManifestReader used by orchestrator, CLI and API tests."""

    container: Any = b"jumbf"
    store: Optional[ManifestStore] = None
    result: Optional[ValidationResult] = None
    extract_error: Optional[Exception] = None
    read_error: Optional[Exception] = None
    validate_calls: List[ManifestStore] = field(default_factory=list)

    def extract(self, asset):
        if self.extract_error is not None:
            raise self.extract_error
        return self.container

    def read(self, container):
        if self.read_error is not None:
            raise self.read_error
        return self.store

    async def validate(self, store, asset):
        self.validate_calls.append(store)
        return self.result


class FailingTagReader:
    def read_tags(self, data):
        raise ValueError("corrupt EXIF segment")


def make_manifest(*, label: str = "urn:uuid:active", version: Optional[int] = 2) -> Manifest:
    return Manifest(
        label=label,
        claim=Claim(
            version=version,
            title="photo.jpg",
            instance_id="xmp:iid:1234",
            claim_generator_name="trustset-tests/1.0",
            default_algorithm="sha256",
            signature_ref="self#jumbf=c2pa.signature",
            assertions=[
                HashedURI(uri="self#jumbf=c2pa.assertions/c2pa.actions.v2", hash=bytes(HASH_16), alg="sha256"),
                HashedURI(uri="self#jumbf=c2pa.assertions/c2pa.hash.data", hash=HASH_16),
            ],
        ),
        signature=Signature(
            signature_data=SignatureData(
                algorithm=SignatureAlgorithm(cose_identifier=-7),
                certificate=CertificateInfo(
                    serial_number="0a1b2c",
                    issuer="CN=Test CA, O=Trust Org, C=US",
                    subject="CN=Signer,O=Example Corp",
                    not_before=datetime(2024, 1, 1, tzinfo=UTC),
                    not_after=datetime(2026, 1, 1, tzinfo=UTC),
                ),
            )
        ),
        assertions=AssertionStore(
            assertions=[
                Assertion(
                    label="c2pa.actions.v2",
                    uuid="6332706100110010800000aa00389b71",
                    source_box=object(),
                    component_type="cbor",
                    content={"raw": True},
                    fields={"actions": [{"action": "c2pa.created"}]},
                ),
                Assertion(
                    label="c2pa.hash.data",
                    uuid="6332706100110010800000aa00389b72",
                    fields={"exclusions": [{"start": 20, "length": 100}], "hash": HASH_16, "alg": "sha256"},
                ),
            ]
        ),
    )


@pytest.fixture
def manifest_store() -> ManifestStore:
    return ManifestStore(manifests=[make_manifest()])


@pytest.fixture
def validation_result() -> ValidationResult:
    return ValidationResult(
        is_valid=False,
        error=None,
        validation_errors=["assertion.dataHash.mismatch"],
        status_entries=[
            StatusEntry(
                code="claimSignature.validated",
                url="self#jumbf=/c2pa/urn:uuid:active/c2pa.signature",
                message="claim signature valid",
            ),
            StatusEntry(
                code="assertion.dataHash.mismatch",
                url="self#jumbf=/c2pa/urn:uuid:active/c2pa.assertions/c2pa.actions.v2",
                message="data hash does not match",
                severity="error",
            ),
            StatusEntry(
                code="signingCredential.trusted",
                url="self#jumbf=/c2pa/urn:uuid:active/c2pa.signature",
                message="signing credential trusted",
            ),
        ],
    )


@pytest.fixture
def png_bytes() -> bytes:
    info = PngImagePlugin.PngInfo()
    info.add_text("Software", "trustset-tests")
    buf = io.BytesIO()
    Image.new("RGB", (4, 3), (255, 0, 0)).save(buf, "PNG", pnginfo=info)
    return buf.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    exif = Image.Exif()
    exif[0x010F] = "TestMake"  # Make
    exif[0x0110] = "TestModel"  # Model
    buf = io.BytesIO()
    Image.new("RGB", (8, 6), (0, 128, 255)).save(buf, "JPEG", exif=exif)
    return buf.getvalue()


@pytest.fixture
def fake_reader(manifest_store, validation_result) -> FakeManifestReader:
    return FakeManifestReader(store=manifest_store, result=validation_result)


@pytest.fixture
def failing_tag_reader() -> FailingTagReader:
    return FailingTagReader()


@pytest.fixture
def manifest_factory():
    return make_manifest


@pytest.fixture
def reader_factory():
    return FakeManifestReader
