from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

HashBytes = Union[bytes, bytearray, memoryview, Sequence[int]]


@dataclass
class HashedURI:
    """Reference to another data block plus its hash."""

    uri: Optional[str] = None
    hash: Optional[HashBytes] = None
    alg: Optional[str] = None


@dataclass
class Claim:
    """Signed statement of a manifest.

    `assertions` holds the created assertion references.
    """

    version: Optional[int] = None
    title: Optional[str] = None
    instance_id: Optional[str] = None
    claim_generator_info: Optional[Any] = None
    claim_generator_name: Optional[str] = None
    default_algorithm: Optional[str] = None
    signature_ref: Optional[str] = None
    assertions: List[HashedURI] = field(default_factory=list)
    gathered_assertions: List[HashedURI] = field(default_factory=list)
    redacted_assertions: List[HashedURI] = field(default_factory=list)


@dataclass
class SignatureAlgorithm:
    cose_identifier: Optional[int] = None
    name: Optional[str] = None


@dataclass
class CertificateInfo:
    """Signing certificate fields. issuer/subject are DN strings."""

    serial_number: Optional[str] = None
    issuer: Optional[str] = None
    subject: Optional[str] = None
    not_before: Optional[datetime] = None
    not_after: Optional[datetime] = None


@dataclass
class SignatureData:
    algorithm: Optional[SignatureAlgorithm] = None
    certificate: Optional[CertificateInfo] = None


@dataclass
class Signature:
    signature_data: Optional[SignatureData] = None


# Bookkeeping keys of an assertion record that never reach the output.
INTERNAL_ASSERTION_KEYS = frozenset(
    {
        "uuid",
        "sourceBox",
        "source_box",
        "componentType",
        "component_type",
        "label",
        "content",
    }
)


@dataclass
class Assertion:
    """A labeled record attached to a manifest.

    `fields` carries the assertion's structured content; the remaining
    attributes are container bookkeeping.
    """

    label: Optional[str] = None
    uuid: Optional[str] = None
    source_box: Optional[Any] = None
    component_type: Optional[str] = None
    content: Optional[Any] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    def as_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "uuid": self.uuid,
            "sourceBox": self.source_box,
            "componentType": self.component_type,
            "label": self.label,
            "content": self.content,
        }
        record.update(self.fields)
        return record


@dataclass
class AssertionStore:
    assertions: List[Any] = field(default_factory=list)


@dataclass
class Manifest:
    label: Optional[str] = None
    claim: Optional[Claim] = None
    signature: Optional[Signature] = None
    assertions: Optional[AssertionStore] = None

    @property
    def assertion_count(self) -> int:
        if self.assertions is None:
            return 0
        return len(self.assertions.assertions or [])


@dataclass
class ManifestStore:
    manifests: List[Manifest] = field(default_factory=list)


@dataclass
class StatusEntry:
    """One validation outcome. `code` is a dot-namespaced string."""

    code: str
    url: Optional[str] = None
    message: Optional[str] = None
    severity: Optional[str] = None


@dataclass
class ValidationResult:
    """Outcome of validating a manifest store.

    Entries keep the order produced by the validator; classification relies
    on it.
    """

    is_valid: bool = False
    error: Optional[str] = None
    validation_errors: List[Any] = field(default_factory=list)
    status_entries: List[StatusEntry] = field(default_factory=list)

    def to_representation(self) -> List[Dict[str, Any]]:
        return [
            {
                "code": e.code,
                "url": e.url,
                "message": e.message,
                "severity": e.severity,
            }
            for e in self.status_entries
        ]
