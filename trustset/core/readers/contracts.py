from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from trustset.core.models import ManifestStore, ValidationResult

from .file_info import AssetInfo


@runtime_checkable
class TagReader(Protocol):
    """Reads a flat metadata tag map from file bytes.

    Each value is wrapped as {"value": ...} and keyed by a human-readable
    tag name (e.g. "Image Width").

    Notes:
    - File bytes are untrusted; readers may raise on malformed input.
    """

    def read_tags(self, data: bytes) -> Mapping[str, Mapping[str, Any]]: ...


@runtime_checkable
class ManifestReader(Protocol):
    """Manifest store reader + validator.

    - extract: locate the manifest container in an asset (None if absent)
    - read: deserialize the container into a ManifestStore
    - validate: validate the store against the asset (awaited once per run)
    """

    def extract(self, asset: AssetInfo) -> Optional[Any]: ...

    def read(self, container: Any) -> ManifestStore: ...

    async def validate(self, store: ManifestStore, asset: AssetInfo) -> ValidationResult: ...
