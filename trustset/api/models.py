from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union


class HealthOut(BaseModel):
    ok: bool
    version: str


class ValidationStatusOut(BaseModel):
    """Flattened validation outcome of a manifest store."""

    isValid: bool = False
    error: Optional[str] = None
    validationErrors: List[str] = Field(default_factory=list)


class ManifestInfoOut(BaseModel):
    """C2PA processing record for one uploaded file."""

    hasManifestStore: bool
    manifestCount: int = 0
    # "not_applicable" | "no_manifest" | "error" or a structured status
    validationStatus: Union[ValidationStatusOut, str]
    manifests: List[Dict[str, Any]] = Field(default_factory=list)
    error: Optional[str] = None
    fileFormat: str = "unknown"
    indicatorSet: Optional[Dict[str, Any]] = None
