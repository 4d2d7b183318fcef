from __future__ import annotations

import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad input.

    Security notes:
    - Env vars are treated as trusted configuration.

    """

    raw = os.environ.get(name, "").strip()
    if not raw:
        return int(default)
    try:
        return int(raw)
    except ValueError:
        return int(default)


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime configuration shared by the CLI and the API service."""

    max_upload_bytes: int = 25 * 1024 * 1024
    log_level: str = "INFO"
    pretty: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            max_upload_bytes=_env_int("TRUSTSET_MAX_UPLOAD_BYTES", 25 * 1024 * 1024),
            log_level=(os.environ.get("TRUSTSET_LOG_LEVEL") or "INFO").upper(),
            pretty=bool(_env_int("TRUSTSET_PRETTY", 0)),
        )
