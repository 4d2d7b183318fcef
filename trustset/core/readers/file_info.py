from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field
from typing import Optional

# Extensions the CLI treats as plain text (statistics only, no C2PA).
TEXT_EXTENSIONS = frozenset({".txt", ".md", ".json", ".xml", ".html", ".css", ".js", ".ts"})

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# ISO-BMFF major brands that may carry C2PA data (HEIF/AVIF/MP4 family).
_BMFF_BOX_TYPES = (b"ftyp",)


@dataclass(frozen=True, slots=True)
class FileInfo:
    """Metadata-only view of a local file.

    Security notes:
    - File contents are untrusted. Sniffing reads only a small prefix.

    """

    path: str
    size_bytes: int
    extension: str
    mime_type: str
    is_text: bool


@dataclass(frozen=True)
class AssetInfo:
    """An in-memory asset whose container format was recognized.

    format is one of "JPEG", "PNG", "BMFF".
    """

    format: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def sniff_file_info(path: str, *, prefix_bytes: int = 512) -> FileInfo:
    """Compute FileInfo for a path.

    Security notes:
    - Reads at most prefix_bytes from the file.
    - Never trusts filename alone for binary types.

    """

    abs_path = os.path.abspath(path)
    st = os.stat(abs_path)
    ext = os.path.splitext(abs_path)[1].lower()

    guessed_mime, _enc = mimetypes.guess_type(abs_path)
    mime = guessed_mime or "application/octet-stream"

    with open(abs_path, "rb") as f:
        head = f.read(prefix_bytes)
    magic = _magic_format(head)
    if magic is not None:
        mime = magic[1]

    return FileInfo(
        path=abs_path,
        size_bytes=int(st.st_size),
        extension=ext,
        mime_type=mime,
        is_text=ext in TEXT_EXTENSIONS,
    )


def sniff_asset(data: bytes) -> Optional[AssetInfo]:
    """Recognize a JPEG / PNG / ISO-BMFF asset from its leading bytes."""

    magic = _magic_format(data)
    if magic is None:
        return None
    return AssetInfo(format=magic[0], mime_type=magic[1], data=data)


def _magic_format(prefix: bytes) -> Optional[tuple[str, str]]:
    """Detect (format, mime) from common magic headers."""

    if prefix.startswith(b"\xff\xd8\xff"):
        return "JPEG", "image/jpeg"
    if prefix.startswith(_PNG_SIGNATURE):
        return "PNG", "image/png"
    if len(prefix) >= 12 and prefix[4:8] in _BMFF_BOX_TYPES:
        return "BMFF", _bmff_mime(prefix[8:12])
    return None


def _bmff_mime(brand: bytes) -> str:
    if brand in {b"heic", b"heix", b"mif1", b"msf1"}:
        return "image/heif"
    if brand in {b"avif", b"avis"}:
        return "image/avif"
    if brand in {b"qt  "}:
        return "video/quicktime"
    return "video/mp4"
