from __future__ import annotations

import io
import math
import struct
from dataclasses import dataclass
from numbers import Rational
from typing import Any, Dict, Mapping, Optional

from PIL import ExifTags, Image, ImageCms

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# EXIF pointer tags; their values are offsets, not metadata.
_POINTER_TAGS = frozenset({0x8769, 0x8825, 0xA005})

_FILE_TYPES = {"JPEG": "jpeg", "MPO": "jpeg", "PNG": "png", "WEBP": "webp", "GIF": "gif", "TIFF": "tiff"}


def _json_value(value: Any) -> Any:
    """Coerce an EXIF value into a JSON-friendly value (None to skip)."""

    if isinstance(value, str):
        return value.strip("\x00").strip()
    if isinstance(value, int):
        return value
    if isinstance(value, (Rational, float)):
        f = float(value)
        return None if math.isnan(f) or math.isinf(f) else f
    if isinstance(value, (bytes, bytearray)):
        try:
            text = bytes(value).decode("ascii").strip("\x00").strip()
        except UnicodeDecodeError:
            return None
        return text if text.isprintable() else None
    if isinstance(value, (list, tuple)):
        items = [_json_value(v) for v in value]
        return None if any(v is None for v in items) else items
    return None


def _png_header(data: bytes) -> Optional[Dict[str, int]]:
    """Decode the PNG IHDR chunk (always the first chunk)."""

    if not data.startswith(_PNG_SIGNATURE) or data[12:16] != b"IHDR" or len(data) < 29:
        return None
    width, height, bit_depth, color_type, compression, flt, interlace = struct.unpack(
        ">IIBBBBB", data[16:29]
    )
    return {
        "Image Width": width,
        "Image Height": height,
        "Bit Depth": bit_depth,
        "Color Type": color_type,
        "Compression": compression,
        "Filter": flt,
        "Interlace": interlace,
    }


@dataclass
class PillowTagReader:
    """TagReader backed by Pillow.

    Produces ExifReader-style tag names, each value wrapped as {"value": ...}.

    Security notes:
    - JPEG and other formats: only headers and metadata segments are decoded.
    - PNG: text chunks may follow the image data, so reading them loads
      (decodes) the image.
    - Pillow's decompression-bomb guard stays active.

    """

    include_exif: bool = True
    include_icc: bool = True

    def read_tags(self, data: bytes) -> Mapping[str, Mapping[str, Any]]:
        raw: Dict[str, Any] = {}
        with Image.open(io.BytesIO(data)) as im:
            raw["FileType"] = _FILE_TYPES.get(im.format or "", (im.format or "unknown").lower())

            header = _png_header(data)
            if header is not None:
                raw.update(header)
            else:
                raw["Image Width"] = im.width
                raw["Image Height"] = im.height
                bits = getattr(im, "bits", None)
                if isinstance(bits, int):
                    raw["Bits Per Sample"] = bits
                raw["Color Components"] = len(im.getbands())

            jfif = im.info.get("jfif_version")
            if isinstance(jfif, tuple) and len(jfif) == 2:
                raw["JFIF Version"] = f"{jfif[0]}.{jfif[1]:02d}"
            if "jfif_unit" in im.info:
                raw["JFIF Density Units"] = im.info["jfif_unit"]

            if self.include_icc and im.info.get("icc_profile"):
                raw.update(self._icc_tags(im.info["icc_profile"]))

            if im.format == "PNG":
                # im.text loads the image to reach chunks after IDAT.
                for key, value in getattr(im, "text", {}).items():
                    raw[str(key)] = value

            if self.include_exif:
                raw.update(self._exif_tags(im.getexif()))

        tags: Dict[str, Dict[str, Any]] = {}
        for name, value in raw.items():
            value = _json_value(value)
            if value is not None:
                tags[name] = {"value": value}
        return tags

    @staticmethod
    def _icc_tags(icc: bytes) -> Dict[str, Any]:
        try:
            profile = ImageCms.ImageCmsProfile(io.BytesIO(icc))
            description = ImageCms.getProfileDescription(profile)
        except (ImageCms.PyCMSError, OSError):
            # Broken ICC profiles are common; the rest of the metadata stands.
            return {}
        return {"ICC Description": description}

    @staticmethod
    def _exif_tags(exif: Image.Exif) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for tag_id, value in exif.items():
            if tag_id in _POINTER_TAGS:
                continue
            out[ExifTags.TAGS.get(tag_id, f"Tag 0x{tag_id:04X}")] = value
        for tag_id, value in exif.get_ifd(ExifTags.IFD.Exif).items():
            if tag_id in _POINTER_TAGS:
                continue
            out[ExifTags.TAGS.get(tag_id, f"Tag 0x{tag_id:04X}")] = value
        for tag_id, value in exif.get_ifd(ExifTags.IFD.GPSInfo).items():
            out[ExifTags.GPSTAGS.get(tag_id, f"GPS Tag 0x{tag_id:04X}")] = value
        return out
