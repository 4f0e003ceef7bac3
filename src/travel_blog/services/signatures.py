"""Magic-number checks for uploaded image content."""

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType


class ImageFormat(StrEnum):
    """Image formats accepted for upload."""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"


MIN_SIGNATURE_LENGTH = 8

MAGIC_NUMBERS: Mapping[ImageFormat, tuple[bytes, ...]] = MappingProxyType(
    {
        ImageFormat.JPEG: (b"\xff\xd8\xff",),
        ImageFormat.PNG: (b"\x89PNG\r\n\x1a\n",),
        ImageFormat.GIF: (b"GIF87a", b"GIF89a"),
        ImageFormat.WEBP: (b"RIFF",),
    }
)

# WebP is a RIFF container; the form type sits after the 4-byte chunk size.
_WEBP_FORM_TYPE = b"WEBP"
_WEBP_FORM_TYPE_OFFSET = 8

_MIME_FORMATS: Mapping[str, ImageFormat] = MappingProxyType(
    {
        "image/jpeg": ImageFormat.JPEG,
        "image/jpg": ImageFormat.JPEG,
        "image/png": ImageFormat.PNG,
        "image/gif": ImageFormat.GIF,
        "image/webp": ImageFormat.WEBP,
    }
)


def format_for_mime(mime_type: str) -> ImageFormat | None:
    """Return the image format for a MIME type, if it is supported."""
    return _MIME_FORMATS.get(mime_type.strip().lower())


def validate_signature(content: bytes, claimed_format: ImageFormat) -> bool:
    """Return true when content starts with a signature of the claimed format."""
    if len(content) < MIN_SIGNATURE_LENGTH:
        return False
    prefixes = MAGIC_NUMBERS.get(claimed_format, ())
    if not any(content.startswith(prefix) for prefix in prefixes):
        return False
    if claimed_format is ImageFormat.WEBP:
        end = _WEBP_FORM_TYPE_OFFSET + len(_WEBP_FORM_TYPE)
        return content[_WEBP_FORM_TYPE_OFFSET:end] == _WEBP_FORM_TYPE
    return True
