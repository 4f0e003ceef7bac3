"""Thumbnail derivation and naming."""

from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

THUMBNAIL_FORMAT = "JPEG"
THUMBNAIL_CONTENT_TYPE = "image/jpeg"
THUMBNAIL_QUALITY = 80
THUMBNAIL_SUFFIX = "_thumb"


class ImageDecodeError(ValueError):
    """Raised when bytes cannot be decoded as an image."""


def derive_thumbnail(original: bytes, width: int, height: int) -> bytes:
    """Return a JPEG thumbnail that covers exactly ``width`` x ``height``.

    The image is scaled to fill the box and the overflow is cropped around
    the centre, so the output never has letterbox bars.
    """
    try:
        with Image.open(BytesIO(original)) as image:
            image.load()
            rgb = image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError("Could not decode image for thumbnail") from exc

    fitted = ImageOps.fit(rgb, (width, height), method=Image.Resampling.LANCZOS)
    buffer = BytesIO()
    fitted.save(buffer, format=THUMBNAIL_FORMAT, quality=THUMBNAIL_QUALITY)
    return buffer.getvalue()


def thumb_name(original_name: str) -> str:
    """Insert the thumbnail suffix before the extension of a file name."""
    dot_index = original_name.rfind(".")
    if dot_index == -1:
        return f"{original_name}{THUMBNAIL_SUFFIX}"
    base = original_name[:dot_index]
    extension = original_name[dot_index:]
    return f"{base}{THUMBNAIL_SUFFIX}{extension}"
