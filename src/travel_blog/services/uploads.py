"""Upload gatekeeping for island photos."""

from pathlib import PurePath

from travel_blog.domain.uploads import (
    Accepted,
    ErrorKind,
    Rejected,
    UploadCandidate,
    ValidationOutcome,
)
from travel_blog.services.signatures import format_for_mime, validate_signature

MAX_IMAGE_SIZE_BYTES = 5 * 1024 * 1024

ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)
ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")


def admit_upload(
    candidate: UploadCandidate, max_size_bytes: int = MAX_IMAGE_SIZE_BYTES
) -> ValidationOutcome:
    """Decide whether an uploaded file may be stored as a photo.

    Checks run in order and stop at the first failure: MIME type, extension,
    content signature, size. The signature check only runs when the content
    is buffered; without it, acceptance rests on the declared MIME type and
    extension alone.
    """
    mime_type = candidate.declared_mime_type.strip().lower()
    if mime_type not in ALLOWED_MIME_TYPES:
        return Rejected(
            reason=ErrorKind.INVALID_MIME_TYPE,
            detail=f"Invalid file type. Allowed types: {', '.join(ALLOWED_MIME_TYPES)}",
        )

    if file_extension(candidate.declared_name) not in ALLOWED_EXTENSIONS:
        return Rejected(
            reason=ErrorKind.INVALID_EXTENSION,
            detail=(
                "Invalid file extension. "
                f"Allowed extensions: {', '.join(ALLOWED_EXTENSIONS)}"
            ),
        )

    if candidate.content:
        image_format = format_for_mime(mime_type)
        if image_format is None or not validate_signature(
            candidate.content, image_format
        ):
            return Rejected(
                reason=ErrorKind.SIGNATURE_MISMATCH,
                detail=(
                    "File signature validation failed. "
                    "File may be corrupted or not a valid image."
                ),
            )

    if candidate.size_bytes > max_size_bytes:
        return Rejected(
            reason=ErrorKind.FILE_TOO_LARGE,
            detail=f"File must be smaller than {size_in_mb(max_size_bytes)}MB",
        )

    return Accepted()


def file_extension(filename: str) -> str:
    """Return the lower-cased extension after the last dot, or an empty string."""
    dot_index = filename.rfind(".")
    if dot_index == -1:
        return ""
    return filename[dot_index:].lower()


def size_in_mb(size_bytes: int) -> str:
    """Format a byte count as whole or fractional mebibytes."""
    return f"{size_bytes / (1024 * 1024):g}"


def safe_filename(filename: str | None, default: str = "photo.jpg") -> str:
    """Strip directory components from a client-supplied file name."""
    name = PurePath((filename or "").replace("\\", "/")).name
    return name or default
