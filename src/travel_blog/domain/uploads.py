"""Domain models for upload validation."""

from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Reasons an upload can be rejected."""

    INVALID_MIME_TYPE = "invalid_mime_type"
    INVALID_EXTENSION = "invalid_extension"
    SIGNATURE_MISMATCH = "signature_mismatch"
    FILE_TOO_LARGE = "file_too_large"


@dataclass(frozen=True)
class UploadCandidate:
    """An incoming file awaiting validation.

    ``content`` is ``None`` when the bytes are not buffered at check time.
    """

    declared_name: str
    declared_mime_type: str
    size_bytes: int
    content: bytes | None = None


@dataclass(frozen=True)
class Accepted:
    """The upload passed every check."""

    accepted = True


@dataclass(frozen=True)
class Rejected:
    """The upload failed a check."""

    reason: ErrorKind
    detail: str

    accepted = False


ValidationOutcome = Accepted | Rejected
