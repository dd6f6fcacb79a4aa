"""MediaFile and client-side validation — nothing invalid ever reaches the network."""
import io
import logging
from dataclasses import dataclass, field
from enum import Enum

from pydub import AudioSegment

from nofuss.constants import (
    ALLOWED_EXTENSIONS,
    MAX_UPLOAD_BYTES,
    MSG_DURATION_FAILED,
    MSG_REJECT_EXTENSION,
    MSG_REJECT_SIZE,
)

logger = logging.getLogger(__name__)


def file_extension(name: str) -> str:
    # No dot → the whole name is the "extension" and fails the allow-list.
    return name.rsplit(".", 1)[-1].lower()


@dataclass(frozen=True)
class MediaFile:
    name: str
    size_bytes: int
    byte_content: bytes = field(repr=False)

    @property
    def extension(self) -> str:
        return file_extension(self.name)


class RejectReason(Enum):
    EXTENSION_REJECTED = "extension_rejected"
    SIZE_EXCEEDED = "size_exceeded"


REJECT_MESSAGES: dict[RejectReason, str] = {
    RejectReason.EXTENSION_REJECTED: MSG_REJECT_EXTENSION,
    RejectReason.SIZE_EXCEEDED: MSG_REJECT_SIZE,
}


@dataclass(frozen=True)
class Valid:
    pass


@dataclass(frozen=True)
class Invalid:
    reason: RejectReason

    @property
    def message(self) -> str:
        return REJECT_MESSAGES[self.reason]


ValidationResult = Valid | Invalid


def validate_file(name: str, size_bytes: int) -> ValidationResult:
    """Size is checked before the extension, so an oversized file with a bad
    extension is reported as too large."""
    match (size_bytes > MAX_UPLOAD_BYTES, file_extension(name) in ALLOWED_EXTENSIONS):
        case (True, _):
            return Invalid(RejectReason.SIZE_EXCEEDED)
        case (False, False):
            return Invalid(RejectReason.EXTENSION_REJECTED)
        case _:
            return Valid()


def probe_duration(file: MediaFile) -> float | None:
    """Decode the file's media metadata and return its length in seconds.

    Blocking (ffmpeg runs in a subprocess) — call via asyncio.to_thread.
    Returns None when the data cannot be decoded.
    """
    try:
        segment = AudioSegment.from_file(io.BytesIO(file.byte_content))
    except Exception as exc:
        logger.debug(MSG_DURATION_FAILED, file.name, exc)
        return None
    return round(segment.duration_seconds, 1)
