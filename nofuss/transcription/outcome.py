"""TranscriptionOutcome — success text or a classified failure, plus the status table."""
from dataclasses import dataclass
from enum import Enum

from nofuss.constants import (
    MSG_ERR_CONNECTION,
    MSG_ERR_RATE_LIMITED,
    MSG_ERR_SERVER,
    MSG_ERR_TOO_LARGE,
    MSG_ERR_UNSUPPORTED,
    MSG_NO_TEXT,
)


class ErrorKind(Enum):
    PAYLOAD_TOO_LARGE = "payload_too_large"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CONNECTION_ERROR = "connection_error"


# Statuses with a dedicated message; every other non-2xx is SERVER_ERROR.
STATUS_ERRORS: dict[int, ErrorKind] = {
    413: ErrorKind.PAYLOAD_TOO_LARGE,
    415: ErrorKind.UNSUPPORTED_MEDIA_TYPE,
    429: ErrorKind.RATE_LIMITED,
}

ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.PAYLOAD_TOO_LARGE: MSG_ERR_TOO_LARGE,
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: MSG_ERR_UNSUPPORTED,
    ErrorKind.RATE_LIMITED: MSG_ERR_RATE_LIMITED,
    ErrorKind.SERVER_ERROR: MSG_ERR_SERVER,
    ErrorKind.CONNECTION_ERROR: MSG_ERR_CONNECTION,
}


@dataclass(frozen=True)
class Transcript:
    text: str


@dataclass(frozen=True)
class TranscriptionFailure:
    kind: ErrorKind

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self.kind]


TranscriptionOutcome = Transcript | TranscriptionFailure


def classify_status(status: int) -> ErrorKind | None:
    """Return the ErrorKind for a status code, or None for 2xx."""
    match status:
        case s if s in STATUS_ERRORS:
            return STATUS_ERRORS[s]
        case s if 200 <= s < 300:
            return None
        case _:
            return ErrorKind.SERVER_ERROR


def classify_response(status: int, body: str) -> TranscriptionOutcome:
    match classify_status(status):
        case None:
            return Transcript(body or MSG_NO_TEXT)
        case kind:
            return TranscriptionFailure(kind)


def display_text(outcome: TranscriptionOutcome) -> str:
    match outcome:
        case Transcript(text=text):
            return text
        case TranscriptionFailure() as failure:
            return failure.message
