"""SessionController — owns one chat's SessionState and wires actions to the core."""
import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from nofuss.bot_client import TranscriptSink
from nofuss.constants import (
    MSG_BACKEND_RAISED,
    MSG_COPY_FAILED,
    MSG_FILE_REJECTED,
    MSG_FILE_SELECTED,
    MSG_REQUEST_STALE,
)
from nofuss.media import (
    Invalid,
    MediaFile,
    Valid,
    ValidationResult,
    probe_duration,
    validate_file,
)
from nofuss.transcription.client import TranscriptionClient
from nofuss.transcription.outcome import (
    ErrorKind,
    TranscriptionFailure,
    TranscriptionOutcome,
    display_text,
)

logger = logging.getLogger(__name__)

DurationProbe = Callable[[MediaFile], Optional[float]]


@dataclass
class SessionState:
    selected_file: Optional[MediaFile] = None
    transcript: Optional[str] = None
    in_flight: bool = False
    duration: Optional[float] = None


class SessionController:
    """Single-request-at-a-time transcription session.

    A generation token is bumped on every reset; a transcription that resolves
    under an older generation is discarded, so a late response can never
    resurrect cleared state. Reset does not cancel the pending request.
    """

    def __init__(
        self,
        transcriber: TranscriptionClient,
        duration_probe: DurationProbe = probe_duration,
    ) -> None:
        self._transcriber = transcriber
        self._duration_probe = duration_probe
        self._state = SessionState()
        self._generation = 0
        self._duration_task: asyncio.Task | None = None

    @property
    def state(self) -> SessionState:
        return dataclasses.replace(self._state)

    # ── actions ───────────────────────────────────────────────────────────────

    def select_file(self, candidate: MediaFile) -> ValidationResult:
        result = validate_file(candidate.name, candidate.size_bytes)
        match result:
            case Invalid(reason=reason):
                logger.info(MSG_FILE_REJECTED, candidate.name, reason.value)
                return result
            case Valid():
                pass

        logger.info(MSG_FILE_SELECTED, candidate.name, candidate.size_bytes)
        self._state.selected_file = candidate
        self._state.transcript = None
        self._state.duration = None
        self._duration_task = asyncio.create_task(self._derive_duration(candidate))
        return result

    async def transcribe(self) -> TranscriptionOutcome | None:
        """Run one transcription; None when it was a no-op or went stale."""
        match (self._state.selected_file, self._state.in_flight):
            case (None, _) | (_, True):
                return None
            case (file, False):
                pass

        token = self._generation
        self._state.transcript = None
        self._state.in_flight = True
        try:
            outcome = await self._transcriber.transcribe(file)
        except Exception:
            logger.exception(MSG_BACKEND_RAISED)
            outcome = TranscriptionFailure(ErrorKind.CONNECTION_ERROR)
        finally:
            # After a reset the flag belongs to the new generation.
            if token == self._generation:
                self._state.in_flight = False

        match token == self._generation:
            case False:
                logger.info(MSG_REQUEST_STALE)
                return None
            case True:
                self._state.transcript = display_text(outcome)
                return outcome

    def reset(self) -> None:
        self._generation += 1
        self._state = SessionState()
        self._duration_task = None

    def stop(self) -> None:
        self.reset()

    async def copy_transcript(self, sink: TranscriptSink) -> bool:
        match self._state.transcript:
            case None | "":
                return False
            case text:
                try:
                    await sink.write(text)
                    return True
                except Exception as exc:
                    logger.error(MSG_COPY_FAILED, exc)
                    return False

    async def wait_for_duration(self) -> float | None:
        """Await the pending duration probe; None if it failed or the file
        is no longer selected."""
        match self._duration_task:
            case None:
                return None
            case task:
                return await task

    # ── internals ─────────────────────────────────────────────────────────────

    async def _derive_duration(self, file: MediaFile) -> float | None:
        duration = await asyncio.to_thread(self._duration_probe, file)
        # Only the file that was probed may receive its duration.
        match (duration, self._state.selected_file is file):
            case (None, _) | (_, False):
                return None
            case (seconds, True):
                self._state.duration = seconds
                return seconds


class SessionRegistry:
    """One SessionController per chat — never a shared singleton."""

    def __init__(self, factory: Callable[[], SessionController]) -> None:
        self._factory = factory
        self._sessions: dict[str, SessionController] = {}

    def get(self, session_id: str) -> SessionController:
        match self._sessions.get(session_id):
            case None:
                controller = self._factory()
                self._sessions[session_id] = controller
                return controller
            case controller:
                return controller
