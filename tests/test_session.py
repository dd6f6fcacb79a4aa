"""SessionController — selection, single in-flight request, reset, copy."""
import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from nofuss.bot_client import TranscriptSink
from nofuss.constants import MSG_ERR_CONNECTION, MSG_ERR_RATE_LIMITED, MSG_NO_TEXT
from nofuss.media import Invalid, MediaFile, RejectReason, Valid
from nofuss.session import SessionController, SessionRegistry, SessionState
from nofuss.transcription.client import TranscriptionClient
from nofuss.transcription.outcome import ErrorKind, Transcript, TranscriptionFailure

MB = 1024 * 1024


def make_file(name: str = "speech.mp3", size: int = 5 * MB) -> MediaFile:
    return MediaFile(name=name, size_bytes=size, byte_content=b"audio")


def make_transcriber(**kwargs) -> MagicMock:
    transcriber = MagicMock(spec=TranscriptionClient)
    transcriber.transcribe = AsyncMock(**kwargs)
    return transcriber


def make_controller(transcriber=None, duration: float | None = 12.3) -> SessionController:
    return SessionController(
        transcriber or make_transcriber(return_value=Transcript("hello world")),
        duration_probe=lambda file: duration,
    )


class BlockingTranscriber(TranscriptionClient):
    """Holds every request open until release() is called."""

    def __init__(self, outcome) -> None:
        self.outcome = outcome
        self.calls = 0
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def transcribe(self, file: MediaFile):
        self.calls += 1
        await self._gate.wait()
        return self.outcome


# ── selection ────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_scenario_a_select_and_transcribe():
    controller = make_controller()

    assert controller.select_file(make_file()) == Valid()
    outcome = await controller.transcribe()

    assert outcome == Transcript("hello world")
    assert controller.state.transcript == "hello world"
    assert controller.state.in_flight is False


def test_scenario_b_invalid_extension_leaves_state_unset():
    controller = make_controller()

    result = controller.select_file(make_file("song.xyz", MB))

    assert result == Invalid(RejectReason.EXTENSION_REJECTED)
    assert controller.state.selected_file is None


def test_scenario_c_oversized_file_rejected():
    controller = make_controller()

    result = controller.select_file(make_file("movie.mp4", 25 * MB))

    assert result == Invalid(RejectReason.SIZE_EXCEEDED)
    assert controller.state == SessionState()


@pytest.mark.asyncio
async def test_invalid_selection_keeps_previous_file_and_transcript():
    controller = make_controller()
    first = make_file()
    controller.select_file(first)
    await controller.transcribe()

    controller.select_file(make_file("song.xyz", MB))

    assert controller.state.selected_file is first
    assert controller.state.transcript == "hello world"


@pytest.mark.asyncio
async def test_new_selection_clears_transcript_and_duration():
    controller = make_controller()
    controller.select_file(make_file())
    await controller.wait_for_duration()
    await controller.transcribe()

    controller.select_file(make_file("other.wav"))

    assert controller.state.transcript is None
    assert controller.state.duration is None
    assert controller.state.selected_file.name == "other.wav"


@pytest.mark.asyncio
async def test_duration_is_derived_after_selection():
    controller = make_controller(duration=42.5)
    controller.select_file(make_file())

    assert await controller.wait_for_duration() == 42.5
    assert controller.state.duration == 42.5


@pytest.mark.asyncio
async def test_undecodable_duration_stays_unset():
    controller = make_controller(duration=None)
    controller.select_file(make_file())

    assert await controller.wait_for_duration() is None
    assert controller.state.duration is None


@pytest.mark.asyncio
async def test_duration_of_replaced_file_is_not_written():
    def probe(file: MediaFile) -> float:
        return 99.0 if file.name == "old.mp3" else 1.0

    controller = SessionController(make_transcriber(), duration_probe=probe)
    controller.select_file(make_file("old.mp3"))
    controller.select_file(make_file("new.mp3"))
    await asyncio.sleep(0.05)
    await controller.wait_for_duration()

    assert controller.state.duration == 1.0


@pytest.mark.asyncio
async def test_duration_after_reset_is_not_written():
    controller = make_controller(duration=7.0)
    controller.select_file(make_file())
    controller.reset()
    await asyncio.sleep(0.05)

    assert controller.state.duration is None


def test_state_is_a_snapshot():
    controller = make_controller()
    snapshot = controller.state
    snapshot.in_flight = True

    assert controller.state.in_flight is False


# ── transcription ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_transcribe_without_file_is_noop():
    transcriber = make_transcriber(return_value=Transcript("x"))
    controller = make_controller(transcriber)

    assert await controller.transcribe() is None
    transcriber.transcribe.assert_not_called()


@pytest.mark.asyncio
async def test_scenario_d_rate_limited_keeps_selection():
    transcriber = make_transcriber(return_value=TranscriptionFailure(ErrorKind.RATE_LIMITED))
    controller = make_controller(transcriber)
    file = make_file()
    controller.select_file(file)

    await controller.transcribe()

    assert controller.state.transcript == MSG_ERR_RATE_LIMITED
    assert controller.state.in_flight is False
    assert controller.state.selected_file is file


@pytest.mark.asyncio
async def test_scenario_e_empty_body_placeholder():
    transcriber = make_transcriber(return_value=Transcript(MSG_NO_TEXT))
    controller = make_controller(transcriber)
    controller.select_file(make_file())

    await controller.transcribe()

    assert controller.state.transcript == "No text returned."


@pytest.mark.asyncio
async def test_scenario_f_backend_exception_is_connection_error():
    transcriber = make_transcriber(side_effect=OSError("network down"))
    controller = make_controller(transcriber)
    controller.select_file(make_file())

    outcome = await controller.transcribe()

    assert outcome == TranscriptionFailure(ErrorKind.CONNECTION_ERROR)
    assert controller.state.transcript == MSG_ERR_CONNECTION
    assert controller.state.in_flight is False


@pytest.mark.asyncio
async def test_transcribe_while_in_flight_is_noop():
    transcriber = BlockingTranscriber(Transcript("done"))
    controller = make_controller(transcriber)
    controller.select_file(make_file())

    first = asyncio.create_task(controller.transcribe())
    await asyncio.sleep(0)
    assert controller.state.in_flight is True

    assert await controller.transcribe() is None
    transcriber.release()
    assert await first == Transcript("done")
    assert transcriber.calls == 1
    assert controller.state.in_flight is False


@pytest.mark.asyncio
async def test_transcribe_clears_previous_text_while_pending():
    transcriber = BlockingTranscriber(Transcript("second"))
    controller = make_controller(make_transcriber(return_value=Transcript("first")))
    controller.select_file(make_file())
    await controller.transcribe()
    controller._transcriber = transcriber

    pending = asyncio.create_task(controller.transcribe())
    await asyncio.sleep(0)
    assert controller.state.transcript is None

    transcriber.release()
    await pending
    assert controller.state.transcript == "second"


@pytest.mark.asyncio
async def test_stale_result_after_reset_is_discarded():
    transcriber = BlockingTranscriber(Transcript("late"))
    controller = make_controller(transcriber)
    controller.select_file(make_file())

    pending = asyncio.create_task(controller.transcribe())
    await asyncio.sleep(0)
    controller.reset()
    transcriber.release()

    assert await pending is None
    assert controller.state == SessionState()


@pytest.mark.asyncio
async def test_stale_result_does_not_release_newer_request():
    old = BlockingTranscriber(Transcript("old"))
    controller = make_controller(old)
    controller.select_file(make_file())
    stale = asyncio.create_task(controller.transcribe())
    await asyncio.sleep(0)

    controller.stop()
    new = BlockingTranscriber(Transcript("new"))
    controller._transcriber = new
    controller.select_file(make_file())
    current = asyncio.create_task(controller.transcribe())
    await asyncio.sleep(0)

    old.release()
    assert await stale is None
    assert controller.state.in_flight is True

    new.release()
    assert await current == Transcript("new")
    assert controller.state.transcript == "new"
    assert controller.state.in_flight is False


# ── reset / stop ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_reset_clears_everything():
    controller = make_controller()
    controller.select_file(make_file())
    await controller.wait_for_duration()
    await controller.transcribe()

    controller.reset()

    assert controller.state == SessionState()


@pytest.mark.asyncio
async def test_reset_is_idempotent():
    controller = make_controller()
    controller.select_file(make_file())
    await controller.transcribe()

    controller.reset()
    once = controller.state
    controller.reset()

    assert controller.state == once == SessionState()


@pytest.mark.asyncio
async def test_stop_equals_reset():
    controller = make_controller()
    controller.select_file(make_file())
    await controller.transcribe()

    controller.stop()

    assert controller.state == SessionState()


# ── copy ─────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_copy_transcript_writes_to_sink():
    controller = make_controller()
    controller.select_file(make_file())
    await controller.transcribe()
    sink = MagicMock(spec=TranscriptSink)
    sink.write = AsyncMock()

    assert await controller.copy_transcript(sink) is True
    sink.write.assert_awaited_once_with("hello world")


@pytest.mark.asyncio
async def test_copy_without_transcript_returns_false():
    controller = make_controller()
    sink = MagicMock(spec=TranscriptSink)
    sink.write = AsyncMock()

    assert await controller.copy_transcript(sink) is False
    sink.write.assert_not_called()


@pytest.mark.asyncio
async def test_copy_failure_leaves_state_untouched():
    controller = make_controller()
    controller.select_file(make_file())
    await controller.transcribe()
    before = controller.state
    sink = MagicMock(spec=TranscriptSink)
    sink.write = AsyncMock(side_effect=RuntimeError("clipboard unavailable"))

    assert await controller.copy_transcript(sink) is False
    assert controller.state == before


# ── registry ─────────────────────────────────────────────────────────────────


def test_registry_creates_one_controller_per_session():
    registry = SessionRegistry(lambda: make_controller())

    a = registry.get("1")
    b = registry.get("2")

    assert a is registry.get("1")
    assert a is not b
