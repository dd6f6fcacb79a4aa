"""WhisperTranscriptionClient — OpenAI Whisper speech-to-text backend."""
import io
import logging

from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from nofuss.constants import MSG_WHISPER_FAILED, MSG_WHISPER_STATUS, WHISPER_MODEL
from nofuss.media import MediaFile
from nofuss.transcription.client import TranscriptionClient
from nofuss.transcription.outcome import (
    ErrorKind,
    TranscriptionFailure,
    TranscriptionOutcome,
    classify_response,
)

logger = logging.getLogger(__name__)


class WhisperTranscriptionClient(TranscriptionClient):

    def __init__(self, api_key: str, timeout: float) -> None:
        self._api_key = api_key
        self._timeout = timeout

    async def transcribe(self, file: MediaFile) -> TranscriptionOutcome:
        # max_retries=0: a failed attempt is terminal, the user re-triggers.
        client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout, max_retries=0)
        audio_file = io.BytesIO(file.byte_content)
        audio_file.name = file.name
        try:
            response = await client.audio.transcriptions.create(
                model=WHISPER_MODEL,
                file=audio_file,
            )
        except APIStatusError as exc:
            logger.warning(MSG_WHISPER_STATUS, exc.status_code)
            return classify_response(exc.status_code, "")
        except APIConnectionError as exc:
            logger.warning(MSG_WHISPER_FAILED, exc)
            return TranscriptionFailure(ErrorKind.CONNECTION_ERROR)
        return classify_response(200, response.text.strip())
