"""HttpTranscriptionClient — multipart POST to {base_url}/transcribe."""
import logging
import time

import httpx

from nofuss.constants import (
    MSG_REQUEST_DONE,
    MSG_REQUEST_FAILED,
    MSG_REQUEST_START,
    TRANSCRIBE_PATH,
    UPLOAD_FIELD,
)
from nofuss.media import MediaFile
from nofuss.transcription.client import TranscriptionClient
from nofuss.transcription.outcome import (
    ErrorKind,
    TranscriptionFailure,
    TranscriptionOutcome,
    classify_response,
)

logger = logging.getLogger(__name__)


class HttpTranscriptionClient(TranscriptionClient):

    def __init__(
        self,
        base_url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = base_url.rstrip("/") + TRANSCRIBE_PATH
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    async def transcribe(self, file: MediaFile) -> TranscriptionOutcome:
        logger.info(MSG_REQUEST_START, self._url, file.name, file.size_bytes)
        start = time.monotonic()
        files = {UPLOAD_FIELD: (file.name, file.byte_content)}
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(self._url, files=files)
                body = response.text
        except httpx.HTTPError as exc:
            logger.warning(MSG_REQUEST_FAILED, exc)
            return TranscriptionFailure(ErrorKind.CONNECTION_ERROR)

        outcome = classify_response(response.status_code, body)
        logger.info(MSG_REQUEST_DONE, time.monotonic() - start, response.status_code)
        return outcome
