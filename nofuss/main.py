"""Entry point — wires Config → TranscriptionClient → TelegramClient."""
import logging

from rich.logging import RichHandler

from nofuss.config import Config
from nofuss.constants import BACKEND_WHISPER, MSG_BOT_STARTING
from nofuss.telegram.client import TelegramClient
from nofuss.transcription.client import TranscriptionClient
from nofuss.transcription.http import HttpTranscriptionClient
from nofuss.transcription.whisper import WhisperTranscriptionClient


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))
    # httpx logs every request at INFO; ours already does.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_transcriber(config: Config) -> TranscriptionClient:
    match (config.transcriber_backend, config.openai_api_key):
        case (backend, str() as key) if backend == BACKEND_WHISPER:
            return WhisperTranscriptionClient(key, config.request_timeout)
        case _:
            return HttpTranscriptionClient(
                config.transcriber_base_url, config.request_timeout
            )


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_BOT_STARTING)

    client = TelegramClient(config, transcriber=build_transcriber(config))
    client.run()


if __name__ == "__main__":
    main()
