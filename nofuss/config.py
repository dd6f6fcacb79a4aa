from dataclasses import dataclass
from typing import Optional
import math
import os
from dotenv import load_dotenv

from nofuss.constants import (
    BACKEND_HTTP,
    BACKEND_WHISPER,
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
)


@dataclass(frozen=True)
class Config:
    telegram_bot_token: str
    transcriber_base_url: str
    transcriber_backend: str
    request_timeout: float
    log_level: str
    openai_api_key: Optional[str]

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        token = os.getenv("TELEGRAM_BOT_TOKEN")
        base_url = os.getenv("TRANSCRIBER_BASE_URL") or DEFAULT_BASE_URL
        backend = os.getenv("TRANSCRIBER_BACKEND", BACKEND_HTTP).strip().lower()
        raw_timeout = os.getenv("REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT)
        log_level = os.getenv("LOG_LEVEL", "INFO")
        openai_api_key = os.getenv("OPENAI_API_KEY") or None

        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"REQUEST_TIMEOUT must be a number, got {raw_timeout!r}")

        return cls._validate(
            telegram_bot_token=token,
            transcriber_base_url=base_url,
            transcriber_backend=backend,
            request_timeout=timeout,
            log_level=log_level,
            openai_api_key=openai_api_key,
        )

    @staticmethod
    def _validate(
        telegram_bot_token: Optional[str],
        transcriber_base_url: str,
        transcriber_backend: str,
        request_timeout: float,
        log_level: str,
        openai_api_key: Optional[str],
    ) -> "Config":
        match telegram_bot_token:
            case None | "":
                raise ValueError("TELEGRAM_BOT_TOKEN must be set in .env")
            case _:
                pass

        match (transcriber_backend, openai_api_key):
            case (str() as b, _) if b == BACKEND_HTTP:
                pass
            case (str() as b, None) if b == BACKEND_WHISPER:
                raise ValueError("OPENAI_API_KEY must be set when TRANSCRIBER_BACKEND=whisper")
            case (str() as b, _) if b == BACKEND_WHISPER:
                pass
            case (other, _):
                raise ValueError(f"TRANSCRIBER_BACKEND must be 'http' or 'whisper', got {other!r}")

        match request_timeout:
            case t if not math.isfinite(t) or t <= 0:
                raise ValueError("REQUEST_TIMEOUT must be a positive, finite number of seconds")
            case _:
                pass

        return Config(
            telegram_bot_token=telegram_bot_token,
            transcriber_base_url=transcriber_base_url,
            transcriber_backend=transcriber_backend,
            request_timeout=request_timeout,
            log_level=log_level,
            openai_api_key=openai_api_key,
        )
