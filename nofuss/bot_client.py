"""Abstract interfaces for transport-agnostic bot clients."""
from abc import ABC, abstractmethod


class BusyIndicator(ABC):
    """Shown while a transcription is outstanding; use as `async with`."""

    @abstractmethod
    async def start(self) -> None: ...

    @abstractmethod
    async def stop(self) -> None: ...

    async def __aenter__(self) -> "BusyIndicator":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()


class TranscriptSink(ABC):
    """Clipboard-like destination for an exported transcript."""

    @abstractmethod
    async def write(self, text: str) -> None: ...


class BotClient(ABC):
    @abstractmethod
    def run(self) -> None: ...

    @abstractmethod
    async def send_message(self, to: str, text: str) -> bool: ...
