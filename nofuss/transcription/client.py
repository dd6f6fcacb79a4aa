"""TranscriptionClient — abstract base for speech-to-text backends."""
from abc import ABC, abstractmethod

from nofuss.media import MediaFile
from nofuss.transcription.outcome import TranscriptionOutcome


class TranscriptionClient(ABC):
    @abstractmethod
    async def transcribe(self, file: MediaFile) -> TranscriptionOutcome:
        """Upload a validated file and classify the result. Never raises for
        transport or HTTP errors — those come back as TranscriptionFailure."""
        ...
