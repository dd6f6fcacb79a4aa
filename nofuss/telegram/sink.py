"""TelegramDocumentSink — "copy to clipboard" by sending the transcript back as a file."""
import io

from telegram import Bot

from nofuss.bot_client import TranscriptSink
from nofuss.constants import TRANSCRIPT_FILENAME


class TelegramDocumentSink(TranscriptSink):

    def __init__(self, bot: Bot, chat_id: str) -> None:
        self._bot = bot
        self._chat_id = chat_id

    async def write(self, text: str) -> None:
        document = io.BytesIO(text.encode("utf-8"))
        await self._bot.send_document(
            chat_id=int(self._chat_id),
            document=document,
            filename=TRANSCRIPT_FILENAME,
        )
