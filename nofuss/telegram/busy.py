"""Telegram busy indicator — "sending a file…" in the chat header while a
transcription is outstanding."""
import asyncio
import logging

from telegram import Bot
from telegram.constants import ChatAction

from nofuss.bot_client import BusyIndicator
from nofuss.constants import MSG_CHAT_ACTION_FAILED, TELEGRAM_BUSY_INTERVAL

logger = logging.getLogger(__name__)


class TelegramBusyIndicator(BusyIndicator):

    def __init__(
        self,
        bot: Bot,
        chat_id: str,
        interval: float = TELEGRAM_BUSY_INTERVAL,
    ) -> None:
        self._bot = bot
        self._chat_id = int(chat_id)
        self._interval = interval
        self._task: asyncio.Task | None = None

    @property
    def active(self) -> bool:
        return self._task is not None

    async def start(self) -> None:
        await self.stop()
        self._task = asyncio.create_task(self._announce())

    async def stop(self) -> None:
        match self._task:
            case None:
                return
            case task:
                self._task = None
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

    async def _announce(self) -> None:
        # Telegram clears a chat action after ~5 s unless it is re-sent.
        while True:
            try:
                await self._bot.send_chat_action(
                    chat_id=self._chat_id, action=ChatAction.UPLOAD_DOCUMENT
                )
            except Exception as exc:
                logger.debug(MSG_CHAT_ACTION_FAILED, exc)
            await asyncio.sleep(self._interval)
