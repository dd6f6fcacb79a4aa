"""TelegramClient — event-driven transport via python-telegram-bot."""
import logging
from typing import Any, Optional

from telegram import Message, Update
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from nofuss.bot_client import BotClient
from nofuss.config import Config
from nofuss.constants import (
    AUDIO_FILENAME,
    CMD_COPY,
    CMD_HELP,
    CMD_RESET,
    CMD_START,
    CMD_STATUS,
    CMD_STOP,
    CMD_TRANSCRIBE,
    MSG_BUSY,
    MSG_CLEARED,
    MSG_COPY_OK,
    MSG_DOWNLOAD_FAILED,
    MSG_DOWNLOAD_LOG,
    MSG_DURATION,
    MSG_DURATION_LOADING,
    MSG_EDIT_FAILED,
    MSG_FILE_INFO,
    MSG_HELP,
    MSG_NO_FILE,
    MSG_NOTHING_TO_COPY,
    MSG_NO_CHAT,
    MSG_SEND_BEFORE_RUN,
    MSG_SEND_FAIL,
    MSG_STATUS,
    MSG_STATUS_BUSY,
    MSG_STATUS_IDLE,
    MSG_STATUS_NO_DURATION,
    MSG_STATUS_NO_FILE,
    MSG_TRANSCRIBING,
    VIDEO_FILENAME,
    VOICE_FILENAME,
)
from nofuss.media import Invalid, MediaFile, Valid, validate_file
from nofuss.session import SessionController, SessionRegistry
from nofuss.telegram.busy import TelegramBusyIndicator
from nofuss.telegram.sink import TelegramDocumentSink
from nofuss.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)

ATTACHMENTS = filters.Document.ALL | filters.AUDIO | filters.VIDEO | filters.VOICE


class TelegramClient(BotClient):

    def __init__(self, config: Config, transcriber: TranscriptionClient) -> None:
        self._token = config.telegram_bot_token
        self._app: Optional[Application] = None
        self._sessions = SessionRegistry(lambda: SessionController(transcriber))

    # ── BotClient interface ───────────────────────────────────────────────────

    def run(self) -> None:
        # Concurrent updates so /stop is handled while a transcription is pending.
        self._app = Application.builder().token(self._token).concurrent_updates(True).build()
        self._app.add_handler(CommandHandler([CMD_START, CMD_HELP], self._handle_help))
        self._app.add_handler(CommandHandler(CMD_TRANSCRIBE, self._handle_transcribe))
        self._app.add_handler(CommandHandler([CMD_STOP, CMD_RESET], self._handle_reset))
        self._app.add_handler(CommandHandler(CMD_COPY, self._handle_copy))
        self._app.add_handler(CommandHandler(CMD_STATUS, self._handle_status))
        self._app.add_handler(TGMessageHandler(ATTACHMENTS, self._handle_file))
        self._app.run_polling()

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error(MSG_SEND_BEFORE_RUN)
                return False
            case app:
                try:
                    await app.bot.send_message(chat_id=int(to), text=text)
                    return True
                except Exception as exc:
                    logger.error(MSG_SEND_FAIL, exc)
                    return False

    # ── helpers (also used in tests) ─────────────────────────────────────────

    @staticmethod
    def _sender_of(update: Update) -> str | None:
        """Chat id as the session key; None for updates without a chat."""
        match update.effective_chat:
            case None:
                logger.debug(MSG_NO_CHAT)
                return None
            case chat:
                return str(chat.id)

    @staticmethod
    def _attachment_of(message: Optional[Message]) -> tuple[Any, str] | None:
        """Return (telegram file object, display name) for a media message."""
        match message:
            case None:
                return None
            case m if m.document is not None:
                return (m.document, m.document.file_name or "")
            case m if m.audio is not None:
                return (m.audio, m.audio.file_name or AUDIO_FILENAME)
            case m if m.video is not None:
                return (m.video, m.video.file_name or VIDEO_FILENAME)
            case m if m.voice is not None:
                return (m.voice, VOICE_FILENAME)
            case _:
                return None

    @staticmethod
    def _format_status(controller: SessionController) -> str:
        state = controller.state
        name = state.selected_file.name if state.selected_file else MSG_STATUS_NO_FILE
        match (state.selected_file, state.duration):
            case (None, _):
                duration = MSG_STATUS_NO_DURATION
            case (_, None):
                duration = MSG_DURATION_LOADING
            case (_, seconds):
                duration = MSG_DURATION % seconds
        busy = MSG_STATUS_BUSY if state.in_flight else MSG_STATUS_IDLE
        return MSG_STATUS % (name, duration, busy)

    # ── handlers ──────────────────────────────────────────────────────────────

    async def _handle_help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        match self._sender_of(update):
            case None:
                return
            case sender:
                await self.send_message(sender, MSG_HELP)

    async def _handle_file(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        match (self._sender_of(update), self._attachment_of(update.message)):
            case (None, _) | (_, None):
                return
            case (sender, (media, name)):
                pass

        # Reject from metadata before spending a download on the file.
        match validate_file(name, media.file_size or 0):
            case Invalid() as rejected:
                await self.send_message(sender, rejected.message)
                return
            case Valid():
                pass

        try:
            tg_file = await media.get_file()
            content = bytes(await tg_file.download_as_bytearray())
        except Exception:
            logger.exception(MSG_DOWNLOAD_LOG)
            await self.send_message(sender, MSG_DOWNLOAD_FAILED)
            return

        controller = self._sessions.get(sender)
        candidate = MediaFile(name=name, size_bytes=len(content), byte_content=content)
        match controller.select_file(candidate):
            case Invalid() as rejected:
                await self.send_message(sender, rejected.message)
                return
            case Valid():
                pass

        info = await update.message.reply_text(MSG_FILE_INFO % (name, MSG_DURATION_LOADING))
        match await controller.wait_for_duration():
            case None:
                pass
            case seconds:
                try:
                    await info.edit_text(MSG_FILE_INFO % (name, MSG_DURATION % seconds))
                except Exception as exc:
                    logger.debug(MSG_EDIT_FAILED, exc)

    async def _handle_transcribe(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        match self._sender_of(update):
            case None:
                return
            case sender:
                controller = self._sessions.get(sender)

        state = controller.state
        match (state.selected_file, state.in_flight):
            case (None, _):
                await self.send_message(sender, MSG_NO_FILE)
                return
            case (_, True):
                await self.send_message(sender, MSG_BUSY)
                return
            case _:
                pass

        await self.send_message(sender, MSG_TRANSCRIBING)
        async with TelegramBusyIndicator(context.bot, sender):
            outcome = await controller.transcribe()

        # None: a /stop or /reset landed while the request was pending.
        match (outcome, controller.state.transcript):
            case (None, _) | (_, None):
                return
            case (_, text):
                await self.send_message(sender, text)

    async def _handle_reset(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        match self._sender_of(update):
            case None:
                return
            case sender:
                self._sessions.get(sender).reset()
                await self.send_message(sender, MSG_CLEARED)

    async def _handle_copy(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        match self._sender_of(update):
            case None:
                return
            case sender:
                controller = self._sessions.get(sender)

        match controller.state.transcript:
            case None | "":
                await self.send_message(sender, MSG_NOTHING_TO_COPY)
                return
            case _:
                pass

        copied = await controller.copy_transcript(TelegramDocumentSink(context.bot, sender))
        match copied:
            case True:
                await self.send_message(sender, MSG_COPY_OK)
            case False:
                pass

    async def _handle_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        match self._sender_of(update):
            case None:
                return
            case sender:
                await self.send_message(sender, self._format_status(self._sessions.get(sender)))
