"""All magic values live here — messages, log templates, limits and names; no inline literals anywhere else."""

# File validation
ALLOWED_EXTENSIONS = frozenset(
    ("mp3", "wav", "ogg", "flac", "m4a", "aac", "wma", "webm", "mp4", "mov")
)
MAX_UPLOAD_BYTES = 20 * 1024 * 1024

# Transcription service
DEFAULT_BASE_URL = "https://whisper-transcriber-backend.onrender.com"
TRANSCRIBE_PATH = "/transcribe"
UPLOAD_FIELD = "file"
DEFAULT_REQUEST_TIMEOUT = "120"
BACKEND_HTTP = "http"
BACKEND_WHISPER = "whisper"
WHISPER_MODEL = "whisper-1"

# Telegram busy indicator re-send interval (seconds).
# Chat actions expire after ~5 s, so we refresh every 4 s.
TELEGRAM_BUSY_INTERVAL: float = 4.0

# Fallback names for attachments Telegram sends without a file name
VOICE_FILENAME = "voice.ogg"
VIDEO_FILENAME = "video.mp4"
AUDIO_FILENAME = "audio.mp3"
TRANSCRIPT_FILENAME = "transcript.txt"

# Log messages
MSG_BOT_STARTING = "Starting transcriber bot…"
MSG_FILE_SELECTED = "Selected %s (%d bytes)"
MSG_FILE_REJECTED = "Rejected %s: %s"
MSG_REQUEST_START = "→ POST %s (%s, %d bytes)"
MSG_REQUEST_DONE = "✓ Transcription finished (%.1fs): %s"
MSG_REQUEST_STALE = "Discarding stale transcription result"
MSG_DURATION_FAILED = "Could not read duration of %s: %s"
MSG_SEND_FAIL = "Telegram send_message failed: %s"
MSG_SEND_BEFORE_RUN = "send_message called before run()"
MSG_REQUEST_FAILED = "Transcription request failed: %s"
MSG_WHISPER_STATUS = "Whisper returned %s"
MSG_WHISPER_FAILED = "Whisper request failed: %s"
MSG_BACKEND_RAISED = "Transcription backend raised"
MSG_COPY_FAILED = "Failed to copy transcript: %s"
MSG_DOWNLOAD_LOG = "Attachment download failed"
MSG_EDIT_FAILED = "File info edit failed: %s"
MSG_CHAT_ACTION_FAILED = "Chat action failed: %s"
MSG_NO_CHAT = "Ignoring update without a chat"

# Transcript display
MSG_NO_TEXT = "No text returned."
MSG_TRANSCRIBING = "Transcribing..."
MSG_DURATION_LOADING = "Loading..."
MSG_FILE_INFO = "✅ %s — %s"
MSG_DURATION = "%.1fs"

# Pre-flight rejections
MSG_REJECT_EXTENSION = "Please upload a valid audio file."
MSG_REJECT_SIZE = "File is too large. Please upload a file under 20 MB."

# Request failures
MSG_ERR_TOO_LARGE = "File is too large for the server. Please upload a file under 20 MB and try again."
MSG_ERR_UNSUPPORTED = (
    "Unsupported file format. Accepted formats: "
    "mp3, wav, ogg, flac, m4a, aac, wma, webm, mp4, mov."
)
MSG_ERR_RATE_LIMITED = "Too many requests. Please wait a moment and try again."
MSG_ERR_SERVER = "An error occurred during transcription. Please try again."
MSG_ERR_CONNECTION = "Could not connect to the transcription service. Please try again later."

# Session commands
CMD_START = "start"
CMD_HELP = "help"
CMD_TRANSCRIBE = "transcribe"
CMD_STOP = "stop"
CMD_RESET = "reset"
CMD_COPY = "copy"
CMD_STATUS = "status"
MSG_NO_FILE = "Send an audio file first."
MSG_BUSY = "Already transcribing — please wait."
MSG_CLEARED = "Cleared — send a new file to start over."
MSG_COPY_OK = "Transcript copied!"
MSG_NOTHING_TO_COPY = "Nothing to copy yet — transcribe a file first."
MSG_DOWNLOAD_FAILED = "Could not download that file — please send it again."
MSG_STATUS_NO_FILE = "none"
MSG_STATUS_NO_DURATION = "-"
MSG_STATUS_BUSY = "yes"
MSG_STATUS_IDLE = "no"
MSG_STATUS = (
    "Status\n"
    "  File     : %s\n"
    "  Duration : %s\n"
    "  Busy     : %s\n"
)

MSG_HELP = (
    "The No-Fuss Transcriber\n"
    "\n"
    "Send an audio or video file (max 20 MB), then:\n"
    "  /transcribe  — transcribe the selected file\n"
    "  /copy        — get the transcript as a .txt file\n"
    "  /stop        — clear the current file and transcript\n"
    "  /reset       — same as /stop\n"
    "  /status      — show the current selection\n"
    "  /help        — show this message\n"
    "\n"
    "Accepted formats: mp3, wav, ogg, flac, m4a, aac, wma, webm, mp4, mov\n"
)
