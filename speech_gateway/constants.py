"""All magic values live here — no inline literals anywhere else."""

# HTTP surface
TRANSCRIBE_PATH = "/api/transcribe"
HEALTH_PATH = "/api/health"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000

# Inbound audio
DEFAULT_AUDIO_CONTENT_TYPE = "audio/wav"
DEFAULT_MIN_AUDIO_BYTES = 100

# Backend modes
MODE_SYNC = "sync"
MODE_ASYNC = "async"

# Retry budget (seconds). Linear growth: min(base + n * increment, cap).
DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BACKOFF_BASE: float = 5.0
DEFAULT_BACKOFF_INCREMENT: float = 5.0
DEFAULT_BACKOFF_MAX: float = 30.0
DEFAULT_ATTEMPT_TIMEOUT: float = 180.0

# Job polling
DEFAULT_POLL_INTERVAL: float = 1.0
DEFAULT_POLL_MAX_ATTEMPTS = 120
DEFAULT_POLL_TIMEOUT: float = 120.0
DEFAULT_LANGUAGE_CODE = "ar"

# Failure envelopes
DEFAULT_DETAIL_MAX_CHARS = 500
SCRUBBED = "***"

# Wire protocol — synchronous inference
AUTH_HEADER = "Authorization"
BEARER_SCHEME = "Bearer"
TEXT_FIELD = "text"
LOADING_MARKER = "loading"
ESTIMATED_TIME_FIELD = "estimated_time"
WARMING_STATUS = 503

# Wire protocol — asynchronous jobs
UPLOAD_SUFFIX = "/upload"
TRANSCRIPT_SUFFIX = "/transcript"
UPLOAD_URL_FIELD = "upload_url"
AUDIO_URL_FIELD = "audio_url"
LANGUAGE_FIELD = "language_code"
JOB_ID_FIELD = "id"
JOB_STATUS_FIELD = "status"
JOB_ERROR_FIELD = "error"

# Log / user-facing messages
MSG_GATEWAY_STARTING = "Starting speech gateway (%s mode) on %s:%s…"
MSG_CREDENTIAL_MISSING_AT_START = "%s is not set; transcribe requests will fail with config_error"
MSG_REQUEST_RECEIVED = "Request %s received: %d bytes"
MSG_ATTEMPT_START = "Request %s attempt %d/%d"
MSG_ATTEMPT_FAILED = "Request %s attempt %d failed: %s"
MSG_RETRY_SCHEDULED = "Request %s retrying in %.1fs"
MSG_REQUEST_SUCCEEDED = "✓ Request %s transcribed after %d attempt(s)"
MSG_REQUEST_FAILED = "✗ Request %s failed after %d attempt(s): %s"
MSG_REQUEST_CRASHED = "Request %s crashed"
MSG_UPLOAD_OK = "Audio uploaded (%d bytes)"
MSG_JOB_SUBMITTED = "Job %s submitted"
MSG_POLL_STATUS = "Job %s poll %d/%d: %s"
MSG_POLL_TRANSIENT = "Job %s poll %d failed, still polling: %s"

# Failure messages
MSG_ERR_METHOD = "POST required"
MSG_ERR_NO_AUDIO = "No audio data received"
MSG_ERR_AUDIO_TOO_SMALL = "Audio too small: %d bytes (minimum %d)"
MSG_ERR_NO_CREDENTIAL = "BACKEND_API_KEY environment variable not configured"
MSG_ERR_WARMING = "Backend model is loading"
MSG_ERR_CLIENT = "Backend rejected the request (%d)"
MSG_ERR_SERVER = "Backend failed (%d)"
MSG_ERR_NO_TEXT = "Backend returned no transcription text"
MSG_ERR_NETWORK = "Could not reach backend: %s"
MSG_ERR_TIMEOUT = "Backend call timed out"
MSG_ERR_ATTEMPT_TIMEOUT = "Attempt exceeded %.0fs"
MSG_ERR_POLL_TIMEOUT = "Transcription timeout after %d polls"
MSG_ERR_POLL_DEADLINE = "Transcription timeout after %.0fs"
MSG_ERR_JOB = "Job error: %s"
MSG_ERR_NO_UPLOAD_REF = "Upload response lacked an upload reference"
MSG_ERR_NO_JOB_ID = "Submit response lacked a job id"
MSG_ERR_PROCESSING = "Unexpected error: %s"
MSG_ERR_AFTER_ATTEMPTS = "%s (after %d attempts)"
