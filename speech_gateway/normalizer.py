"""Response normalizer — every outcome becomes a parseable envelope."""
from typing import Any, Optional

from speech_gateway.constants import DEFAULT_DETAIL_MAX_CHARS
from speech_gateway.errors import GatewayError, scrub
from speech_gateway.retry import TranscriptionResult


def success_envelope(result: TranscriptionResult) -> dict[str, Any]:
    return {"text": result.text}


def failure_envelope(
    error: GatewayError,
    credential: Optional[str] = None,
    limit: int = DEFAULT_DETAIL_MAX_CHARS,
) -> dict[str, Any]:
    """{"error", "message", "detail"?, "status"?} with the credential scrubbed out."""
    envelope: dict[str, Any] = {
        "error": error.kind.value,
        "message": scrub(error.message, credential, limit),
    }
    match scrub(error.detail, credential, limit):
        case None | "":
            pass
        case detail:
            envelope["detail"] = detail
    match error.status:
        case None:
            pass
        case status:
            envelope["status"] = status
    return envelope
