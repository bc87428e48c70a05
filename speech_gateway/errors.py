"""Error taxonomy — the single exception type that crosses module seams."""
from enum import Enum
from typing import Optional

from speech_gateway.constants import DEFAULT_DETAIL_MAX_CHARS, SCRUBBED


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    METHOD_NOT_ALLOWED = "method_not_allowed"
    CONFIG_ERROR = "config_error"
    BACKEND_WARMING = "backend_warming"
    BACKEND_CLIENT_ERROR = "backend_client_error"
    BACKEND_SERVER_ERROR = "backend_server_error"
    NO_TEXT = "no_text"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    BACKEND_JOB_ERROR = "backend_job_error"
    PROCESSING_ERROR = "processing_error"


def scrub(
    text: Optional[str],
    secret: Optional[str],
    limit: int = DEFAULT_DETAIL_MAX_CHARS,
) -> Optional[str]:
    """Replace every occurrence of secret, then cap to limit characters."""
    match text:
        case None:
            return None
        case _:
            pass
    cleaned = text.replace(secret, SCRUBBED) if secret else text
    return cleaned[:limit]


class GatewayError(Exception):
    """A classified failure: kind, retry eligibility and optional diagnostics."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        retryable: bool = False,
        status: Optional[int] = None,
        detail: Optional[str] = None,
        attempts: int = 0,
    ) -> None:
        self.kind = kind
        self.message = message
        self.retryable = retryable
        self.status = status
        self.detail = detail
        self.attempts = attempts
        super().__init__(message)

    def __repr__(self) -> str:
        return f"GatewayError({self.kind.value}, {self.message!r}, retryable={self.retryable})"
