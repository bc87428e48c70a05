"""Error classifier — pure mapping from raw failures to the error taxonomy."""
import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from speech_gateway.constants import (
    ESTIMATED_TIME_FIELD,
    LOADING_MARKER,
    MSG_ERR_CLIENT,
    MSG_ERR_NETWORK,
    MSG_ERR_NO_TEXT,
    MSG_ERR_PROCESSING,
    MSG_ERR_SERVER,
    MSG_ERR_TIMEOUT,
    MSG_ERR_WARMING,
    WARMING_STATUS,
)
from speech_gateway.errors import ErrorKind, GatewayError


@dataclass(frozen=True)
class Classification:
    kind: ErrorKind
    retryable: bool


WARMING = Classification(ErrorKind.BACKEND_WARMING, True)
CLIENT_ERROR = Classification(ErrorKind.BACKEND_CLIENT_ERROR, False)
SERVER_ERROR = Classification(ErrorKind.BACKEND_SERVER_ERROR, True)
NETWORK_ERROR = Classification(ErrorKind.NETWORK_ERROR, True)
TIMEOUT = Classification(ErrorKind.TIMEOUT, True)
PROCESSING_ERROR = Classification(ErrorKind.PROCESSING_ERROR, False)
# 1xx and unfollowed 3xx replies point at a misconfigured backend URL.
UNEXPECTED_STATUS = Classification(ErrorKind.BACKEND_SERVER_ERROR, False)


# ── body shape helpers ────────────────────────────────────────────────────────


def is_loading(body: Any) -> bool:
    """True when the body says the backend model is still loading."""
    match body:
        case {"error": str() as err} if LOADING_MARKER in err.lower():
            return True
        case dict() if ESTIMATED_TIME_FIELD in body:
            return True
        case str() as text:
            return LOADING_MARKER in text.lower()
        case _:
            return False


def extract_text(body: Any) -> Optional[str]:
    """Return the stripped transcription text, or None when absent or blank."""
    match body:
        case {"text": str() as text} if text.strip():
            return text.strip()
        case [{"text": str()} as first, *_]:
            return extract_text(first)
        case _:
            return None


# ── classification ────────────────────────────────────────────────────────────


def classify_response(
    status: int, body: Any, *, no_text_retryable: bool = False
) -> Optional[Classification]:
    """Classify an HTTP reply. None means a 2xx that carries text."""
    match status:
        case s if s == WARMING_STATUS:
            return WARMING
        case s if 200 <= s < 300:
            match (extract_text(body), is_loading(body)):
                case (str(), _):
                    return None
                case (None, True):
                    return WARMING
                case _:
                    return Classification(ErrorKind.NO_TEXT, no_text_retryable)
        case _ if is_loading(body):
            return WARMING
        case s if 400 <= s < 500:
            return CLIENT_ERROR
        case s if 500 <= s < 600:
            return SERVER_ERROR
        case _:
            return UNEXPECTED_STATUS


def classify_exception(exc: BaseException) -> Classification:
    match exc:
        case GatewayError():
            return Classification(exc.kind, exc.retryable)
        case httpx.TimeoutException() | asyncio.TimeoutError():
            return TIMEOUT
        case httpx.TransportError():
            return NETWORK_ERROR
        case _:
            return PROCESSING_ERROR


def classify(
    status: Optional[int] = None,
    body: Any = None,
    exc: Optional[BaseException] = None,
    *,
    no_text_retryable: bool = False,
) -> Optional[Classification]:
    """Map (status, body, exception) to a taxonomy entry.

    An exception wins over status; a missing status with no exception is a
    processing error. Returns None only for a successful reply with text.
    """
    match (exc, status):
        case (BaseException(), _):
            return classify_exception(exc)
        case (None, None):
            return PROCESSING_ERROR
        case _:
            return classify_response(status, body, no_text_retryable=no_text_retryable)


def describe(kind: ErrorKind, status: Optional[int] = None, cause: str = "") -> str:
    """Human-readable message for a classified failure."""
    match kind:
        case ErrorKind.BACKEND_WARMING:
            return MSG_ERR_WARMING
        case ErrorKind.BACKEND_CLIENT_ERROR:
            return MSG_ERR_CLIENT % (status or 0)
        case ErrorKind.BACKEND_SERVER_ERROR:
            return MSG_ERR_SERVER % (status or 0)
        case ErrorKind.NO_TEXT:
            return MSG_ERR_NO_TEXT
        case ErrorKind.NETWORK_ERROR:
            return MSG_ERR_NETWORK % cause
        case ErrorKind.TIMEOUT:
            return MSG_ERR_TIMEOUT
        case _:
            return MSG_ERR_PROCESSING % cause


def to_gateway_error(exc: BaseException) -> GatewayError:
    """Wrap any exception as a GatewayError, passing GatewayErrors through."""
    match exc:
        case GatewayError():
            return exc
        case _:
            found = classify_exception(exc)
            return GatewayError(
                found.kind,
                describe(found.kind, cause=str(exc) or type(exc).__name__),
                retryable=found.retryable,
                detail=str(exc) or None,
            )
