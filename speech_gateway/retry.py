"""RetryOrchestrator — per-request attempt state machine with linear backoff."""
import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional

from speech_gateway.classifier import to_gateway_error
from speech_gateway.config import Config
from speech_gateway.constants import (
    MSG_ATTEMPT_FAILED,
    MSG_ATTEMPT_START,
    MSG_ERR_AFTER_ATTEMPTS,
    MSG_ERR_ATTEMPT_TIMEOUT,
    MSG_REQUEST_FAILED,
    MSG_REQUEST_SUCCEEDED,
    MSG_RETRY_SCHEDULED,
)
from speech_gateway.errors import ErrorKind, GatewayError
from speech_gateway.transcription.client import TranscriptionClient
from speech_gateway.validator import AudioPayload

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class RequestState(str, Enum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# States only move forward; SUCCEEDED and FAILED are final.
_TRANSITIONS: dict[RequestState, frozenset[RequestState]] = {
    RequestState.IDLE: frozenset({RequestState.ATTEMPTING}),
    RequestState.ATTEMPTING: frozenset(
        {RequestState.SUCCEEDED, RequestState.WAITING, RequestState.FAILED}
    ),
    RequestState.WAITING: frozenset({RequestState.ATTEMPTING}),
    RequestState.SUCCEEDED: frozenset(),
    RequestState.FAILED: frozenset(),
}


@dataclass
class Attempt:
    index: int
    started_at: float
    outcome: Optional[GatewayError] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is None


@dataclass
class TranscriptionRequest:
    payload: AudioPayload
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    attempts: list[Attempt] = field(default_factory=list)
    state: RequestState = RequestState.IDLE

    def advance(self, new_state: RequestState) -> None:
        match new_state in _TRANSITIONS[self.state]:
            case True:
                self.state = new_state
            case False:
                raise RuntimeError(
                    f"Illegal transition {self.state.value} → {new_state.value}"
                )


@dataclass(frozen=True)
class TranscriptionResult:
    text: str
    attempts: int


def backoff_delay(retry_index: int, base: float, increment: float, cap: float) -> float:
    """Linear backoff: min(base + retry_index × increment, cap). retry_index starts at 0."""
    return min(base + retry_index * increment, cap)


class RetryOrchestrator:
    """Runs attempts sequentially until success, a terminal failure, or budget exhaustion."""

    def __init__(
        self,
        config: Config,
        client: TranscriptionClient,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._client = client
        self._sleep = sleep

    def delay(self, retry_index: int) -> float:
        return backoff_delay(
            retry_index,
            self._config.backoff_base,
            self._config.backoff_increment,
            self._config.backoff_max,
        )

    async def run(self, request: TranscriptionRequest) -> TranscriptionResult:
        budget = self._config.max_attempts
        request.advance(RequestState.ATTEMPTING)

        while True:
            attempt = Attempt(index=len(request.attempts) + 1, started_at=time.monotonic())
            request.attempts.append(attempt)
            logger.info(
                MSG_ATTEMPT_START,
                request.request_id,
                attempt.index,
                budget,
                extra={"request_id": request.request_id, "attempt": attempt.index},
            )

            text, error = await self._attempt(request.payload)
            match error:
                case None:
                    request.advance(RequestState.SUCCEEDED)
                    logger.info(
                        MSG_REQUEST_SUCCEEDED,
                        request.request_id,
                        attempt.index,
                        extra={"request_id": request.request_id, "attempt": attempt.index},
                    )
                    return TranscriptionResult(text=text, attempts=attempt.index)
                case _:
                    attempt.outcome = error

            logger.warning(
                MSG_ATTEMPT_FAILED,
                request.request_id,
                attempt.index,
                error.kind.value,
                extra={
                    "request_id": request.request_id,
                    "attempt": attempt.index,
                    "kind": error.kind.value,
                },
            )

            match (error.retryable, attempt.index < budget):
                case (True, True):
                    wait = self.delay(attempt.index - 1)
                    request.advance(RequestState.WAITING)
                    logger.info(
                        MSG_RETRY_SCHEDULED,
                        request.request_id,
                        wait,
                        extra={"request_id": request.request_id, "attempt": attempt.index},
                    )
                    await self._sleep(wait)
                    request.advance(RequestState.ATTEMPTING)
                case _:
                    request.advance(RequestState.FAILED)
                    final = _annotate(error, attempt.index)
                    logger.error(
                        MSG_REQUEST_FAILED,
                        request.request_id,
                        attempt.index,
                        final.kind.value,
                        extra={
                            "request_id": request.request_id,
                            "attempt": attempt.index,
                            "kind": final.kind.value,
                        },
                    )
                    raise final from error

    async def _attempt(
        self, payload: AudioPayload
    ) -> tuple[Optional[str], Optional[GatewayError]]:
        """One bounded call: (text, None) on success, (None, classified failure) otherwise."""
        timeout = self._config.attempt_timeout
        try:
            text = await asyncio.wait_for(
                self._client.transcribe(payload), timeout=timeout
            )
            return text, None
        except asyncio.TimeoutError:
            return None, GatewayError(
                ErrorKind.TIMEOUT,
                MSG_ERR_ATTEMPT_TIMEOUT % timeout,
                retryable=True,
            )
        except Exception as exc:
            return None, to_gateway_error(exc)


def _annotate(error: GatewayError, attempts: int) -> GatewayError:
    """Final failure carrying the last cause plus how many attempts were spent.

    The request is over, so the result is never retryable whatever the cause.
    """
    message = (
        MSG_ERR_AFTER_ATTEMPTS % (error.message, attempts) if attempts > 1 else error.message
    )
    return GatewayError(
        error.kind,
        message,
        retryable=False,
        status=error.status,
        detail=error.detail,
        attempts=attempts,
    )
