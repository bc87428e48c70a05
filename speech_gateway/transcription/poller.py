"""JobPoller — drives an asynchronous job's status checks to a terminal state or ceiling.

The ceiling is two bounds: a poll count and a wall-clock deadline. Exactly
``poll_max_attempts`` status fetches happen before the count bound fires, and
no wait follows the final fetch. Waits go through an injectable ``sleep`` so
they stay cancellable and tests can run them instantly.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx

from speech_gateway.classifier import classify
from speech_gateway.config import Config
from speech_gateway.constants import (
    AUTH_HEADER,
    JOB_ERROR_FIELD,
    JOB_STATUS_FIELD,
    MSG_ERR_JOB,
    MSG_ERR_NO_TEXT,
    MSG_ERR_POLL_DEADLINE,
    MSG_ERR_POLL_TIMEOUT,
    MSG_POLL_STATUS,
    MSG_POLL_TRANSIENT,
    TEXT_FIELD,
    TRANSCRIPT_SUFFIX,
)
from speech_gateway.errors import ErrorKind, GatewayError, scrub

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.ERROR)


@dataclass(frozen=True)
class Job:
    id: str
    status: JobStatus
    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_body(cls, job_id: str, body: object) -> "Job":
        match body:
            case dict():
                raw = str(body.get(JOB_STATUS_FIELD, ""))
                try:
                    status = JobStatus(raw)
                except ValueError:
                    status = JobStatus.PROCESSING
                return cls(
                    id=job_id,
                    status=status,
                    text=body.get(TEXT_FIELD),
                    error=body.get(JOB_ERROR_FIELD),
                )
            case _:
                return cls(id=job_id, status=JobStatus.PROCESSING)


class JobPoller:

    def __init__(self, config: Config, sleep: Sleep = asyncio.sleep) -> None:
        self._config = config
        self._sleep = sleep

    def job_url(self, job_id: str) -> str:
        return f"{self._config.backend_url}{TRANSCRIPT_SUFFIX}/{job_id}"

    async def wait(
        self,
        http: httpx.AsyncClient,
        job_id: str,
        check: Callable[[httpx.Response], object],
    ) -> str:
        """Poll until the job finishes; return its text or raise GatewayError."""
        try:
            return await asyncio.wait_for(
                self._loop(http, job_id, check), timeout=self._config.poll_timeout
            )
        except asyncio.TimeoutError:
            raise GatewayError(
                ErrorKind.TIMEOUT,
                MSG_ERR_POLL_DEADLINE % self._config.poll_timeout,
            ) from None

    async def _loop(
        self,
        http: httpx.AsyncClient,
        job_id: str,
        check: Callable[[httpx.Response], object],
    ) -> str:
        ceiling = self._config.poll_max_attempts
        headers = {AUTH_HEADER: self._config.api_key or ""}
        started = time.monotonic()

        for poll in range(1, ceiling + 1):
            job = await self._fetch(http, job_id, headers, check, poll)
            match job:
                case Job(status=JobStatus.COMPLETED, text=str() as text) if text.strip():
                    return text.strip()
                case Job(status=JobStatus.COMPLETED):
                    raise GatewayError(
                        ErrorKind.NO_TEXT,
                        MSG_ERR_NO_TEXT,
                        retryable=self._config.no_text_retryable,
                    )
                case Job(status=JobStatus.ERROR, error=err):
                    raise GatewayError(
                        ErrorKind.BACKEND_JOB_ERROR,
                        MSG_ERR_JOB % scrub(str(err), self._config.api_key),
                        detail=scrub(str(err), self._config.api_key, self._config.detail_max_chars),
                    )
                case _:
                    pass
            if poll < ceiling:
                await self._sleep(self._config.poll_interval)

        logger.warning(
            "Job %s hit poll ceiling after %.1fs", job_id, time.monotonic() - started
        )
        raise GatewayError(ErrorKind.TIMEOUT, MSG_ERR_POLL_TIMEOUT % ceiling)

    async def _fetch(
        self,
        http: httpx.AsyncClient,
        job_id: str,
        headers: dict[str, str],
        check: Callable[[httpx.Response], object],
        poll: int,
    ) -> Optional[Job]:
        """One status fetch. Transient failures yield None and polling goes on."""
        try:
            response = await http.get(self.job_url(job_id), headers=headers)
            job = Job.from_body(job_id, check(response))
        except (GatewayError, httpx.TransportError) as exc:
            match classify(exc=exc).retryable:
                case True:
                    logger.warning(MSG_POLL_TRANSIENT, job_id, poll, exc)
                    return None
                case False:
                    raise
        logger.debug(
            MSG_POLL_STATUS, job_id, poll, self._config.poll_max_attempts, job.status.value
        )
        return job
