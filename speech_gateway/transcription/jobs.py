"""JobTranscriptionClient — upload, submit a job, then poll it to completion."""
import logging
from typing import Optional

import httpx

from speech_gateway.config import Config
from speech_gateway.constants import (
    AUDIO_URL_FIELD,
    AUTH_HEADER,
    JOB_ID_FIELD,
    LANGUAGE_FIELD,
    MSG_ERR_NO_JOB_ID,
    MSG_ERR_NO_UPLOAD_REF,
    MSG_JOB_SUBMITTED,
    MSG_UPLOAD_OK,
    TRANSCRIPT_SUFFIX,
    UPLOAD_SUFFIX,
    UPLOAD_URL_FIELD,
)
from speech_gateway.errors import ErrorKind, GatewayError
from speech_gateway.transcription.client import TranscriptionClient
from speech_gateway.transcription.poller import JobPoller
from speech_gateway.validator import AudioPayload

logger = logging.getLogger(__name__)


def _field(body: object, name: str) -> Optional[str]:
    match body:
        case {**fields} if fields.get(name):
            return str(fields[name])
        case _:
            return None


class JobTranscriptionClient(TranscriptionClient):

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        poller: Optional[JobPoller] = None,
    ) -> None:
        super().__init__(config, transport)
        self._poller = poller or JobPoller(config)

    def _auth(self) -> dict[str, str]:
        return {AUTH_HEADER: self._config.api_key or ""}

    async def transcribe(self, payload: AudioPayload) -> str:
        async with self._http() as http:
            upload_ref = await self._upload(http, payload)
            job_id = await self._submit(http, upload_ref)
            return await self._poller.wait(http, job_id, self._check_status)

    async def _upload(self, http: httpx.AsyncClient, payload: AudioPayload) -> str:
        response = await http.post(
            f"{self._config.backend_url}{UPLOAD_SUFFIX}",
            content=payload.data,
            headers=self._auth(),
        )
        match _field(self._check_status(response), UPLOAD_URL_FIELD):
            case None:
                raise GatewayError(
                    ErrorKind.BACKEND_SERVER_ERROR,
                    MSG_ERR_NO_UPLOAD_REF,
                    retryable=True,
                    status=response.status_code,
                )
            case ref:
                logger.info(MSG_UPLOAD_OK, payload.size)
                return ref

    async def _submit(self, http: httpx.AsyncClient, upload_ref: str) -> str:
        response = await http.post(
            f"{self._config.backend_url}{TRANSCRIPT_SUFFIX}",
            json={
                AUDIO_URL_FIELD: upload_ref,
                LANGUAGE_FIELD: self._config.language_code,
            },
            headers=self._auth(),
        )
        match _field(self._check_status(response), JOB_ID_FIELD):
            case None:
                raise GatewayError(
                    ErrorKind.BACKEND_SERVER_ERROR,
                    MSG_ERR_NO_JOB_ID,
                    retryable=True,
                    status=response.status_code,
                )
            case job_id:
                logger.info(MSG_JOB_SUBMITTED, job_id)
                return job_id
