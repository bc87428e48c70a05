"""TranscriptionGateway — validate, orchestrate, normalize. Never raises."""
import asyncio
import logging
from typing import Any, Optional

from speech_gateway.config import Config
from speech_gateway.constants import (
    MSG_ERR_METHOD,
    MSG_ERR_NO_CREDENTIAL,
    MSG_ERR_PROCESSING,
    MSG_REQUEST_CRASHED,
    MSG_REQUEST_RECEIVED,
)
from speech_gateway.errors import ErrorKind, GatewayError
from speech_gateway.normalizer import failure_envelope, success_envelope
from speech_gateway.retry import RetryOrchestrator, Sleep, TranscriptionRequest
from speech_gateway.transcription.client import TranscriptionClient
from speech_gateway.validator import validate_audio

logger = logging.getLogger(__name__)


class TranscriptionGateway:

    def __init__(
        self,
        config: Config,
        client: TranscriptionClient,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._orchestrator = RetryOrchestrator(config, client, sleep=sleep)

    @property
    def config(self) -> Config:
        return self._config

    async def handle(
        self,
        method: str,
        body: Optional[bytes],
        content_type: Optional[str] = None,
    ) -> dict[str, Any]:
        """Turn one inbound call into a success or failure envelope."""
        request_id = "-"
        try:
            match method.upper():
                case "POST":
                    pass
                case _:
                    raise GatewayError(ErrorKind.METHOD_NOT_ALLOWED, MSG_ERR_METHOD)

            match self._config.credential_missing:
                case True:
                    raise GatewayError(ErrorKind.CONFIG_ERROR, MSG_ERR_NO_CREDENTIAL)
                case False:
                    pass

            payload = validate_audio(body, content_type, self._config.min_audio_bytes)
            request = TranscriptionRequest(payload=payload)
            request_id = request.request_id
            logger.info(
                MSG_REQUEST_RECEIVED,
                request_id,
                payload.size,
                extra={"request_id": request_id},
            )
            result = await self._orchestrator.run(request)
            return success_envelope(result)

        except GatewayError as err:
            return failure_envelope(err, self._config.api_key, self._config.detail_max_chars)
        except Exception as exc:
            logger.exception(MSG_REQUEST_CRASHED, request_id, extra={"request_id": request_id})
            crash = GatewayError(ErrorKind.PROCESSING_ERROR, MSG_ERR_PROCESSING % exc)
            return failure_envelope(crash, self._config.api_key, self._config.detail_max_chars)
