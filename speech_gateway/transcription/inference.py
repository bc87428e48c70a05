"""InferenceTranscriptionClient — one synchronous inference call per attempt."""
import logging

from speech_gateway.constants import AUTH_HEADER, BEARER_SCHEME
from speech_gateway.transcription.client import TranscriptionClient
from speech_gateway.validator import AudioPayload

logger = logging.getLogger(__name__)


class InferenceTranscriptionClient(TranscriptionClient):

    def _headers(self, payload: AudioPayload) -> dict[str, str]:
        headers = {"Content-Type": payload.content_type}
        match self._config.api_key:
            case str() as key if key:
                headers[AUTH_HEADER] = f"{BEARER_SCHEME} {key}"
            case _:
                pass
        return headers

    async def transcribe(self, payload: AudioPayload) -> str:
        async with self._http() as http:
            response = await http.post(
                self._config.backend_url,
                content=payload.data,
                headers=self._headers(payload),
            )
        logger.debug("Inference reply %s (%d bytes)", response.status_code, len(response.content))
        return self._check_text(response)
