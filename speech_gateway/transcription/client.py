"""TranscriptionClient — abstract base for speech-to-text backends."""
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from speech_gateway.classifier import Classification, classify, describe, extract_text
from speech_gateway.config import Config
from speech_gateway.errors import GatewayError, scrub
from speech_gateway.validator import AudioPayload


def parse_body(response: httpx.Response) -> Any:
    """JSON when the body parses, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text


class TranscriptionClient(ABC):

    def __init__(
        self,
        config: Config,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport

    @abstractmethod
    async def transcribe(self, payload: AudioPayload) -> str:
        """Convert raw audio bytes to text. Raises GatewayError on failure."""
        ...

    # ── shared wire helpers ───────────────────────────────────────────────────

    def _http(self) -> httpx.AsyncClient:
        """A client scoped to one attempt; callers close it with `async with`."""
        return httpx.AsyncClient(
            timeout=self._config.attempt_timeout,
            transport=self._transport,
        )

    def _error(self, response: httpx.Response, found: Classification) -> GatewayError:
        return GatewayError(
            found.kind,
            describe(found.kind, response.status_code),
            retryable=found.retryable,
            status=response.status_code,
            detail=scrub(response.text, self._config.api_key, self._config.detail_max_chars),
        )

    def _check_status(self, response: httpx.Response) -> Any:
        """Return the parsed body of a 2xx reply, raise a classified error otherwise."""
        body = parse_body(response)
        match response.is_success:
            case True:
                return body
            case False:
                found = classify(response.status_code, body)
                raise self._error(response, found)

    def _check_text(self, response: httpx.Response) -> str:
        """Return the transcription text of a reply, raise a classified error otherwise."""
        body = parse_body(response)
        found = classify(
            response.status_code,
            body,
            no_text_retryable=self._config.no_text_retryable,
        )
        match found:
            case None:
                return extract_text(body)
            case failure:
                raise self._error(response, failure)
