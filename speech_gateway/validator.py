"""Request validator — rejects empty or undersized audio before any network call."""
from dataclasses import dataclass
from typing import Optional

from speech_gateway.constants import (
    DEFAULT_AUDIO_CONTENT_TYPE,
    DEFAULT_MIN_AUDIO_BYTES,
    MSG_ERR_AUDIO_TOO_SMALL,
    MSG_ERR_NO_AUDIO,
)
from speech_gateway.errors import ErrorKind, GatewayError


@dataclass(frozen=True)
class AudioPayload:
    data: bytes
    size: int
    content_type: str


def validate_audio(
    data: Optional[bytes],
    content_type: Optional[str] = None,
    min_bytes: int = DEFAULT_MIN_AUDIO_BYTES,
) -> AudioPayload:
    match data:
        case None | b"":
            raise GatewayError(ErrorKind.INVALID_INPUT, MSG_ERR_NO_AUDIO)
        case raw if len(raw) < min_bytes:
            raise GatewayError(
                ErrorKind.INVALID_INPUT,
                MSG_ERR_AUDIO_TOO_SMALL % (len(raw), min_bytes),
            )
        case raw:
            return AudioPayload(
                data=bytes(raw),
                size=len(raw),
                content_type=_audio_type(content_type),
            )


def _audio_type(content_type: Optional[str]) -> str:
    """Keep audio/* types; anything else (octet-stream, missing) becomes wav."""
    match (content_type or "").split(";")[0].strip().lower():
        case str() as kind if kind.startswith("audio/"):
            return kind
        case _:
            return DEFAULT_AUDIO_CONTENT_TYPE
