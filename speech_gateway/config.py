from dataclasses import dataclass
from enum import Enum
from typing import Optional
import os
from dotenv import load_dotenv

from speech_gateway.constants import (
    DEFAULT_ATTEMPT_TIMEOUT,
    DEFAULT_BACKOFF_BASE,
    DEFAULT_BACKOFF_INCREMENT,
    DEFAULT_BACKOFF_MAX,
    DEFAULT_DETAIL_MAX_CHARS,
    DEFAULT_HOST,
    DEFAULT_LANGUAGE_CODE,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MIN_AUDIO_BYTES,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_MAX_ATTEMPTS,
    DEFAULT_POLL_TIMEOUT,
    DEFAULT_PORT,
    MODE_ASYNC,
    MODE_SYNC,
)


class BackendMode(str, Enum):
    SYNC = MODE_SYNC
    ASYNC = MODE_ASYNC


def _flag(raw: Optional[str], default: bool) -> bool:
    match (raw or "").strip().lower():
        case "":
            return default
        case "1" | "true" | "yes" | "on":
            return True
        case _:
            return False


@dataclass(frozen=True)
class Config:
    backend_url: str
    mode: BackendMode
    api_key: Optional[str]
    require_api_key: bool
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_base: float = DEFAULT_BACKOFF_BASE
    backoff_increment: float = DEFAULT_BACKOFF_INCREMENT
    backoff_max: float = DEFAULT_BACKOFF_MAX
    attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS
    poll_timeout: float = DEFAULT_POLL_TIMEOUT
    language_code: str = DEFAULT_LANGUAGE_CODE
    min_audio_bytes: int = DEFAULT_MIN_AUDIO_BYTES
    detail_max_chars: int = DEFAULT_DETAIL_MAX_CHARS
    no_text_retryable: bool = False
    log_level: str = "INFO"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @property
    def credential_missing(self) -> bool:
        """True when the backend needs a key and none is configured."""
        return self.require_api_key and not self.api_key

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        backend_url = os.getenv("BACKEND_URL")
        raw_mode = os.getenv("BACKEND_MODE", MODE_SYNC)
        api_key = os.getenv("BACKEND_API_KEY") or None
        raw_require = os.getenv("BACKEND_REQUIRE_KEY")
        mode = raw_mode.strip().lower()

        return cls._validate(
            backend_url=backend_url,
            mode=mode,
            api_key=api_key,
            require_api_key=_flag(raw_require, default=mode == MODE_ASYNC),
            max_attempts=int(os.getenv("MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS))),
            backoff_base=float(os.getenv("BACKOFF_BASE_SECONDS", str(DEFAULT_BACKOFF_BASE))),
            backoff_increment=float(
                os.getenv("BACKOFF_INCREMENT_SECONDS", str(DEFAULT_BACKOFF_INCREMENT))
            ),
            backoff_max=float(os.getenv("BACKOFF_MAX_SECONDS", str(DEFAULT_BACKOFF_MAX))),
            attempt_timeout=float(
                os.getenv("ATTEMPT_TIMEOUT_SECONDS", str(DEFAULT_ATTEMPT_TIMEOUT))
            ),
            poll_interval=float(os.getenv("POLL_INTERVAL_SECONDS", str(DEFAULT_POLL_INTERVAL))),
            poll_max_attempts=int(
                os.getenv("POLL_MAX_ATTEMPTS", str(DEFAULT_POLL_MAX_ATTEMPTS))
            ),
            poll_timeout=float(os.getenv("POLL_TIMEOUT_SECONDS", str(DEFAULT_POLL_TIMEOUT))),
            language_code=os.getenv("LANGUAGE_CODE", DEFAULT_LANGUAGE_CODE),
            min_audio_bytes=int(os.getenv("MIN_AUDIO_BYTES", str(DEFAULT_MIN_AUDIO_BYTES))),
            detail_max_chars=int(os.getenv("DETAIL_MAX_CHARS", str(DEFAULT_DETAIL_MAX_CHARS))),
            no_text_retryable=_flag(os.getenv("NO_TEXT_RETRYABLE"), default=False),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", DEFAULT_HOST),
            port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        )

    @staticmethod
    def _validate(
        backend_url: Optional[str],
        mode: str,
        api_key: Optional[str],
        require_api_key: bool,
        **tuning,
    ) -> "Config":
        match backend_url:
            case None | "":
                raise ValueError("BACKEND_URL must be set in .env")
            case _:
                pass

        match mode:
            case "sync" | "async":
                pass
            case _:
                raise ValueError(f"BACKEND_MODE must be 'sync' or 'async', got {mode!r}")

        match tuning.get("max_attempts", DEFAULT_MAX_ATTEMPTS):
            case n if n < 1:
                raise ValueError("MAX_ATTEMPTS must be at least 1")
            case _:
                pass

        negative = [
            name
            for name in ("backoff_base", "backoff_increment", "backoff_max", "poll_interval")
            if tuning.get(name, 0) < 0
        ]
        match negative:
            case []:
                pass
            case names:
                raise ValueError(f"Negative durations are not allowed: {', '.join(names)}")

        return Config(
            backend_url=backend_url.rstrip("/"),
            mode=BackendMode(mode),
            api_key=api_key,
            require_api_key=require_api_key,
            **tuning,
        )
