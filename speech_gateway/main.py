"""Entry point — wires Config → TranscriptionClient → TranscriptionGateway → HTTP app."""
import logging

import uvicorn
from rich.logging import RichHandler

from speech_gateway.config import Config
from speech_gateway.constants import MSG_CREDENTIAL_MISSING_AT_START, MSG_GATEWAY_STARTING
from speech_gateway.gateway import TranscriptionGateway
from speech_gateway.server import create_app
from speech_gateway.transcription.factory import build_transcriber


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_GATEWAY_STARTING, config.mode.value, config.host, config.port)
    match config.credential_missing:
        case True:
            logger.warning(MSG_CREDENTIAL_MISSING_AT_START, "BACKEND_API_KEY")
        case False:
            pass

    gateway = TranscriptionGateway(config, build_transcriber(config))
    uvicorn.run(create_app(gateway), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
