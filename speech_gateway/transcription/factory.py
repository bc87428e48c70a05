"""Adapter selection — a backend swap is a configuration change."""
from typing import Optional

import httpx

from speech_gateway.config import BackendMode, Config
from speech_gateway.transcription.client import TranscriptionClient
from speech_gateway.transcription.inference import InferenceTranscriptionClient
from speech_gateway.transcription.jobs import JobTranscriptionClient


def build_transcriber(
    config: Config,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TranscriptionClient:
    match config.mode:
        case BackendMode.SYNC:
            return InferenceTranscriptionClient(config, transport)
        case BackendMode.ASYNC:
            return JobTranscriptionClient(config, transport)
