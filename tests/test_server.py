"""TDD: HTTP surface tests written FIRST"""
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from speech_gateway.config import BackendMode, Config
from speech_gateway.gateway import TranscriptionGateway
from speech_gateway.server import create_app

AUDIO = b"RIFF" + b"\x00" * 296


def make_client(text: str = "hello") -> tuple[TestClient, MagicMock]:
    config = Config(
        backend_url="https://backend.test/asr",
        mode=BackendMode.SYNC,
        api_key="hf_key",
        require_api_key=False,
    )
    transcriber = MagicMock()
    transcriber.transcribe = AsyncMock(return_value=text)
    gateway = TranscriptionGateway(config, transcriber, sleep=AsyncMock())
    return TestClient(create_app(gateway)), transcriber


def test_post_audio_returns_text():
    client, transcriber = make_client("marhaba")

    response = client.post(
        "/api/transcribe", content=AUDIO, headers={"Content-Type": "audio/wav"}
    )

    assert response.status_code == 200
    assert response.json() == {"text": "marhaba"}
    payload = transcriber.transcribe.await_args.args[0]
    assert payload.data == AUDIO
    assert payload.content_type == "audio/wav"


def test_get_is_accepted_with_method_not_allowed_envelope():
    client, transcriber = make_client()

    response = client.get("/api/transcribe")

    assert response.status_code == 200
    assert response.json()["error"] == "method_not_allowed"
    transcriber.transcribe.assert_not_awaited()


def test_tiny_body_is_invalid_input():
    client, transcriber = make_client()

    response = client.post("/api/transcribe", content=b"abc")

    assert response.status_code == 200
    assert response.json()["error"] == "invalid_input"
    transcriber.transcribe.assert_not_awaited()


def test_health_reports_mode_without_leaking_key():
    client, _ = make_client()

    response = client.get("/api/health")

    assert response.json() == {"status": "ok", "mode": "sync", "credential": True}


def test_options_and_head_reach_the_envelope():
    client, transcriber = make_client()

    options = client.request("OPTIONS", "/api/transcribe")
    head = client.head("/api/transcribe")

    assert options.status_code == 200
    assert options.json()["error"] == "method_not_allowed"
    assert head.status_code == 200
    transcriber.transcribe.assert_not_awaited()
