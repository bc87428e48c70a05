"""TDD: request validator tests written FIRST"""
import pytest

from speech_gateway.errors import ErrorKind, GatewayError
from speech_gateway.validator import AudioPayload, validate_audio


def test_missing_audio_is_invalid_input():
    with pytest.raises(GatewayError) as info:
        validate_audio(None)

    assert info.value.kind is ErrorKind.INVALID_INPUT
    assert info.value.retryable is False


def test_empty_audio_is_invalid_input():
    with pytest.raises(GatewayError) as info:
        validate_audio(b"")

    assert info.value.kind is ErrorKind.INVALID_INPUT


def test_audio_below_minimum_is_invalid_input():
    with pytest.raises(GatewayError, match="99 bytes"):
        validate_audio(b"\x00" * 99, min_bytes=100)


def test_audio_at_minimum_passes():
    payload = validate_audio(b"\x00" * 100, min_bytes=100)

    assert payload == AudioPayload(data=b"\x00" * 100, size=100, content_type="audio/wav")


def test_payload_is_immutable():
    payload = validate_audio(b"\x00" * 200)

    with pytest.raises(Exception):
        payload.size = 1


def test_audio_content_type_is_kept():
    assert validate_audio(b"\x00" * 200, "audio/webm").content_type == "audio/webm"


def test_content_type_parameters_are_dropped():
    assert validate_audio(b"\x00" * 200, "audio/wav; codecs=1").content_type == "audio/wav"


def test_non_audio_content_type_defaults_to_wav():
    assert validate_audio(b"\x00" * 200, "application/octet-stream").content_type == "audio/wav"
