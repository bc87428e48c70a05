"""TDD: JobPoller tests written FIRST"""
import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from speech_gateway.config import BackendMode, Config
from speech_gateway.errors import ErrorKind, GatewayError
from speech_gateway.transcription.jobs import JobTranscriptionClient
from speech_gateway.transcription.poller import Job, JobPoller, JobStatus


def make_config(**overrides) -> Config:
    fields = dict(
        backend_url="https://api.backend.test/v2",
        mode=BackendMode.ASYNC,
        api_key="sk-secret-123",
        require_api_key=True,
        poll_interval=1.0,
        poll_max_attempts=5,
    )
    fields.update(overrides)
    return Config(**fields)


def scripted(*responses: httpx.Response):
    """Serve the responses in order, repeating the last one forever."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        template = responses[min(len(seen), len(responses)) - 1]
        return httpx.Response(
            template.status_code, content=template.content, headers=template.headers
        )

    return httpx.MockTransport(handler), seen


async def poll(config: Config, transport, sleep) -> str:
    poller = JobPoller(config, sleep=sleep)
    checker = JobTranscriptionClient(config, transport, poller=poller)
    async with httpx.AsyncClient(transport=transport) as http:
        return await poller.wait(http, "job-1", checker._check_status)


# ── job model ─────────────────────────────────────────────────────────────────


def test_terminal_statuses():
    assert JobStatus.COMPLETED.terminal
    assert JobStatus.ERROR.terminal
    assert not JobStatus.QUEUED.terminal
    assert not JobStatus.PROCESSING.terminal


def test_unknown_status_is_treated_as_in_progress():
    assert Job.from_body("j", {"status": "warming_up"}).status is JobStatus.PROCESSING


def test_job_from_body_reads_text_and_error():
    job = Job.from_body("j", {"status": "error", "error": "bad audio"})
    assert job == Job(id="j", status=JobStatus.ERROR, text=None, error="bad audio")


# ── polling ───────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_poll_returns_text_when_completed():
    transport, seen = scripted(
        httpx.Response(200, json={"status": "processing"}),
        httpx.Response(200, json={"status": "completed", "text": " done "}),
    )
    sleep = AsyncMock()

    assert await poll(make_config(), transport, sleep) == "done"
    assert len(seen) == 2
    assert str(seen[0].url) == "https://api.backend.test/v2/transcript/job-1"
    assert seen[0].headers["Authorization"] == "sk-secret-123"
    sleep.assert_awaited_once_with(1.0)


@pytest.mark.asyncio
async def test_job_error_is_terminal_and_not_retryable():
    transport, seen = scripted(
        httpx.Response(200, json={"status": "error", "error": "Audio file is corrupted"})
    )

    with pytest.raises(GatewayError) as info:
        await poll(make_config(), transport, AsyncMock())

    assert info.value.kind is ErrorKind.BACKEND_JOB_ERROR
    assert info.value.retryable is False
    assert "Audio file is corrupted" in info.value.message
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_job_error_text_never_echoes_the_key():
    transport, _ = scripted(
        httpx.Response(200, json={"status": "error", "error": "Invalid key sk-secret-123 for job"})
    )

    with pytest.raises(GatewayError) as info:
        await poll(make_config(), transport, AsyncMock())

    assert info.value.kind is ErrorKind.BACKEND_JOB_ERROR
    assert "sk-secret-123" not in info.value.message
    assert "sk-secret-123" not in info.value.detail
    assert "Invalid key" in info.value.detail


@pytest.mark.asyncio
async def test_completed_without_text_is_no_text():
    transport, _ = scripted(httpx.Response(200, json={"status": "completed", "text": ""}))

    with pytest.raises(GatewayError) as info:
        await poll(make_config(), transport, AsyncMock())

    assert info.value.kind is ErrorKind.NO_TEXT


@pytest.mark.asyncio
async def test_poll_ceiling_times_out_exactly_at_ceiling():
    transport, seen = scripted(httpx.Response(200, json={"status": "processing"}))
    sleep = AsyncMock()

    with pytest.raises(GatewayError) as info:
        await poll(make_config(poll_max_attempts=5), transport, sleep)

    assert info.value.kind is ErrorKind.TIMEOUT
    assert info.value.retryable is False
    assert len(seen) == 5
    assert sleep.await_count == 4


@pytest.mark.asyncio
async def test_poll_wall_clock_deadline_times_out():
    transport, _ = scripted(httpx.Response(200, json={"status": "queued"}))
    config = make_config(poll_max_attempts=10_000, poll_interval=0.01, poll_timeout=0.05)

    with pytest.raises(GatewayError) as info:
        await poll(config, transport, sleep=asyncio.sleep)

    assert info.value.kind is ErrorKind.TIMEOUT
    assert "timeout" in info.value.message.lower()


@pytest.mark.asyncio
async def test_transient_poll_failure_keeps_polling():
    transport, seen = scripted(
        httpx.Response(502, text="bad gateway"),
        httpx.Response(200, json={"status": "completed", "text": "ok"}),
    )

    assert await poll(make_config(), transport, AsyncMock()) == "ok"
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_permanent_poll_failure_propagates():
    transport, seen = scripted(httpx.Response(404, json={"error": "transcript not found"}))

    with pytest.raises(GatewayError) as info:
        await poll(make_config(), transport, AsyncMock())

    assert info.value.kind is ErrorKind.BACKEND_CLIENT_ERROR
    assert len(seen) == 1
