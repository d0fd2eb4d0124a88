"""Tests for OllamaLLMClient (mocked HTTP)."""

import json
from unittest.mock import patch

import httpx
import pytest

from code_review_rag.llm.ollama import OllamaLLMClient


def _default_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/tags":
        return httpx.Response(200, json={"models": []})
    if request.url.path == "/api/generate":
        return httpx.Response(200, json={"response": "test output"})
    return httpx.Response(404)


@pytest.mark.asyncio
async def test_generate_success():
    transport = httpx.MockTransport(_default_handler)
    client = OllamaLLMClient(http_client=httpx.AsyncClient(transport=transport))
    try:
        result = await client.generate("hello")
        assert result == "test output"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_generate_unavailable():
    def fail_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    transport = httpx.MockTransport(fail_handler)
    client = OllamaLLMClient(http_client=httpx.AsyncClient(transport=transport))
    try:
        assert await client.is_available() is False
        assert await client.generate("hello") is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_generate_connection_refused():
    def refuse_handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = httpx.MockTransport(refuse_handler)
    client = OllamaLLMClient(http_client=httpx.AsyncClient(transport=transport))
    try:
        assert await client.generate("hello") is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_generate_malformed_reply_returns_none():
    """A reply without 'response' text is a backend failure, not a crash."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": []})
        return httpx.Response(200, json={"error": "model not loaded"})

    transport = httpx.MockTransport(handler)
    client = OllamaLLMClient(http_client=httpx.AsyncClient(transport=transport))
    try:
        assert await client.generate("hello") is None
        assert client._available is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_generate_payload_uses_configured_model_and_system_prompt():
    captured: list[dict[str, object]] = []

    def capture_handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": []})
        if request.url.path == "/api/generate":
            captured.append(json.loads(request.content))
            return httpx.Response(200, json={"response": "ok"})
        return httpx.Response(404)

    transport = httpx.MockTransport(capture_handler)
    client = OllamaLLMClient(http_client=httpx.AsyncClient(transport=transport))
    try:
        with patch.dict("os.environ", {"REVIEW_LLM_MODEL": "llama3:8b"}):
            await client.generate("hello", system="be helpful")
        assert len(captured) == 1
        assert captured[0]["model"] == "llama3:8b"
        assert captured[0]["system"] == "be helpful"
        assert captured[0]["prompt"] == "hello"
        assert captured[0]["stream"] is False
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_availability_caching():
    """Success is cached; failure resets so next call retries."""
    call_count = 0

    def counting_handler(request: httpx.Request) -> httpx.Response:
        nonlocal call_count
        if request.url.path == "/api/tags":
            call_count += 1
            return httpx.Response(200, json={"models": []})
        return httpx.Response(404)

    transport = httpx.MockTransport(counting_handler)
    client = OllamaLLMClient(http_client=httpx.AsyncClient(transport=transport))
    try:
        assert await client.is_available() is True
        assert call_count == 1

        assert await client.is_available() is True
        assert call_count == 1

        client._available = None
        assert await client.is_available() is True
        assert call_count == 2
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_close_cleans_up():
    transport = httpx.MockTransport(_default_handler)
    client = OllamaLLMClient(http_client=httpx.AsyncClient(transport=transport))
    assert client._http is not None
    await client.close()
    assert client._http is None


@pytest.mark.asyncio
async def test_invalid_url_is_unavailable(monkeypatch):
    monkeypatch.setenv("REVIEW_OLLAMA_URL", "http://[::1:11434")
    client = OllamaLLMClient()
    try:
        assert await client.is_available() is False
        assert await client.generate("hello") is None
    finally:
        await client.close()
