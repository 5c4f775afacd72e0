"""
Unit tests for GeminiClient.

Every request goes to an httpx.MockTransport; no API key or network needed.
These test request shape and failure mapping, not Gemini's output.
"""

import json

import httpx
import pytest

from greencompass.ai.gemini_client import GeminiClient, _response_text
from greencompass.core.config import Settings
from greencompass.core.exceptions import EmptyResponseError, TransportError


def _client(transport, **overrides) -> GeminiClient:
    return GeminiClient(Settings(gemini_api_key="test-key", **overrides), transport=transport)


# ─── Configuration ────────────────────────────────────────────────────────────


class TestGeminiClientConfig:

    def test_disabled_without_key(self):
        client = GeminiClient(Settings(gemini_api_key=""))
        assert client.enabled is False

    def test_enabled_with_key(self):
        assert GeminiClient(Settings(gemini_api_key="abc")).enabled is True

    def test_endpoint_uses_model(self):
        client = GeminiClient(Settings(gemini_api_key="abc", gemini_model="gemini-2.0-flash"))
        assert client.endpoint == (
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash:generateContent"
        )

    def test_trailing_slash_in_base_url(self):
        client = GeminiClient(Settings(gemini_api_key="abc", gemini_base_url="http://gemini.local/v1/"))
        assert client.endpoint.startswith("http://gemini.local/v1/models/")


# ─── send() ───────────────────────────────────────────────────────────────────


class TestSend:

    @pytest.mark.asyncio
    async def test_returns_candidate_text(self, gemini_transport):
        transport, _ = gemini_transport(text='{"energy": 0.9}')
        assert await _client(transport).send("prompt") == '{"energy": 0.9}'

    @pytest.mark.asyncio
    async def test_request_shape(self, gemini_transport):
        transport, calls = gemini_transport(text="ok")
        await _client(transport).send("emission factors for Kathmandu")

        [request] = calls
        assert request.method == "POST"
        assert request.url.path.endswith("/models/gemini-1.5-flash:generateContent")
        assert request.url.params["key"] == "test-key"
        body = json.loads(request.content)
        assert body["contents"] == [{"parts": [{"text": "emission factors for Kathmandu"}]}]
        assert body["generationConfig"] == {"temperature": 0.2}

    @pytest.mark.asyncio
    async def test_temperature_from_settings(self, gemini_transport):
        transport, calls = gemini_transport(text="ok")
        await _client(transport, gemini_temperature=0.7).send("p")
        assert json.loads(calls[0].content)["generationConfig"]["temperature"] == 0.7

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 403, 429, 500, 503])
    async def test_http_error_carries_status(self, gemini_transport, status):
        transport, _ = gemini_transport(status=status)
        with pytest.raises(TransportError) as excinfo:
            await _client(transport).send("p")
        assert excinfo.value.status_code == status

    @pytest.mark.asyncio
    async def test_network_error_has_no_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError) as excinfo:
            await _client(httpx.MockTransport(handler)).send("p")
        assert excinfo.value.status_code is None

    @pytest.mark.asyncio
    async def test_missing_candidates_is_empty_response(self, gemini_transport):
        transport, _ = gemini_transport(body={"promptFeedback": {"blockReason": "SAFETY"}})
        with pytest.raises(EmptyResponseError):
            await _client(transport).send("p")

    @pytest.mark.asyncio
    async def test_non_json_body_is_empty_response(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(EmptyResponseError):
            await _client(httpx.MockTransport(handler)).send("p")

    @pytest.mark.asyncio
    async def test_no_retry(self, gemini_transport):
        transport, calls = gemini_transport(status=500)
        with pytest.raises(TransportError):
            await _client(transport).send("p")
        assert len(calls) == 1


# ─── Response parsing ─────────────────────────────────────────────────────────


class TestResponseText:

    def test_happy_path(self):
        payload = {"candidates": [{"content": {"parts": [{"text": "hello"}]}}]}
        assert _response_text(payload) == "hello"

    @pytest.mark.parametrize("payload", [
        {},
        {"candidates": []},
        {"candidates": [{"content": {}}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
        None,
    ])
    def test_missing_or_mistyped_text(self, payload):
        with pytest.raises(EmptyResponseError):
            _response_text(payload)
