"""
pytest configuration and shared fixtures for the GreenCompass tests.

Key concern: tests must never reach the real Gemini API. We achieve this by:
  1. Forcing GEMINI_API_KEY="" before the app is imported, so every
     module-level singleton starts in offline (fallback) mode.
  2. Faking Gemini HTTP with httpx.MockTransport (see gemini_transport),
     or replacing the prompt client with a StubPromptClient.
  3. Resetting the slowapi limiter before each test so request counts
     from one test don't trip the limit in another.
"""

import os
from datetime import date

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ["GEMINI_API_KEY"] = ""
os.environ.setdefault("ENVIRONMENT", "test")

# A fixed date keeps fallback values reproducible: Thursday 15 January 2026, winter, Q1.
FIXED_DAY = date(2026, 1, 15)


class StubPromptClient:
    """Stands in for GeminiClient: replays canned text or raises."""

    def __init__(self, responses=None, error=None):
        # responses: one string for every prompt, or {prompt marker: text}
        if isinstance(responses, str):
            self.default, self.responses = responses, {}
        else:
            self.default, self.responses = None, responses or {}
        self.error = error
        self.prompts = []

    async def send(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.default is not None:
            return self.default
        for marker, text in self.responses.items():
            if marker in prompt:
                return text
        return "I am not able to help with that."


class RecordingSink:
    """Diagnostic sink that keeps every absorbed failure."""

    def __init__(self):
        self.events = []

    def __call__(self, category, region, error):
        self.events.append((category, region, error))


@pytest.fixture(autouse=True)
def reset_rate_limits():
    from greencompass.core.rate_limit import limiter

    limiter.reset()
    yield


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def gemini_transport():
    """
    Build an httpx.MockTransport answering like generateContent.

    Usage:
        transport, calls = gemini_transport(status=200, text="...")
    """

    def _build(status=200, text=None, body=None):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if body is not None:
                return httpx.Response(status, json=body)
            if text is None:
                return httpx.Response(status, json={"error": {"message": "failure"}})
            return httpx.Response(
                status,
                json={"candidates": [{"content": {"parts": [{"text": text}]}}]},
            )

        return httpx.MockTransport(handler), calls

    return _build


@pytest.fixture()
async def client():
    """
    HTTPX async test client wired to the FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from greencompass.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture()
def fixed_day():
    return FIXED_DAY


@pytest.fixture()
def stub_client():
    """Factory for StubPromptClient: stub_client("text") or stub_client(error=exc)."""
    return StubPromptClient
