"""
GeminiClient — Async prompt client for the Gemini generateContent REST API.

One call = one POST carrying a single prompt and a low temperature:

    POST {base_url}/models/{model}:generateContent?key=…
    {"contents": [{"parts": [{"text": prompt}]}],
     "generationConfig": {"temperature": 0.2}}

and the answer is read from candidates[0].content.parts[0].text.

Failure modes (no retries; callers fall back on any failure):
  - non-2xx status or network error → TransportError (status_code captured)
  - 2xx body without the text path  → EmptyResponseError

Runtime modes:
  - GEMINI_API_KEY unset: the client is disabled (enabled=False) and the
    acquisition service never calls it; all data comes from the fallback.
  - GEMINI_API_KEY set: real calls.

Tests inject an httpx.MockTransport via the `transport` argument.
"""

import logging
from typing import Any, Optional

import httpx

from greencompass.core.config import Settings, settings
from greencompass.core.exceptions import EmptyResponseError, TransportError

logger = logging.getLogger(__name__)


def _response_text(payload: Any) -> str:
    """Dig candidates[0].content.parts[0].text out of a generateContent body."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise EmptyResponseError("Gemini response has no candidate text") from exc
    if not isinstance(text, str):
        raise EmptyResponseError("Gemini candidate text is not a string")
    return text


class GeminiClient:
    """
    Thin async wrapper around one Gemini model.

    Don't instantiate per-request; use the module-level `gemini_client`
    singleton, or build one from explicit Settings in tests.
    """

    def __init__(
        self,
        config: Settings = settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = config.gemini_api_key
        self.model = config.gemini_model
        self.base_url = config.gemini_base_url.rstrip("/")
        self.temperature = config.gemini_temperature
        self.timeout = config.gemini_timeout_seconds
        self._transport = transport
        self.enabled = bool(self.api_key)

        if self.enabled:
            logger.info("GeminiClient initialised in LIVE mode (model: %s)", self.model)
        else:
            logger.info(
                "GEMINI_API_KEY not set — GeminiClient disabled, "
                "carbon data will come from the offline fallback."
            )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def send(self, prompt: str) -> str:
        """
        Send one prompt and return the raw generated text.

        Raises:
            TransportError:     network failure or non-2xx status.
            EmptyResponseError: 2xx response without candidate text.
        """
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": self.temperature},
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    params={"key": self.api_key},
                    headers={"Content-Type": "application/json"},
                    json=body,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                logger.error("Gemini API error: %s — %s", status, exc.response.text[:200])
                raise TransportError(f"Gemini request failed: {status}", status_code=status) from exc
            except httpx.RequestError as exc:
                logger.error("Gemini request failed (model=%s): %s", self.model, exc)
                raise TransportError(f"Gemini request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise EmptyResponseError("Gemini response body is not JSON") from exc
        return _response_text(payload)


# Module-level singleton
gemini_client = GeminiClient()
