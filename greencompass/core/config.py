"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. The Gemini key is injected via environment and is
never hard-coded.

The only switch that changes data behaviour is GEMINI_API_KEY:
  - empty (default) → every category is served from the offline fallback
  - set             → live Gemini data, with per-call fallback on failure

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated allowed origins for the dashboard front-end.
    cors_origins_str: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # ─── Gemini ────────────────────────────────────────────────────
    # Get from https://aistudio.google.com/
    # Leave empty to run fully offline on the deterministic fallback data.
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Low temperature biases the model toward literal, parseable output.
    gemini_temperature: float = 0.2

    # None = no deadline. Callers that need bounded latency set this.
    gemini_timeout_seconds: Optional[float] = None

    # ─── Forecast ──────────────────────────────────────────────────
    forecast_horizon_years: int = 5

    # ─── Rate limiting ─────────────────────────────────────────────
    # Applied to every route that may trigger a Gemini call.
    rate_limit: str = "30/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Don't fail on unknown env vars
    )

    @property
    def live_data_enabled(self) -> bool:
        return bool(self.gemini_api_key)


# Module-level singleton; import this rather than constructing Settings()
settings = Settings()
