"""
rate_limit.py — Shared slowapi limiter, keyed by client IP.

Routes that can reach Gemini opt in with @limiter.limit(settings.rate_limit)
and take a `request: Request` argument; main.py registers the limiter and
its 429 handler on the app.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
