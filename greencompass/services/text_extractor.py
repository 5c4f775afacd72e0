"""
text_extractor.py — Pull JSON out of free-form LLM output.

Gemini does not reliably answer with bare JSON even when told to. It wraps
the payload in prose, markdown fences, or both. Extraction runs an ordered
chain of strategies and returns the first one that parses:

  1. ```json fenced block      → parse the block interior
  2. first "[" … last "]" span  → parse as a JSON array (top-level only)
  3. first "{" … last "}" span  → parse as a JSON object

If nothing parses the result is None. That is not an error; callers treat
it as the signal to fall back.

Adding a provider-specific strategy:
    extractor = TextExtractor(strategies=[my_strategy, *DEFAULT_STRATEGIES])
"""

import json
import logging
import re
from typing import Any, Callable, Optional, Sequence

logger = logging.getLogger(__name__)

Strategy = Callable[[str], Optional[Any]]

_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_ARRAY_RE       = re.compile(r"\[[\s\S]*\]")
_OBJECT_RE      = re.compile(r"\{[\s\S]*\}")


def _loads(fragment: str) -> Optional[Any]:
    try:
        return json.loads(fragment)
    except json.JSONDecodeError:
        return None


def from_fenced_block(text: str) -> Optional[Any]:
    """Parse the interior of the first ```json fenced block."""
    m = _FENCED_JSON_RE.search(text)
    if not m:
        return None
    return _loads(m.group(1).strip())


def from_array(text: str) -> Optional[list]:
    """
    Parse the widest [...] span as a JSON array.

    Skipped when braces enclose the span: the array is then a member of
    an object (e.g. "sectors") and from_object should take it.
    """
    m = _ARRAY_RE.search(text)
    if not m:
        return None
    brace = text.find("{")
    if brace != -1 and brace < m.start() and text.rfind("}") >= m.end():
        return None
    parsed = _loads(m.group())
    return parsed if isinstance(parsed, list) else None


def from_object(text: str) -> Optional[dict]:
    """Parse the widest {...} span as a JSON object."""
    m = _OBJECT_RE.search(text)
    if not m:
        return None
    parsed = _loads(m.group())
    return parsed if isinstance(parsed, dict) else None


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (from_fenced_block, from_array, from_object)


class TextExtractor:
    """Runs the strategy chain. Stateless; safe to share across tasks."""

    def __init__(self, strategies: Sequence[Strategy] = DEFAULT_STRATEGIES) -> None:
        self.strategies = tuple(strategies)

    def extract(self, raw_text: str) -> Optional[Any]:
        if not raw_text:
            return None
        for strategy in self.strategies:
            result = strategy(raw_text)
            if result is not None:
                logger.debug("Extracted JSON via %s", strategy.__name__)
                return result
        return None


# Module-level singleton
text_extractor = TextExtractor()
