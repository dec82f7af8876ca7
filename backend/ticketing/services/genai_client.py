from __future__ import annotations

from typing import Optional

from google import genai  # type: ignore
from google.genai import types  # type: ignore

from ticketing.core.config import settings

_GENAI_CLIENT: Optional[genai.Client] = None


def get_genai_client() -> Optional[genai.Client]:
    """Return a process-wide Gemini client with a bounded HTTP timeout.

    Returns ``None`` when no API key is configured. The timeout applies to each
    ``generate_content`` call: a slow model or network raises, and callers
    fall back to the rule-based parser.
    """
    global _GENAI_CLIENT
    api_key = (settings.GOOGLE_GENAI_API_KEY or "").strip()
    if not api_key:
        return None
    if _GENAI_CLIENT is None:
        _GENAI_CLIENT = genai.Client(
            api_key=api_key,
            # HttpOptions.timeout is in milliseconds and applies per request
            http_options=types.HttpOptions(
                timeout=int(settings.GOOGLE_GENAI_TIMEOUT_SECONDS * 1000),
            ),
        )
    return _GENAI_CLIENT
