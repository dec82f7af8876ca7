"""Turn a chat message into a typed :class:`Intent`.

Gemini gets the first attempt. Whatever goes wrong there (no API key, a
timeout, an exception from the SDK, or a reply that is not one of the agreed
JSON shapes) the message is handed to :func:`fallback_parse` instead, so a
caller always gets an intent back and never sees a provider error.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional

from google.genai import types  # type: ignore

from ticketing.core.config import settings
from ticketing.schemas.chat import Intent
from ticketing.services.genai_client import get_genai_client
from ticketing.services.intent_parser import GREETING_MESSAGE, fallback_parse

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTIONS = (
    "You are a friendly assistant for an event ticket booking service. Classify the "
    "user's message and respond with ONLY one compact JSON object, no markdown and "
    "no prose, in exactly one of these shapes:\n"
    '- {"intent": "greeting"} when the user only says hi/hello/hey.\n'
    '- {"intent": "view"} when the user wants to see or list available events or tickets.\n'
    '- {"intent": "book", "event": "<event name>", "tickets": <integer >= 1>} when the user '
    "wants to book, buy or reserve tickets. Use 1 for tickets if no number is given.\n"
    '- {"intent": "chat", "response": "<short reply>"} for anything else; keep the reply '
    "to one or two friendly sentences about what you can help with.\n"
    '- {"error": "<what is wrong>"} when the message cannot be understood at all.\n'
)


def _build_prompt(text: str) -> str:
    return (
        f"{SYSTEM_INSTRUCTIONS}\n"
        f"User message: {json.dumps(text)}\n\n"
        "JSON response:"
    )


def _extract_json_object(raw: str) -> Optional[Dict[str, Any]]:
    text = raw.strip()
    # Prefer the substring between the first '{' and last '}' so code fences
    # and stray prose around the object are ignored.
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        text = text[start : end + 1]
    data = json.loads(text)
    if not isinstance(data, dict):
        return None
    return data


def intent_from_payload(data: Dict[str, Any]) -> Optional[Intent]:
    """Validate a provider reply; ``None`` means it matched no allowed shape."""
    kind = data.get("intent")

    if kind is None:
        error = data.get("error")
        if isinstance(error, str) and error.strip():
            return Intent(kind="error", error=error.strip(), source="genai")
        return None

    if kind == "greeting":
        return Intent(kind="greeting", response=GREETING_MESSAGE, source="genai")

    if kind == "view":
        return Intent(kind="view", source="genai")

    if kind == "book":
        event = data.get("event")
        if not isinstance(event, str) or not event.strip():
            return None
        tickets = data.get("tickets", 1)
        if tickets is None:
            tickets = 1
        if isinstance(tickets, bool) or not isinstance(tickets, int) or tickets < 1:
            return None
        return Intent(
            kind="book",
            event_name_query=event.strip(),
            requested_tickets=tickets,
            source="genai",
        )

    if kind == "chat":
        response = data.get("response")
        if not isinstance(response, str) or not response.strip():
            return None
        return Intent(kind="chat", response=response.strip(), source="genai")

    return None


def _resolve_with_genai(text: str) -> Optional[Intent]:
    client = get_genai_client()
    if client is None:
        return None

    try:
        t0 = time.monotonic()
        res = client.models.generate_content(
            model=settings.GOOGLE_GENAI_MODEL,
            contents=_build_prompt(text),
            config=types.GenerateContentConfig(
                temperature=0,
                response_mime_type="application/json",
            ),
        )
        dt_ms = int((time.monotonic() - t0) * 1000)
        logger.info("intent_resolver: gemini_parse_ms=%s", dt_ms)
        raw = (getattr(res, "text", None) or "").strip()
        if not raw:
            logger.warning("Gemini returned empty text; using rule-based parser")
            return None
        data = _extract_json_object(raw)
    except Exception as exc:
        logger.warning("Gemini intent parsing failed: %s", exc)
        return None

    intent = intent_from_payload(data) if data is not None else None
    if intent is None:
        logger.warning("Gemini reply did not match an intent shape: %.200s", raw)
    return intent


def resolve(text: str) -> Intent:
    """Classify ``text``. ``text`` must already be non-empty."""
    intent = _resolve_with_genai(text)
    if intent is not None:
        return intent
    return fallback_parse(text)
