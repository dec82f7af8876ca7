"""Rule-based intent parsing.

This is the deterministic path of intent resolution: it never calls out and
never raises, so chat keeps working when Gemini is slow, misconfigured or
down. Rules are tried in order and the first match wins, which is why
"Hello, I want tickets" is a greeting rather than a booking.
"""

from __future__ import annotations

import re
from typing import Optional

from ..schemas.chat import Intent

GREETING_MESSAGE = (
    "Hi! I'm your ticket assistant. I can show you available events or help you "
    "book tickets. What would you like to do?"
)
HELP_MESSAGE = (
    "I'm your ticket booking assistant! I can help you view available events or "
    "book tickets. What would you like to do?"
)
CLARIFY_EVENT_MESSAGE = (
    "I'd love to help you book tickets! Could you tell me which event you're "
    "interested in? Try saying something like 'Book 2 tickets for Jazz Night'."
)

_GREETING_RE = re.compile(r"^(?:hi|hello|hey|greetings|good (?:morning|afternoon|evening))\b")

_VIEW_WORDS = r"(?:show|list|view|see|display|available|which)"
_EVENT_WORDS = r"(?:events?|concerts?|shows?|tickets?)"
_VIEW_PATTERNS = (
    re.compile(rf"\b{_VIEW_WORDS}\b.*\b{_EVENT_WORDS}\b"),
    re.compile(rf"\b{_EVENT_WORDS}\b.*\b(?:available|list|show)\b"),
    re.compile(r"\b(?:what|which)\b.*\bavailable\b"),
)

_BOOK_RE = re.compile(r"\b(?:book|purchase|buy|get|reserve|want)\b")

_NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}
_COUNT_RE = re.compile(
    r"\b(\d+|" + "|".join(_NUMBER_WORDS) + r")\s*"
    r"(?:tickets?|seats?|spots?|reservations?|pass(?:es)?)\b"
)

_QUOTED_RE = re.compile(r"\"([^\"]+)\"|“([^”]+)”|(?:^|\s)'([^']+)'")
# A clause ends at a trailing "concert"/"show"/"event" or at the end of the text.
_CLAUSE_END = r"(?=\s+(?:concert|show|event)s?\b|\s*$)"
_FOR_RE = re.compile(r"\bfor\s+(?:the\s+)?([a-z0-9\s]+?)" + _CLAUSE_END)
_TO_RE = re.compile(
    r"\bto\s+(?!(?:book|purchase|buy|get|reserve|see|attend|go)\b)"
    r"(?:the\s+)?([a-z0-9\s]+?)" + _CLAUSE_END
)
_TRAILING_FILLER_RE = re.compile(r"(?:\s+(?:please|thanks|thank you|now))+$")

_STOP_WORDS = {
    "book", "booking", "purchase", "buy", "get", "reserve", "want", "wanna",
    "ticket", "tickets", "seat", "seats", "spot", "spots", "pass", "passes",
    "reservation", "reservations", "for", "to", "the", "a", "an", "some",
    "i", "id", "im", "me", "my", "we", "us", "our", "please", "would", "like",
    "can", "could", "you", "of", "and",
} | set(_NUMBER_WORDS)


def _normalize(text: str) -> str:
    return text.lower().strip()


def _strip_punctuation(text: str) -> str:
    text = re.sub(r"['’]", "", text)
    return re.sub(r"\s+", " ", re.sub(r"[^a-z0-9\s]+", " ", text)).strip()


def _clean_fragment(fragment: str) -> str:
    return _TRAILING_FILLER_RE.sub("", fragment.strip()).strip()


def _is_view_request(text: str) -> bool:
    return any(pattern.search(text) for pattern in _VIEW_PATTERNS)


def extract_ticket_count(text: str) -> int:
    """Return the count placed next to a ticket noun, or 1 when there is none."""
    match = _COUNT_RE.search(text)
    if not match:
        return 1
    raw = match.group(1)
    if raw in _NUMBER_WORDS:
        return _NUMBER_WORDS[raw]
    return int(raw)


def extract_event_fragment(text: str) -> Optional[str]:
    """Pick out the part of a booking request that names the event.

    Tries a quoted name, then a "for ..." clause, then a "to ..." clause, and
    finally whatever is left once booking words and numbers are removed.
    """
    quoted = _QUOTED_RE.search(text)
    if quoted:
        name = next((g for g in quoted.groups() if g), "").strip()
        if name:
            return name

    plain = _strip_punctuation(text)
    for pattern in (_FOR_RE, _TO_RE):
        match = pattern.search(plain)
        if match:
            fragment = _clean_fragment(match.group(1))
            if fragment:
                return fragment

    leftover = [
        word for word in plain.split()
        if word not in _STOP_WORDS and not word.isdigit()
    ]
    fragment = _clean_fragment(" ".join(leftover))
    return fragment or None


def fallback_parse(text: str) -> Intent:
    lowered = _normalize(text)

    if _GREETING_RE.search(lowered):
        return Intent(kind="greeting", response=GREETING_MESSAGE)

    if _is_view_request(lowered):
        return Intent(kind="view")

    if _BOOK_RE.search(lowered):
        event_name = extract_event_fragment(lowered)
        if not event_name:
            return Intent(kind="chat", response=CLARIFY_EVENT_MESSAGE)
        return Intent(
            kind="book",
            event_name_query=event_name,
            requested_tickets=extract_ticket_count(lowered),
            response=f"Got it! Let me find tickets for {event_name}.",
        )

    return Intent(kind="chat", response=HELP_MESSAGE)
