"""Schemas for the chat booking flow.

An :class:`Intent` is what the resolver makes of one message. A ``book``
intent becomes a :class:`ProposedBooking` (or a :class:`Rejection`), and only
an explicit confirm turns the proposal into a :class:`Receipt`.
"""

from __future__ import annotations

from datetime import date as date_type
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, StrictInt, StrictStr

from .event import EventRead

IntentKind = Literal["greeting", "view", "book", "chat", "error"]


class Intent(BaseModel):
    """Typed classification of one free-text message."""

    kind: IntentKind
    event_name_query: Optional[str] = Field(
        default=None, description="Raw text naming the event (book only)."
    )
    requested_tickets: int = Field(
        default=1, description="Number of tickets asked for (book only)."
    )
    response: Optional[str] = Field(
        default=None, description="Reply text suggested for chat/greeting intents."
    )
    error: Optional[str] = Field(
        default=None, description="Provider-reported problem with the message."
    )
    source: Literal["genai", "fallback"] = "fallback"


class RejectionReason(str, Enum):
    INVALID_INPUT = "invalid_input"
    EVENT_NOT_FOUND = "event_not_found"
    INSUFFICIENT_CAPACITY = "insufficient_capacity"


class Rejection(BaseModel):
    reason: RejectionReason
    message: str
    query: Optional[str] = Field(
        default=None, description="Event text that could not be resolved."
    )
    event_id: Optional[int] = None
    event_name: Optional[str] = None
    available_tickets: Optional[int] = Field(
        default=None, description="True availability when capacity was the problem."
    )
    suggestion: Optional[str] = None


class ProposedBooking(BaseModel):
    """A booking preview. ``available_tickets`` is advisory only."""

    event_id: int
    event_name: str
    event_date: date_type
    event_location: str
    requested_tickets: int
    available_tickets: int
    needs_confirmation: bool = True
    message: str


class Receipt(BaseModel):
    event_id: int
    event_name: str
    tickets_purchased: int
    remaining_tickets: int
    message: str


class ChatReply(BaseModel):
    intent: IntentKind
    response: str
    events: Optional[List[EventRead]] = None
    booking: Optional[ProposedBooking] = None
    rejection: Optional[Rejection] = None


class ChatRequest(BaseModel):
    """Request body containing the raw chat message."""

    text: StrictStr = Field(..., description="Free-form chat message")


# Largest value a 64-bit INTEGER column can bind
SQL_INT_MAX = 2**63 - 1


class ConfirmRequest(BaseModel):
    event_id: StrictInt = Field(..., le=SQL_INT_MAX)
    tickets: StrictInt = Field(..., le=SQL_INT_MAX)
