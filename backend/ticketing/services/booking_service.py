"""Chat booking flow: propose, then confirm.

``propose`` only reads. It finds the event and checks the advertised
availability so the user can be asked to confirm. ``confirm`` is the single
path that sells tickets, and it trusts nothing from the proposal: the
ledger's conditional write decides.

Storage errors from the ledger are not caught here; the transport turns
them into a generic internal error.
"""

from __future__ import annotations

import logging
from typing import List, Union

from sqlalchemy.orm import Session

from .. import models
from ..crud import crud_event
from ..schemas.chat import (
    ChatReply,
    Intent,
    ProposedBooking,
    Receipt,
    Rejection,
    RejectionReason,
)
from ..schemas.event import EventRead
from ..utils.validation import is_positive_int, sanitize_input
from .event_locator import find_event
from .intent_parser import GREETING_MESSAGE, HELP_MESSAGE
from .intent_resolver import resolve

logger = logging.getLogger(__name__)

VIEW_SUGGESTION = "Try asking to see available events first"


def _tickets(count: int) -> str:
    return f"{count} ticket{'s' if count != 1 else ''}"


def _invalid_tickets() -> Rejection:
    return Rejection(
        reason=RejectionReason.INVALID_INPUT,
        message="Please ask for at least 1 ticket (a whole number).",
    )


def _insufficient(event_id: int, event_name: str, available: int) -> Rejection:
    if available <= 0:
        message = f"Sorry, {event_name} is sold out."
    else:
        verb = "is" if available == 1 else "are"
        message = (
            f"Sorry, only {_tickets(available)} {verb} available for {event_name}. "
            f"Would you like to book {available} instead?"
        )
    return Rejection(
        reason=RejectionReason.INSUFFICIENT_CAPACITY,
        message=message,
        event_id=event_id,
        event_name=event_name,
        available_tickets=max(available, 0),
    )


def propose(db: Session, intent: Intent) -> Union[ProposedBooking, Rejection]:
    """Preview a booking for a ``book`` intent without touching inventory."""
    if intent.kind != "book":
        return Rejection(
            reason=RejectionReason.INVALID_INPUT,
            message="Only booking requests can be proposed.",
        )
    if not is_positive_int(intent.requested_tickets):
        return _invalid_tickets()

    query = (intent.event_name_query or "").strip()
    event = find_event(db, query)
    if event is None:
        return Rejection(
            reason=RejectionReason.EVENT_NOT_FOUND,
            message=(
                f'I couldn\'t find an event called "{query}". '
                "Would you like to see all available events?"
            ),
            query=query,
            suggestion=VIEW_SUGGESTION,
        )

    available = event.available_tickets
    requested = intent.requested_tickets
    if available < requested:
        return _insufficient(event.id, event.name, available)

    return ProposedBooking(
        event_id=event.id,
        event_name=event.name,
        event_date=event.date,
        event_location=event.location,
        requested_tickets=requested,
        available_tickets=available,
        message=(
            f"I'm ready to book {_tickets(requested)} for {event.name} on "
            f"{event.date.isoformat()} at {event.location}. Please confirm your booking."
        ),
    )


def confirm(db: Session, event_id: int, requested_tickets: int) -> Union[Receipt, Rejection]:
    """Sell the tickets of a confirmed proposal."""
    if not is_positive_int(event_id):
        return Rejection(
            reason=RejectionReason.INVALID_INPUT,
            message="A valid event ID is required.",
        )
    if not is_positive_int(requested_tickets):
        return _invalid_tickets()

    try:
        result = crud_event.reserve_tickets(db, event_id, requested_tickets)
    except crud_event.EventNotFoundError:
        return Rejection(
            reason=RejectionReason.EVENT_NOT_FOUND,
            message="That event no longer exists.",
            event_id=event_id,
            suggestion=VIEW_SUGGESTION,
        )
    except crud_event.InsufficientCapacityError as exc:
        return _insufficient(exc.event_id, exc.event_name, exc.available)

    logger.info(
        "booking confirmed event_id=%s tickets=%s remaining=%s",
        result.event_id,
        result.tickets_purchased,
        result.remaining_tickets,
    )
    return Receipt(
        event_id=result.event_id,
        event_name=result.event_name,
        tickets_purchased=result.tickets_purchased,
        remaining_tickets=result.remaining_tickets,
        message=(
            "Your booking is confirmed! You have successfully booked "
            f"{_tickets(result.tickets_purchased)} for {result.event_name}. "
            f"{_tickets(result.remaining_tickets)} remaining."
        ),
    )


def _describe_events(events: List[models.Event]) -> str:
    if not events:
        return "Sorry, there are no events with available tickets at the moment."
    listing = ", ".join(
        f"{e.name} on {e.date.isoformat()} ({e.available_tickets} tickets available)"
        for e in events
    )
    noun = "event" if len(events) == 1 else "events"
    return f"I found {len(events)} {noun} with available tickets: {listing}"


def handle_message(db: Session, text: object) -> Union[ChatReply, Rejection]:
    """Answer one chat message.

    Returns a :class:`Rejection` only for unusable input (nothing left after
    sanitising); everything else, including unknown events and sold-out
    shows, is a normal reply.
    """
    cleaned = sanitize_input(text)
    if not cleaned:
        return Rejection(
            reason=RejectionReason.INVALID_INPUT,
            message="Text input required",
        )

    intent = resolve(cleaned)
    logger.debug("message resolved kind=%s source=%s", intent.kind, intent.source)

    if intent.kind == "greeting":
        return ChatReply(intent="greeting", response=GREETING_MESSAGE)

    if intent.kind == "view":
        events = crud_event.list_available_events(db)
        return ChatReply(
            intent="view",
            response=_describe_events(events),
            events=[EventRead.model_validate(e) for e in events],
        )

    if intent.kind == "book":
        outcome = propose(db, intent)
        if isinstance(outcome, Rejection):
            return ChatReply(intent="book", response=outcome.message, rejection=outcome)
        return ChatReply(intent="book", response=outcome.message, booking=outcome)

    if intent.kind == "error":
        return ChatReply(
            intent="error",
            response=f"{intent.error} {VIEW_SUGGESTION}, or tell me which event to book.",
        )

    return ChatReply(intent="chat", response=intent.response or HELP_MESSAGE)
