"""Event inventory: listings and the atomic ticket reservation."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..utils.validation import is_positive_int

logger = logging.getLogger(__name__)

# Largest value a 64-bit INTEGER column can bind
SQL_INT_MAX = 2**63 - 1


class ReservationError(Exception):
    """Base class for reservations the ledger refuses."""


class InvalidQuantityError(ReservationError):
    def __init__(self, quantity: object) -> None:
        super().__init__(f"Ticket quantity must be a positive integer, got {quantity!r}")
        self.quantity = quantity


class EventNotFoundError(ReservationError):
    def __init__(self, event_id: int) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id


class InsufficientCapacityError(ReservationError):
    def __init__(self, event_id: int, event_name: str, available: int) -> None:
        noun = "ticket" if available == 1 else "tickets"
        super().__init__(f"Only {available} {noun} available for {event_name}")
        self.event_id = event_id
        self.event_name = event_name
        self.available = available


@dataclass(frozen=True)
class ReservationResult:
    event_id: int
    event_name: str
    tickets_purchased: int
    remaining_tickets: int


def get_event(db: Session, event_id: int) -> Optional[models.Event]:
    if abs(event_id) > SQL_INT_MAX:
        return None
    return db.get(models.Event, event_id)


def list_events(db: Session) -> List[models.Event]:
    return (
        db.query(models.Event)
        .order_by(models.Event.date.asc(), models.Event.id.asc())
        .all()
    )


def list_available_events(db: Session) -> List[models.Event]:
    """Return events that still have tickets, soonest first."""
    return (
        db.query(models.Event)
        .filter(models.Event.capacity - models.Event.tickets_sold > 0)
        .order_by(models.Event.date.asc(), models.Event.id.asc())
        .all()
    )


def create_event(
    db: Session,
    *,
    name: str,
    date: date,
    location: str,
    capacity: int,
    description: str = "",
    tickets_sold: int = 0,
    event_id: Optional[int] = None,
) -> models.Event:
    name = (name or "").strip()
    location = (location or "").strip()
    if not name:
        raise ValueError("Event name is required.")
    if not location:
        raise ValueError("Event location is required.")
    if not isinstance(capacity, int) or capacity < 0:
        raise ValueError("Capacity must be a non-negative integer.")
    if not isinstance(tickets_sold, int) or not 0 <= tickets_sold <= capacity:
        raise ValueError("Tickets sold must be between 0 and capacity.")

    db_event = models.Event(
        id=event_id,
        name=name,
        date=date,
        location=location,
        description=description or "",
        capacity=capacity,
        tickets_sold=tickets_sold,
    )
    db.add(db_event)
    db.commit()
    db.refresh(db_event)
    return db_event


def _read_inventory(db: Session, event_id: int):
    return db.execute(
        select(models.Event.name, models.Event.capacity, models.Event.tickets_sold).where(
            models.Event.id == event_id
        )
    ).first()


def reserve_tickets(db: Session, event_id: int, quantity: int) -> ReservationResult:
    """Sell ``quantity`` tickets for ``event_id`` or raise.

    The capacity check and the increment are one conditional UPDATE, so the
    database decides which of several concurrent callers get the last
    tickets. The preliminary read only serves to tell "no such event" apart
    from "not enough tickets"; it is never the basis of the write.

    Raises:
        InvalidQuantityError: ``quantity`` is not a positive integer.
        EventNotFoundError: the event does not exist.
        InsufficientCapacityError: fewer than ``quantity`` tickets remained
            when the write ran. Carries the availability read afterwards.
        SQLAlchemyError: the write could not be executed; the session is
            rolled back and the error re-raised.
    """
    if not is_positive_int(quantity):
        raise InvalidQuantityError(quantity)
    if abs(event_id) > SQL_INT_MAX:
        raise EventNotFoundError(event_id)

    try:
        before = _read_inventory(db, event_id)
        if before is None:
            db.rollback()
            raise EventNotFoundError(event_id)
        if quantity > SQL_INT_MAX:
            # No event can hold this many; it cannot be bound as a parameter either
            db.rollback()
            raise InsufficientCapacityError(
                event_id, before.name, max(before.capacity - before.tickets_sold, 0)
            )

        stmt = (
            update(models.Event)
            .where(
                models.Event.id == event_id,
                models.Event.tickets_sold + quantity <= models.Event.capacity,
            )
            .values(tickets_sold=models.Event.tickets_sold + quantity)
            .execution_options(synchronize_session=False)
        )
        if db.get_bind().dialect.update_returning:
            row = db.execute(
                stmt.returning(models.Event.name, models.Event.capacity, models.Event.tickets_sold)
            ).first()
        else:
            result = db.execute(stmt)
            # Still inside the write transaction, so this sees our own row
            row = _read_inventory(db, event_id) if result.rowcount == 1 else None

        if row is None:
            db.rollback()
            current = _read_inventory(db, event_id)
            db.rollback()
            if current is None:
                raise EventNotFoundError(event_id)
            available = max(current.capacity - current.tickets_sold, 0)
            logger.info(
                "reserve rejected event_id=%s requested=%s available=%s",
                event_id,
                quantity,
                available,
            )
            raise InsufficientCapacityError(event_id, current.name, available)

        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("reserve failed event_id=%s requested=%s", event_id, quantity)
        raise

    # The ORM identity map may hold a pre-write copy of this event
    db.expire_all()
    return ReservationResult(
        event_id=event_id,
        event_name=row.name,
        tickets_purchased=quantity,
        remaining_tickets=row.capacity - row.tickets_sold,
    )
