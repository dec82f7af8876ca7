from .crud_event import (
    EventNotFoundError,
    InsufficientCapacityError,
    InvalidQuantityError,
    ReservationError,
    ReservationResult,
    create_event,
    get_event,
    list_available_events,
    list_events,
    reserve_tickets,
)
from . import crud_event
