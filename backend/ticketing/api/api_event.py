from typing import Any, List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from ..crud import crud_event
from ..schemas.event import EventRead
from ..utils import error_response
from .dependencies import get_db

router = APIRouter()


@router.get("/events", response_model=List[EventRead])
def read_events(db: Session = Depends(get_db)) -> Any:
    return crud_event.list_events(db)


@router.get("/events/available", response_model=List[EventRead])
def read_available_events(db: Session = Depends(get_db)) -> Any:
    """Events that still have at least one ticket, soonest first."""
    return crud_event.list_available_events(db)


@router.get("/events/{event_id}", response_model=EventRead)
def read_event(
    event_id: int = Path(..., title="The ID of the event"),
    db: Session = Depends(get_db),
) -> Any:
    event = crud_event.get_event(db, event_id)
    if event is None:
        raise error_response(
            "Event not found.",
            {"event_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return event
