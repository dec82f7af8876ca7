from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import models


def find_event(db: Session, name_query: str) -> Optional[models.Event]:
    """Resolve a user-supplied event name to a single event.

    An exact case-insensitive match wins. Otherwise the shortest name that
    contains the query is taken as the closest match. Blank queries match
    nothing.
    """
    query = (name_query or "").strip().lower()
    if not query:
        return None

    lowered_name = func.lower(models.Event.name)
    exact = (
        db.query(models.Event)
        .filter(lowered_name == query)
        .order_by(models.Event.id.asc())
        .first()
    )
    if exact is not None:
        return exact

    return (
        db.query(models.Event)
        .filter(lowered_name.contains(query, autoescape=True))
        .order_by(func.length(models.Event.name).asc(), models.Event.id.asc())
        .first()
    )
