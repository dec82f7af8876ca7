from sqlalchemy import CheckConstraint, Column, Date, Index, Integer, String, Text
from sqlalchemy.ext.hybrid import hybrid_property

from .base import BaseModel


class Event(BaseModel):
    """A ticketed event and its inventory counter.

    ``tickets_sold`` only ever grows, and only through
    :func:`ticketing.crud.crud_event.reserve_tickets`.
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    capacity = Column(Integer, nullable=False)
    tickets_sold = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("capacity >= 0", name="ck_events_capacity_non_negative"),
        CheckConstraint("tickets_sold >= 0", name="ck_events_sold_non_negative"),
        CheckConstraint("tickets_sold <= capacity", name="ck_events_sold_lte_capacity"),
        Index("ix_events_date", "date"),
    )

    @hybrid_property
    def available_tickets(self) -> int:
        return self.capacity - self.tickets_sold

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name!r}, sold={self.tickets_sold}/{self.capacity})>"
