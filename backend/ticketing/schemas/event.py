"""Schemas for event listings."""

from datetime import date as date_type

from pydantic import BaseModel


class EventRead(BaseModel):
    id: int
    name: str
    date: date_type
    location: str
    description: str
    capacity: int
    tickets_sold: int
    available_tickets: int

    model_config = {"from_attributes": True}
