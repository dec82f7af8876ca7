from datetime import datetime, timezone
from sqlalchemy import Column, DateTime
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(Base):
    """Abstract base adding creation and update timestamps (UTC)."""

    __abstract__ = True

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
