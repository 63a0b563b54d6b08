"""
Shared column helpers for ORM models.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String


def new_id() -> str:
    return uuid.uuid4().hex


class TimestampMixin:
    """Adds string primary key and created/updated timestamps."""
    id = Column(String(32), primary_key=True, default=new_id)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        """Column values as a JSON-friendly dict."""
        out = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif hasattr(value, "value"):
                value = value.value
            out[column.key] = value
        return out


def to_naive_utc(value: datetime) -> datetime:
    """Stored datetimes are naive UTC; aware values are converted first."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
