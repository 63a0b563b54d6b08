from sqlalchemy import Column, Integer, String

from ..database import Base
from .base import TimestampMixin


class StoredFile(TimestampMixin, Base):
    """An uploaded or generated file kept by the storage service."""
    __tablename__ = "files"

    name = Column(String(255), nullable=False)
    content_type = Column(String(128), nullable=False, default="application/octet-stream")
    size = Column(Integer, nullable=False, default=0)
    storage_key = Column(String(512), nullable=False, unique=True)
    url = Column(String(512), nullable=False)
    uploaded_by = Column(String(32), nullable=True)
