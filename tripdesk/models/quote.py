from sqlalchemy import Column, Float, String, Text

from ..database import Base
from .base import TimestampMixin


class Quote(TimestampMixin, Base):
    """A DMC's price quote for an enquiry.

    (enquiry_id, dmc_id) has no unique constraint; duplicates are only
    checked by a lookup before insert.
    """
    __tablename__ = "quotes"

    enquiry_id = Column(String(32), nullable=False, index=True)
    dmc_id = Column(String(32), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(8), nullable=True)
    comments = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="PENDING")
