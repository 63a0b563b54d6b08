from enum import Enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, String
from sqlalchemy import Enum as SAEnum

from ..database import Base
from .base import TimestampMixin


class PaymentParty(str, Enum):
    """Who the payment is with."""
    CUSTOMER = "CUSTOMER"
    DMC = "DMC"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PARTIAL = "PARTIAL"
    PAID = "PAID"


class Payment(TimestampMixin, Base):
    """A customer or DMC payment against an enquiry."""
    __tablename__ = "payments"

    party = Column(SAEnum(PaymentParty, native_enum=False, length=16), nullable=False, index=True)
    enquiry_id = Column(String(32), nullable=False, index=True)
    dmc_id = Column(String(32), nullable=True, index=True)
    itinerary_reference = Column(String(64), nullable=True)
    customer_name = Column(String(255), nullable=True)
    currency = Column(String(8), nullable=False, default="USD")
    total_cost = Column(Float, nullable=False, default=0)
    amount_paid = Column(Float, nullable=False, default=0)
    remaining_balance = Column(Float, nullable=False, default=0)
    payment_date = Column(DateTime, nullable=False)
    payment_status = Column(SAEnum(PaymentStatus, native_enum=False, length=16), nullable=False, default=PaymentStatus.PENDING)
    payment_channel = Column(String(128), nullable=False, default="Bank transfer ( manual entry )")
    transaction_id = Column(String(128), nullable=True)
    selected_bank = Column(String(128), nullable=True)
    upi_id = Column(String(128), nullable=True)
    receipt_file_id = Column(String(32), nullable=True)
    invoice = Column(JSON, nullable=True)
    created_by = Column(String(32), nullable=True)


class PaymentMethodType(str, Enum):
    BANK_ACCOUNT = "BANK_ACCOUNT"
    UPI = "UPI"
    QR_CODE = "QR_CODE"
    PAYMENT_GATEWAY = "PAYMENT_GATEWAY"


class AgencyPaymentMethod(TimestampMixin, Base):
    """One way customers can pay an agency: bank account, UPI id, QR code or payment link."""
    __tablename__ = "agency_payment_methods"

    agency_id = Column(String(32), nullable=False, index=True)
    type = Column(SAEnum(PaymentMethodType, native_enum=False, length=16), nullable=False)
    name = Column(String(255), nullable=True)
    identifier = Column(String(512), nullable=True)
    upi_provider = Column(String(64), nullable=True)
    payment_link = Column(String(512), nullable=True)
    bank = Column(JSON, nullable=True)
    qr_file_id = Column(String(32), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
