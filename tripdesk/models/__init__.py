"""ORM models for TripDesk."""
from .agency import AgencyForm, AgencyStatus, AgencyType, PanType
from .booking import BookingFeedback, BookingProgress, BookingReminder, BookingStatus
from .customer import CustomerFeedback, SentItinerary
from .dmc import Dmc, SharedDmc, SharedDmcItem, SharedDmcStatus
from .enquiry import Enquiry
from .file import StoredFile
from .itinerary import Itinerary
from .payment import AgencyPaymentMethod, Payment, PaymentMethodType, PaymentParty, PaymentStatus
from .quote import Quote
from .user import STAFF_ROLES, Role, User, UserStatus

__all__ = [
    "AgencyForm",
    "AgencyStatus",
    "AgencyType",
    "PanType",
    "BookingFeedback",
    "BookingProgress",
    "BookingReminder",
    "CustomerFeedback",
    "SentItinerary",
    "BookingStatus",
    "Dmc",
    "SharedDmc",
    "SharedDmcItem",
    "SharedDmcStatus",
    "Enquiry",
    "StoredFile",
    "Itinerary",
    "AgencyPaymentMethod",
    "Payment",
    "PaymentMethodType",
    "PaymentParty",
    "PaymentStatus",
    "Quote",
    "STAFF_ROLES",
    "Role",
    "User",
    "UserStatus",
]
