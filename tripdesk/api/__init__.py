"""API routes for TripDesk."""
from fastapi import APIRouter

from . import (
    agency,
    auth,
    booking,
    customers,
    dmcs,
    documents,
    enquiries,
    itineraries,
    pages,
    payment_methods,
    payments,
    quotes,
    staff,
)

router = APIRouter()
for module in (
    auth, staff, agency, enquiries, itineraries, dmcs, quotes, customers,
    payment_methods, payments, booking, documents, pages,
):
    router.include_router(module.router)

__all__ = ["router"]
