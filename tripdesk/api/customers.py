"""
Sharing itineraries with the customer of an enquiry, and the feedback they send back.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import CustomerFeedback, Enquiry, Itinerary, SentItinerary, User
from ..schemas.customer import FeedbackCreate, FeedbackUpdate, SendToCustomer
from ..services import email
from .deps import agency_owner_id, ensure_agency, find_agency_form, get_current_user, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/share-customer", tags=["customers"])


def _enquiry_for(db: Session, enquiry_id: str, user: User) -> Enquiry:
    enquiry = get_or_404(db, Enquiry, enquiry_id, "Enquiry")
    ensure_agency(enquiry, user)
    return enquiry


def _itinerary_row(itinerary: Itinerary, enquiry: Enquiry) -> dict:
    return {
        "id": itinerary.id,
        "date_generated": itinerary.created_at.strftime("%d . %m . %Y"),
        "pdf_status": "available" if itinerary.pdf_file_id else "missing",
        "pdf_url": f"/api/files/{itinerary.pdf_file_id}" if itinerary.pdf_file_id else None,
        "status": itinerary.status or "draft",
        "customer_name": enquiry.name,
        "destinations": itinerary.destinations or enquiry.locations or "Not specified",
        "start_date": itinerary.start_date,
        "end_date": itinerary.end_date,
        "budget": itinerary.budget,
        "currency": itinerary.currency,
    }


@router.get("")
async def customer_dashboard(
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    itinerary_id: Optional[str] = Query(None, alias="itineraryId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Everything shared with one customer: their itineraries, feedback and
    the history of itineraries sent to them.

    With ``itineraryId`` the lists are narrowed to that itinerary.
    """
    if itinerary_id and not enquiry_id:
        enquiry_id = get_or_404(db, Itinerary, itinerary_id, "Itinerary").enquiry_id
    if not enquiry_id:
        raise HTTPException(status_code=400, detail="Enquiry ID is required")
    enquiry = _enquiry_for(db, enquiry_id, user)

    itineraries = select(Itinerary).where(Itinerary.enquiry_id == enquiry.id)
    feedbacks = select(CustomerFeedback).where(CustomerFeedback.enquiry_id == enquiry.id)
    sent = select(SentItinerary).where(SentItinerary.enquiry_id == enquiry.id)
    if itinerary_id:
        itineraries = itineraries.where(Itinerary.id == itinerary_id)
        feedbacks = feedbacks.where(CustomerFeedback.itinerary_id == itinerary_id)
        sent = sent.where(SentItinerary.itinerary_id == itinerary_id)

    return {
        "customer": {
            "id": enquiry.id,
            "name": enquiry.name,
            "email": enquiry.email,
            "phone": enquiry.phone,
            "whatsapp_number": enquiry.phone,
        },
        "itineraries": [
            _itinerary_row(i, enquiry)
            for i in db.scalars(itineraries.order_by(Itinerary.created_at.desc())).all()
        ],
        "feedbacks": [f.to_dict() for f in db.scalars(feedbacks.order_by(CustomerFeedback.created_at.desc())).all()],
        "sent_itineraries": [s.to_dict() for s in db.scalars(sent.order_by(SentItinerary.sent_date.desc())).all()],
    }


@router.post("", status_code=201)
async def send_to_customer(body: SendToCustomer, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Record an itinerary sent to the customer; the email channel also mails it."""
    enquiry = _enquiry_for(db, body.enquiry_id, user)
    itinerary = None
    if body.itinerary_id:
        itinerary = get_or_404(db, Itinerary, body.itinerary_id, "Itinerary")
        if itinerary.enquiry_id != enquiry.id:
            raise HTTPException(status_code=400, detail="Itinerary does not belong to this enquiry")

    to_email = body.email or enquiry.email
    if body.type == "email" and not to_email:
        raise HTTPException(status_code=400, detail="Customer email is required")

    record = SentItinerary(
        enquiry_id=enquiry.id,
        itinerary_id=body.itinerary_id,
        customer_name=body.customer_name or enquiry.name or "Unknown Customer",
        email=to_email,
        whatsapp_number=body.whatsapp_number or enquiry.phone,
        notes=body.notes,
        whatsapp_sent=body.type == "whatsapp",
        created_by=user.id,
    )
    if body.type == "email":
        agency = find_agency_form(db, agency_owner_id(user))
        agency_name = agency.name if agency else (user.company_name or user.name)
        record.email_sent, _ = await run_in_threadpool(
            email.send_customer_itinerary, to_email, record.customer_name, itinerary, agency_name, body.notes
        )

    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(f"Itinerary {body.itinerary_id} sent to customer of enquiry {enquiry.id} by {body.type}")
    return {"success": True, "message": "Itinerary sent successfully", "sent_itinerary": record.to_dict()}


@router.post("/feedback", status_code=201)
async def add_feedback(body: FeedbackCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    enquiry = _enquiry_for(db, body.enquiry_id, user)
    feedback = CustomerFeedback(**body.model_dump(exclude={"enquiry_id"}), enquiry_id=enquiry.id)
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    return {"success": True, "feedback": feedback.to_dict()}


@router.put("")
async def update_feedback(body: FeedbackUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    feedback = get_or_404(db, CustomerFeedback, body.feedback_id, "Feedback")
    _enquiry_for(db, feedback.enquiry_id, user)

    for key, value in body.model_dump(exclude={"feedback_id"}, exclude_none=True).items():
        if value:
            setattr(feedback, key, value)
    db.commit()
    db.refresh(feedback)
    return {"success": True, "message": "Feedback updated successfully", "feedback": feedback.to_dict()}


@router.delete("")
async def delete_feedback(
    feedback_id: str = Query(..., alias="feedbackId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    feedback = get_or_404(db, CustomerFeedback, feedback_id, "Feedback")
    _enquiry_for(db, feedback.enquiry_id, user)
    db.delete(feedback)
    db.commit()
    return {"success": True, "message": "Feedback deleted successfully"}
