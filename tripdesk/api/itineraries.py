"""
Itineraries: AI generation on create, then plain CRUD.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Enquiry, Itinerary, StoredFile, User
from ..schemas.records import ItineraryCreate, ItineraryUpdate
from ..services import storage
from ..services.itinerary_generator import TripRequest, generate_itinerary, trip_days, user_tier
from .deps import ensure_owner, get_current_user, get_or_404, role_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/itineraries", tags=["itineraries"])

# Fields passed to the generator
REQUEST_FIELDS = (
    "destinations", "start_date", "end_date", "travel_type", "adults", "children",
    "under6", "from7to12", "flights_required", "pickup_location", "drop_location",
    "currency", "budget", "activity_preferences", "hotel_preferences", "meal_preference",
    "dietary_preference", "transport_preferences", "traveling_with_pets",
    "additional_requests", "more_details", "must_see_spots",
)


@router.get("")
async def list_itineraries(
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(Itinerary).where(Itinerary.user_id == user.id)
    if enquiry_id:
        query = query.where(Itinerary.enquiry_id == enquiry_id)
    itineraries = db.scalars(query.order_by(Itinerary.created_at.desc())).all()
    return {"itineraries": [i.to_dict() for i in itineraries]}


@router.post("", status_code=201)
async def create_itinerary(body: ItineraryCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Generate and store an itinerary.

    If generation fails the caller-provided plan (or an empty one) is saved
    instead, so the request still succeeds.
    """
    try:
        trip_days(body.start_date, body.end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid travel dates: {e}")

    if body.enquiry_id:
        enquiry = get_or_404(db, Enquiry, body.enquiry_id, "Enquiry")
        ensure_owner(enquiry, user)

    values = body.model_dump(exclude_none=True)
    request = TripRequest(**{k: values[k] for k in REQUEST_FIELDS if k in values})
    tier = user_tier(role_of(user), user.user_type)

    itinerary = Itinerary(**values, user_id=user.id)
    try:
        generated = await generate_itinerary(request, tier)
    except Exception as e:
        logger.error(f"Itinerary generation failed, saving provided plan: {e}", exc_info=True)
        itinerary.daily_itinerary = body.daily_itinerary or []
        itinerary.accommodation = body.accommodation or []
        itinerary.budget_estimation = body.budget_estimation
    else:
        itinerary.daily_itinerary = generated.daily_itinerary
        itinerary.accommodation = generated.accommodation
        itinerary.budget_estimation = generated.budget_estimation
        itinerary.model_used = generated.model_used
        itinerary.generation_cost = generated.cost

    db.add(itinerary)
    db.commit()
    db.refresh(itinerary)
    logger.info(f"Itinerary {itinerary.id} saved: {len(itinerary.daily_itinerary)} days")
    return {"itinerary": itinerary.to_dict()}


@router.get("/{itinerary_id}")
async def get_itinerary(itinerary_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    itinerary = get_or_404(db, Itinerary, itinerary_id, "Itinerary")
    ensure_owner(itinerary, user)
    return {"itinerary": itinerary.to_dict()}


@router.put("/{itinerary_id}")
async def update_itinerary(
    itinerary_id: str,
    body: ItineraryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    itinerary = get_or_404(db, Itinerary, itinerary_id, "Itinerary")
    ensure_owner(itinerary, user)

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "start_date" in changes or "end_date" in changes:
        try:
            trip_days(changes.get("start_date", itinerary.start_date), changes.get("end_date", itinerary.end_date))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid travel dates: {e}")
    if changes.get("enquiry_id"):
        ensure_owner(get_or_404(db, Enquiry, changes["enquiry_id"], "Enquiry"), user)

    for key, value in changes.items():
        setattr(itinerary, key, value)
    db.commit()
    db.refresh(itinerary)
    return {"itinerary": itinerary.to_dict()}


@router.delete("/{itinerary_id}")
async def delete_itinerary(itinerary_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    itinerary = get_or_404(db, Itinerary, itinerary_id, "Itinerary")
    ensure_owner(itinerary, user)

    if itinerary.pdf_file_id:
        stored = db.get(StoredFile, itinerary.pdf_file_id)
        if stored is not None:
            storage.delete_file(db, stored)
    db.delete(itinerary)
    db.commit()
    logger.info(f"Itinerary {itinerary_id} deleted by {user.id}")
    return {"message": "Itinerary deleted successfully"}
