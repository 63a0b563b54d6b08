"""
Booking progress, feedback and reminders for a confirmed itinerary.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import BookingFeedback, BookingProgress, BookingReminder, Itinerary, User
from ..schemas.booking import (
    BookingFeedbackCreate,
    BookingProgressCreate,
    BookingProgressUpdate,
    BookingReminderCreate,
)
from .deps import ensure_owner, get_current_user, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["booking"])


def _itinerary(db: Session, itinerary_id: str, user: User) -> Itinerary:
    itinerary = get_or_404(db, Itinerary, itinerary_id, "Itinerary")
    ensure_owner(itinerary, user)
    return itinerary


@router.get("/booking-progress/{itinerary_id}")
async def list_progress(itinerary_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    _itinerary(db, itinerary_id, user)
    rows = db.scalars(
        select(BookingProgress).where(BookingProgress.itinerary_id == itinerary_id).order_by(BookingProgress.date)
    ).all()
    return {"progress": [r.to_dict() for r in rows]}


@router.post("/booking-progress/{itinerary_id}", status_code=201)
async def add_progress(
    itinerary_id: str,
    body: BookingProgressCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    itinerary = _itinerary(db, itinerary_id, user)
    row = BookingProgress(
        itinerary_id=itinerary.id,
        enquiry_id=body.enquiry_id or itinerary.enquiry_id,
        date=body.date,
        service=body.service,
        status=body.status,
        dmc_notes=body.dmc_notes,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(f"Booking progress {row.id} ({row.status.value}) on itinerary {itinerary_id}")
    return {"progress": row.to_dict()}


@router.put("/booking-progress/{itinerary_id}/{progress_id}")
async def update_progress(
    itinerary_id: str,
    progress_id: str,
    body: BookingProgressUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _itinerary(db, itinerary_id, user)
    row = get_or_404(db, BookingProgress, progress_id, "Booking progress")
    if row.itinerary_id != itinerary_id:
        raise HTTPException(status_code=404, detail="Booking progress not found")

    for key, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return {"progress": row.to_dict()}


@router.get("/booking-feedback/{itinerary_id}")
async def list_feedback(itinerary_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    _itinerary(db, itinerary_id, user)
    rows = db.scalars(
        select(BookingFeedback)
        .where(BookingFeedback.itinerary_id == itinerary_id)
        .order_by(BookingFeedback.created_at.desc())
    ).all()
    return {"feedback": [r.to_dict() for r in rows]}


@router.post("/booking-feedback/{itinerary_id}", status_code=201)
async def add_feedback(
    itinerary_id: str,
    body: BookingFeedbackCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    itinerary = _itinerary(db, itinerary_id, user)
    row = BookingFeedback(
        itinerary_id=itinerary.id,
        enquiry_id=body.enquiry_id or itinerary.enquiry_id,
        note=body.note,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return {"feedback": row.to_dict()}


@router.get("/booking-reminder/{itinerary_id}")
async def list_reminders(
    itinerary_id: str,
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    _itinerary(db, itinerary_id, user)
    query = select(BookingReminder).where(BookingReminder.itinerary_id == itinerary_id)
    if enquiry_id:
        query = query.where(BookingReminder.enquiry_id == enquiry_id)
    rows = db.scalars(query.order_by(BookingReminder.date)).all()
    return {"reminders": [r.to_dict() for r in rows]}


@router.post("/booking-reminder/{itinerary_id}", status_code=201)
async def add_reminder(
    itinerary_id: str,
    body: BookingReminderCreate,
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    itinerary = _itinerary(db, itinerary_id, user)
    row = BookingReminder(
        itinerary_id=itinerary.id,
        enquiry_id=enquiry_id or body.enquiry_id or itinerary.enquiry_id,
        date=body.date,
        note=body.note,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(f"Reminder {row.id} set for {row.date.isoformat()} on itinerary {itinerary_id}")
    return {"reminder": row.to_dict()}
