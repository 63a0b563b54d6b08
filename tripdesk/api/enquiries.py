"""
Customer enquiries (leads).
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Enquiry, User
from ..schemas.records import EnquiryCreate, EnquiryUpdate
from ..services import email
from .deps import agency_owner_id, ensure_owner, get_current_user, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/enquiries", tags=["enquiries"])


def _notify_assignee(db: Session, background_tasks: BackgroundTasks, enquiry: Enquiry) -> None:
    if not enquiry.assigned_staff:
        return
    staff = db.get(User, enquiry.assigned_staff)
    if staff is not None:
        background_tasks.add_task(email.send_enquiry_assigned, staff, enquiry)


@router.get("")
async def list_enquiries(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    enquiries = db.scalars(
        select(Enquiry).where(Enquiry.user_id == user.id).order_by(Enquiry.created_at.desc())
    ).all()
    return {"enquiries": [e.to_dict() for e in enquiries]}


@router.post("", status_code=201)
async def create_enquiry(
    body: EnquiryCreate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    enquiry = Enquiry(**body.model_dump(exclude_none=True), user_id=user.id, agency_id=agency_owner_id(user))
    db.add(enquiry)
    db.commit()
    db.refresh(enquiry)
    logger.info(f"Enquiry {enquiry.id} created by {user.id}")

    _notify_assignee(db, background_tasks, enquiry)
    return {"enquiry": enquiry.to_dict()}


@router.get("/{enquiry_id}")
async def get_enquiry(enquiry_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    enquiry = get_or_404(db, Enquiry, enquiry_id, "Enquiry")
    ensure_owner(enquiry, user)
    return {"enquiry": enquiry.to_dict()}


@router.put("/{enquiry_id}")
async def update_enquiry(
    enquiry_id: str,
    body: EnquiryUpdate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    enquiry = get_or_404(db, Enquiry, enquiry_id, "Enquiry")
    ensure_owner(enquiry, user)

    previous_assignee = enquiry.assigned_staff
    for key, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(enquiry, key, value)
    db.commit()
    db.refresh(enquiry)

    if enquiry.assigned_staff != previous_assignee:
        _notify_assignee(db, background_tasks, enquiry)
    return {"enquiry": enquiry.to_dict()}


@router.delete("/{enquiry_id}")
async def delete_enquiry(enquiry_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    enquiry = get_or_404(db, Enquiry, enquiry_id, "Enquiry")
    ensure_owner(enquiry, user)
    db.delete(enquiry)
    db.commit()
    logger.info(f"Enquiry {enquiry_id} deleted by {user.id}")
    return {"message": "Enquiry deleted successfully"}
