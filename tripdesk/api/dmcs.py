"""
DMC directory and sharing itineraries with DMCs for quotes.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Dmc, Itinerary, SharedDmc, SharedDmcItem, SharedDmcStatus, User
from ..schemas.dmc import DmcCreate, ShareDmcCreate, ShareDmcUpdate
from ..services import email
from .deps import agency_owner_id, ensure_owner, find_agency_form, get_current_user, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dmc"])


def _share_dict(db: Session, share: SharedDmc) -> dict:
    items = db.scalars(select(SharedDmcItem).where(SharedDmcItem.shared_dmc_id == share.id)).all()
    data = share.to_dict()
    data["items"] = [item.to_dict() for item in items]
    return data


@router.get("/auth/agency-add-dmc")
async def list_dmcs(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    dmcs = db.scalars(
        select(Dmc).where(Dmc.agency_id == agency_owner_id(user)).order_by(Dmc.name)
    ).all()
    return {"dmcs": [d.to_dict() for d in dmcs]}


@router.post("/auth/agency-add-dmc", status_code=201)
async def add_dmc(body: DmcCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    dmc = Dmc(
        name=body.name,
        email=body.email.lower(),
        contact_person=body.contact_person,
        phone=body.phone,
        destinations=body.destinations,
        agency_id=agency_owner_id(user),
        created_by=user.id,
    )
    db.add(dmc)
    db.commit()
    db.refresh(dmc)
    logger.info(f"DMC {dmc.id} added by {user.id}")
    return {"dmc": dmc.to_dict()}


@router.get("/share-dmc")
async def list_shares(
    itinerary_id: Optional[str] = Query(None, alias="itineraryId"),
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(SharedDmc).where(SharedDmc.created_by == user.id)
    if itinerary_id:
        query = query.where(SharedDmc.itinerary_id == itinerary_id)
    if enquiry_id:
        query = query.where(SharedDmc.enquiry_id == enquiry_id)
    shares = db.scalars(query.order_by(SharedDmc.created_at.desc())).all()
    return {"shares": [_share_dict(db, s) for s in shares]}


@router.post("/share-dmc", status_code=201)
async def share_with_dmcs(body: ShareDmcCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Send an itinerary to one or more DMCs and ask them to quote."""
    itinerary = get_or_404(db, Itinerary, body.itinerary_id, "Itinerary")
    ensure_owner(itinerary, user)

    dmc_ids = list(dict.fromkeys(body.dmc_ids))
    dmcs = db.scalars(
        select(Dmc).where(Dmc.id.in_(dmc_ids), Dmc.agency_id == agency_owner_id(user))
    ).all()
    found = {d.id for d in dmcs}
    unknown = [d for d in dmc_ids if d not in found]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown DMC ids: {', '.join(unknown)}")

    enquiry_id = body.enquiry_id or itinerary.enquiry_id
    if not enquiry_id:
        raise HTTPException(status_code=400, detail="Enquiry ID is required")

    share = SharedDmc(itinerary_id=itinerary.id, enquiry_id=enquiry_id, created_by=user.id)
    db.add(share)
    db.flush()

    agency = find_agency_form(db, agency_owner_id(user))
    agency_name = agency.name if agency else (user.company_name or user.name)
    for dmc in dmcs:
        sent, _ = await run_in_threadpool(email.send_dmc_share, dmc, itinerary, agency_name)
        db.add(SharedDmcItem(shared_dmc_id=share.id, dmc_id=dmc.id, status=SharedDmcStatus.PENDING, email_sent=sent))
    db.commit()
    logger.info(f"Itinerary {itinerary.id} shared with {len(dmcs)} DMCs")
    return {"share": _share_dict(db, share)}


@router.put("/share-dmc")
async def update_share(body: ShareDmcUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    share = get_or_404(db, SharedDmc, body.shared_dmc_id, "Shared DMC")
    if share.created_by != user.id:
        raise HTTPException(status_code=403, detail="Forbidden")

    item = db.scalars(
        select(SharedDmcItem).where(SharedDmcItem.shared_dmc_id == share.id, SharedDmcItem.dmc_id == body.dmc_id)
    ).first()
    if item is None:
        raise HTTPException(status_code=404, detail="DMC is not part of this share")

    item.status = body.status
    if body.status == SharedDmcStatus.ACCEPTED:
        share.status = "DMC_SELECTED"
    db.commit()
    return {"share": _share_dict(db, share)}


@router.delete("/share-dmc")
async def delete_share(
    share_id: str = Query(..., alias="id"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    share = get_or_404(db, SharedDmc, share_id, "Shared DMC")
    if share.created_by != user.id:
        raise HTTPException(status_code=403, detail="Forbidden")
    for item in db.scalars(select(SharedDmcItem).where(SharedDmcItem.shared_dmc_id == share.id)).all():
        db.delete(item)
    db.delete(share)
    db.commit()
    return {"message": "Share deleted successfully"}
