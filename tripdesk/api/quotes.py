import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Enquiry, Quote, User
from ..schemas.records import QuoteCreate, QuoteUpdate
from .deps import agency_owner_id, ensure_agency, get_current_user, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


def _quote_enquiry(db: Session, quote: Quote, user: User) -> Enquiry:
    enquiry = db.get(Enquiry, quote.enquiry_id)
    if enquiry is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    ensure_agency(enquiry, user)
    return enquiry


@router.get("")
async def list_quotes(
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    dmc_id: Optional[str] = Query(None, alias="dmcId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = select(Quote).join(Enquiry, Enquiry.id == Quote.enquiry_id).where(
        Enquiry.agency_id == agency_owner_id(user)
    )
    if enquiry_id:
        query = query.where(Quote.enquiry_id == enquiry_id)
    if dmc_id:
        query = query.where(Quote.dmc_id == dmc_id)
    quotes = db.scalars(query.order_by(Quote.created_at.desc())).all()
    return {"quotes": [q.to_dict() for q in quotes]}


@router.post("", status_code=201)
async def create_quote(body: QuoteCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """One quote per DMC per enquiry; a second one is refused with the first."""
    ensure_agency(get_or_404(db, Enquiry, body.enquiry_id, "Enquiry"), user)

    existing = db.scalars(
        select(Quote).where(Quote.enquiry_id == body.enquiry_id, Quote.dmc_id == body.dmc_id)
    ).first()
    if existing is not None:
        return JSONResponse(
            status_code=400,
            content={"detail": "Quote already exists for this DMC and enquiry", "quote": existing.to_dict()},
        )

    quote = Quote(**body.model_dump(exclude_none=True))
    db.add(quote)
    db.commit()
    db.refresh(quote)
    logger.info(f"Quote {quote.id} from DMC {quote.dmc_id} for enquiry {quote.enquiry_id}")
    return {"quote": quote.to_dict()}


@router.put("")
async def update_quote(body: QuoteUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    quote = get_or_404(db, Quote, body.id, "Quote")
    _quote_enquiry(db, quote, user)
    for key, value in body.model_dump(exclude={"id"}, exclude_unset=True, exclude_none=True).items():
        setattr(quote, key, value.upper() if key == "status" else value)
    db.commit()
    db.refresh(quote)
    return {"quote": quote.to_dict()}
