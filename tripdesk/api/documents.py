"""
Itinerary PDFs and stored file downloads.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from pydantic import Field
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Enquiry, Itinerary, StoredFile, User
from ..schemas.base import ApiModel
from ..services import storage
from ..services.pdf import render_itinerary_pdf
from .deps import ensure_owner, get_current_user, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["documents"])


class GeneratePdfRequest(ApiModel):
    itinerary_id: str = Field(..., min_length=1)


@router.post("/generate-pdf")
async def generate_pdf(body: GeneratePdfRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Render the itinerary PDF and link it; regenerating replaces the old file."""
    itinerary = get_or_404(db, Itinerary, body.itinerary_id, "Itinerary")
    ensure_owner(itinerary, user)

    enquiry = db.get(Enquiry, itinerary.enquiry_id) if itinerary.enquiry_id else None
    pdf = render_itinerary_pdf(itinerary, enquiry.name if enquiry else None)

    previous = db.get(StoredFile, itinerary.pdf_file_id) if itinerary.pdf_file_id else None
    stored = storage.save_bytes(
        db, pdf, f"itinerary-{itinerary.id[:8]}.pdf", "application/pdf", "itinerary-pdfs", user.id
    )
    itinerary.pdf_file_id = stored.id
    if previous is not None:
        storage.delete_file(db, previous)
    db.commit()
    logger.info(f"PDF {stored.id} generated for itinerary {itinerary.id}")
    return {"file_id": stored.id, "url": stored.url, "size": stored.size}


@router.get("/files/{file_id}")
async def download_file(file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    stored = get_or_404(db, StoredFile, file_id, "File")
    path = storage.path_for(stored)
    if not path.exists():
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(str(path), media_type=stored.content_type, filename=stored.name)
