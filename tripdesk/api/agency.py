"""
Agency registration form and its approval workflow.
"""
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, Response
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models import AgencyForm, AgencyStatus, Role, User
from ..schemas.agency import AgencyFormData, form_fields, missing_required
from ..services import email, storage
from ..services.approval import ApprovalAction, access_status, apply_action, status_after_resubmission
from ..services.security import verify_agency_action_token
from .deps import agency_owner_id, find_agency_form, get_current_user, get_optional_user, is_admin, require_roles

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["agency"])


def _parse_form(fields: dict) -> AgencyFormData:
    try:
        return AgencyFormData.model_validate(fields)
    except ValidationError as e:
        bad = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise HTTPException(status_code=400, detail=f"Invalid values for: {bad}")


async def _store_uploads(db: Session, form, agency: AgencyForm, user: User) -> None:
    logo = await storage.save_upload(db, form.get("logo"), "logos", user.id)
    if logo is not None:
        agency.logo_path = logo.url
    license_file = await storage.save_upload(db, form.get("businessLicense"), "licenses", user.id)
    if license_file is not None:
        agency.business_license_path = license_file.url


def _apply_fields(agency: AgencyForm, data: AgencyFormData) -> None:
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(agency, key, value)


@router.get("/agencyform")
async def get_agency_form(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's agency form, if one was submitted."""
    agency = find_agency_form(db, agency_owner_id(user))
    return {"exists": agency is not None, "data": agency.to_dict() if agency else None}


@router.post("/agencyform")
async def submit_agency_form(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    user: User = Depends(require_roles(Role.AGENCY_ADMIN)),
    db: Session = Depends(get_db),
):
    """
    Submit the agency form.

    The first submission creates the form in PENDING. Resubmitting a form in
    MODIFY (or still PENDING) updates it in place and puts it back in the
    review queue; an ACTIVE or REJECTED form cannot be resubmitted (409).
    """
    form = await request.form()
    data = _parse_form(form_fields(form))

    missing = missing_required(data)
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required fields: {', '.join(missing)}")

    agency = find_agency_form(db, user.id)
    if agency is None:
        agency = AgencyForm(created_by=user.id, status=AgencyStatus.PENDING)
        db.add(agency)
        response.status_code = 201
    else:
        try:
            agency.status = status_after_resubmission(agency.status)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))

    _apply_fields(agency, data)
    await _store_uploads(db, form, agency, user)
    user.company_name = agency.name
    user.profile_completed = True
    db.commit()
    db.refresh(agency)
    logger.info(f"Agency form {agency.id} submitted by {user.id}")

    background_tasks.add_task(email.send_approval_request, agency)
    return {"success": True, "message": "Agency form submitted successfully", "data": agency.to_dict()}


@router.put("/agencyform")
async def update_agency_form(
    request: Request,
    background_tasks: BackgroundTasks,
    user: User = Depends(require_roles(Role.AGENCY_ADMIN)),
    db: Session = Depends(get_db),
):
    """Edit agency details without touching the approval status."""
    agency = find_agency_form(db, user.id)
    if agency is None:
        raise HTTPException(status_code=404, detail="Agency form not found")

    form = await request.form()
    data = _parse_form(form_fields(form))
    _apply_fields(agency, data)
    await _store_uploads(db, form, agency, user)
    db.commit()
    db.refresh(agency)
    logger.info(f"Agency form {agency.id} updated by {user.id}")

    background_tasks.add_task(email.send_approval_request, agency)
    return {"success": True, "message": "Agency form updated successfully", "data": agency.to_dict()}


@router.get("/agencyform/{action}")
async def transition_agency(
    action: ApprovalAction,
    background_tasks: BackgroundTasks,
    agency_id: Optional[str] = Query(None, alias="agencyId"),
    token: Optional[str] = Query(None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Admin email link: move an agency to the action's status and redirect."""
    if not agency_id:
        raise HTTPException(status_code=400, detail="Agency ID is required")

    if settings.approval_links_require_token:
        signed = bool(token) and verify_agency_action_token(token, agency_id, action.value)
        if not signed and not is_admin(user):
            raise HTTPException(status_code=403, detail="Invalid or missing approval token")

    agency = db.get(AgencyForm, agency_id)
    if agency is None:
        raise HTTPException(status_code=404, detail="Agency not found")

    transition = apply_action(agency.status, action)
    if transition.changed:
        agency.status = transition.status
        db.commit()
        logger.info(f"Agency {agency.id}: {transition.previous.value} -> {transition.status.value}")
        background_tasks.add_task(email.send_agency_status, agency)
    else:
        logger.info(f"Agency {agency.id}: {action.value} left status {agency.status.value}")

    return RedirectResponse(transition.redirect_to, status_code=302)


@router.get("/agency/check-form-submitted")
async def check_form_submitted(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    agency = find_agency_form(db, agency_owner_id(user))
    return {
        "submitted": agency is not None,
        "status": agency.status.value if agency else None,
    }


@router.get("/agency/me")
async def my_agency(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    agency = find_agency_form(db, agency_owner_id(user))
    if agency is None:
        raise HTTPException(status_code=404, detail="Agency not found")
    return {"agency": agency.to_dict(), "user": user.to_dict()}


@router.get("/agency/access")
async def agency_access(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Polled by the agency dashboard to gate its UI."""
    agency = find_agency_form(db, agency_owner_id(user))
    status = agency.status if agency else None
    return {
        "access": access_status(status),
        "agency_status": status.value if status else None,
        "poll_interval_seconds": settings.agency_status_poll_seconds,
    }
