"""
Agency payment methods: bank accounts, UPI, payment links and QR codes.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import AgencyPaymentMethod, PaymentMethodType, User
from ..schemas.payment import parse_bank_details
from ..services import storage
from ..services.payments import payment_method_summary
from .deps import agency_owner_id, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["payment-methods"])


def _active_methods(db: Session, agency_id: str, kind: Optional[PaymentMethodType] = None):
    query = select(AgencyPaymentMethod).where(
        AgencyPaymentMethod.agency_id == agency_id, AgencyPaymentMethod.is_active.is_(True)
    )
    if kind is not None:
        query = query.where(AgencyPaymentMethod.type == kind)
    return db.scalars(
        query.order_by(AgencyPaymentMethod.updated_at.desc(), AgencyPaymentMethod.created_at.desc())
    ).all()


async def _save_methods(
    db: Session,
    user: User,
    replace: bool,
    bank: Optional[str],
    upi_provider: Optional[str],
    upi_id: Optional[str],
    payment_link: Optional[str],
    qr_code: Optional[UploadFile],
) -> dict:
    try:
        banks = parse_bank_details(bank)
    except (ValueError, ValidationError):
        raise HTTPException(status_code=400, detail="Invalid bank data format")

    agency_id = agency_owner_id(user)
    if replace:
        for method in _active_methods(db, agency_id):
            method.is_active = False

    methods = []
    for details in banks:
        methods.append(AgencyPaymentMethod(
            type=PaymentMethodType.BANK_ACCOUNT,
            name=details.bank_name,
            identifier=details.account_number,
            bank=details.model_dump(exclude_none=True),
        ))
    if upi_id and upi_provider:
        methods.append(AgencyPaymentMethod(
            type=PaymentMethodType.UPI,
            name=f"{upi_provider} - {upi_id}",
            upi_provider=upi_provider,
            identifier=upi_id,
        ))
    if payment_link:
        methods.append(AgencyPaymentMethod(
            type=PaymentMethodType.PAYMENT_GATEWAY,
            name="Payment Gateway Link",
            identifier=payment_link,
            payment_link=payment_link,
        ))
    qr_file = await storage.save_upload(db, qr_code, "payment-qr", user.id)
    if qr_file is not None:
        methods.append(AgencyPaymentMethod(
            type=PaymentMethodType.QR_CODE,
            name=f"QR Code - {qr_file.name}",
            identifier=qr_file.name,
            qr_file_id=qr_file.id,
        ))

    for method in methods:
        method.agency_id = agency_id
        method.is_active = True
        db.add(method)
    db.commit()
    logger.info(f"Agency {agency_id} {'replaced' if replace else 'added'} {len(methods)} payment methods")
    return {
        "success": True,
        "message": f"Payment methods {'updated' if replace else 'saved'} successfully",
        "paymentMethod": payment_method_summary(_active_methods(db, agency_id)),
    }


@router.get("/auth/add-bank-details")
async def get_bank_details(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"paymentMethod": payment_method_summary(_active_methods(db, agency_owner_id(user)))}


@router.post("/auth/add-bank-details", status_code=201)
async def add_bank_details(
    bank: Optional[str] = Form(None),
    upi_provider: Optional[str] = Form(None, alias="upiProvider"),
    upi_id: Optional[str] = Form(None, alias="upiId"),
    payment_link: Optional[str] = Form(None, alias="paymentLink"),
    qr_code: Optional[UploadFile] = File(None, alias="qrCode"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add payment methods alongside the ones already active."""
    return await _save_methods(db, user, False, bank, upi_provider, upi_id, payment_link, qr_code)


@router.put("/auth/add-bank-details")
async def replace_bank_details(
    bank: Optional[str] = Form(None),
    upi_provider: Optional[str] = Form(None, alias="upiProvider"),
    upi_id: Optional[str] = Form(None, alias="upiId"),
    payment_link: Optional[str] = Form(None, alias="paymentLink"),
    qr_code: Optional[UploadFile] = File(None, alias="qrCode"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Deactivate every current payment method and store the posted set instead."""
    return await _save_methods(db, user, True, bank, upi_provider, upi_id, payment_link, qr_code)


@router.get("/agency-payment-method")
async def list_payment_methods(
    kind: Optional[PaymentMethodType] = Query(None, alias="type"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    methods = _active_methods(db, agency_owner_id(user), kind)
    return {"paymentMethods": [m.to_dict() for m in methods]}
