"""
Customer and DMC payments, with receipt upload and invoice PDFs.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import AgencyPaymentMethod, Dmc, Enquiry, Payment, PaymentParty, User
from ..models.base import to_naive_utc
from ..services import email, storage
from ..services.payments import build_invoice, normalize_payment_status, pay_to_details, remaining_balance
from ..services.pdf import InvoiceFormatError, render_invoice_pdf
from .deps import agency_owner_id, ensure_agency, find_agency_form, get_current_user, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["payments"])

DEFAULT_CHANNEL = "Bank transfer ( manual entry )"


def _parse_payment_date(value: Optional[str]) -> datetime:
    if not value:
        return datetime.utcnow()
    try:
        return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid payment date")


async def _record_payment(
    db: Session,
    user: User,
    party: PaymentParty,
    enquiry: Enquiry,
    dmc: Optional[Dmc],
    total_cost: float,
    amount_paid: float,
    fields: dict,
    receipt: Optional[UploadFile],
) -> Payment:
    payment = Payment(
        party=party,
        enquiry_id=enquiry.id,
        dmc_id=dmc.id if dmc else None,
        total_cost=total_cost,
        amount_paid=amount_paid,
        remaining_balance=remaining_balance(total_cost, amount_paid),
        payment_status=normalize_payment_status(fields.pop("payment_status", None)),
        payment_date=_parse_payment_date(fields.pop("payment_date", None)),
        payment_channel=fields.pop("payment_channel", None) or DEFAULT_CHANNEL,
        currency=fields.pop("currency", None) or enquiry.currency or "USD",
        customer_name=fields.pop("customer_name", None) or enquiry.name,
        created_by=user.id,
        **fields,
    )

    folder = "customer-payments" if party == PaymentParty.CUSTOMER else "dmc-payments"
    stored = await storage.save_upload(db, receipt, folder, user.id)
    if stored is not None:
        payment.receipt_file_id = stored.id

    pay_to = None
    if party == PaymentParty.CUSTOMER:
        bill_to = {"name": enquiry.name, "email": enquiry.email, "phone": enquiry.phone}
        methods = db.scalars(
            select(AgencyPaymentMethod).where(
                AgencyPaymentMethod.agency_id == enquiry.agency_id, AgencyPaymentMethod.is_active.is_(True)
            )
        ).all()
        pay_to = pay_to_details(methods)
    else:
        bill_to = {"name": dmc.name, "email": dmc.email, "phone": dmc.phone}
    payment.invoice = build_invoice(payment, bill_to, pay_to)

    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(f"{party.value} payment {payment.id}: {payment.amount_paid} of {payment.total_cost} {payment.currency}")
    return payment


def _invoice_response(db: Session, user: User, payment_id: str, party: PaymentParty) -> Response:
    payment = db.get(Payment, payment_id)
    if payment is None or payment.party != party:
        raise HTTPException(status_code=404, detail="Payment not found")
    enquiry = db.get(Enquiry, payment.enquiry_id)
    if enquiry is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    ensure_agency(enquiry, user)
    if not payment.invoice:
        raise HTTPException(status_code=404, detail="Invoice data not found for this payment")

    agency = find_agency_form(db, enquiry.agency_id)
    title = "PAYMENT INVOICE" if party == PaymentParty.CUSTOMER else "DMC PAYMENT INVOICE"
    try:
        pdf = render_invoice_pdf(payment.invoice, agency.name if agency else "Agency", title)
    except InvoiceFormatError as e:
        logger.error(f"Invoice snapshot for payment {payment.id} is malformed: {e}")
        raise HTTPException(status_code=500, detail="Invalid invoice data format")

    filename = f"invoice-{payment.id[:8]}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _list(db: Session, user: User, party: PaymentParty, enquiry_id: Optional[str], dmc_id: Optional[str] = None) -> dict:
    query = select(Payment).join(Enquiry, Enquiry.id == Payment.enquiry_id).where(
        Payment.party == party, Enquiry.agency_id == agency_owner_id(user)
    )
    if enquiry_id:
        query = query.where(Payment.enquiry_id == enquiry_id)
    if dmc_id:
        query = query.where(Payment.dmc_id == dmc_id)
    payments = db.scalars(query.order_by(Payment.payment_date.desc())).all()
    return {"payments": [p.to_dict() for p in payments]}


@router.get("/customer-payment")
async def list_customer_payments(
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _list(db, user, PaymentParty.CUSTOMER, enquiry_id)


@router.post("/customer-payment", status_code=201)
async def create_customer_payment(
    background_tasks: BackgroundTasks,
    enquiry_id: str = Form(..., alias="enquiryId"),
    total_cost: float = Form(..., alias="totalCost", ge=0),
    amount_paid: float = Form(..., alias="amountPaid", ge=0),
    payment_status: Optional[str] = Form(None, alias="paymentStatus"),
    payment_date: Optional[str] = Form(None, alias="paymentDate"),
    payment_channel: Optional[str] = Form(None, alias="paymentChannel"),
    transaction_id: Optional[str] = Form(None, alias="transactionId"),
    selected_bank: Optional[str] = Form(None, alias="selectedBank"),
    upi_id: Optional[str] = Form(None, alias="upiId"),
    currency: Optional[str] = Form(None),
    customer_name: Optional[str] = Form(None, alias="customerName"),
    itinerary_reference: Optional[str] = Form(None, alias="itineraryReference"),
    receipt: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    enquiry = get_or_404(db, Enquiry, enquiry_id, "Enquiry")
    ensure_agency(enquiry, user)
    fields = {
        "payment_status": payment_status,
        "payment_date": payment_date,
        "payment_channel": payment_channel,
        "transaction_id": transaction_id,
        "selected_bank": selected_bank,
        "upi_id": upi_id,
        "currency": currency,
        "customer_name": customer_name,
        "itinerary_reference": itinerary_reference,
    }
    payment = await _record_payment(
        db, user, PaymentParty.CUSTOMER, enquiry, None, total_cost, amount_paid, fields, receipt
    )
    background_tasks.add_task(email.send_payment_confirmation, enquiry.email, payment)
    return {"payment": payment.to_dict()}


@router.get("/customer-payment/invoice/{payment_id}")
async def customer_invoice(payment_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _invoice_response(db, user, payment_id, PaymentParty.CUSTOMER)


@router.get("/dmc-payment")
async def list_dmc_payments(
    enquiry_id: Optional[str] = Query(None, alias="enquiryId"),
    dmc_id: Optional[str] = Query(None, alias="dmcId"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _list(db, user, PaymentParty.DMC, enquiry_id, dmc_id)


@router.post("/dmc-payment", status_code=201)
async def create_dmc_payment(
    background_tasks: BackgroundTasks,
    enquiry_id: str = Form(..., alias="enquiryId"),
    dmc_id: str = Form(..., alias="dmcId"),
    total_cost: float = Form(..., alias="totalCost", ge=0),
    amount_paid: float = Form(..., alias="amountPaid", ge=0),
    payment_status: Optional[str] = Form(None, alias="paymentStatus"),
    payment_date: Optional[str] = Form(None, alias="paymentDate"),
    payment_channel: Optional[str] = Form(None, alias="paymentChannel"),
    transaction_id: Optional[str] = Form(None, alias="transactionId"),
    selected_bank: Optional[str] = Form(None, alias="selectedBank"),
    upi_id: Optional[str] = Form(None, alias="upiId"),
    currency: Optional[str] = Form(None),
    itinerary_reference: Optional[str] = Form(None, alias="itineraryReference"),
    receipt: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    enquiry = get_or_404(db, Enquiry, enquiry_id, "Enquiry")
    ensure_agency(enquiry, user)
    dmc = get_or_404(db, Dmc, dmc_id, "DMC")
    ensure_agency(dmc, user)
    fields = {
        "payment_status": payment_status,
        "payment_date": payment_date,
        "payment_channel": payment_channel,
        "transaction_id": transaction_id,
        "selected_bank": selected_bank,
        "upi_id": upi_id,
        "currency": currency,
        "itinerary_reference": itinerary_reference,
    }
    payment = await _record_payment(
        db, user, PaymentParty.DMC, enquiry, dmc, total_cost, amount_paid, fields, receipt
    )
    background_tasks.add_task(email.send_payment_confirmation, dmc.email, payment)
    return {"payment": payment.to_dict()}


@router.get("/dmc-payment/invoice/{payment_id}")
async def dmc_invoice(payment_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _invoice_response(db, user, payment_id, PaymentParty.DMC)
