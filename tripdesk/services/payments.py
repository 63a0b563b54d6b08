"""
Payment bookkeeping: status mapping, balance and the invoice snapshot.
"""
from datetime import datetime
from typing import Optional

from ..models.payment import PaymentMethodType, PaymentStatus

STATUS_MAP = {
    "partial": PaymentStatus.PARTIAL,
    "paid": PaymentStatus.PAID,
    "pending": PaymentStatus.PENDING,
}


def normalize_payment_status(value: Optional[str]) -> PaymentStatus:
    """Map 'Partial'/'Paid'/'Pending' in any case; anything else is PENDING."""
    return STATUS_MAP.get((value or "").strip().lower(), PaymentStatus.PENDING)


def remaining_balance(total_cost: float, amount_paid: float) -> float:
    return max(0.0, float(total_cost or 0) - float(amount_paid or 0))


def build_invoice(payment, bill_to: Optional[dict] = None, pay_to: Optional[dict] = None) -> dict:
    """Snapshot of a payment as it should appear on its invoice."""
    payment_date = payment.payment_date
    if isinstance(payment_date, datetime):
        payment_date = payment_date.isoformat()

    status = payment.payment_status
    invoice = {
        "total_cost": float(payment.total_cost),
        "amount_paid": float(payment.amount_paid),
        "remaining_balance": float(payment.remaining_balance),
        "payment_status": status.value if hasattr(status, "value") else status,
        "payment_channel": payment.payment_channel,
        "payment_date": payment_date,
        "currency": payment.currency,
        "transaction_id": payment.transaction_id,
        "selected_bank": payment.selected_bank,
        "upi_id": payment.upi_id,
        "customer_name": payment.customer_name,
        "itinerary_reference": payment.itinerary_reference,
    }
    if bill_to:
        invoice["bill_to"] = {k: v for k, v in bill_to.items() if v}
    if pay_to:
        invoice["pay_to"] = pay_to
    return invoice


def payment_method_summary(methods) -> dict:
    """
    Group an agency's active payment methods the way the payment page shows them.

    ``methods`` should be newest first: every bank account is listed, while
    only the newest UPI id, payment link and QR code are kept.
    """
    summary = {"bank": [], "upi_provider": "", "identifier": "", "payment_link": "", "qr_code": None}
    for method in methods:
        kind = method.type.value if hasattr(method.type, "value") else method.type
        if kind == PaymentMethodType.BANK_ACCOUNT.value:
            if method.bank:
                summary["bank"].append(dict(method.bank, id=method.id))
        elif kind == PaymentMethodType.UPI.value:
            if not summary["identifier"]:
                summary["upi_provider"] = method.upi_provider or "UPI"
                summary["identifier"] = method.identifier or ""
        elif kind == PaymentMethodType.PAYMENT_GATEWAY.value:
            summary["payment_link"] = summary["payment_link"] or method.payment_link or ""
        elif kind == PaymentMethodType.QR_CODE.value and summary["qr_code"] is None and method.qr_file_id:
            summary["qr_code"] = {"url": f"/api/files/{method.qr_file_id}", "name": method.identifier or "QR Code"}
    return summary


def pay_to_details(methods) -> Optional[dict]:
    """Where the customer can send the balance, for the invoice snapshot."""
    summary = payment_method_summary(methods)
    pay_to = {}
    banks = [{k: v for k, v in bank.items() if k != "id" and v} for bank in summary["bank"]]
    banks = [b for b in banks if b]
    if banks:
        pay_to["banks"] = banks
    if summary["identifier"]:
        pay_to["upi"] = f"{summary['upi_provider']}: {summary['identifier']}"
    if summary["payment_link"]:
        pay_to["payment_link"] = summary["payment_link"]
    return pay_to or None
