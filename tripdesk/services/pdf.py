"""
PDF documents drawn with reportlab: the itinerary handout and payment invoices.
"""
import logging
from datetime import datetime
from io import BytesIO
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

BRAND = colors.HexColor("#1A4D99")

# Keys an invoice snapshot must carry, with their expected types
INVOICE_FIELDS = {
    "total_cost": (int, float),
    "amount_paid": (int, float),
    "remaining_balance": (int, float),
    "payment_status": str,
    "payment_channel": str,
    "payment_date": str,
    "currency": str,
}

BANK_LABELS = (
    ("Account Holder", "account_holder_name"),
    ("Bank", "bank_name"),
    ("Branch", "branch_name"),
    ("Account Number", "account_number"),
    ("IFSC", "ifsc_code"),
    ("Country", "bank_country"),
    ("Currency", "currency"),
    ("Notes", "notes"),
)


class InvoiceFormatError(ValueError):
    """Raised when a stored invoice snapshot lacks required fields."""


_styles = getSampleStyleSheet()
title_style = ParagraphStyle("TripTitle", parent=_styles["Title"], textColor=BRAND)
heading_style = ParagraphStyle("TripHeading", parent=_styles["Heading2"], textColor=BRAND, spaceBefore=12)
day_style = ParagraphStyle("TripDay", parent=_styles["Heading3"], spaceBefore=8)
normal_style = _styles["BodyText"]


def _p(text, style=normal_style) -> Paragraph:
    return Paragraph(escape(str(text if text is not None else "")), style)


def _table(rows: list[list], col_widths: Optional[list] = None) -> Table:
    table = Table(rows, colWidths=col_widths, hAlign="LEFT")
    table.setStyle(TableStyle([
        ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
    ]))
    return table


def _build(story: list, title: str) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
    )
    doc.build(story)
    return buffer.getvalue()


def render_itinerary_pdf(itinerary, customer_name: Optional[str] = None) -> bytes:
    """Traveller handout: summary, day-by-day plan, hotels and budget."""
    story = [
        _p(f"Trip to {itinerary.destinations}", title_style),
        _p(f"{itinerary.start_date} to {itinerary.end_date}"),
        Spacer(1, 0.4 * cm),
    ]

    summary = [
        ["Traveller", customer_name or "-"],
        ["Travel type", itinerary.travel_type or "-"],
        ["Group", f"{itinerary.adults} adults, {itinerary.children} children"],
        ["Budget", f"{itinerary.budget} {itinerary.currency}"],
    ]
    if itinerary.pickup_location:
        summary.append(["Pickup", itinerary.pickup_location])
    if itinerary.drop_location:
        summary.append(["Drop", itinerary.drop_location])
    story.append(_table([[k, _p(v)] for k, v in summary], [4 * cm, 12 * cm]))

    story.append(_p("Day by day", heading_style))
    for day in itinerary.daily_itinerary or []:
        story.append(_p(f"{day.get('date', '')}  {day.get('title', '')}", day_style))
        rows = []
        for act in day.get("activities") or []:
            detail = act.get("description") or act.get("title") or ""
            if act.get("location"):
                detail = f"{detail} ({act['location']})"
            rows.append([act.get("time") or "", _p(act.get("title") or ""), _p(detail)])
        if rows:
            story.append(_table(rows, [2.5 * cm, 4.5 * cm, 9 * cm]))

    if itinerary.accommodation:
        story.append(_p("Accommodation", heading_style))
        rows = [["Hotel", "Rating", "Nights", "Location"]]
        for acc in itinerary.accommodation:
            rows.append([
                _p(acc.get("name")),
                str(acc.get("rating", "")),
                str(acc.get("nights", "")),
                _p(acc.get("location") or ""),
            ])
        story.append(_table(rows, [5.5 * cm, 2 * cm, 2 * cm, 6.5 * cm]))

    budget = itinerary.budget_estimation or {}
    if budget:
        story.append(_p("Budget estimate", heading_style))
        story.append(_p(f"{budget.get('amount', '')} {budget.get('currency', '')}"))

    if itinerary.custom_cancellation_terms:
        story.append(_p("Cancellation policy", heading_style))
        story.append(_p(itinerary.custom_cancellation_terms))

    return _build(story, f"Itinerary {itinerary.destinations}")


def validate_invoice(data) -> dict:
    if not isinstance(data, dict):
        raise InvoiceFormatError("Invoice snapshot is not an object")
    for key, kind in INVOICE_FIELDS.items():
        if not isinstance(data.get(key), kind) or isinstance(data.get(key), bool):
            raise InvoiceFormatError(f"Invoice snapshot has no valid {key}")
    return data


def render_invoice_pdf(invoice: dict, agency_name: str = "Agency", title: str = "PAYMENT INVOICE") -> bytes:
    """Invoice for a customer or DMC payment, drawn from its stored snapshot."""
    invoice = validate_invoice(invoice)
    currency = invoice["currency"]

    def money(value) -> str:
        return f"{currency} {float(value):.2f}"

    story = [
        _p(title, title_style),
        _p(f"Agency: {agency_name}"),
        _p(f"Invoice #: {invoice.get('itinerary_reference') or '-'}"),
        _p(f"Issue Date: {datetime.utcnow().strftime('%d %b %Y')}"),
        _p(f"Payment Date: {invoice['payment_date'][:10]}"),
        Spacer(1, 0.4 * cm),
    ]

    bill_to = invoice.get("bill_to") or {}
    story.append(_p("BILL TO", heading_style))
    for label, key in (("Name", "name"), ("Email", "email"), ("Phone", "phone")):
        if bill_to.get(key):
            story.append(_p(f"{label}: {bill_to[key]}"))
    if invoice.get("customer_name") and not bill_to.get("name"):
        story.append(_p(f"Name: {invoice['customer_name']}"))

    story.append(_p("PAYMENT SUMMARY", heading_style))
    story.append(_table([
        ["Total Cost", money(invoice["total_cost"])],
        ["Amount Paid", money(invoice["amount_paid"])],
        ["Remaining Balance", money(invoice["remaining_balance"])],
        ["Status", invoice["payment_status"]],
    ], [5 * cm, 8 * cm]))

    method = [["Channel", invoice["payment_channel"]]]
    for label, key in (("Transaction ID", "transaction_id"), ("Bank", "selected_bank"), ("UPI ID", "upi_id")):
        if invoice.get(key):
            method.append([label, invoice[key]])
    story.append(_p("PAYMENT METHOD", heading_style))
    story.append(_table(method, [5 * cm, 8 * cm]))

    pay_to = invoice.get("pay_to") or {}
    if pay_to and float(invoice["remaining_balance"]) > 0:
        story.append(_p("HOW TO PAY", heading_style))
        for bank in pay_to.get("banks", []):
            rows = [[label, bank[key]] for label, key in BANK_LABELS if bank.get(key)]
            if rows:
                story.append(_table(rows, [5 * cm, 8 * cm]))
                story.append(Spacer(1, 0.2 * cm))
        if pay_to.get("upi"):
            story.append(_p(f"UPI: {pay_to['upi']}"))
        if pay_to.get("payment_link"):
            story.append(_p(f"Pay online: {pay_to['payment_link']}"))

    return _build(story, title)
