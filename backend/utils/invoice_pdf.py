# backend/utils/invoice_pdf.py

from dataclasses import dataclass, field
from datetime import date as date_type, datetime
from decimal import Decimal
from io import BytesIO
from typing import Any, Iterable, List, Mapping, Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from config import settings

CURRENCY_PREFIX = "Rs."

FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"


def format_amount(value: Decimal) -> str:
    # Fixed prefix, no locale formatting
    return f"{CURRENCY_PREFIX} {value}"


@dataclass(frozen=True)
class Party:
    name: str
    lines: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InvoiceLine:
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def extended_price(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class InvoiceDocument:
    order_id: int
    seller: Party
    buyer: Party
    lines: List[InvoiceLine]
    total: Decimal
    payment_ref: str
    issued_on: date_type

    @property
    def filename(self) -> str:
        return f"Invoice_{self.order_id}.pdf"


def _get(item: Any, *names: str, default=None):
    # Items may be ORM rows, pydantic models or plain dicts
    for name in names:
        if isinstance(item, Mapping):
            if item.get(name) is not None:
                return item[name]
        elif getattr(item, name, None) is not None:
            return getattr(item, name)
    return default


def seller_party() -> Party:
    return Party(
        name=settings.STORE_NAME,
        lines=[
            f"GSTIN: {settings.STORE_GSTIN}",
            settings.STORE_ADDRESS,
            f"Contact: {settings.STORE_CONTACT}",
        ],
    )


def build_invoice(
    order_id: int,
    user: Any,
    items: Iterable[Any],
    total,
    payment_id: Optional[str],
    date: Optional[datetime | date_type] = None,
) -> InvoiceDocument:
    """Assemble the invoice for an order. Pure: reads nothing but its arguments and settings."""
    lines = [
        InvoiceLine(
            name=str(_get(it, "name", "product_name", default="")),
            quantity=int(_get(it, "qty", "quantity", default=0)),
            unit_price=Decimal(str(_get(it, "price", default="0"))),
        )
        for it in items
    ]

    buyer_lines = []
    email = _get(user, "email")
    if email:
        buyer_lines.append(f"Email: {email}")
    phone = _get(user, "phone")
    if phone:
        buyer_lines.append(f"Phone: {phone}")

    if date is None:
        issued_on = date_type.today()
    elif isinstance(date, datetime):
        issued_on = date.date()
    else:
        issued_on = date

    return InvoiceDocument(
        order_id=order_id,
        seller=seller_party(),
        buyer=Party(name=str(_get(user, "name", default="")), lines=buyer_lines),
        lines=lines,
        total=Decimal(str(total)),
        payment_ref=payment_id or "COD",
        issued_on=issued_on,
    )


def render_invoice_pdf(doc: InvoiceDocument) -> bytes:
    """
    Draws the invoice on A4:
    - seller header with identity lines
    - bill-to block (left) and order reference block (right)
    - item table: name, quantity, unit price, extended price
    - grand total
    """
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    def draw_text(x, y, text, font=FONT_REGULAR_NAME, size=10, align="left"):
        c.setFont(font, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)

    # --- 1. SELLER ---
    y = height - 20 * mm
    draw_text(14 * mm, y, doc.seller.name, font=FONT_BOLD_NAME, size=20)
    y -= 7 * mm
    for line in doc.seller.lines:
        draw_text(14 * mm, y, line, size=10)
        y -= 5 * mm

    c.setLineWidth(0.5)
    c.line(14 * mm, y, 196 * mm, y)
    y -= 10 * mm

    # --- 2. BUYER vs ORDER REFERENCE ---
    y_columns = y
    draw_text(14 * mm, y, "Bill To:", font=FONT_BOLD_NAME, size=12)
    y -= 6 * mm
    draw_text(14 * mm, y, f"Name: {doc.buyer.name}", size=11)
    for line in doc.buyer.lines:
        y -= 5 * mm
        draw_text(14 * mm, y, line, size=11)

    y_ref = y_columns
    draw_text(196 * mm, y_ref, f"Order ID: #{doc.order_id}", size=11, align="right")
    y_ref -= 6 * mm
    draw_text(196 * mm, y_ref, f"Pay ID: {doc.payment_ref}", size=11, align="right")
    y_ref -= 6 * mm
    draw_text(196 * mm, y_ref, f"Date: {doc.issued_on.strftime('%d/%m/%Y')}", size=11, align="right")

    y = min(y, y_ref) - 12 * mm

    # --- 3. ITEM TABLE ---
    def draw_header(current_y):
        c.setFillColorRGB(0.23, 0.51, 0.96)
        c.rect(14 * mm, current_y - 2 * mm, 182 * mm, 8 * mm, fill=1, stroke=0)
        c.setFillColorRGB(1, 1, 1)
        c.setFont(FONT_BOLD_NAME, 10)
        c.drawString(16 * mm, current_y, "Item")
        c.drawRightString(120 * mm, current_y, "Qty")
        c.drawRightString(155 * mm, current_y, "Unit Price")
        c.drawRightString(194 * mm, current_y, "Total")
        c.setFillColorRGB(0, 0, 0)
        return current_y - 8 * mm

    y = draw_header(y)
    c.setFont(FONT_REGULAR_NAME, 10)
    for line in doc.lines:
        c.drawString(16 * mm, y, line.name[:50])
        c.drawRightString(120 * mm, y, str(line.quantity))
        c.drawRightString(155 * mm, y, format_amount(line.unit_price))
        c.drawRightString(194 * mm, y, format_amount(line.extended_price))

        c.setLineWidth(0.1)
        c.line(14 * mm, y - 2 * mm, 196 * mm, y - 2 * mm)
        y -= 7 * mm

        if y < 30 * mm:
            c.showPage()
            y = draw_header(height - 20 * mm)
            c.setFont(FONT_REGULAR_NAME, 10)

    # --- 4. TOTAL ---
    y -= 5 * mm
    if y < 20 * mm:
        c.showPage()
        y = height - 30 * mm
    draw_text(196 * mm, y, f"Grand Total: {format_amount(doc.total)}", font=FONT_BOLD_NAME, size=14, align="right")

    c.showPage()
    c.save()
    return buffer.getvalue()
