# backend/routes/orders.py
from decimal import Decimal
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from database import get_db
import logging
from utils.audit import write_log, client_ip
from utils.cart_snapshot import EMPTY_SNAPSHOT
from utils.invoice_pdf import build_invoice, render_invoice_pdf
from models.users import User
from models.order import Order, OrderItem
from schemas.order import OrderCreatePayload, OrderCreatedResponse, OrderResponse

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

PAID = "Paid"

def _catalog_id(line_id) -> int | None:
    # Placeholder ids from cart rehydration have no product row
    return line_id if isinstance(line_id, int) else None

def _materialize_order(db: Session, payload: OrderCreatePayload) -> Order:
    """
    Turns a paid checkout into an Order with its items and clears the stored cart,
    all in one transaction.

    The whole mirrored cart is cleared, including lines the buyer did not select;
    the client keeps those until its next sync.
    """
    lines_total = sum((line.price * line.qty for line in payload.items), Decimal("0"))
    if lines_total != payload.total:
        # The client-computed total is trusted as-is
        logger.warning(
            "Order total %s for user %s differs from line sum %s",
            payload.total, payload.user_id, lines_total,
        )

    try:
        order = Order(
            user_id=payload.user_id,
            total_amount=payload.total,
            status=PAID,
            payment_id=payload.payment_id,
        )
        db.add(order)
        db.flush()

        db.add_all([
            OrderItem(
                order_id=order.id,
                product_id=_catalog_id(line.id),
                product_name=line.name,
                quantity=line.qty,
                price=line.price,
                image=line.image,
            )
            for line in payload.items
        ])

        db.query(User).filter(User.id == payload.user_id).update(
            {User.cart_data: EMPTY_SNAPSHOT}, synchronize_session=False
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to materialize order for user %s", payload.user_id)
        raise HTTPException(status_code=500, detail="Failed to create order")

    db.refresh(order)
    return order

# Record a paid checkout
@router.post("", response_model=OrderCreatedResponse)
def create_order(
    payload: OrderCreatePayload,
    request: Request,
    db: Session = Depends(get_db),
):
    if not db.query(User.id).filter(User.id == payload.user_id).first():
        raise HTTPException(status_code=404, detail="User not found")

    order = _materialize_order(db, payload)

    write_log(
        db, user_id=payload.user_id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
        ip=client_ip(request),
        meta={"order_id": order.id, "items": len(payload.items), "total": str(payload.total),
              "payment_id": payload.payment_id},
    )
    return OrderCreatedResponse(order_id=order.id)

# Order history of a user, newest first
@router.get("/{user_id}", response_model=List[OrderResponse])
def list_user_orders(
    user_id: int,
    db: Session = Depends(get_db),
):
    return (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == user_id)
        .order_by(Order.date.desc(), Order.id.desc())
        .all()
    )

# Printable invoice for a stored order
@router.get("/{order_id}/invoice")
def download_invoice(
    order_id: int,
    db: Session = Depends(get_db),
):
    order = db.query(Order).options(selectinload(Order.items)).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    buyer = db.query(User).filter(User.id == order.user_id).first()
    document = build_invoice(
        order.id,
        buyer or {"name": "Customer"},
        order.items,
        order.total_amount,
        order.payment_id,
        order.date,
    )
    return Response(
        content=render_invoice_pdf(document),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )
