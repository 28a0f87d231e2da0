# backend/routes/payment.py
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database import get_db
from schemas.payment import PaymentCreateRequest, PaymentVerifyRequest, PaymentVerifyResponse
from utils.audit import write_log, client_ip
from utils.razorpay_client import RazorpayClient, get_payment_client

router = APIRouter(prefix="/payment", tags=["Payment"])
logger = logging.getLogger(__name__)

# Open a gateway order for the amount the buyer is about to pay
@router.post("/create")
async def create_payment(
    payload: PaymentCreateRequest,
    client: RazorpayClient = Depends(get_payment_client),
):
    try:
        order = await client.create_order(payload.amount)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except httpx.HTTPError:
        raise HTTPException(status_code=502, detail="Payment gateway error")

    logger.info("Gateway order %s created for %s", order.get("id"), payload.amount)
    return order

# Check the signature the checkout widget returned
@router.post("/verify", response_model=PaymentVerifyResponse)
def verify_payment(
    payload: PaymentVerifyRequest,
    request: Request,
    db: Session = Depends(get_db),
    client: RazorpayClient = Depends(get_payment_client),
):
    verified = client.verify_signature(
        payload.razorpay_order_id, payload.razorpay_payment_id, payload.razorpay_signature
    )

    write_log(
        db, user_id=None, action="PAYMENT_VERIFY", resource="payment",
        status="SUCCESS" if verified else "FAIL", ip=client_ip(request),
        meta={"order_id": payload.razorpay_order_id, "payment_id": payload.razorpay_payment_id},
    )

    if not verified:
        logger.warning("Payment signature mismatch for gateway order %s", payload.razorpay_order_id)
        return JSONResponse(status_code=400, content={"success": False})
    return PaymentVerifyResponse(success=True)
