# backend/routes/cart.py
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.cart import CartSyncRequest
from schemas.common import SuccessResponse
from utils.audit import write_log, client_ip
from utils.cart_snapshot import serialize_snapshot

router = APIRouter(prefix="/users", tags=["Cart"])

# Mirror the client cart onto the user record (last write wins)
@router.put("/{user_id}/cart", response_model=SuccessResponse)
def sync_cart(
    user_id: int,
    payload: CartSyncRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.cart_data = serialize_snapshot(payload.cart)
    db.commit()

    write_log(
        db,
        user_id=user_id,
        action="CART_SYNC",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"lines": len(payload.cart)},
    )
    return SuccessResponse()
