# backend/routes/users.py
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from typing import List, Optional, Literal
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from utils.audit import write_log, client_ip
from utils.tokenJWT import require_admin
from schemas.common import MessageResponse, SuccessResponse
from schemas.user import UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])


# Customer list for the admin dashboard
@router.get("", response_model=List[UserResponse])
def get_all_users(
    q: Optional[str] = Query(None, description="Search by name, email or phone"),
    sort_by: Literal["id", "name", "email", "created_at"] = "id",
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    query = db.query(User)

    if q:
        like = f"%{q.lower()}%"
        query = query.filter(or_(
            func.lower(User.name).like(like),
            func.lower(User.email).like(like),
            User.phone.like(like),
        ))

    sort_map = {
        "id": User.id,
        "name": User.name,
        "email": User.email,
        "created_at": User.created_at,
    }
    col = sort_map.get(sort_by, User.id)
    query = query.order_by(col.asc() if order == "asc" else col.desc())

    return query.all()


# Profile edits from the account page (also used to join Prime)
@router.put("/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    changes = payload.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"]:
        changes["email"] = changes["email"].strip().lower()
        taken = db.query(User.id).filter(func.lower(User.email) == changes["email"], User.id != user_id).first()
        if taken:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()

    write_log(db, user_id=user_id, action="PROFILE_UPDATE", resource="users",
              ip=client_ip(request), meta={"fields": sorted(changes)})
    return {"message": "Updated"}


# Delete a customer account (Admin only)
@router.delete("/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if user.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot delete your own account")

    email = user.email
    db.delete(user)
    db.commit()

    write_log(db, user_id=current_user.id, action="USER_DELETE", resource="users",
              ip=client_ip(request), meta={"deleted_user_id": user_id, "email": email})
    return SuccessResponse()
