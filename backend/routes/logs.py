# backend/routes/logs.py
from datetime import date, datetime, time, timedelta
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.users import User
from schemas.log import AuditEntryOut, AuditPage
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/admin/logs", tags=["Logs"])


def _entry(log: Log) -> AuditEntryOut:
    out = AuditEntryOut.model_validate(log)
    out.user_email = log.user.email if log.user else None
    return out


# Audit trail for the admin dashboard: logins, cart syncs, payments, orders
@router.get("", response_model=AuditPage)
def list_audit_entries(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Action name, e.g. ORDER_CREATE"),
    user_id: Optional[int] = Query(None),
    resource: Optional[str] = Query(None, description="cart, payment, orders, auth..."),
    status: Optional[Literal["SUCCESS", "FAIL"]] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None, description="Inclusive"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action == action.upper())
    if user_id is not None:
        query = query.filter(Log.user_id == user_id)
    if resource:
        query = query.filter(Log.resource == resource)
    if status:
        query = query.filter(Log.status == status)
    if date_from:
        query = query.filter(Log.ts >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.filter(Log.ts < datetime.combine(date_to + timedelta(days=1), time.min))

    total = query.count()
    rows = (
        query.order_by(Log.ts.desc(), Log.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return AuditPage(items=[_entry(r) for r in rows], total=total, page=page, page_size=page_size)
