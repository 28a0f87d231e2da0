# backend/routes/auth.py
import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy import or_, func
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from models.product import Product
from schemas import user as schemas
from utils.audit import write_log, client_ip
from utils.cart_snapshot import parse_snapshot, rehydrate
from utils.hashing import get_password_hash, verify_password
from utils.kv_store import KeyValueStore, get_kv_store, mark_admin_seen, otp_key
from utils.tokenJWT import token_for

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger(__name__)

def _find_by_contact(db: Session, contact: str) -> User | None:
    normalized = contact.strip().lower()
    return db.query(User).filter(
        or_(func.lower(User.email) == normalized, User.phone == contact.strip())
    ).first()

def _session_payload(user: User, cart=None) -> schemas.SessionResponse:
    return schemas.SessionResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        role=user.role,
        is_admin=user.is_admin,
        is_prime=user.is_prime,
        cart=cart or [],
        access_token=token_for(user),
    )

# Issue a registration code for a new email or phone number
@router.post("/otp", response_model=schemas.OtpResponse)
def request_otp(
    payload: schemas.OtpRequest,
    db: Session = Depends(get_db),
    store: KeyValueStore = Depends(get_kv_store),
):
    if _find_by_contact(db, payload.contact):
        raise HTTPException(status_code=400, detail="User exists")

    # Abandoned registrations leave expired codes behind
    store.purge_expired()

    code = f"{secrets.randbelow(10000):04d}"
    store.set(otp_key(payload.contact), code, ttl_seconds=settings.OTP_TTL_SECONDS)
    logger.info("OTP issued for %s", payload.contact)

    # No SMS/e-mail provider is wired up; mock mode hands the code back
    return schemas.OtpResponse(message="OTP Sent", mock_otp=code if settings.OTP_MOCK else None)

# Register a new user after OTP confirmation
@router.post("/register", response_model=schemas.SessionResponse)
def register(
    payload: schemas.RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    store: KeyValueStore = Depends(get_kv_store),
):
    key = otp_key(payload.contact)
    expected = store.get(key)
    if expected is None or not secrets.compare_digest(str(expected), payload.otp.strip()):
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"contact": payload.contact, "reason": "Invalid OTP"})
        raise HTTPException(status_code=400, detail="Invalid OTP")

    if _find_by_contact(db, payload.contact):
        raise HTTPException(status_code=400, detail="User exists")

    contact = payload.contact.strip()
    is_email = "@" in contact
    new_user = User(
        name=payload.name,
        email=contact.lower() if is_email else f"{contact}@mobile",
        phone=None if is_email else contact,
        password_hash=get_password_hash(payload.password),
        cart_data="[]",
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    store.delete(key)

    write_log(db, user_id=new_user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": new_user.email})
    return _session_payload(new_user)

# Authenticate by email or phone and restore the mirrored cart
@router.post("/login", response_model=schemas.SessionResponse)
def login(
    payload: schemas.LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    store: KeyValueStore = Depends(get_kv_store),
):
    db_user = _find_by_contact(db, payload.contact)

    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"contact": payload.contact})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Credentials")

    if db_user.is_admin:
        mark_admin_seen(store)

    restored = []
    entries = parse_snapshot(db_user.cart_data)
    if entries:
        products = db.query(Product).order_by(Product.id).all()
        restored = rehydrate(entries, products)

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"restored_lines": len(restored)})
    return _session_payload(db_user, restored)
