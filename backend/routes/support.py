# backend/routes/support.py
import logging
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session, selectinload

from config import settings
from database import get_db
from models.users import User
from models.support import ChatMessage, CallRequest
from schemas.common import SuccessResponse
from schemas import support as schemas
from utils.chat_bot import send_bot_reply
from utils.kv_store import KeyValueStore, get_kv_store, is_admin_online, mark_admin_seen
from utils.tokenJWT import require_admin

router = APIRouter(tags=["Support"])
logger = logging.getLogger(__name__)


# =========================
# CHAT
# =========================
@router.get("/chat/status", response_model=schemas.ChatStatus)
def chat_status(store: KeyValueStore = Depends(get_kv_store)):
    return {"online": is_admin_online(store)}


@router.get("/chat/{user_id}", response_model=List[schemas.ChatMessageOut])
def chat_history(user_id: int, db: Session = Depends(get_db)):
    return (
        db.query(ChatMessage)
        .filter(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        .all()
    )


@router.post("/chat/send", response_model=schemas.ChatMessageOut)
def send_message(
    payload: schemas.ChatSendRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    store: KeyValueStore = Depends(get_kv_store),
):
    if not db.query(User.id).filter(User.id == payload.user_id).first():
        raise HTTPException(status_code=404, detail="User not found. Please relogin.")

    msg = ChatMessage(user_id=payload.user_id, text=payload.text, sender=payload.sender, is_read=False)
    db.add(msg)
    db.commit()
    db.refresh(msg)

    if payload.sender == "admin":
        mark_admin_seen(store)
    elif not is_admin_online(store):
        # Nobody on duty: scripted answer after a short pause
        background_tasks.add_task(
            send_bot_reply, payload.user_id, payload.text, settings.CHAT_BOT_REPLY_DELAY_SECONDS
        )
        logger.debug("Queued bot reply for user %s", payload.user_id)

    return msg


@router.get("/admin/chats", response_model=List[schemas.ChatThreadOut])
def admin_chats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    users = (
        db.query(User)
        .options(selectinload(User.chat_messages))
        .filter(User.chat_messages.any())
        .all()
    )
    # Most recently active thread first
    return sorted(users, key=lambda u: (u.chat_messages[0].created_at, u.chat_messages[0].id), reverse=True)


# =========================
# CALL-BACK REQUESTS
# =========================
@router.post("/support/call-request", response_model=SuccessResponse)
def create_call_request(payload: schemas.CallRequestCreate, db: Session = Depends(get_db)):
    db.add(CallRequest(**payload.model_dump()))
    db.commit()
    return SuccessResponse()


@router.get("/admin/call-requests", response_model=List[schemas.CallRequestOut])
def list_call_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return db.query(CallRequest).order_by(CallRequest.created_at.desc(), CallRequest.id.desc()).all()


@router.put("/admin/call-requests/{request_id}", response_model=SuccessResponse)
def resolve_call_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    call = db.query(CallRequest).filter(CallRequest.id == request_id).first()
    if not call:
        raise HTTPException(status_code=404, detail="Call request not found")
    call.status = "Called"
    db.commit()
    return SuccessResponse()
