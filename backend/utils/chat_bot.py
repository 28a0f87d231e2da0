import logging
import time

from database import SessionLocal
from models.support import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_REPLY = "Thanks for your message. An agent will reply shortly."

# Checked in order, first keyword found wins
KEYWORD_REPLIES = (
    ("price", "Prices are listed on the product page."),
    ("delivery", "We deliver within 24-48 hours."),
    ("hello", "Hello! I am the Umang AI Assistant."),
)


def pick_reply(text: str) -> str:
    lower = (text or "").lower()
    for keyword, reply in KEYWORD_REPLIES:
        if keyword in lower:
            return reply
    return DEFAULT_REPLY


def send_bot_reply(user_id: int, text: str, delay_seconds: float = 0.0, session_factory=SessionLocal) -> None:
    """Background task: store the scripted answer after a short pause."""
    if delay_seconds > 0:
        time.sleep(delay_seconds)
    db = session_factory()
    try:
        db.add(ChatMessage(user_id=user_id, text=pick_reply(text), sender="bot", is_read=False))
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Failed to store bot reply for user %s", user_id)
    finally:
        db.close()
