# backend/utils/kv_store.py
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.kv import KeyValueEntry

logger = logging.getLogger(__name__)

ADMIN_PRESENCE_KEY = "presence:admin"


def _utcnow() -> datetime:
    # Stored naive so SQLite and MySQL compare the same way
    return datetime.now(timezone.utc).replace(tzinfo=None)


class KeyValueStore:
    """Expiring key/value store backed by the ``kv_entries`` table.

    Replaces process-local dictionaries so state is shared between
    workers and survives restarts. Expired rows are treated as absent
    and removed lazily on read.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str, default: Any = None) -> Any:
        entry = self.db.get(KeyValueEntry, key)
        if entry is None:
            return default
        if entry.expires_at is not None and entry.expires_at <= _utcnow():
            self.db.delete(entry)
            self.db.commit()
            return default
        return json.loads(entry.value)

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        expires_at = _utcnow() + timedelta(seconds=ttl_seconds) if ttl_seconds is not None else None
        entry = self.db.get(KeyValueEntry, key)
        if entry is None:
            entry = KeyValueEntry(key=key)
            self.db.add(entry)
        entry.value = json.dumps(value)
        entry.expires_at = expires_at
        self.db.commit()

    def delete(self, key: str) -> None:
        entry = self.db.get(KeyValueEntry, key)
        if entry is not None:
            self.db.delete(entry)
            self.db.commit()

    def purge_expired(self) -> int:
        removed = (
            self.db.query(KeyValueEntry)
            .filter(KeyValueEntry.expires_at != None, KeyValueEntry.expires_at <= _utcnow())  # noqa: E711
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if removed:
            logger.debug("Purged %s expired kv entries", removed)
        return removed


def get_kv_store(db: Session = Depends(get_db)) -> KeyValueStore:
    return KeyValueStore(db)


# Admin presence drives the chat auto-reply
def mark_admin_seen(store: KeyValueStore) -> None:
    store.set(ADMIN_PRESENCE_KEY, _utcnow().isoformat(), ttl_seconds=settings.ADMIN_PRESENCE_TTL_SECONDS)

def is_admin_online(store: KeyValueStore) -> bool:
    return store.get(ADMIN_PRESENCE_KEY) is not None


# Pending registration codes
def otp_key(contact: str) -> str:
    return f"otp:{contact.strip().lower()}"
