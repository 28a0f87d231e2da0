from sqlalchemy import Column, String, Text, DateTime
from database import Base

# Expiring key/value pair; holds admin presence and pending OTP codes
class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)  # JSON encoded
    expires_at = Column(DateTime, nullable=True, index=True)  # naive UTC, NULL = never
