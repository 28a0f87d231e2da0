from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base

# One message in a customer's support thread
class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    sender = Column(String(20), nullable=False)  # user / admin / bot
    text = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user = relationship("User", back_populates="chat_messages")

# "Call me back" request from the support page
class CallRequest(Base):
    __tablename__ = "call_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True)
    name = Column(String(255), nullable=True)
    phone = Column(String(32), nullable=False)
    status = Column(String(20), default="Pending", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
