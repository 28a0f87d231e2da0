# backend/models/users.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

# Represents a customer or administrator account
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    phone = Column(String(32), nullable=True, index=True)
    password_hash = Column(String(255), nullable=True)

    # Serialized cart snapshot: [{"name", "price", "quantity"}]
    cart_data = Column(Text, nullable=True)

    is_admin = Column(Boolean, default=False, nullable=False)
    is_prime = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    chat_messages = relationship(
        "ChatMessage", back_populates="user", cascade="all, delete-orphan",
        order_by="ChatMessage.created_at.desc()",
    )

    @property
    def role(self) -> str:
        return "admin" if self.is_admin else "user"
