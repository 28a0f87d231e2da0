from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from database import Base

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    total_amount = Column(Numeric(10, 2), nullable=False)

    # Free text; checkout writes "Paid", nothing transitions it afterwards
    status = Column(String(50), default="Processing", nullable=False)

    # Gateway payment reference
    payment_id = Column(String(255), nullable=True)
    date = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)

    # Not a foreign key: the product may be deleted or was never resolved
    product_id = Column(Integer, nullable=True)

    # Display fields denormalized at purchase time
    product_name = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(500), nullable=True)

    order = relationship("Order", back_populates="items")
