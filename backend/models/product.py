# backend/models/product.py
from sqlalchemy import Column, Integer, String, Text, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base

# Model Product
# A single catalog entry. Prices are fixed-point currency,
# stock is shown to buyers but never decremented on purchase.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    category = Column(String(255), nullable=False, index=True)

    price = Column(Numeric(10, 2), CheckConstraint("price >= 0"), nullable=False)
    stock = Column(Integer, default=0, nullable=False)

    image = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)

    reviews = relationship("Review", back_populates="product", order_by="Review.id.desc()")
