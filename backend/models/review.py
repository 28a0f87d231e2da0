from datetime import date
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Product review left by a customer
class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(Integer, nullable=True)
    user_name = Column(String(255), nullable=True)
    rating = Column(Integer, CheckConstraint("rating >= 1 AND rating <= 5"), nullable=False)
    comment = Column(Text, nullable=True)
    date = Column(Date, default=date.today)

    product = relationship("Product", back_populates="reviews")

# Feedback about the shop itself
class SiteReview(Base):
    __tablename__ = "site_reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=True)
    user_name = Column(String(255), nullable=True)
    rating = Column(Integer, CheckConstraint("rating >= 1 AND rating <= 5"), nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
