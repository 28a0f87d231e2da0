from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from models.review import SiteReview
from schemas.review import ReviewCreate, SiteReviewOut

router = APIRouter(prefix="/site-reviews", tags=["Reviews"])

@router.get("", response_model=List[SiteReviewOut])
def list_site_reviews(db: Session = Depends(get_db)):
    return db.query(SiteReview).order_by(SiteReview.created_at.desc(), SiteReview.id.desc()).all()

@router.post("", response_model=SiteReviewOut)
def add_site_review(payload: ReviewCreate, db: Session = Depends(get_db)):
    review = SiteReview(**payload.model_dump())
    db.add(review)
    db.commit()
    db.refresh(review)
    return review
