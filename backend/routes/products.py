# backend/routes/products.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from utils.tokenJWT import require_admin
from utils.audit import write_log, client_ip
from models.users import User
from models.product import Product
from models.review import Review
from schemas.common import SuccessResponse
import schemas.product as product_schemas
import schemas.review as review_schemas

router = APIRouter(prefix="/products", tags=["Products"])

def _get_product_or_404(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# =========================
# CATALOG
# =========================
@router.get("", response_model=List[product_schemas.ProductOut])
def list_products(
    q: Optional[str] = Query(None, description="Search by name"),
    category: Optional[str] = Query(None, description="Exact category"),
    db: Session = Depends(get_db),
):
    query = db.query(Product)
    if q:
        query = query.filter(Product.name.ilike(f"%{q}%"))
    if category:
        query = query.filter(Product.category == category)
    return query.order_by(Product.id).all()


@router.get("/{product_id}", response_model=product_schemas.ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_product_or_404(db, product_id)


# =========================
# ADMIN: INVENTORY
# =========================
@router.post("", response_model=product_schemas.ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    product = Product(**payload.model_dump())
    db.add(product)
    db.commit()
    db.refresh(product)

    write_log(db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
              ip=client_ip(request), meta={"product_id": product.id, "name": product.name})
    return product


@router.put("/{product_id}", response_model=SuccessResponse)
def update_product(
    product_id: int,
    payload: product_schemas.ProductEditRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    product = _get_product_or_404(db, product_id)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(product, field, value)
    db.commit()

    write_log(db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
              ip=client_ip(request), meta={"product_id": product_id, "fields": sorted(changes)})
    return SuccessResponse()


@router.delete("/{product_id}", response_model=SuccessResponse)
def delete_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    product = _get_product_or_404(db, product_id)

    # No cascade: reviews are detached (product_id set to NULL), order items keep their copy
    db.delete(product)
    db.commit()

    write_log(db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
              ip=client_ip(request), meta={"product_id": product_id})
    return SuccessResponse()


# =========================
# REVIEWS
# =========================
@router.get("/{product_id}/reviews", response_model=List[review_schemas.ReviewOut])
def list_reviews(product_id: int, db: Session = Depends(get_db)):
    return db.query(Review).filter(Review.product_id == product_id).order_by(Review.id.desc()).all()


@router.post("/{product_id}/reviews", response_model=SuccessResponse)
def add_review(
    product_id: int,
    payload: review_schemas.ReviewCreate,
    db: Session = Depends(get_db),
):
    _get_product_or_404(db, product_id)
    db.add(Review(product_id=product_id, **payload.model_dump()))
    db.commit()
    return SuccessResponse()
