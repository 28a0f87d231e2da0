from pydantic import Field
from typing import Optional
from datetime import date as date_type, datetime

from schemas.common import ORMBase


class ReviewCreate(ORMBase):
    user_id: Optional[int] = Field(default=None, alias="userId")
    user_name: Optional[str] = Field(default=None, alias="userName")
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class ReviewOut(ORMBase):
    id: int
    product_id: Optional[int] = Field(default=None, serialization_alias="productId")
    user_id: Optional[int] = Field(default=None, serialization_alias="userId")
    user_name: Optional[str] = Field(default=None, serialization_alias="userName")
    rating: int
    comment: Optional[str] = None
    date: Optional[date_type] = None


class SiteReviewOut(ORMBase):
    id: int
    user_id: Optional[int] = Field(default=None, serialization_alias="userId")
    user_name: Optional[str] = Field(default=None, serialization_alias="userName")
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
