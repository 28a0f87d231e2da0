# backend/schemas/product.py
from pydantic import Field, field_validator
from typing import Optional

from schemas.common import Money, ORMBase


# Shared base attributes for product entities
class ProductBase(ORMBase):
    name: str = Field(min_length=1)
    category: str = Field(min_length=1)
    price: Money = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    image: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None


# Schema for creating a new product
class ProductCreate(ProductBase):
    pass


# Schema for partial product updates
class ProductEditRequest(ORMBase):
    """Schema for PUT requests - omitted fields stay unchanged."""
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    price: Optional[Money] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    image: Optional[str] = Field(None, max_length=500)
    description: Optional[str] = None

    @field_validator("name", "category", "price", "stock")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


# Full product representation including ID
class ProductOut(ProductBase):
    id: int
