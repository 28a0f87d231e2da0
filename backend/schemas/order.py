from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Union
from datetime import datetime

from schemas.common import Money, ORMBase


# Cart line selected for checkout
class OrderLineIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Placeholder ids from cart rehydration are strings
    id: Optional[Union[int, str]] = None
    name: str = Field(min_length=1)
    qty: int = Field(ge=1)
    price: Money = Field(ge=0, max_digits=10, decimal_places=2)
    image: Optional[str] = None


# Input schema for materializing a paid order
class OrderCreatePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    items: List[OrderLineIn] = Field(min_length=1)
    total: Money = Field(ge=0, max_digits=10, decimal_places=2)
    payment_id: Optional[str] = Field(default=None, alias="paymentId")


class OrderCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    order_id: int = Field(serialization_alias="orderId")


# Output schema for an individual order line item
class OrderItemOut(ORMBase):
    id: int
    order_id: int = Field(serialization_alias="orderId")
    product_id: Optional[int] = Field(default=None, serialization_alias="productId")
    product_name: Optional[str] = None
    quantity: int
    price: Money
    image: Optional[str] = None


# Output schema representing the full order with its items
class OrderResponse(ORMBase):
    id: int
    user_id: int = Field(serialization_alias="userId")
    total_amount: Money
    status: str
    payment_id: Optional[str] = None
    date: Optional[datetime] = None
    items: List[OrderItemOut] = Field(serialization_alias="order_items")
