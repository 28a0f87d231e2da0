from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Union

from schemas.common import Money

# One line of the client cart as pushed by the storefront; extra keys are ignored
class CartLineIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    price: Money = Field(ge=0, max_digits=10, decimal_places=2)
    qty: int = Field(ge=1)

# Request schema for mirroring the client cart onto the user record
class CartSyncRequest(BaseModel):
    cart: List[CartLineIn]

# Cart line restored at login; id is a placeholder string when the product could not be matched
class RestoredCartLine(BaseModel):
    id: Union[int, str]
    name: str
    price: Money
    image: Optional[str] = None
    qty: int
