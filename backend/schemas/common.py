from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

TWO_PLACES = Decimal("0.01")


def format_money(value) -> str:
    return str(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


# Currency amounts go over the wire as fixed two-decimal strings ("2000.00").
# Inputs carry max_digits=10, decimal_places=2 to fit the Numeric(10, 2) columns.
Money = Annotated[Decimal, PlainSerializer(format_money, return_type=str, when_used="json")]


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class SuccessResponse(BaseModel):
    success: bool = True


class MessageResponse(BaseModel):
    message: str
