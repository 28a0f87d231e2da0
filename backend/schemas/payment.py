from decimal import Decimal
from pydantic import BaseModel, Field

# Amount in major currency units (rupees); paise are the smallest step
class PaymentCreateRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)

# Callback fields handed over by the checkout widget
class PaymentVerifyRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str

class PaymentVerifyResponse(BaseModel):
    success: bool
