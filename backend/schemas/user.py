from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime

from schemas.cart import RestoredCartLine
from schemas.common import ORMBase

# Request schema for a registration code; contact is an email or a phone number
class OtpRequest(BaseModel):
    contact: str = Field(min_length=3)

class OtpResponse(BaseModel):
    message: str
    mock_otp: Optional[str] = Field(default=None, serialization_alias="mockOtp")

# Schema for completing registration with the received code
class RegisterRequest(BaseModel):
    contact: str = Field(min_length=3)
    otp: str
    name: str = Field(min_length=1)
    password: str = Field(min_length=4)

# Schema for user authentication credentials
class LoginRequest(BaseModel):
    contact: str
    password: str

# Session payload returned after login or registration, including the restored cart
class SessionResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    role: str
    is_admin: bool = Field(serialization_alias="isAdmin")
    is_prime: bool = Field(serialization_alias="isPrime")
    cart: List[RestoredCartLine] = []
    access_token: str
    token_type: str = "bearer"

# Output schema for user profile details (admin listing)
class UserResponse(ORMBase):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    is_admin: bool = Field(serialization_alias="isAdmin")
    is_prime: bool = Field(serialization_alias="isPrime")
    created_at: Optional[datetime] = None

# Schema for partial profile updates
class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    phone: Optional[str] = None
    is_prime: Optional[bool] = Field(None, alias="isPrime")

    # Omitted means "leave as is"; an explicit null would hit a NOT NULL column
    @field_validator("name", "email", "is_prime")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value
