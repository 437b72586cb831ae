# bookstore/schemas/checkout_schemas.py
import re
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional

from bookstore.constants.shipping import PaymentMethod

# Vietnamese mobile and landline numbers, with 0 or 84 prefix
PHONE_REGEX = re.compile(
    r"^(0|84)(2(0[3-9]|1[0-689]|2[0-25-9]|3[2-9]|4[0-9]|5[124-9]|6[0-39]|7[0-7]|8[0-9]|9[0-4679])"
    r"|3[2-9]|5[5689]|7[06-9]|8[0-689]|9[0-46-9])([0-9]{7})$"
)


class Province(BaseModel):
    id: int
    name: str

class District(BaseModel):
    id: int
    name: str

class Ward(BaseModel):
    code: str
    name: str

class PreviewInfo(BaseModel):
    shipping_fee: int
    shipping_time: str


class PreviewOrderRequest(BaseModel):
    district: int = Field(..., ge=1)
    ward: str = Field(..., min_length=1)


class SubmitOrderForm(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    phone: str
    email: EmailStr
    address: str = Field(..., min_length=1, max_length=255)
    province: int = Field(..., ge=1)
    district: int = Field(..., ge=1)
    ward: str = Field(..., min_length=1)
    note: Optional[str] = Field(None, max_length=500)
    payment: PaymentMethod

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, value):
        value = value.strip()
        if not PHONE_REGEX.match(value):
            raise ValueError("Invalid phone number")
        return value


class SubmitOrderResponse(BaseModel):
    order_id: int
    shipping_code: str
    message: str
