from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from bookstore.utils.hash import BCRYPT_MAX_BYTES


class UserRegister(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, value):
        if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError("Password is too long")
        return value

    @model_validator(mode="after")
    def validate_passwords(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: int
    name: str
    email: EmailStr
    created_at: datetime
