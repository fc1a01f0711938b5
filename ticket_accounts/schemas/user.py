"""
Pydantic schemas for user-related request/response validation.
"""

from datetime import datetime
from typing import Literal, Optional
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, EmailStr, Field, field_validator

# bcrypt only hashes the first 72 bytes and refuses anything longer
MAX_PASSWORD_BYTES = 72


def normalize_email(value: str) -> str:
    """Normalize an address the same way EmailStr does; unparseable input is returned as-is."""
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError:
        return value


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    tel: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=6, max_length=72)
    role: Literal["member", "admin"] = "member"

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserLogin(BaseModel):
    email: str
    password: str

    model_config = {"strict": True}

    @field_validator("email")
    @classmethod
    def normalize(cls, value: str) -> str:
        return normalize_email(value)


class UserUpdate(BaseModel):
    # Only these two fields are ever written by a profile update
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    tel: Optional[str] = Field(None, min_length=1, max_length=20)

    model_config = {"strict": True}


class UserResponse(BaseModel):
    id: int = Field(serialization_alias="_id")
    name: str
    email: str
    tel: str
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}


class UserEnvelope(BaseModel):
    success: bool = True
    data: UserResponse


class TokenResponse(BaseModel):
    success: bool = True
    id: int = Field(serialization_alias="_id")
    name: str
    email: str
    token: str


class LogoutResponse(BaseModel):
    success: bool = True
    data: dict = Field(default_factory=dict)


class MessageResponse(BaseModel):
    success: bool = True
    message: str
