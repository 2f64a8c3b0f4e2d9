"""Pydantic schemas for registration, login, and the current user.

Learn: Pydantic v2 models validate request/response data. Separate
request schemas (input) from response schemas (output) for clean APIs.
Empty strings fail min_length, so "" counts as a missing field.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)
    email: EmailStr

    @field_validator("email")
    @classmethod
    def email_fits_column(cls, value: str) -> str:
        if len(value) > 100:
            raise ValueError("must be at most 100 characters")
        return value


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user_id: int
    username: str
    email: str


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime


class MeResponse(BaseModel):
    user_id: int
    username: str
    email: str
