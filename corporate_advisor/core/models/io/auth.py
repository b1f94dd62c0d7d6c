"""
Authentication and account I/O models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class RegisterRequest(BaseModel):
    """Schema for creating an account."""

    email: str = Field(description="Login e-mail address")
    password: str = Field(min_length=6, description="Password, at least 6 characters")
    name: str = Field(min_length=2, description="Display name, at least 2 characters")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("올바른 이메일 형식이 아닙니다")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRead(BaseModel):
    """Schema for reading a user account."""

    id: str
    email: str
    name: str
    role: str
    credits: int
    created_at: datetime

    class Config:
        from_attributes = True
