from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    """Schema for user registration."""

    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        """Emails are matched case-insensitively."""
        return v.strip().lower() if isinstance(v, str) else v


class UserLogin(BaseModel):
    """Schema for login."""

    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class UserResponse(BaseModel):
    """Public user fields."""

    id: str
    email: str
    name: str

    model_config = {"from_attributes": True}


class AuthPayload(BaseModel):
    """User and the access token issued for it."""

    user: UserResponse
    token: str
