"""Pydantic schemas for registration, login, and the current user."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from bookshelf.auth.password import MAX_PASSWORD_BYTES, password_too_long


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        if password_too_long(v):
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class RegisterResponse(BaseModel):
    message: str = "User registered successfully"
    user_id: int
    username: str


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    token: str
    user_id: int
    username: str


class UserRead(BaseModel):
    """Public view of a user. password_hash is never part of it."""
    id: int
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}
