"""
Pydantic schemas for auth and profile endpoints.

Email and password are optional here so that a missing field reaches the
service and comes back as MissingField (400) rather than a schema error.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class SignupRequest(BaseModel):
    """Schema for account creation."""
    email: Optional[str] = Field(None, description="Account email, matched exactly as given")
    password: Optional[str] = Field(None, description="Plain-text password (max 72 bytes)")
    name: Optional[str] = Field(None, description="Display name")


class LoginRequest(BaseModel):
    """Schema for credential login."""
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""
    id: str
    email: str
    is_email_verified: bool

    class Config:
        from_attributes = True


class UserProfileResponse(UserResponse):
    """User view for /me."""
    name: Optional[str] = None
    created_at: Optional[datetime] = None


class SignupResponse(BaseModel):
    """Schema for signup response."""
    user: UserResponse
    token: str


class LoginResponse(BaseModel):
    """Schema for login response. The token is always present."""
    success: bool = True
    user: UserResponse
    token: str


class MeResponse(BaseModel):
    """Schema for /me response."""
    user: UserProfileResponse
