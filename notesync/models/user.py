"""
User model definitions.
Wire schemas exchanged with the remote authentication service.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserLogin(BaseModel):
    """Schema for user login."""
    email: str
    password: str


class UserResponse(BaseModel):
    """
    User data returned by the service after login.
    Excludes sensitive fields like the password hash.
    """
    id: str
    email: str
    name: str
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"


class TokenResponse(BaseModel):
    """Access token response after successful login."""
    access_token: str
    token_type: str = "bearer"
    user: Optional[UserResponse] = None
