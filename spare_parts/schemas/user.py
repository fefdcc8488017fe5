"""
Pydantic schemas for users and authentication.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

from spare_parts.models.user import UserRole
from spare_parts.schemas.common import OperationResult


class UserResponse(BaseModel):
    """Sanitized user; never includes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    service_number: str
    name: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class LoginRequest(BaseModel):
    """Schema for login request."""
    service_number: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)

    @field_validator("service_number")
    @classmethod
    def normalize_service_number(cls, v: str) -> str:
        return v.strip().upper()


class RegisterRequest(LoginRequest):
    """Schema for user registration."""
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = UserRole.USER


class AuthResponse(OperationResult):
    """Login/registration/session lookup result."""
    user: Optional[UserResponse] = None


class UserRoleUpdate(BaseModel):
    """Admin request to change another user's role."""
    user_id: int
    role: UserRole
