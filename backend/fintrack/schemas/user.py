"""
Pydantic schemas for User entity.
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
from fintrack.models.user import UserRole


class UserBase(BaseModel):
    """Base user schema."""
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr


class UserCreate(UserBase):
    """Schema for user registration."""
    model_config = ConfigDict(str_strip_whitespace=True)

    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    """Schema for updating profile details."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None


class UserResponse(UserBase):
    """Schema for user response. Never includes the password hash."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: UserRole
    created_at: datetime


class UserLogin(BaseModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class PasswordUpdate(BaseModel):
    """Schema for changing the current user's password."""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6)


class Token(BaseModel):
    """Schema for JWT token response."""
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
