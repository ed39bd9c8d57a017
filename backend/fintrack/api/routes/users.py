"""
User management routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, defer
from typing import List
from fintrack.core.exceptions import NotFound
from fintrack.core.utils import format_response
from fintrack.db.session import get_db
from fintrack.schemas.common import Envelope
from fintrack.schemas.user import UserResponse, UserUpdate
from fintrack.models.user import User, UserRole
from fintrack.services import auth_service
from fintrack.api.dependencies import authorize, get_current_user

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=Envelope[UserResponse])
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return format_response(UserResponse.model_validate(current_user))


@router.put("/me", response_model=Envelope[UserResponse])
def update_current_user(
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the current user's name or email."""
    user = auth_service.update_profile(db, current_user, user_data)
    return format_response(UserResponse.model_validate(user), "Profile updated")


@router.get("", response_model=Envelope[List[UserResponse]])
def list_users(
    admin: User = Depends(authorize(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """List all users (admin only)."""
    users = db.query(User).options(defer(User.hashed_password)).order_by(User.id).all()
    return format_response([UserResponse.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=Envelope[UserResponse])
def get_user(
    user_id: int,
    admin: User = Depends(authorize(UserRole.ADMIN)),
    db: Session = Depends(get_db)
):
    """Get user by ID (admin only)."""
    user = db.query(User).options(defer(User.hashed_password)).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return format_response(UserResponse.model_validate(user))
