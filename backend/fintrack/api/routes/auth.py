"""
Authentication routes for signup, login, logout and password management.
"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from fintrack.core.config import settings
from fintrack.core.security import create_access_token
from fintrack.core.utils import format_response
from fintrack.db.session import get_db
from fintrack.models.user import User
from fintrack.schemas.common import Envelope
from fintrack.schemas.user import (
    UserCreate, UserLogin, Token, UserResponse,
    PasswordUpdate, ForgotPasswordRequest, ResetPasswordRequest
)
from fintrack.services import auth_service
from fintrack.api.dependencies import get_current_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user: User, response: Response) -> dict:
    """Issue a token, set it as the auth cookie and build the response body."""
    access_token = create_access_token(user)
    response.set_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        value=access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE
    )
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserResponse.model_validate(user)
    }


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, response: Response, db: Session = Depends(get_db)):
    """Register a new user and log them in."""
    user = auth_service.register_user(db, user_data)
    return _token_response(user, response)


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = auth_service.authenticate_user(db, credentials.email, credentials.password)
    return _token_response(user, response)


@router.post("/logout", response_model=Envelope)
def logout(response: Response):
    """
    Clear the auth cookie.

    Tokens are stateless, so a copy of the token held elsewhere remains
    valid until it expires.
    """
    response.delete_cookie(
        key=settings.TOKEN_COOKIE_NAME,
        httponly=True,
        samesite="strict",
        secure=settings.COOKIE_SECURE
    )
    return format_response(message="Logged out successfully")


@router.put("/password", response_model=Token)
def update_password(
    password_data: PasswordUpdate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change the current user's password."""
    user = auth_service.change_password(
        db, current_user.id, password_data.current_password, password_data.new_password
    )
    return _token_response(user, response)


@router.post("/forgot-password", response_model=Envelope)
def forgot_password(request_data: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Issue a password reset token. Delivery happens outside this service."""
    auth_service.request_password_reset(db, request_data.email)
    # Same answer whether or not the email exists
    return format_response(message="If the email is registered, a reset link has been sent")


@router.put("/reset-password/{reset_token}", response_model=Token)
def reset_password(
    reset_token: str,
    password_data: ResetPasswordRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """Set a new password with a reset token."""
    user = auth_service.reset_password(db, reset_token, password_data.password)
    return _token_response(user, response)
