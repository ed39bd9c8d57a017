"""
Account service for registration, login and password management.
"""
import logging
from datetime import timedelta
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from fintrack.core.config import settings
from fintrack.core.exceptions import Conflict, NotFound, Unauthenticated, ValidationFailed
from fintrack.core.security import generate_reset_token, get_password_hash, hash_reset_token, verify_password
from fintrack.db.base import utcnow
from fintrack.models.user import User, UserRole
from fintrack.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

# Unknown emails are checked against this so every failed login runs bcrypt once
_DUMMY_PASSWORD_HASH = get_password_hash("fintrack-dummy-password")


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Look up a user by normalized email."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def _commit_unique_email(db: Session) -> None:
    """Commit, turning a lost race on the unique email index into Conflict."""
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Email uniqueness violated on commit")
        raise Conflict("Email already registered")


def register_user(db: Session, user_data: UserCreate) -> User:
    """Register a new user."""
    if get_user_by_email(db, user_data.email):
        logger.warning("Registration rejected: email already registered")
        raise Conflict("Email already registered")

    new_user = User(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password
    )
    db.add(new_user)
    _commit_unique_email(db)
    db.refresh(new_user)
    logger.info("User %s registered", new_user.id)
    return new_user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials, else raise Unauthenticated."""
    user = get_user_by_email(db, email)
    if user is None:
        verify_password(password, _DUMMY_PASSWORD_HASH)
    if not user or not user.check_password(password):
        logger.warning("Login failed for email domain %s", email.rsplit("@", 1)[-1])
        raise Unauthenticated("Incorrect email or password")
    logger.info("User %s logged in", user.id)
    return user


def update_profile(db: Session, user: User, user_data: UserUpdate) -> User:
    """Update name and/or email. The password hash is left untouched."""
    changes = user_data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        existing = get_user_by_email(db, changes["email"])
        if existing and existing.id != user.id:
            raise Conflict("Email already registered")

    for field, value in changes.items():
        setattr(user, field, value)

    _commit_unique_email(db)
    db.refresh(user)
    return user


def change_password(db: Session, user_id: int, current_password: str, new_password: str) -> User:
    """Replace a user's password after checking the current one."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    if not user.check_password(current_password):
        raise ValidationFailed(
            "Current password is incorrect",
            errors=[{"field": "current_password", "message": "Current password is incorrect"}]
        )

    user.password = new_password
    db.commit()
    db.refresh(user)
    logger.info("User %s changed password", user.id)
    return user


def request_password_reset(db: Session, email: str) -> Optional[str]:
    """
    Store a hashed reset token on the user and return the raw token.

    Delivering the raw token (e-mail) is somebody else's job. Returns None
    for unknown emails.
    """
    user = get_user_by_email(db, email)
    if not user:
        logger.info("Password reset requested for unknown email")
        return None

    raw_token, digest = generate_reset_token()
    user.reset_password_token = digest
    user.reset_password_expire = utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()
    logger.info("Password reset token issued for user %s", user.id)
    return raw_token


def reset_password(db: Session, raw_token: str, new_password: str) -> User:
    """Set a new password using a reset token and consume the token."""
    user = db.query(User).filter(
        User.reset_password_token == hash_reset_token(raw_token),
        User.reset_password_expire > utcnow()
    ).first()
    if not user:
        raise ValidationFailed("Reset token is invalid or has expired")

    user.password = new_password
    user.reset_password_token = None
    user.reset_password_expire = None
    db.commit()
    db.refresh(user)
    logger.info("User %s reset password", user.id)
    return user


def set_role(db: Session, email: str, role: UserRole) -> User:
    """Change a user's role, e.g. to bootstrap the first admin."""
    user = get_user_by_email(db, email)
    if not user:
        raise NotFound("User not found")
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("User %s role set to %s", user.id, role.value)
    return user
