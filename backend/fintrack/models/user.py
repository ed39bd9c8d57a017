"""
User model for authentication and user management.
"""
import enum
from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship, validates
from fintrack.db.base import BaseModel
from fintrack.core.security import get_password_hash, verify_password


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STANDARD = "standard"
    ADMIN = "admin"


class User(BaseModel):
    """
    User model.

    The plaintext password is never stored: assigning ``user.password``
    recomputes ``hashed_password``, and nothing else touches it.
    """
    __tablename__ = "users"

    name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(
        SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.STANDARD,
        nullable=False
    )
    reset_password_token = Column(String(64), nullable=True, index=True)
    reset_password_expire = Column(DateTime, nullable=True)

    # Relationships
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan")

    @validates("email")
    def normalize_email(self, key, value):
        return value.strip().lower() if value else value

    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plain_password: str):
        self.hashed_password = get_password_hash(plain_password)

    def check_password(self, plain_password: str) -> bool:
        """Compare a plaintext password with the stored hash."""
        return verify_password(plain_password, self.hashed_password)
