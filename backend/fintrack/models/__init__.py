"""Models package - Import all models for SQLAlchemy registration."""
from fintrack.models.user import User, UserRole
from fintrack.models.transaction import Transaction, TransactionKind

__all__ = [
    "User",
    "UserRole",
    "Transaction",
    "TransactionKind",
]
