"""
Transaction model for income and expense records.
"""
import enum
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Integer, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from fintrack.db.base import BaseModel


class TransactionKind(str, enum.Enum):
    """Transaction polarity."""
    INCOME = "income"
    EXPENSE = "expense"


class Transaction(BaseModel):
    """A single dated income or expense owned by one user."""
    __tablename__ = "transactions"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    kind = Column(
        SQLEnum(TransactionKind, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        index=True
    )
    category = Column(String(50), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(DateTime, nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="transactions")
