"""
Pydantic schemas for Transaction entity and its statistics.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional
from datetime import date as dt_date, datetime, timezone
from decimal import Decimal
from fintrack.models.transaction import TransactionKind

SortKey = Literal["date", "-date", "amount", "-amount"]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Dates are stored as naive UTC; offsets are applied before dropping them."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class TransactionBase(BaseModel):
    """Base transaction schema."""
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: TransactionKind
    category: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., ge=Decimal("0.01"), max_digits=15, decimal_places=2)
    description: str = Field(..., min_length=1)
    date: datetime

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class TransactionCreate(TransactionBase):
    """Schema for transaction creation."""
    pass


class TransactionUpdate(BaseModel):
    """Schema for transaction update. Only supplied fields are applied."""
    model_config = ConfigDict(str_strip_whitespace=True)

    kind: Optional[TransactionKind] = None
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    amount: Optional[Decimal] = Field(None, ge=Decimal("0.01"), max_digits=15, decimal_places=2)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[datetime] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class TransactionResponse(TransactionBase):
    """Schema for transaction response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime


class TransactionFilter(BaseModel):
    """
    Listing parameters: filters, search, sort and pagination.

    Every field is optional and independent. Frozen so one value can be
    passed around and turned into a query without being mutated on the way.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    kind: Optional[TransactionKind] = None
    category: Optional[str] = None
    start_date: Optional[dt_date] = None
    end_date: Optional[dt_date] = None
    search: Optional[str] = None
    sort: SortKey = "-date"


class DateRange(BaseModel):
    """Optional inclusive date bounds for statistics."""
    model_config = ConfigDict(frozen=True)

    start_date: Optional[dt_date] = None
    end_date: Optional[dt_date] = None


class SummaryStats(BaseModel):
    income: Decimal
    expense: Decimal
    balance: Decimal


class CategoryStat(BaseModel):
    """Totals for one category and kind."""
    category: str
    kind: TransactionKind
    count: int
    total: Decimal


class MonthStat(BaseModel):
    """Totals for one calendar month (1-12)."""
    month: int
    income: Decimal
    expense: Decimal


class MonthlyStats(BaseModel):
    year: int
    months: List[MonthStat]
