"""
Transaction routes: CRUD, filtered listing and statistics.

Every route requires an authenticated user and only ever touches that
user's transactions.
"""
from datetime import date
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from fintrack.core.utils import format_response, page_count
from fintrack.db.session import get_db
from fintrack.models.user import User
from fintrack.schemas.common import Envelope, PageEnvelope
from fintrack.schemas.transaction import (
    TransactionCreate, TransactionUpdate, TransactionResponse, TransactionFilter,
    DateRange, SummaryStats, CategoryStat, MonthlyStats
)
from fintrack.services import statistics_service, transaction_service
from fintrack.api.dependencies import get_current_user

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=PageEnvelope[TransactionResponse])
def list_transactions(
    filters: Annotated[TransactionFilter, Query()],
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List transactions with filters, search, sort and pagination."""
    items, total = transaction_service.list_transactions(db, current_user.id, filters)
    return {
        "success": True,
        "count": len(items),
        "total": total,
        "page": filters.page,
        "pages": page_count(total, filters.limit),
        "data": [TransactionResponse.model_validate(t) for t in items]
    }


@router.post("", response_model=Envelope[TransactionResponse], status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction_data: TransactionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new transaction."""
    transaction = transaction_service.create_transaction(db, current_user.id, transaction_data)
    return format_response(TransactionResponse.model_validate(transaction), "Transaction created")


@router.get("/stats/summary", response_model=Envelope[SummaryStats])
def get_summary(
    dates: Annotated[DateRange, Query()],
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Total income, expense and balance over an optional date range."""
    summary = statistics_service.get_summary(db, current_user.id, dates.start_date, dates.end_date)
    return format_response(summary)


@router.get("/stats/category", response_model=Envelope[List[CategoryStat]])
def get_category_stats(
    dates: Annotated[DateRange, Query()],
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Count and total per category and kind over an optional date range."""
    stats = statistics_service.get_by_category(db, current_user.id, dates.start_date, dates.end_date)
    return format_response(stats)


@router.get("/stats/monthly", response_model=Envelope[MonthlyStats])
def get_monthly_stats(
    year: Optional[int] = Query(None, ge=1, le=9999),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Income and expense for each month of a year (defaults to the current year)."""
    if year is None:
        year = date.today().year
    stats = statistics_service.get_by_month(db, current_user.id, year)
    return format_response(stats)


@router.get("/{transaction_id}", response_model=Envelope[TransactionResponse])
def get_transaction(
    transaction_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get one of the current user's transactions."""
    transaction = transaction_service.get_owned_transaction(db, transaction_id, current_user.id)
    return format_response(TransactionResponse.model_validate(transaction))


@router.put("/{transaction_id}", response_model=Envelope[TransactionResponse])
def update_transaction(
    transaction_id: int,
    transaction_data: TransactionUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a transaction. Omitted fields keep their values."""
    transaction = transaction_service.update_transaction(
        db, transaction_id, current_user.id, transaction_data
    )
    return format_response(TransactionResponse.model_validate(transaction), "Transaction updated")


@router.delete("/{transaction_id}", response_model=Envelope)
def delete_transaction(
    transaction_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a transaction."""
    transaction_service.delete_transaction(db, transaction_id, current_user.id)
    return format_response(message="Transaction deleted")
