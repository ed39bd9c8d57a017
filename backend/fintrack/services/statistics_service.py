"""
Statistics over a user's transactions: summary, per-category and per-month.

All three views use `scope_conditions` from the transaction service, so they
count exactly the rows a listing with the same owner and date range returns.
"""
from datetime import date
from typing import List, Optional
from sqlalchemy import extract, func
from sqlalchemy.orm import Session
from fintrack.core.utils import to_money
from fintrack.models.transaction import Transaction, TransactionKind
from fintrack.schemas.transaction import CategoryStat, MonthStat, MonthlyStats, SummaryStats
from fintrack.services.transaction_service import scope_conditions


def get_summary(
    db: Session,
    owner_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> SummaryStats:
    """Total income, total expense and balance."""
    rows = db.query(
        Transaction.kind,
        func.sum(Transaction.amount)
    ).filter(
        *scope_conditions(owner_id, start_date, end_date)
    ).group_by(
        Transaction.kind
    ).all()

    totals = {kind: to_money(total) for kind, total in rows}
    income = totals.get(TransactionKind.INCOME, to_money(0))
    expense = totals.get(TransactionKind.EXPENSE, to_money(0))

    return SummaryStats(income=income, expense=expense, balance=income - expense)


def get_by_category(
    db: Session,
    owner_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> List[CategoryStat]:
    """Count and total per (category, kind), largest total first."""
    total_amount = func.sum(Transaction.amount)
    rows = db.query(
        Transaction.category,
        Transaction.kind,
        func.count(Transaction.id),
        total_amount
    ).filter(
        *scope_conditions(owner_id, start_date, end_date)
    ).group_by(
        Transaction.category,
        Transaction.kind
    ).all()

    stats = [
        CategoryStat(category=category, kind=kind, count=count, total=to_money(total))
        for category, kind, count, total in rows
    ]
    stats.sort(key=lambda s: (-s.total, s.category, s.kind.value))
    return stats


def get_by_month(db: Session, owner_id: int, year: int) -> MonthlyStats:
    """Income and expense for each of the twelve months of `year`."""
    month = extract("month", Transaction.date)
    rows = db.query(
        month,
        Transaction.kind,
        func.sum(Transaction.amount)
    ).filter(
        *scope_conditions(owner_id, date(year, 1, 1), date(year, 12, 31))
    ).group_by(
        month,
        Transaction.kind
    ).all()

    by_month = {m: {TransactionKind.INCOME: to_money(0), TransactionKind.EXPENSE: to_money(0)} for m in range(1, 13)}
    for month_number, kind, total in rows:
        by_month[int(month_number)][kind] = to_money(total)

    months = [
        MonthStat(
            month=m,
            income=totals[TransactionKind.INCOME],
            expense=totals[TransactionKind.EXPENSE]
        )
        for m, totals in sorted(by_month.items())
    ]
    return MonthlyStats(year=year, months=months)
