"""
Transaction service: owner-scoped record access and the listing query builder.

Every function takes the acting user's id explicitly; nothing here reads a
"current user" from shared state.
"""
import logging
from datetime import date, datetime, time
from typing import List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from fintrack.core.exceptions import NotFound
from fintrack.models.transaction import Transaction
from fintrack.schemas.transaction import TransactionCreate, TransactionFilter, TransactionUpdate

logger = logging.getLogger(__name__)

# Ties fall back to id in the same direction so pages never overlap
SORT_ORDERS = {
    "date": (Transaction.date.asc(), Transaction.id.asc()),
    "-date": (Transaction.date.desc(), Transaction.id.desc()),
    "amount": (Transaction.amount.asc(), Transaction.id.asc()),
    "-amount": (Transaction.amount.desc(), Transaction.id.desc()),
}

LIKE_ESCAPE = "\\"


def _contains_pattern(value: str) -> str:
    """Build a LIKE pattern matching `value` literally anywhere in the column."""
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def scope_conditions(
    owner_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> list:
    """
    Ownership and date-range predicate shared by listing and statistics.

    Both bounds are optional and inclusive; a bound covers its whole
    calendar day.
    """
    conditions = [Transaction.user_id == owner_id]
    if start_date is not None:
        conditions.append(Transaction.date >= datetime.combine(start_date, time.min))
    if end_date is not None:
        conditions.append(Transaction.date <= datetime.combine(end_date, time.max))
    return conditions


def build_conditions(owner_id: int, filters: TransactionFilter) -> list:
    """Translate a filter specification into a list of AND-ed conditions."""
    conditions = scope_conditions(owner_id, filters.start_date, filters.end_date)

    if filters.kind is not None:
        conditions.append(Transaction.kind == filters.kind)

    if filters.category:
        conditions.append(
            Transaction.category.ilike(_contains_pattern(filters.category), escape=LIKE_ESCAPE)
        )

    if filters.search:
        pattern = _contains_pattern(filters.search)
        conditions.append(or_(
            Transaction.description.ilike(pattern, escape=LIKE_ESCAPE),
            Transaction.category.ilike(pattern, escape=LIKE_ESCAPE)
        ))

    return conditions


def list_transactions(
    db: Session,
    owner_id: int,
    filters: TransactionFilter
) -> Tuple[List[Transaction], int]:
    """Return one sorted page of matching transactions and the unpaginated total."""
    conditions = build_conditions(owner_id, filters)

    total = db.query(func.count(Transaction.id)).filter(*conditions).scalar() or 0

    items = db.query(Transaction).filter(
        *conditions
    ).order_by(
        *SORT_ORDERS[filters.sort]
    ).offset(
        (filters.page - 1) * filters.limit
    ).limit(
        filters.limit
    ).all()

    return items, total


def get_owned_transaction(db: Session, transaction_id: int, owner_id: int) -> Transaction:
    """
    Fetch a transaction belonging to `owner_id`.

    Missing and foreign records both raise NotFound so callers cannot probe
    for ids they do not own.
    """
    transaction = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.user_id == owner_id
    ).first()
    if not transaction:
        raise NotFound("Transaction not found")
    return transaction


def create_transaction(db: Session, owner_id: int, data: TransactionCreate) -> Transaction:
    """Create a transaction owned by `owner_id`."""
    transaction = Transaction(user_id=owner_id, **data.model_dump())
    db.add(transaction)
    db.commit()
    db.refresh(transaction)
    logger.info("Transaction %s created for user %s", transaction.id, owner_id)
    return transaction


def update_transaction(
    db: Session,
    transaction_id: int,
    owner_id: int,
    data: TransactionUpdate
) -> Transaction:
    """Merge the supplied fields onto an owned transaction."""
    transaction = get_owned_transaction(db, transaction_id, owner_id)

    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(transaction, field, value)

    db.commit()
    db.refresh(transaction)
    logger.info("Transaction %s updated by user %s", transaction_id, owner_id)
    return transaction


def delete_transaction(db: Session, transaction_id: int, owner_id: int) -> None:
    """Delete an owned transaction."""
    transaction = get_owned_transaction(db, transaction_id, owner_id)
    db.delete(transaction)
    db.commit()
    logger.info("Transaction %s deleted by user %s", transaction_id, owner_id)
