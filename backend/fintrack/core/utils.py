"""
Utility functions for the application.
"""
from typing import Any, Dict, List, Optional
from decimal import Decimal, ROUND_HALF_UP
import math

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Coerce a numeric aggregate (possibly None) to a Decimal rounded to cents."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def page_count(total: int, limit: int) -> int:
    """Number of pages needed to show `total` items `limit` at a time."""
    return math.ceil(total / limit) if limit else 0


def format_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """Format API success response."""
    return {
        "success": True,
        "message": message,
        "data": data
    }


def format_error(message: str, errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"success": False, "message": message}
    if errors:
        response["errors"] = errors
    return response
