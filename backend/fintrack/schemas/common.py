"""
Response envelopes shared by all routes.
"""
from pydantic import BaseModel
from typing import Generic, List, Optional, TypeVar

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Tagged success response carrying a payload."""
    success: bool = True
    message: Optional[str] = None
    data: Optional[DataT] = None


class PageEnvelope(BaseModel, Generic[DataT]):
    """List response with pagination metadata."""
    success: bool = True
    message: Optional[str] = None
    data: List[DataT] = []
    count: int
    total: int
    page: int
    pages: int


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """Tagged failure response."""
    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None
