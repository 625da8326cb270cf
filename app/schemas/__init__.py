"""Pydantic schemas for API requests and responses."""

from app.schemas.common import (
    ErrorDetail,
    ErrorResponse,
    ListMeta,
    StandardListResponse,
    StandardResponse,
)

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "ListMeta",
    "StandardListResponse",
    "StandardResponse",
]
