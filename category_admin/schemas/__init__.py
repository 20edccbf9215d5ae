"""Pydantic schemas for request/response validation."""

from category_admin.schemas.category import (
    CategoryAttributesSchema,
    CategoryCreate,
    CategoryListResponse,
    CategoryRead,
    CategoryStatsResponse,
    CategoryTreeNodeRead,
    CategoryTreeResponse,
    CategoryUpdate,
    MoveCategoryRequest,
    NameValidationResponse,
    ReorderRequest,
    TopCategory,
)
from category_admin.schemas.common import ApiResponse, ErrorResponse, HealthResponse

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "HealthResponse",
    "CategoryAttributesSchema",
    "CategoryCreate",
    "CategoryListResponse",
    "CategoryRead",
    "CategoryStatsResponse",
    "CategoryTreeNodeRead",
    "CategoryTreeResponse",
    "CategoryUpdate",
    "MoveCategoryRequest",
    "NameValidationResponse",
    "ReorderRequest",
    "TopCategory",
]
