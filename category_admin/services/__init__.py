"""Business logic services."""

from category_admin.services.category_repository import (
    CategoryRepository,
    InMemoryCategoryRepository,
    SqlCategoryRepository,
)
from category_admin.services.category_service import CategoryService, get_category_service

__all__ = [
    "CategoryRepository",
    "CategoryService",
    "InMemoryCategoryRepository",
    "SqlCategoryRepository",
    "get_category_service",
]
