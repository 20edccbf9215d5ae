"""SQLAlchemy models for the category store."""

from category_admin.models.base import Base, TimestampMixin
from category_admin.models.category import Category

__all__ = [
    "Base",
    "TimestampMixin",
    "Category",
]
