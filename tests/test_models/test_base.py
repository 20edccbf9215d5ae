"""Tests for base model infrastructure."""

from sqlalchemy.orm import DeclarativeBase

from category_admin.models.base import Base, TimestampMixin


def test_base_is_declarative_base():
    """Base should be a SQLAlchemy DeclarativeBase."""
    assert hasattr(Base, "metadata")
    assert issubclass(Base, DeclarativeBase)


def test_base_uses_naming_convention():
    """Constraint names should follow the shared convention."""
    assert Base.metadata.naming_convention["pk"] == "pk_%(table_name)s"


def test_timestamp_mixin_columns():
    """TimestampMixin should provide created_at and updated_at columns."""
    assert hasattr(TimestampMixin, "created_at")
    assert hasattr(TimestampMixin, "updated_at")
