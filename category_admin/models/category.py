"""Category model - one node of the catalogue hierarchy."""

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from category_admin.models.base import Base, TimestampMixin


class Category(Base, TimestampMixin):
    """Category row with its materialized path.

    `path` holds ancestor ids root-first and `level` its length. Both are
    written by the service from the tree operations, never by clients, as
    is `slug`, derived from the name.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(140), nullable=False, unique=True, index=True)
    parent_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("categories.id"),
        nullable=True,
        index=True,
    )
    path: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    product_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    attributes: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<Category(id='{self.id}', name='{self.name}', level={self.level})>"
