"""Category request and response schemas."""

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from category_admin.core.filters import CategoryPage
from category_admin.core.records import CategoryAttributes, CategoryRecord
from category_admin.core.stats import CategoryStats
from category_admin.core.tree_builder import TreeNode


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name must not be blank")
    return v


def _clean_id(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


# =============================================================================
# Requests
# =============================================================================


class CategoryAttributesSchema(BaseModel):
    """Product attributes shared by a category."""

    supported_genders: list[Literal["men", "women", "kids", "unisex"]] = Field(
        default_factory=list,
        description="Genders products in this category are made for",
    )
    has_gender_variants: bool = Field(
        default=False,
        description="Products come in gender variants; implied by supported_genders",
    )
    has_size_guide: bool = Field(default=False, description="Show a size guide")
    requires_fitting: bool = Field(default=False, description="Products need fitting")

    model_config = {"extra": "forbid"}

    def to_core(self) -> CategoryAttributes:
        return CategoryAttributes(
            supported_genders=tuple(self.supported_genders),
            has_gender_variants=self.has_gender_variants,
            has_size_guide=self.has_size_guide,
            requires_fitting=self.requires_fitting,
        )

    @classmethod
    def from_core(cls, attributes: CategoryAttributes) -> "CategoryAttributesSchema":
        return cls(**attributes.to_dict())


class CategoryCreate(BaseModel):
    """Payload for creating a category. Path and level are always derived."""

    name: str = Field(min_length=1, max_length=200, description="Category name")
    parent_id: str | None = Field(
        default=None,
        max_length=64,
        description="Parent category ID, omitted for a root category",
    )
    display_order: int | None = Field(
        default=None,
        ge=0,
        description="Position among siblings, appended last when omitted",
    )
    is_active: bool = Field(default=True, description="Whether the category is active")
    description: str | None = Field(default=None, max_length=2000, description="Free text")
    attributes: CategoryAttributesSchema | None = Field(
        default=None,
        description="Product attributes, all off when omitted",
    )

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Reject whitespace-only names."""
        return _clean_name(v)

    @field_validator("parent_id")
    @classmethod
    def validate_parent_id(cls, v: str | None) -> str | None:
        """Treat an empty parent as root."""
        return _clean_id(v)


class CategoryUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    is_active: bool | None = Field(default=None)
    description: str | None = Field(default=None, max_length=2000)
    attributes: CategoryAttributesSchema | None = Field(default=None)

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else _clean_name(v)


class MoveCategoryRequest(BaseModel):
    """Payload for moving a category under a new parent."""

    new_parent_id: str | None = Field(
        default=None,
        max_length=64,
        description="Target parent ID, omitted to make the category a root",
    )
    new_display_order: int | None = Field(
        default=None,
        ge=0,
        description="Position among the new siblings, appended last when omitted",
    )

    model_config = {"extra": "forbid"}

    @field_validator("new_parent_id")
    @classmethod
    def validate_new_parent_id(cls, v: str | None) -> str | None:
        return _clean_id(v)


class ReorderRequest(BaseModel):
    """Payload for ranking one sibling group."""

    parent_id: str | None = Field(
        default=None,
        max_length=64,
        description="Parent of the sibling group, omitted for root categories",
    )
    ordered_ids: list[str] = Field(
        description="Every sibling ID exactly once, in the new order",
    )

    model_config = {"extra": "forbid"}

    @field_validator("parent_id")
    @classmethod
    def validate_parent_id(cls, v: str | None) -> str | None:
        return _clean_id(v)


# =============================================================================
# Responses
# =============================================================================


class CategoryRead(BaseModel):
    """A single category."""

    id: str = Field(description="Category ID")
    name: str = Field(description="Category name")
    slug: str = Field(default="", description="URL key derived from the name")
    parent_id: str | None = Field(default=None, description="Parent category ID")
    path: list[str] = Field(default_factory=list, description="Ancestor IDs, root first")
    level: int = Field(description="Depth, 0 for root categories")
    display_order: int = Field(description="Rank among siblings")
    is_active: bool = Field(description="Whether the category is active")
    product_count: int = Field(default=0, description="Products assigned to the category")
    description: str | None = Field(default=None)
    attributes: CategoryAttributesSchema = Field(default_factory=CategoryAttributesSchema)

    @classmethod
    def from_record(cls, record: CategoryRecord) -> "CategoryRead":
        return cls(
            id=record.id,
            name=record.name,
            parent_id=record.parent_id,
            path=list(record.path),
            level=record.level,
            display_order=record.display_order,
            is_active=record.is_active,
            product_count=record.product_count,
            description=record.description,
            slug=record.slug,
            attributes=CategoryAttributesSchema.from_core(record.attributes),
        )


class CategoryTreeNodeRead(CategoryRead):
    """A category with its ordered children."""

    children: list["CategoryTreeNodeRead"] = Field(default_factory=list)
    has_children: bool = Field(default=False)

    @classmethod
    def from_forest(cls, forest: Sequence[TreeNode]) -> list["CategoryTreeNodeRead"]:
        """Convert a built forest without recursing on tree depth."""
        roots = [cls._from_node(node) for node in forest]
        stack = list(zip(forest, roots))
        while stack:
            node, schema = stack.pop()
            schema.children = [cls._from_node(child) for child in node.children]
            stack.extend(zip(node.children, schema.children))
        return roots

    @classmethod
    def _from_node(cls, node: TreeNode) -> "CategoryTreeNodeRead":
        return cls(
            **CategoryRead.from_record(node.record).model_dump(),
            has_children=node.has_children,
        )


class CategoryTreeResponse(BaseModel):
    """Whole category forest."""

    tree: list[CategoryTreeNodeRead] = Field(default_factory=list)
    total: int = Field(description="Number of categories in the tree")


class CategoryListResponse(BaseModel):
    """One page of categories."""

    categories: list[CategoryRead] = Field(default_factory=list)
    total: int = Field(description="Matching categories across all pages")
    page: int = Field(description="1-based page number")
    limit: int = Field(description="Page size")
    total_pages: int = Field(description="Number of pages")

    @classmethod
    def from_page(cls, page: CategoryPage) -> "CategoryListResponse":
        return cls(
            categories=[CategoryRead.from_record(record) for record in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            total_pages=page.total_pages,
        )


class TopCategory(BaseModel):
    """Entry of the top categories ranking."""

    category: CategoryRead
    product_count: int


class CategoryStatsResponse(BaseModel):
    """Dashboard statistics."""

    total_categories: int
    active_categories: int
    inactive_categories: int
    categories_by_level: dict[int, int] = Field(default_factory=dict)
    total_products: int
    categories_with_products: int
    top_categories: list[TopCategory] = Field(default_factory=list)

    @classmethod
    def from_stats(cls, stats: CategoryStats) -> "CategoryStatsResponse":
        return cls(
            total_categories=stats.total,
            active_categories=stats.active,
            inactive_categories=stats.inactive,
            categories_by_level=stats.by_level,
            total_products=stats.total_products,
            categories_with_products=stats.categories_with_products,
            top_categories=[
                TopCategory(
                    category=CategoryRead.from_record(record),
                    product_count=record.product_count,
                )
                for record in stats.top_categories
            ],
        )


class NameValidationResponse(BaseModel):
    """Result of a sibling name availability check."""

    name: str
    parent_id: str | None = None
    available: bool
