"""Tests for category request and response schemas."""

import pytest
from pydantic import ValidationError

from category_admin.core.filters import CategoryPage
from category_admin.core.stats import compute_stats
from category_admin.core.tree_builder import build_tree
from category_admin.core.records import CategoryAttributes
from category_admin.schemas.category import (
    CategoryAttributesSchema,
    CategoryCreate,
    CategoryListResponse,
    CategoryRead,
    CategoryStatsResponse,
    CategoryTreeNodeRead,
    CategoryUpdate,
    MoveCategoryRequest,
    ReorderRequest,
)


class TestCategoryCreate:
    """Validation of the create payload."""

    def test_name_is_trimmed(self):
        request = CategoryCreate(name="  Garden ")
        assert request.name == "Garden"
        assert request.parent_id is None
        assert request.display_order is None
        assert request.is_active is True

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="   ")

    def test_empty_parent_means_root(self):
        assert CategoryCreate(name="Garden", parent_id="").parent_id is None

    def test_path_cannot_be_supplied(self):
        """Path and level are derived, never accepted from clients."""
        with pytest.raises(ValidationError):
            CategoryCreate(name="Garden", path=["x"])

    def test_negative_display_order_rejected(self):
        with pytest.raises(ValidationError):
            CategoryCreate(name="Garden", display_order=-1)


class TestCategoryAttributesSchema:
    """Validation of category attributes."""

    def test_unknown_gender_rejected(self):
        with pytest.raises(ValidationError):
            CategoryAttributesSchema(supported_genders=["adults"])

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            CategoryAttributesSchema(has_colors=True)

    def test_to_core_implies_gender_variants(self):
        schema = CategoryAttributesSchema(supported_genders=["women", "men"])

        attributes = schema.to_core()

        assert attributes.supported_genders == ("men", "women")
        assert attributes.has_gender_variants is True

    def test_create_accepts_attributes(self):
        request = CategoryCreate(name="Boots", attributes={"has_size_guide": True})
        assert request.attributes.to_core() == CategoryAttributes(has_size_guide=True)


class TestCategoryUpdate:
    """Validation of the partial update payload."""

    def test_only_sent_fields_are_set(self):
        request = CategoryUpdate(description=None)
        assert request.model_dump(exclude_unset=True) == {"description": None}

    def test_attributes_can_be_sent(self):
        request = CategoryUpdate(attributes={"requires_fitting": True})
        assert request.attributes.requires_fitting is True

    def test_parent_change_not_allowed(self):
        """Reparenting goes through the move endpoint."""
        with pytest.raises(ValidationError):
            CategoryUpdate(parent_id="other")


class TestMoveAndReorderRequests:
    """Validation of move and reorder payloads."""

    def test_move_to_root(self):
        request = MoveCategoryRequest()
        assert request.new_parent_id is None
        assert request.new_display_order is None

    def test_move_blank_parent_means_root(self):
        assert MoveCategoryRequest(new_parent_id=" ").new_parent_id is None

    def test_reorder_requires_ids(self):
        with pytest.raises(ValidationError):
            ReorderRequest(parent_id="electronics")


class TestResponses:
    """Conversion from core values to response schemas."""

    def test_read_from_record(self, catalog_snapshot):
        read = CategoryRead.from_record(catalog_snapshot[2])
        assert read.id == "android"
        assert read.slug == "android"
        assert read.attributes == CategoryAttributesSchema()
        assert read.path == ["electronics", "phones"]
        assert read.level == 2

    def test_tree_from_forest(self, catalog_snapshot):
        tree = CategoryTreeNodeRead.from_forest(build_tree(catalog_snapshot))

        assert [node.id for node in tree] == ["electronics", "fashion"]
        phones = tree[0].children[0]
        assert phones.id == "phones"
        assert phones.has_children is True
        assert [child.id for child in phones.children] == ["android", "iphone"]
        assert phones.children[0].has_children is False

    def test_list_from_page(self, catalog_snapshot):
        page = CategoryPage(items=list(catalog_snapshot[:2]), total=7, page=1, limit=2)
        response = CategoryListResponse.from_page(page)

        assert [c.id for c in response.categories] == ["electronics", "phones"]
        assert response.total_pages == 4

    def test_stats_from_stats(self, catalog_snapshot):
        response = CategoryStatsResponse.from_stats(compute_stats(catalog_snapshot, top_n=2))

        assert response.total_categories == 7
        assert response.inactive_categories == 1
        assert response.categories_by_level == {0: 2, 1: 3, 2: 2}
        assert [t.category.id for t in response.top_categories] == ["phones", "laptops"]
        assert response.top_categories[0].product_count == 12
