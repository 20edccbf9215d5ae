"""Search, filter, sort and paginate categories for list screens."""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from category_admin.core.records import CategoryRecord

SortField = Literal["name", "display_order", "product_count", "level"]
SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class CategoryFilter:
    """List query; None fields do not filter.

    parent_id only applies when filter_by_parent is set, so that "roots
    only" (parent_id=None) can be told apart from "any parent".
    """

    search: str | None = None
    level: int | None = None
    parent_id: str | None = None
    filter_by_parent: bool = False
    is_active: bool | None = None
    has_products: bool | None = None
    gender: str | None = None
    sort_by: SortField = "display_order"
    sort_order: SortOrder = "asc"
    page: int = 1
    limit: int = 20


@dataclass(frozen=True)
class CategoryPage:
    """One page of filtered categories."""

    items: list[CategoryRecord] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)


def _matches(record: CategoryRecord, flt: CategoryFilter) -> bool:
    if flt.search:
        needle = flt.search.strip().casefold()
        haystack = f"{record.name} {record.description or ''}".casefold()
        if needle not in haystack:
            return False
    if flt.level is not None and record.level != flt.level:
        return False
    if flt.filter_by_parent and record.parent_id != flt.parent_id:
        return False
    if flt.is_active is not None and record.is_active != flt.is_active:
        return False
    if flt.has_products is not None and (record.product_count > 0) != flt.has_products:
        return False
    if flt.gender is not None and flt.gender not in record.attributes.supported_genders:
        return False
    return True


def _sort_key(sort_by: SortField):
    if sort_by == "name":
        return lambda record: (record.name.casefold(), record.id)
    if sort_by == "product_count":
        return lambda record: (record.product_count, record.name.casefold(), record.id)
    if sort_by == "level":
        return lambda record: (record.level, record.display_order, record.id)
    return lambda record: (record.level, record.parent_id or "", record.display_order, record.id)


def filter_categories(
    all_nodes: Sequence[CategoryRecord], flt: CategoryFilter
) -> CategoryPage:
    """Apply flt to the snapshot and cut out the requested page.

    Args:
        all_nodes: Full snapshot
        flt: Filter, sort and page settings; page is 1-based

    Returns:
        CategoryPage with the matching records for that page and the total
    """
    matched = [record for record in all_nodes if _matches(record, flt)]
    matched.sort(key=_sort_key(flt.sort_by), reverse=flt.sort_order == "desc")

    page = max(flt.page, 1)
    limit = max(flt.limit, 1)
    start = (page - 1) * limit
    return CategoryPage(
        items=matched[start : start + limit],
        total=len(matched),
        page=page,
        limit=limit,
    )
