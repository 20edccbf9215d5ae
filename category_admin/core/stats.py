"""Read-only statistics over a category snapshot."""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from category_admin.core.records import CategoryRecord


@dataclass(frozen=True)
class CategoryStats:
    """Aggregated counts for the dashboard."""

    total: int
    active: int
    inactive: int
    by_level: dict[int, int] = field(default_factory=dict)
    total_products: int = 0
    categories_with_products: int = 0
    top_categories: list[CategoryRecord] = field(default_factory=list)


def top_categories(all_nodes: Sequence[CategoryRecord], n: int) -> list[CategoryRecord]:
    """The n records with most products, ties broken by name ascending."""
    if n <= 0:
        return []
    ranked = sorted(all_nodes, key=lambda record: (-record.product_count, record.name, record.id))
    return ranked[:n]


def compute_stats(all_nodes: Sequence[CategoryRecord], top_n: int = 10) -> CategoryStats:
    """Count categories by status, level and product presence.

    Args:
        all_nodes: Full snapshot
        top_n: How many categories to include in top_categories

    Returns:
        CategoryStats for the snapshot
    """
    active = sum(1 for record in all_nodes if record.is_active)
    levels = Counter(record.level for record in all_nodes)

    return CategoryStats(
        total=len(all_nodes),
        active=active,
        inactive=len(all_nodes) - active,
        by_level=dict(sorted(levels.items())),
        total_products=sum(record.product_count for record in all_nodes),
        categories_with_products=sum(1 for record in all_nodes if record.product_count > 0),
        top_categories=top_categories(all_nodes, top_n),
    )
