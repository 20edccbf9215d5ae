"""Core module - pure category tree operations.

Everything here works on immutable snapshots of CategoryRecord and performs
no I/O. Expected failures come back as Rejected values.
"""

from category_admin.core.display_order import (
    next_display_order,
    normalize_all_groups,
    normalize_group,
    reorder,
)
from category_admin.core.filters import CategoryFilter, CategoryPage, filter_categories
from category_admin.core.lifecycle import (
    category_path,
    create_category,
    delete_category,
    find_by_slug,
    is_name_available,
    rename_category,
    set_active,
    toggle_active,
    update_attributes,
    update_description,
)
from category_admin.core.move_validator import validate_move
from category_admin.core.outcome import (
    CycleDetectedError,
    Ok,
    Outcome,
    Rejected,
    RejectionReason,
)
from category_admin.core.path_codec import (
    ancestor_chain,
    derive_path,
    is_descendant_of,
    rebuild_paths,
)
from category_admin.core.records import CategoryAttributes, CategoryRecord, Snapshot
from category_admin.core.reparent import move
from category_admin.core.slugs import slugify, unique_slug
from category_admin.core.stats import CategoryStats, compute_stats, top_categories
from category_admin.core.tree_builder import TreeNode, build_tree, find_node, flatten_tree

__all__ = [
    "CategoryAttributes",
    "CategoryFilter",
    "CategoryPage",
    "CategoryRecord",
    "CategoryStats",
    "CycleDetectedError",
    "Ok",
    "Outcome",
    "Rejected",
    "RejectionReason",
    "Snapshot",
    "TreeNode",
    "ancestor_chain",
    "build_tree",
    "category_path",
    "compute_stats",
    "create_category",
    "delete_category",
    "derive_path",
    "filter_categories",
    "find_by_slug",
    "find_node",
    "flatten_tree",
    "is_descendant_of",
    "is_name_available",
    "move",
    "rebuild_paths",
    "next_display_order",
    "normalize_all_groups",
    "normalize_group",
    "rename_category",
    "reorder",
    "set_active",
    "slugify",
    "toggle_active",
    "top_categories",
    "unique_slug",
    "update_attributes",
    "update_description",
    "validate_move",
]
