"""Create, rename, activate and delete categories on a snapshot.

Each operation returns a new snapshot (or a Rejected reason) and leaves the
input untouched.
"""

from collections.abc import Sequence

from category_admin.core.display_order import (
    next_display_order,
    normalize_group,
    rank_updates,
)
from category_admin.core.outcome import Ok, Outcome, Rejected, RejectionReason
from category_admin.core.path_codec import ancestor_chain, derive_path
from category_admin.core.records import (
    CategoryAttributes,
    CategoryRecord,
    Snapshot,
    apply_updates,
    index_by_id,
    normalize_name,
    siblings_of,
)
from category_admin.core.slugs import unique_slug


def _not_found(node_id: str) -> Rejected:
    return Rejected(RejectionReason.NOT_FOUND, f"Category '{node_id}' not found")


def _duplicate(name: str) -> Rejected:
    return Rejected(
        RejectionReason.DUPLICATE_NAME,
        f"A sibling named '{name.strip()}' already exists",
    )


def is_name_available(
    all_nodes: Sequence[CategoryRecord],
    name: str,
    parent_id: str | None = None,
    exclude_id: str | None = None,
) -> bool:
    """True if no sibling under parent_id already uses name.

    Args:
        all_nodes: Full snapshot
        name: Candidate name (compared trimmed and case-insensitively)
        parent_id: Sibling group to check, None for roots
        exclude_id: Category to ignore, typically the one being renamed
    """
    key = normalize_name(name)
    return not any(
        record.parent_id == parent_id
        and record.id != exclude_id
        and normalize_name(record.name) == key
        for record in all_nodes
    )


def create_category(
    all_nodes: Sequence[CategoryRecord],
    *,
    category_id: str,
    name: str,
    parent_id: str | None = None,
    display_order: int | None = None,
    is_active: bool = True,
    description: str | None = None,
    attributes: CategoryAttributes | None = None,
) -> Outcome[tuple[Snapshot, CategoryRecord]]:
    """Add a category; path, level and slug are derived.

    Without display_order the category is appended after its siblings.
    With it, the category is inserted at that position (clamped to the
    group size) and the sibling group is re-ranked densely.

    Returns:
        Ok((new snapshot, created record)), or Rejected with
        PARENT_NOT_FOUND or DUPLICATE_NAME
    """
    index = index_by_id(all_nodes)

    parent = None
    if parent_id is not None:
        parent = index.get(parent_id)
        if parent is None:
            return Rejected(
                RejectionReason.PARENT_NOT_FOUND,
                f"Parent category '{parent_id}' not found",
            )

    if not is_name_available(all_nodes, name, parent_id):
        return _duplicate(name)

    siblings = siblings_of(parent_id, all_nodes)
    if display_order is None:
        position = None
        display_order = next_display_order(parent_id, siblings)
    else:
        position = max(0, min(display_order, len(siblings)))
        display_order = position

    path = derive_path(parent)
    record = CategoryRecord(
        id=category_id,
        name=name.strip(),
        parent_id=parent_id,
        path=path,
        level=len(path),
        display_order=display_order,
        is_active=is_active,
        description=description,
        slug=unique_slug(name, (r.slug for r in all_nodes)),
        attributes=attributes or CategoryAttributes(),
    )

    updates: dict[str, CategoryRecord] = {}
    if position is not None:
        siblings.insert(position, record)
        updates = rank_updates(siblings)
    return Ok(((*apply_updates(all_nodes, updates), record), record))


def rename_category(
    all_nodes: Sequence[CategoryRecord], node_id: str, new_name: str
) -> Outcome[Snapshot]:
    """Rename a category, keeping names unique among its siblings.

    The slug is derived again from the new name.
    """
    node = index_by_id(all_nodes).get(node_id)
    if node is None:
        return _not_found(node_id)

    if not is_name_available(all_nodes, new_name, node.parent_id, exclude_id=node_id):
        return _duplicate(new_name)

    slug = unique_slug(new_name, (r.slug for r in all_nodes if r.id != node_id))
    return Ok(apply_updates(all_nodes, {node_id: node.with_name(new_name.strip(), slug)}))


def set_active(
    all_nodes: Sequence[CategoryRecord], node_id: str, is_active: bool
) -> Outcome[Snapshot]:
    """Activate or deactivate a single category; children are unaffected."""
    node = index_by_id(all_nodes).get(node_id)
    if node is None:
        return _not_found(node_id)
    return Ok(apply_updates(all_nodes, {node_id: node.with_active(is_active)}))


def toggle_active(all_nodes: Sequence[CategoryRecord], node_id: str) -> Outcome[Snapshot]:
    node = index_by_id(all_nodes).get(node_id)
    if node is None:
        return _not_found(node_id)
    return set_active(all_nodes, node_id, not node.is_active)


def update_description(
    all_nodes: Sequence[CategoryRecord], node_id: str, description: str | None
) -> Outcome[Snapshot]:
    node = index_by_id(all_nodes).get(node_id)
    if node is None:
        return _not_found(node_id)
    return Ok(apply_updates(all_nodes, {node_id: node.with_description(description)}))


def update_attributes(
    all_nodes: Sequence[CategoryRecord], node_id: str, attributes: CategoryAttributes
) -> Outcome[Snapshot]:
    node = index_by_id(all_nodes).get(node_id)
    if node is None:
        return _not_found(node_id)
    return Ok(apply_updates(all_nodes, {node_id: node.with_attributes(attributes)}))


def find_by_slug(all_nodes: Sequence[CategoryRecord], slug: str) -> CategoryRecord | None:
    return next((record for record in all_nodes if record.slug == slug), None)


def delete_category(all_nodes: Sequence[CategoryRecord], node_id: str) -> Outcome[Snapshot]:
    """Remove a leaf category and close the gap among its siblings.

    Categories that still have children cannot be deleted; their children
    must be moved or deleted first.

    Returns:
        Ok(new snapshot), or Rejected with NOT_FOUND or HAS_CHILDREN
    """
    node = index_by_id(all_nodes).get(node_id)
    if node is None:
        return _not_found(node_id)

    children = sum(1 for record in all_nodes if record.parent_id == node_id)
    if children:
        return Rejected(
            RejectionReason.HAS_CHILDREN,
            f"Category '{node.name}' still has {children} subcategories",
        )

    remaining = tuple(record for record in all_nodes if record.id != node_id)
    return Ok(normalize_group(node.parent_id, remaining))


def category_path(
    all_nodes: Sequence[CategoryRecord], node_id: str
) -> list[CategoryRecord]:
    """Breadcrumb from the root down to node_id, inclusive.

    Returns an empty list if node_id is unknown.

    Raises:
        CycleDetectedError: If the snapshot already contains a cycle
    """
    index = index_by_id(all_nodes)
    node = index.get(node_id)
    if node is None:
        return []
    return [index[ancestor_id] for ancestor_id in ancestor_chain(node_id, index)] + [node]
