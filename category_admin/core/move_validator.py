"""Legality check for moving a category under a new parent."""

from collections.abc import Sequence

from category_admin.core.outcome import Ok, Outcome, Rejected, RejectionReason
from category_admin.core.path_codec import is_descendant_of
from category_admin.core.records import CategoryRecord, index_by_id, normalize_name


def validate_move(
    node_id: str,
    new_parent_id: str | None,
    all_nodes: Sequence[CategoryRecord],
) -> Outcome[CategoryRecord]:
    """Decide whether node_id may be placed under new_parent_id.

    Checks run in order and the first failure wins:
    1. the node must exist
    2. a node cannot be its own parent
    3. the new parent must exist (None means "make root")
    4. the new parent cannot be a descendant of the node
    5. no sibling under the new parent may already use the node's name

    Args:
        node_id: Category being moved
        new_parent_id: Target parent id, or None for root
        all_nodes: Full snapshot

    Returns:
        Ok carrying the node being moved, or Rejected with the reason

    Raises:
        CycleDetectedError: If the snapshot already contains a cycle
    """
    index = index_by_id(all_nodes)

    node = index.get(node_id)
    if node is None:
        return Rejected(RejectionReason.NOT_FOUND, f"Category '{node_id}' not found")

    if new_parent_id == node_id:
        return Rejected(
            RejectionReason.SELF_PARENT,
            "A category cannot be its own parent",
        )

    if new_parent_id is not None and new_parent_id not in index:
        return Rejected(
            RejectionReason.PARENT_NOT_FOUND,
            f"Parent category '{new_parent_id}' not found",
        )

    if new_parent_id is not None and is_descendant_of(new_parent_id, node_id, index):
        return Rejected(
            RejectionReason.CYCLIC_MOVE,
            f"Cannot move '{node.name}' under its own descendant",
        )

    key = normalize_name(node.name)
    for other in index.values():
        if (
            other.id != node_id
            and other.parent_id == new_parent_id
            and normalize_name(other.name) == key
        ):
            return Rejected(
                RejectionReason.DUPLICATE_NAME,
                f"A sibling named '{other.name}' already exists",
            )

    return Ok(node)
