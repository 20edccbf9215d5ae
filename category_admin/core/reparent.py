"""Reparenting: move a category and cascade path/level to its subtree."""

from collections import defaultdict, deque
from collections.abc import Sequence

from category_admin.core.display_order import next_display_order, rank_updates
from category_admin.core.move_validator import validate_move
from category_admin.core.outcome import CycleDetectedError, Ok, Outcome, Rejected
from category_admin.core.path_codec import derive_path
from category_admin.core.records import (
    CategoryRecord,
    Snapshot,
    apply_updates,
    index_by_id,
    siblings_of,
)
from category_admin.infra.logging import get_logger

logger = get_logger(__name__)


def move(
    node_id: str,
    new_parent_id: str | None,
    all_nodes: Sequence[CategoryRecord],
    new_display_order: int | None = None,
) -> Outcome[Snapshot]:
    """Move node_id under new_parent_id.

    The moved node gets its path/level from the new parent. Its existing
    descendants are then walked breadth-first and each one is re-derived
    from its own (unchanged) parent, so only the ids above the moved node
    change.

    Without new_display_order the node is appended after its new siblings.
    With it, the new sibling group is re-ranked densely with the node at
    that position (clamped to the group size). When the parent changes,
    the group the node left is re-ranked densely as well.

    The new snapshot is built completely before it is returned. On
    rejection only the reason comes back and the input is untouched.

    Args:
        node_id: Category to move
        new_parent_id: Target parent id, None to make it a root
        all_nodes: Full, current snapshot
        new_display_order: Optional position among the new siblings

    Returns:
        Ok with the updated snapshot, or the validator's Rejected

    Raises:
        CycleDetectedError: If the snapshot already contains a cycle
    """
    verdict = validate_move(node_id, new_parent_id, all_nodes)
    if isinstance(verdict, Rejected):
        logger.info(
            "Category move rejected",
            category_id=node_id,
            new_parent_id=new_parent_id,
            reason=verdict.reason.value,
        )
        return verdict

    index = index_by_id(all_nodes)
    node = verdict.value
    parent = index.get(new_parent_id) if new_parent_id is not None else None

    moved = node.with_hierarchy(new_parent_id, derive_path(parent))
    updates: dict[str, CategoryRecord] = {}

    if node.parent_id != new_parent_id:
        former_siblings = [
            record for record in siblings_of(node.parent_id, all_nodes) if record.id != node_id
        ]
        updates.update(rank_updates(former_siblings))

    new_siblings = [
        record for record in siblings_of(new_parent_id, all_nodes) if record.id != node_id
    ]
    if new_display_order is None:
        if node.parent_id != new_parent_id:
            moved = moved.with_display_order(
                next_display_order(new_parent_id, new_siblings)
            )
    else:
        position = max(0, min(new_display_order, len(new_siblings)))
        new_siblings.insert(position, moved)
        updates.update(rank_updates(new_siblings))
        moved = updates.get(node_id, moved)

    updates[node_id] = moved

    children_of: dict[str, list[CategoryRecord]] = defaultdict(list)
    for record in all_nodes:
        if record.parent_id is not None:
            children_of[record.parent_id].append(record)

    queue: deque[CategoryRecord] = deque([moved])
    visited = {node_id}
    descendants = 0
    while queue:
        current = queue.popleft()
        child_path = derive_path(current)
        for child in children_of.get(current.id, ()):
            if child.id in visited:
                raise CycleDetectedError(node_id, [*child_path, child.id])
            visited.add(child.id)
            updated = child.with_hierarchy(child.parent_id, child_path)
            updates[child.id] = updated
            queue.append(updated)
            descendants += 1

    logger.info(
        "Category moved",
        category_id=node_id,
        old_parent_id=node.parent_id,
        new_parent_id=new_parent_id,
        level=moved.level,
        descendants=descendants,
    )
    return Ok(apply_updates(all_nodes, updates))
