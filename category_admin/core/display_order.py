"""Dense ranking of categories within a sibling group."""

from collections.abc import Sequence

from category_admin.core.outcome import Ok, Outcome, Rejected, RejectionReason
from category_admin.core.records import (
    CategoryRecord,
    Snapshot,
    apply_updates,
    siblings_of,
)
from category_admin.infra.logging import get_logger

logger = get_logger(__name__)


def rank_updates(ordered: Sequence[CategoryRecord]) -> dict[str, CategoryRecord]:
    """Records whose display_order differs from their index in ordered."""
    return {
        record.id: record.with_display_order(index)
        for index, record in enumerate(ordered)
        if record.display_order != index
    }


def reorder(
    parent_id: str | None,
    ordered_ids: Sequence[str],
    all_nodes: Sequence[CategoryRecord],
) -> Outcome[Snapshot]:
    """Assign display_order = position for each sibling in ordered_ids.

    The root group is the records whose parent_id is None. A record whose
    parent is missing from the snapshot is shown as a root by build_tree
    but belongs to no reorderable group until rebuild_paths detaches it.

    Args:
        parent_id: Sibling group to reorder, None for the roots
        ordered_ids: Every current sibling id exactly once, in target order
        all_nodes: Full snapshot

    Returns:
        Ok with the updated snapshot, or Rejected(INCOMPLETE_REORDER) when
        ordered_ids is not exactly the sibling group
    """
    group = {record.id: record for record in all_nodes if record.parent_id == parent_id}

    if len(ordered_ids) != len(group) or set(ordered_ids) != group.keys():
        missing = sorted(group.keys() - set(ordered_ids))
        unexpected = sorted(set(ordered_ids) - group.keys())
        logger.debug(
            "Reorder rejected",
            parent_id=parent_id,
            missing=missing,
            unexpected=unexpected,
            requested=len(ordered_ids),
            siblings=len(group),
        )
        return Rejected(
            RejectionReason.INCOMPLETE_REORDER,
            "Order must list every sibling exactly once",
        )

    updates = rank_updates([group[node_id] for node_id in ordered_ids])
    return Ok(apply_updates(all_nodes, updates))


def normalize_group(
    parent_id: str | None, all_nodes: Sequence[CategoryRecord]
) -> Snapshot:
    """Re-rank a sibling group densely, keeping its current relative order."""
    updates = rank_updates(siblings_of(parent_id, all_nodes))
    return apply_updates(all_nodes, updates)


def next_display_order(
    parent_id: str | None, all_nodes: Sequence[CategoryRecord]
) -> int:
    """Rank that places a new node after every current sibling."""
    orders = [r.display_order for r in all_nodes if r.parent_id == parent_id]
    return max(orders) + 1 if orders else 0


def normalize_all_groups(all_nodes: Sequence[CategoryRecord]) -> Snapshot:
    """normalize_group applied to every sibling group of the snapshot."""
    snapshot = tuple(all_nodes)
    for parent_id in dict.fromkeys(record.parent_id for record in snapshot):
        snapshot = normalize_group(parent_id, snapshot)
    return snapshot
