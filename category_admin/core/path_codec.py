"""Materialized path helpers.

Converts between a node's parent links and its stored path/level fields.
"""

from collections.abc import Mapping, Sequence

from category_admin.core.outcome import CycleDetectedError
from category_admin.core.records import (
    CategoryRecord,
    Snapshot,
    apply_updates,
    index_by_id,
)


def _as_index(
    all_nodes: Sequence[CategoryRecord] | Mapping[str, CategoryRecord],
) -> Mapping[str, CategoryRecord]:
    if isinstance(all_nodes, Mapping):
        return all_nodes
    return index_by_id(all_nodes)


def ancestor_chain(
    node_id: str,
    all_nodes: Sequence[CategoryRecord] | Mapping[str, CategoryRecord],
) -> list[str]:
    """Walk parent links and return ancestor ids, root first.

    The node itself is excluded. A parent id that is not present in
    all_nodes ends the chain.

    Args:
        node_id: Category whose ancestors are wanted
        all_nodes: Full snapshot, as a sequence or an id index

    Returns:
        Ancestor ids ordered from root to direct parent

    Raises:
        CycleDetectedError: If the walk revisits a node or needs more hops
            than there are nodes
    """
    index = _as_index(all_nodes)
    node = index.get(node_id)
    if node is None:
        return []

    chain: list[str] = []
    seen = {node_id}
    current = node.parent_id
    max_hops = len(index)

    while current is not None and current in index:
        if current in seen or len(chain) >= max_hops:
            raise CycleDetectedError(node_id, [node_id, *reversed(chain), current])
        seen.add(current)
        chain.append(current)
        current = index[current].parent_id

    chain.reverse()
    return chain


def is_descendant_of(
    candidate_id: str,
    ancestor_id: str,
    all_nodes: Sequence[CategoryRecord] | Mapping[str, CategoryRecord],
) -> bool:
    """True iff ancestor_id lies on candidate_id's ancestor chain."""
    return ancestor_id in ancestor_chain(candidate_id, all_nodes)


def derive_path(parent: CategoryRecord | None) -> tuple[str, ...]:
    """Path for a child of parent; empty for a root."""
    if parent is None:
        return ()
    return (*parent.path, parent.id)


def rebuild_paths(all_nodes: Sequence[CategoryRecord]) -> Snapshot:
    """Re-derive path and level of every node from its parent links.

    Nodes whose parent is missing from the snapshot are detached and become
    roots. Records that already agree with their parent links are returned
    unchanged.

    Raises:
        CycleDetectedError: If parent links form a cycle
    """
    index = index_by_id(all_nodes)
    updates: dict[str, CategoryRecord] = {}

    for record in all_nodes:
        parent_id = record.parent_id if record.parent_id in index else None
        if parent_id is None:
            path: tuple[str, ...] = ()
        else:
            path = (*ancestor_chain(parent_id, index), parent_id)
        if record.parent_id != parent_id or record.path != path or record.level != len(path):
            updates[record.id] = record.with_hierarchy(parent_id, path)

    return apply_updates(all_nodes, updates)
