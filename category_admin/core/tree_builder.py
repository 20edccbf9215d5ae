"""Build an ordered forest from a flat, unordered category snapshot."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from category_admin.core.records import CategoryRecord
from category_admin.infra.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TreeNode:
    """A category record with its ordered children."""

    record: CategoryRecord
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def has_children(self) -> bool:
        return bool(self.children)


def _sibling_key(record: CategoryRecord) -> tuple[int, str]:
    return (record.display_order, record.id)


def build_tree(records: Iterable[CategoryRecord]) -> list[TreeNode]:
    """Convert flat records into a forest ordered by display_order.

    Records with no parent, or whose parent is absent from the input, become
    roots so that partial snapshots still render. Siblings are sorted by
    display_order, ties broken by id.

    Uses an explicit work-list; depth of the hierarchy never grows the call
    stack.

    Args:
        records: Category records in any order

    Returns:
        Root TreeNodes, each fully materialized
    """
    records = list(records)
    known_ids = {record.id for record in records}

    children_of: dict[str, list[CategoryRecord]] = defaultdict(list)
    roots: list[CategoryRecord] = []
    for record in records:
        if record.parent_id is None or record.parent_id not in known_ids:
            roots.append(record)
        else:
            children_of[record.parent_id].append(record)

    roots.sort(key=_sibling_key)
    forest = [TreeNode(record=record) for record in roots]

    stack = list(forest)
    placed = len(forest)
    while stack:
        node = stack.pop()
        kids = sorted(children_of.get(node.id, ()), key=_sibling_key)
        node.children = [TreeNode(record=kid) for kid in kids]
        placed += len(node.children)
        stack.extend(node.children)

    if placed != len(records):
        reachable = {record.id for record in flatten_tree(forest)}
        orphaned = sorted(known_ids - reachable)
        logger.warning(
            "Categories unreachable from any root were left out of the tree",
            count=len(orphaned),
            category_ids=orphaned,
        )

    return forest


def flatten_tree(forest: Sequence[TreeNode]) -> list[CategoryRecord]:
    """Flatten a forest back into records, pre-order."""
    flat: list[CategoryRecord] = []
    stack = list(reversed(forest))
    while stack:
        node = stack.pop()
        flat.append(node.record)
        stack.extend(reversed(node.children))
    return flat


def find_node(forest: Sequence[TreeNode], node_id: str) -> TreeNode | None:
    """Locate a node in a built forest by id."""
    stack = list(forest)
    while stack:
        node = stack.pop()
        if node.id == node_id:
            return node
        stack.extend(node.children)
    return None
