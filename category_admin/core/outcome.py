"""Tagged results returned by the category tree operations.

Expected validation failures (missing parent, duplicate name, cyclic target)
are returned as ``Rejected`` values so callers can map them to user-facing
messages. Only a corrupt input snapshot raises.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class RejectionReason(str, Enum):
    """Why a tree operation was refused."""

    NOT_FOUND = "not_found"
    SELF_PARENT = "self_parent"
    PARENT_NOT_FOUND = "parent_not_found"
    CYCLIC_MOVE = "cyclic_move"
    DUPLICATE_NAME = "duplicate_name"
    INCOMPLETE_REORDER = "incomplete_reorder"
    HAS_CHILDREN = "has_children"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Accepted operation carrying its value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    """Refused operation. Inputs were left unchanged."""

    reason: RejectionReason
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


Outcome = Ok[T] | Rejected


class CycleDetectedError(Exception):
    """Raised when the input snapshot already contains a parent cycle.

    A healthy store never reaches this; it is an integrity fault of the
    persisted data, not a rejected request.
    """

    def __init__(self, node_id: str, visited: list[str]) -> None:
        self.node_id = node_id
        self.visited = visited
        super().__init__(
            f"Parent chain of category '{node_id}' does not terminate: "
            f"{' -> '.join(visited)}"
        )
