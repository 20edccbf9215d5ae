"""Category record that flows through the tree operations."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

Snapshot = tuple["CategoryRecord", ...]

GENDERS = ("men", "women", "kids", "unisex")


@dataclass(frozen=True)
class CategoryAttributes:
    """Product attributes that apply to everything in a category.

    has_gender_variants is implied by a non-empty supported_genders.
    """

    supported_genders: tuple[str, ...] = ()
    has_gender_variants: bool = False
    has_size_guide: bool = False
    requires_fitting: bool = False

    def __post_init__(self) -> None:
        unknown = set(self.supported_genders) - set(GENDERS)
        if unknown:
            raise ValueError(f"Unknown genders: {sorted(unknown)}")
        genders = tuple(g for g in GENDERS if g in self.supported_genders)
        object.__setattr__(self, "supported_genders", genders)
        if genders:
            object.__setattr__(self, "has_gender_variants", True)

    def to_dict(self) -> dict[str, Any]:
        return {
            "supported_genders": list(self.supported_genders),
            "has_gender_variants": self.has_gender_variants,
            "has_size_guide": self.has_size_guide,
            "requires_fitting": self.requires_fitting,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "CategoryAttributes":
        data = data or {}
        return cls(
            supported_genders=tuple(data.get("supported_genders") or ()),
            has_gender_variants=bool(data.get("has_gender_variants", False)),
            has_size_guide=bool(data.get("has_size_guide", False)),
            requires_fitting=bool(data.get("requires_fitting", False)),
        )


@dataclass(frozen=True)
class CategoryRecord:
    """Immutable category as stored by the persistence layer.

    Every operation receives records and returns new ones.
    Original records are never mutated.

    Attributes:
        id: Unique, immutable identity
        name: Display label, unique among siblings
        slug: URL key derived from the name, unique across the catalogue
        parent_id: Parent category id, None for a root
        path: Ancestor ids from root to (excluding) self
        level: Depth, always len(path)
        display_order: Rank among siblings
        is_active: Status flag, independent of hierarchy
        product_count: Owned by the product service, aggregation input only
        description: Free text carried through unchanged
        attributes: Product attributes shared by the category
    """

    id: str
    name: str
    parent_id: str | None = None
    path: tuple[str, ...] = ()
    level: int = 0
    display_order: int = 0
    is_active: bool = True
    product_count: int = 0
    description: str | None = None
    slug: str = ""
    attributes: CategoryAttributes = field(default_factory=CategoryAttributes)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def with_hierarchy(
        self, parent_id: str | None, path: tuple[str, ...]
    ) -> "CategoryRecord":
        """Return new record placed under parent_id with the given path.

        Level is derived from the path so the two can never disagree.
        """
        return replace(self, parent_id=parent_id, path=tuple(path), level=len(path))

    def with_display_order(self, display_order: int) -> "CategoryRecord":
        return replace(self, display_order=display_order)

    def with_name(self, name: str, slug: str) -> "CategoryRecord":
        return replace(self, name=name, slug=slug)

    def with_active(self, is_active: bool) -> "CategoryRecord":
        return replace(self, is_active=is_active)

    def with_description(self, description: str | None) -> "CategoryRecord":
        return replace(self, description=description)

    def with_attributes(self, attributes: CategoryAttributes) -> "CategoryRecord":
        return replace(self, attributes=attributes)


def index_by_id(records: Iterable[CategoryRecord]) -> dict[str, CategoryRecord]:
    """Build an id -> record map."""
    return {record.id: record for record in records}


def siblings_of(
    parent_id: str | None, records: Iterable[CategoryRecord]
) -> list[CategoryRecord]:
    """Return records in the sibling group of parent_id, sorted by rank.

    Records whose parent is missing from the input are not part of the root
    group here; only an explicit None parent makes a root sibling.
    """
    group = [record for record in records if record.parent_id == parent_id]
    group.sort(key=lambda record: (record.display_order, record.id))
    return group


def normalize_name(name: str) -> str:
    """Key used for sibling name uniqueness."""
    return name.strip().casefold()


def apply_updates(
    records: Sequence[CategoryRecord], updates: dict[str, CategoryRecord]
) -> Snapshot:
    """Return a new snapshot with records replaced by id, order preserved."""
    return tuple(updates.get(record.id, record) for record in records)
