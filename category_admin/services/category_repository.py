"""Category Repository - loads and persists category snapshots.

The tree operations work on whole snapshots. Repositories hand out the
current snapshot and write back the difference between two snapshots in a
single transaction, so a move that touches a whole subtree lands entirely
or not at all.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy import delete, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from category_admin.core.records import CategoryAttributes, CategoryRecord, Snapshot
from category_admin.infra.database import get_db_session
from category_admin.infra.logging import get_logger
from category_admin.models.category import Category

logger = get_logger(__name__)


@dataclass(frozen=True)
class SnapshotDiff:
    """Rows to insert, update and delete to turn one snapshot into another."""

    inserted: list[CategoryRecord] = field(default_factory=list)
    updated: list[CategoryRecord] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.inserted or self.updated or self.deleted)


def diff_snapshots(before: Sequence[CategoryRecord], after: Sequence[CategoryRecord]) -> SnapshotDiff:
    """Compare two snapshots by id."""
    old = {record.id: record for record in before}
    new = {record.id: record for record in after}

    return SnapshotDiff(
        inserted=[record for record_id, record in new.items() if record_id not in old],
        updated=[
            record
            for record_id, record in new.items()
            if record_id in old and old[record_id] != record
        ],
        deleted=[record_id for record_id in old if record_id not in new],
    )


def to_record(row: Category) -> CategoryRecord:
    """Convert an ORM row to a core record."""
    return CategoryRecord(
        id=row.id,
        name=row.name,
        parent_id=row.parent_id,
        path=tuple(row.path or ()),
        level=row.level,
        display_order=row.display_order,
        is_active=row.is_active,
        product_count=row.product_count,
        description=row.description,
        slug=row.slug,
        attributes=CategoryAttributes.from_dict(row.attributes),
    )


def _row_values(record: CategoryRecord) -> dict:
    return {
        "name": record.name,
        "parent_id": record.parent_id,
        "path": list(record.path),
        "level": record.level,
        "display_order": record.display_order,
        "is_active": record.is_active,
        "product_count": record.product_count,
        "description": record.description,
        "slug": record.slug,
        "attributes": record.attributes.to_dict(),
    }


class CategoryRepository(Protocol):
    """Storage for category snapshots."""

    async def load_snapshot(self) -> Snapshot: ...

    async def save_snapshot(self, before: Snapshot, after: Snapshot) -> SnapshotDiff: ...

    async def ping(self) -> bool: ...


class InMemoryCategoryRepository:
    """Process-local store, used for development and tests."""

    def __init__(self, records: Sequence[CategoryRecord] = ()) -> None:
        self._records: Snapshot = tuple(records)

    async def load_snapshot(self) -> Snapshot:
        return self._records

    async def save_snapshot(self, before: Snapshot, after: Snapshot) -> SnapshotDiff:
        changes = diff_snapshots(before, after)
        self._records = tuple(after)
        return changes

    async def ping(self) -> bool:
        return True


class SqlCategoryRepository:
    """Category store backed by the `categories` table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        """Initialize repository.

        Args:
            session_factory: Session factory (defaults to the global one)
        """
        self._session_factory = session_factory

    async def load_snapshot(self) -> Snapshot:
        async with get_db_session(self._session_factory) as session:
            result = await session.execute(select(Category))
            rows = result.scalars().all()

        snapshot = tuple(to_record(row) for row in rows)
        logger.debug("Loaded category snapshot", count=len(snapshot))
        return snapshot

    async def save_snapshot(self, before: Snapshot, after: Snapshot) -> SnapshotDiff:
        """Write the difference between before and after in one transaction.

        Args:
            before: Snapshot the change was computed from
            after: Snapshot to persist

        Returns:
            The applied SnapshotDiff
        """
        changes = diff_snapshots(before, after)
        if changes.is_empty:
            return changes

        async with get_db_session(self._session_factory) as session:
            # Parents before children for the self-referencing foreign key
            for record in sorted(changes.inserted, key=lambda r: r.level):
                session.add(Category(id=record.id, **_row_values(record)))
            await session.flush()

            for record in changes.updated:
                await session.execute(
                    update(Category)
                    .where(Category.id == record.id)
                    .values(**_row_values(record))
                )

            if changes.deleted:
                await session.execute(
                    delete(Category).where(Category.id.in_(changes.deleted))
                )

        logger.info(
            "Persisted category changes",
            inserted=len(changes.inserted),
            updated=len(changes.updated),
            deleted=len(changes.deleted),
        )
        return changes

    async def ping(self) -> bool:
        try:
            async with get_db_session(self._session_factory) as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Category store unreachable", error=str(e))
            return False
