"""Category Service - runs tree operations against the stored snapshot.

Every write goes through a single lock: the latest snapshot is reloaded,
the pure tree operation computes the new snapshot, and the repository
persists the difference before the lock is released. Moves and reorders
are therefore never computed against a stale snapshot within this process.
"""

import asyncio
from collections.abc import Callable
from typing import Any
from uuid import uuid4

from category_admin.core import lifecycle, reparent
from category_admin.core.display_order import reorder as reorder_siblings
from category_admin.core.filters import CategoryFilter, CategoryPage, filter_categories
from category_admin.core.outcome import (
    CycleDetectedError,
    Ok,
    Outcome,
    Rejected,
    RejectionReason,
)
from category_admin.core.records import (
    CategoryAttributes,
    CategoryRecord,
    Snapshot,
    index_by_id,
)
from category_admin.core.stats import CategoryStats, compute_stats
from category_admin.core.tree_builder import TreeNode, build_tree
from category_admin.infra.logging import get_logger
from category_admin.services.category_repository import CategoryRepository

logger = get_logger(__name__)

_UNSET: Any = object()


class CategoryService:
    """Reads and writes the category tree through a repository."""

    def __init__(self, repository: CategoryRepository, top_n: int = 10) -> None:
        """Initialize service.

        Args:
            repository: Snapshot store
            top_n: Default size of top_categories in stats
        """
        self.repository = repository
        self.top_n = top_n
        self._write_lock = asyncio.Lock()

    # =========================================================================
    # Reads
    # =========================================================================

    async def snapshot(self) -> Snapshot:
        return await self.repository.load_snapshot()

    async def get_tree(self) -> list[TreeNode]:
        return build_tree(await self.snapshot())

    async def get_stats(self, top_n: int | None = None) -> CategoryStats:
        return compute_stats(await self.snapshot(), self.top_n if top_n is None else top_n)

    async def list_categories(self, flt: CategoryFilter) -> CategoryPage:
        return filter_categories(await self.snapshot(), flt)

    async def get_category(self, category_id: str) -> CategoryRecord | None:
        return index_by_id(await self.snapshot()).get(category_id)

    async def get_category_by_slug(self, slug: str) -> CategoryRecord | None:
        return lifecycle.find_by_slug(await self.snapshot(), slug)

    async def get_path(self, category_id: str) -> list[CategoryRecord]:
        """Breadcrumb from root to the category, empty if unknown."""
        snapshot = await self.snapshot()
        try:
            return lifecycle.category_path(snapshot, category_id)
        except CycleDetectedError as e:
            self._log_integrity_fault(e)
            raise

    async def is_name_available(
        self,
        name: str,
        parent_id: str | None = None,
        exclude_id: str | None = None,
    ) -> bool:
        return lifecycle.is_name_available(await self.snapshot(), name, parent_id, exclude_id)

    # =========================================================================
    # Writes
    # =========================================================================

    async def create(
        self,
        name: str,
        parent_id: str | None = None,
        display_order: int | None = None,
        is_active: bool = True,
        description: str | None = None,
        attributes: CategoryAttributes | None = None,
    ) -> Outcome[CategoryRecord]:
        """Create a category under parent_id (root when None)."""
        category_id = uuid4().hex
        created: list[CategoryRecord] = []

        def operation(snapshot: Snapshot) -> Outcome[Snapshot]:
            outcome = lifecycle.create_category(
                snapshot,
                category_id=category_id,
                name=name,
                parent_id=parent_id,
                display_order=display_order,
                is_active=is_active,
                description=description,
                attributes=attributes,
            )
            if isinstance(outcome, Rejected):
                return outcome
            new_snapshot, record = outcome.value
            created.append(record)
            return Ok(new_snapshot)

        outcome = await self._write("create", operation, category_id=category_id)
        if isinstance(outcome, Rejected):
            return outcome
        return Ok(created[0])

    async def update(
        self,
        category_id: str,
        name: str | None = None,
        is_active: bool | None = None,
        description: str | None = _UNSET,
        attributes: CategoryAttributes | None = None,
    ) -> Outcome[CategoryRecord]:
        """Apply a partial update; fields left out are not touched."""

        def operation(snapshot: Snapshot) -> Outcome[Snapshot]:
            if category_id not in index_by_id(snapshot):
                return Rejected(
                    RejectionReason.NOT_FOUND, f"Category '{category_id}' not found"
                )
            outcome: Outcome[Snapshot] = Ok(snapshot)
            if name is not None:
                outcome = lifecycle.rename_category(outcome.value, category_id, name)
                if isinstance(outcome, Rejected):
                    return outcome
            if description is not _UNSET:
                outcome = lifecycle.update_description(outcome.value, category_id, description)
                if isinstance(outcome, Rejected):
                    return outcome
            if is_active is not None:
                outcome = lifecycle.set_active(outcome.value, category_id, is_active)
                if isinstance(outcome, Rejected):
                    return outcome
            if attributes is not None:
                outcome = lifecycle.update_attributes(outcome.value, category_id, attributes)
                if isinstance(outcome, Rejected):
                    return outcome
            return outcome

        return await self._write_returning(category_id, "update", operation)

    async def toggle_status(self, category_id: str) -> Outcome[CategoryRecord]:
        return await self._write_returning(
            category_id,
            "toggle_status",
            lambda snapshot: lifecycle.toggle_active(snapshot, category_id),
        )

    async def move(
        self,
        category_id: str,
        new_parent_id: str | None,
        new_display_order: int | None = None,
    ) -> Outcome[CategoryRecord]:
        """Reparent a category together with its whole subtree."""
        return await self._write_returning(
            category_id,
            "move",
            lambda snapshot: reparent.move(
                category_id, new_parent_id, snapshot, new_display_order
            ),
            new_parent_id=new_parent_id,
        )

    async def reorder(
        self, parent_id: str | None, ordered_ids: list[str]
    ) -> Outcome[list[CategoryRecord]]:
        """Rank a sibling group in the given order; returns the group."""
        outcome = await self._write(
            "reorder",
            lambda snapshot: reorder_siblings(parent_id, ordered_ids, snapshot),
            parent_id=parent_id,
        )
        if isinstance(outcome, Rejected):
            return outcome
        index = index_by_id(outcome.value)
        return Ok([index[category_id] for category_id in ordered_ids])

    async def delete(self, category_id: str) -> Outcome[str]:
        """Delete a leaf category."""
        outcome = await self._write(
            "delete",
            lambda snapshot: lifecycle.delete_category(snapshot, category_id),
            category_id=category_id,
        )
        if isinstance(outcome, Rejected):
            return outcome
        return Ok(category_id)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _write(
        self,
        action: str,
        operation: Callable[[Snapshot], Outcome[Snapshot]],
        **log_context: Any,
    ) -> Outcome[Snapshot]:
        """Run operation on the latest snapshot and persist its result."""
        async with self._write_lock:
            before = await self.repository.load_snapshot()

            try:
                outcome = operation(before)
            except CycleDetectedError as e:
                self._log_integrity_fault(e)
                raise

            if isinstance(outcome, Rejected):
                logger.info(
                    "Category operation rejected",
                    action=action,
                    reason=outcome.reason.value,
                    detail=outcome.detail,
                    **log_context,
                )
                return outcome

            changes = await self.repository.save_snapshot(before, outcome.value)

        logger.info(
            "Category operation applied",
            action=action,
            inserted=len(changes.inserted),
            updated=len(changes.updated),
            deleted=len(changes.deleted),
            **log_context,
        )
        return outcome

    async def _write_returning(
        self,
        category_id: str,
        action: str,
        operation: Callable[[Snapshot], Outcome[Snapshot]],
        **log_context: Any,
    ) -> Outcome[CategoryRecord]:
        outcome = await self._write(action, operation, category_id=category_id, **log_context)
        if isinstance(outcome, Rejected):
            return outcome
        return Ok(index_by_id(outcome.value)[category_id])

    @staticmethod
    def _log_integrity_fault(error: CycleDetectedError) -> None:
        logger.error(
            "Category snapshot integrity fault: parent cycle",
            category_id=error.node_id,
            chain=error.visited,
        )


# Global singleton instance
_category_service: CategoryService | None = None


def get_category_service() -> CategoryService:
    """Get or create the global category service.

    Uses the in-memory store when settings.use_memory_store is set,
    the database otherwise.

    Returns:
        Global CategoryService instance
    """
    global _category_service

    if _category_service is None:
        from category_admin.config import settings
        from category_admin.services.category_repository import (
            InMemoryCategoryRepository,
            SqlCategoryRepository,
        )

        repository: CategoryRepository
        if settings.use_memory_store:
            repository = InMemoryCategoryRepository()
        else:
            repository = SqlCategoryRepository()

        _category_service = CategoryService(repository, top_n=settings.stats_top_n)
        logger.info(
            "Created global CategoryService",
            store=type(repository).__name__,
        )

    return _category_service
