"""Tests for snapshot diffing and the SQL category repository."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from category_admin.core.display_order import reorder
from category_admin.core.lifecycle import create_category, delete_category, rename_category
from category_admin.core.records import CategoryAttributes, CategoryRecord, index_by_id
from category_admin.core.reparent import move
from category_admin.infra.database import create_tables
from category_admin.services.category_repository import (
    InMemoryCategoryRepository,
    SqlCategoryRepository,
    diff_snapshots,
)


class TestDiffSnapshots:
    """Tests for diff_snapshots."""

    def test_identical_snapshots(self, catalog_snapshot):
        changes = diff_snapshots(catalog_snapshot, catalog_snapshot)
        assert changes.is_empty

    def test_move_updates_only_changed_rows(self, catalog_snapshot):
        after = move("phones", "fashion", catalog_snapshot).value
        changes = diff_snapshots(catalog_snapshot, after)

        assert changes.inserted == []
        assert changes.deleted == []
        # phones, its two children and laptops closing the gap
        assert {r.id for r in changes.updated} == {"phones", "android", "iphone", "laptops"}

    def test_insert_and_delete(self, catalog_snapshot):
        extra = CategoryRecord(id="garden", name="Garden", display_order=2)
        after = (*catalog_snapshot[1:], extra)
        changes = diff_snapshots(catalog_snapshot, after)

        assert changes.inserted == [extra]
        assert changes.deleted == ["electronics"]


class TestInMemoryRepository:
    """Tests for InMemoryCategoryRepository."""

    @pytest.mark.asyncio
    async def test_save_replaces_snapshot(self, catalog_snapshot):
        repository = InMemoryCategoryRepository(catalog_snapshot)
        after = delete_category(catalog_snapshot, "shoes").value

        changes = await repository.save_snapshot(catalog_snapshot, after)

        assert changes.deleted == ["shoes"]
        assert await repository.load_snapshot() == after
        assert await repository.ping() is True


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """In-memory SQLite database with the categories table."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(engine)
    yield async_sessionmaker(bind=engine, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def sql_repository(session_factory, catalog_snapshot) -> SqlCategoryRepository:
    """SQL repository seeded with the catalog."""
    repository = SqlCategoryRepository(session_factory)
    await repository.save_snapshot((), catalog_snapshot)
    return repository


class TestSqlRepository:
    """Tests for SqlCategoryRepository against SQLite."""

    @pytest.mark.asyncio
    async def test_round_trip(self, sql_repository, catalog_snapshot):
        loaded = await sql_repository.load_snapshot()
        assert index_by_id(loaded) == index_by_id(catalog_snapshot)

    @pytest.mark.asyncio
    async def test_persist_move(self, sql_repository, catalog_snapshot):
        after = move("phones", "fashion", catalog_snapshot).value

        changes = await sql_repository.save_snapshot(catalog_snapshot, after)

        assert len(changes.updated) == 4
        loaded = index_by_id(await sql_repository.load_snapshot())
        assert loaded["android"].path == ("fashion", "phones")
        assert loaded["android"].level == 2
        assert loaded["phones"].parent_id == "fashion"
        assert loaded["laptops"].display_order == 0

    @pytest.mark.asyncio
    async def test_persist_reorder_and_delete(self, sql_repository, catalog_snapshot):
        reordered = reorder(None, ["fashion", "electronics"], catalog_snapshot).value
        await sql_repository.save_snapshot(catalog_snapshot, reordered)
        deleted = delete_category(reordered, "android").value
        await sql_repository.save_snapshot(reordered, deleted)

        loaded = index_by_id(await sql_repository.load_snapshot())
        assert loaded["fashion"].display_order == 0
        assert loaded["electronics"].display_order == 1
        assert "android" not in loaded
        assert loaded["iphone"].display_order == 0

    @pytest.mark.asyncio
    async def test_persist_slug_and_attributes(self, sql_repository, catalog_snapshot):
        attributes = CategoryAttributes(supported_genders=("women",), has_size_guide=True)
        created, record = create_category(
            catalog_snapshot,
            category_id="dresses",
            name="Dresses",
            parent_id="fashion",
            attributes=attributes,
        ).value
        renamed = rename_category(created, "laptops", "Notebooks").value

        await sql_repository.save_snapshot(catalog_snapshot, renamed)

        loaded = index_by_id(await sql_repository.load_snapshot())
        assert loaded["dresses"] == record
        assert loaded["dresses"].attributes.has_gender_variants is True
        assert loaded["laptops"].slug == "notebooks"

    @pytest.mark.asyncio
    async def test_persist_insert_at_taken_position(self, sql_repository, catalog_snapshot):
        after, _ = create_category(
            catalog_snapshot,
            category_id="tv",
            name="TV",
            parent_id="electronics",
            display_order=0,
        ).value

        await sql_repository.save_snapshot(catalog_snapshot, after)

        loaded = index_by_id(await sql_repository.load_snapshot())
        orders = [loaded[i].display_order for i in ("tv", "phones", "laptops")]
        assert orders == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_empty_diff_is_noop(self, sql_repository, catalog_snapshot):
        changes = await sql_repository.save_snapshot(catalog_snapshot, catalog_snapshot)
        assert changes.is_empty

    @pytest.mark.asyncio
    async def test_ping(self, sql_repository):
        assert await sql_repository.ping() is True
