"""Shared fixtures for category tree tests."""

from collections import defaultdict
from collections.abc import AsyncGenerator, Callable, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from category_admin.core.path_codec import ancestor_chain
from category_admin.core.records import CategoryRecord, index_by_id
from category_admin.services.category_repository import InMemoryCategoryRepository
from category_admin.services.category_service import CategoryService


@pytest.fixture
def abc_snapshot() -> tuple[CategoryRecord, ...]:
    """A is root, B under A, C under B."""
    return (
        CategoryRecord(id="A", name="Alpha"),
        CategoryRecord(id="B", name="Beta", parent_id="A", path=("A",), level=1),
        CategoryRecord(id="C", name="Gamma", parent_id="B", path=("A", "B"), level=2),
    )


@pytest.fixture
def catalog_snapshot() -> tuple[CategoryRecord, ...]:
    """Two root departments with nested subcategories.

    electronics
      phones
        android
        iphone
      laptops
    fashion (inactive)
      shoes
    """
    return (
        CategoryRecord(id="electronics", name="Electronics", slug="electronics", display_order=0),
        CategoryRecord(
            id="phones",
            name="Phones",
            slug="phones",
            parent_id="electronics",
            path=("electronics",),
            level=1,
            display_order=0,
            product_count=12,
        ),
        CategoryRecord(
            id="android",
            name="Android",
            slug="android",
            parent_id="phones",
            path=("electronics", "phones"),
            level=2,
            display_order=0,
            product_count=7,
        ),
        CategoryRecord(
            id="iphone",
            name="iPhone",
            slug="iphone",
            parent_id="phones",
            path=("electronics", "phones"),
            level=2,
            display_order=1,
            product_count=5,
        ),
        CategoryRecord(
            id="laptops",
            name="Laptops",
            slug="laptops",
            parent_id="electronics",
            path=("electronics",),
            level=1,
            display_order=1,
            product_count=9,
            description="Notebooks and ultrabooks",
        ),
        CategoryRecord(
            id="fashion", name="Fashion", slug="fashion", display_order=1, is_active=False
        ),
        CategoryRecord(
            id="shoes",
            name="Shoes",
            slug="shoes",
            parent_id="fashion",
            path=("fashion",),
            level=1,
            display_order=0,
            product_count=9,
        ),
    )


@pytest.fixture
def assert_tree_invariants() -> Callable[[Sequence[CategoryRecord]], None]:
    """Check path, level, no-cycle and dense sibling rank invariants."""

    def check(snapshot: Sequence[CategoryRecord]) -> None:
        index = index_by_id(snapshot)
        groups: dict[str | None, list[int]] = defaultdict(list)
        for record in snapshot:
            if record.parent_id is None:
                assert record.path == ()
            else:
                parent = index[record.parent_id]
                assert record.path == (*parent.path, parent.id)
            assert record.level == len(record.path)
            assert record.id not in ancestor_chain(record.id, index)
            groups[record.parent_id].append(record.display_order)

        for parent_id, orders in groups.items():
            assert sorted(orders) == list(range(len(orders))), parent_id

        slugs = [record.slug for record in snapshot if record.slug]
        assert len(slugs) == len(set(slugs))

    return check


@pytest.fixture
def service(catalog_snapshot: tuple[CategoryRecord, ...]) -> CategoryService:
    """Service over an in-memory store seeded with the catalog."""
    return CategoryService(InMemoryCategoryRepository(catalog_snapshot), top_n=3)


@pytest_asyncio.fixture
async def client(service: CategoryService) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the in-memory service injected."""
    from category_admin.api.deps import get_service
    from category_admin.main import app

    app.dependency_overrides[get_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
