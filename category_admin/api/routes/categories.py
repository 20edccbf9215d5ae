"""Category administration endpoints.

Thin HTTP layer over CategoryService. Rejected tree operations are raised
as RejectionError and rendered by the handler registered in main.
"""

from typing import Annotated, Literal

from fastapi import APIRouter, Query, status

from category_admin.api.deps import RequestId, Service
from category_admin.api.errors import RejectionError
from category_admin.config import settings
from category_admin.core.filters import CategoryFilter
from category_admin.core.outcome import Outcome, Rejected, RejectionReason
from category_admin.core.records import CategoryAttributes
from category_admin.core.tree_builder import flatten_tree
from category_admin.schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    CategoryRead,
    CategoryStatsResponse,
    CategoryTreeNodeRead,
    CategoryTreeResponse,
    CategoryUpdate,
    MoveCategoryRequest,
    NameValidationResponse,
    ReorderRequest,
)
from category_admin.schemas.common import ApiResponse

router = APIRouter()


def _unwrap(outcome: Outcome):
    if isinstance(outcome, Rejected):
        raise RejectionError(outcome)
    return outcome.value


# =============================================================================
# Reads
# =============================================================================


@router.get("", response_model=ApiResponse[CategoryListResponse])
async def list_categories(
    service: Service,
    _: RequestId,
    search: str | None = None,
    level: Annotated[int | None, Query(ge=0)] = None,
    parent_id: str | None = None,
    roots_only: bool = False,
    is_active: bool | None = None,
    has_products: bool | None = None,
    gender: Literal["men", "women", "kids", "unisex"] | None = None,
    sort_by: Literal["name", "display_order", "product_count", "level"] = "display_order",
    sort_order: Literal["asc", "desc"] = "asc",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> ApiResponse[CategoryListResponse]:
    """Search, filter and paginate categories.

    parent_id restricts to one sibling group; roots_only restricts to root
    categories and takes precedence.
    """
    flt = CategoryFilter(
        search=search,
        level=level,
        parent_id=None if roots_only else parent_id,
        filter_by_parent=roots_only or parent_id is not None,
        is_active=is_active,
        has_products=has_products,
        gender=gender,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=min(limit or settings.default_page_size, settings.max_page_size),
    )
    result = await service.list_categories(flt)
    return ApiResponse(data=CategoryListResponse.from_page(result))


@router.get("/tree", response_model=ApiResponse[CategoryTreeResponse])
async def get_tree(service: Service, _: RequestId) -> ApiResponse[CategoryTreeResponse]:
    """Whole category forest ordered by display_order."""
    forest = await service.get_tree()
    return ApiResponse(
        data=CategoryTreeResponse(
            tree=CategoryTreeNodeRead.from_forest(forest),
            total=len(flatten_tree(forest)),
        )
    )


@router.get("/stats", response_model=ApiResponse[CategoryStatsResponse])
async def get_stats(
    service: Service,
    _: RequestId,
    top: Annotated[int | None, Query(ge=0, le=100)] = None,
) -> ApiResponse[CategoryStatsResponse]:
    """Counts by status and level plus the top categories by products."""
    stats = await service.get_stats(top)
    return ApiResponse(data=CategoryStatsResponse.from_stats(stats))


@router.get("/validate-name", response_model=ApiResponse[NameValidationResponse])
async def validate_name(
    service: Service,
    _: RequestId,
    name: Annotated[str, Query(min_length=1, max_length=200)],
    parent_id: str | None = None,
    exclude_id: str | None = None,
) -> ApiResponse[NameValidationResponse]:
    """Check whether a name is free among the siblings under parent_id."""
    available = await service.is_name_available(name, parent_id or None, exclude_id)
    return ApiResponse(
        data=NameValidationResponse(name=name, parent_id=parent_id or None, available=available)
    )


@router.get("/slug/{slug}", response_model=ApiResponse[CategoryRead])
async def get_category_by_slug(
    slug: str, service: Service, _: RequestId
) -> ApiResponse[CategoryRead]:
    """Look a category up by its URL slug."""
    record = await service.get_category_by_slug(slug)
    if record is None:
        raise RejectionError(
            Rejected(RejectionReason.NOT_FOUND, f"Category with slug '{slug}' not found")
        )
    return ApiResponse(data=CategoryRead.from_record(record))


@router.get("/{category_id}", response_model=ApiResponse[CategoryRead])
async def get_category(
    category_id: str, service: Service, _: RequestId
) -> ApiResponse[CategoryRead]:
    record = await service.get_category(category_id)
    if record is None:
        raise RejectionError(
            Rejected(RejectionReason.NOT_FOUND, f"Category '{category_id}' not found")
        )
    return ApiResponse(data=CategoryRead.from_record(record))


@router.get("/{category_id}/path", response_model=ApiResponse[list[CategoryRead]])
async def get_category_path(
    category_id: str, service: Service, _: RequestId
) -> ApiResponse[list[CategoryRead]]:
    """Breadcrumb from the root down to the category."""
    path = await service.get_path(category_id)
    if not path:
        raise RejectionError(
            Rejected(RejectionReason.NOT_FOUND, f"Category '{category_id}' not found")
        )
    return ApiResponse(data=[CategoryRead.from_record(record) for record in path])


# =============================================================================
# Writes
# =============================================================================


@router.post(
    "",
    response_model=ApiResponse[CategoryRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    request: CategoryCreate, service: Service, _: RequestId
) -> ApiResponse[CategoryRead]:
    record = _unwrap(
        await service.create(
            name=request.name,
            parent_id=request.parent_id,
            display_order=request.display_order,
            is_active=request.is_active,
            description=request.description,
            attributes=request.attributes.to_core() if request.attributes else None,
        )
    )
    return ApiResponse(
        data=CategoryRead.from_record(record),
        message="Category created successfully",
    )


@router.patch("/bulk/display-order", response_model=ApiResponse[list[CategoryRead]])
async def reorder_categories(
    request: ReorderRequest, service: Service, _: RequestId
) -> ApiResponse[list[CategoryRead]]:
    """Assign dense display_order values to one sibling group."""
    siblings = _unwrap(await service.reorder(request.parent_id, request.ordered_ids))
    return ApiResponse(
        data=[CategoryRead.from_record(record) for record in siblings],
        message="Display order updated successfully",
    )


@router.patch("/{category_id}", response_model=ApiResponse[CategoryRead])
async def update_category(
    category_id: str, request: CategoryUpdate, service: Service, _: RequestId
) -> ApiResponse[CategoryRead]:
    changes = request.model_dump(exclude_unset=True)
    if "attributes" in changes:
        # null resets every attribute
        changes["attributes"] = (
            request.attributes.to_core() if request.attributes else CategoryAttributes()
        )
    record = _unwrap(await service.update(category_id, **changes))
    return ApiResponse(
        data=CategoryRead.from_record(record),
        message="Category updated successfully",
    )


@router.patch("/{category_id}/toggle-status", response_model=ApiResponse[CategoryRead])
async def toggle_category_status(
    category_id: str, service: Service, _: RequestId
) -> ApiResponse[CategoryRead]:
    record = _unwrap(await service.toggle_status(category_id))
    return ApiResponse(
        data=CategoryRead.from_record(record),
        message="Category status updated successfully",
    )


@router.patch("/{category_id}/move", response_model=ApiResponse[CategoryRead])
async def move_category(
    category_id: str, request: MoveCategoryRequest, service: Service, _: RequestId
) -> ApiResponse[CategoryRead]:
    """Reparent a category; its whole subtree follows."""
    record = _unwrap(
        await service.move(category_id, request.new_parent_id, request.new_display_order)
    )
    return ApiResponse(
        data=CategoryRead.from_record(record),
        message="Category moved successfully",
    )


@router.delete("/{category_id}", response_model=ApiResponse[str])
async def delete_category(
    category_id: str, service: Service, _: RequestId
) -> ApiResponse[str]:
    """Delete a category without subcategories."""
    deleted_id = _unwrap(await service.delete(category_id))
    return ApiResponse(data=deleted_id, message="Category deleted successfully")
