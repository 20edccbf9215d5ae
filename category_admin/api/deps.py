"""FastAPI dependencies for dependency injection.

Provides:
- Category service bound to the configured store
- Request id propagation into log context
"""

from typing import Annotated, AsyncGenerator
from uuid import uuid4

from fastapi import Depends, Header

from category_admin.infra.logging import bind_request_context, clear_request_context
from category_admin.services.category_service import CategoryService, get_category_service


async def get_service() -> CategoryService:
    """Get category service dependency."""
    return get_category_service()


async def request_context(
    x_request_id: Annotated[str | None, Header()] = None,
) -> AsyncGenerator[str, None]:
    """Tag every log line of the request with its id.

    Uses the caller's X-Request-Id when present, a fresh one otherwise.
    """
    request_id = x_request_id or uuid4().hex
    bind_request_context(request_id=request_id)
    try:
        yield request_id
    finally:
        clear_request_context()


# Type aliases for cleaner annotations
Service = Annotated[CategoryService, Depends(get_service)]
RequestId = Annotated[str, Depends(request_context)]
