"""Infrastructure - Database and logging."""

from category_admin.infra.database import close_db_engine, get_db_session
from category_admin.infra.logging import get_logger, setup_logging

__all__ = [
    "get_db_session",
    "close_db_engine",
    "setup_logging",
    "get_logger",
]
