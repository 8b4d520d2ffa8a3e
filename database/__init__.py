"""Database package public API."""

from core.constants import DatabaseDefaults

from .connection import OptimizedSQLitePool, init_db_pool
from .migrations import run_migrations
from .models import Location, VisitAttempt, VisitAttemptResult, WinnerRecord
from .repositories import PromotionStore, VisitLogRepository, WinnerRepository


async def open_store(
    database_path: str,
    pool_size: int = DatabaseDefaults.POOL_SIZE,
    busy_timeout_ms: int = DatabaseDefaults.BUSY_TIMEOUT,
) -> PromotionStore:
    """Open the pool, apply the schema and return a ready store."""
    pool = await init_db_pool(database_path, pool_size, busy_timeout_ms)
    await run_migrations(pool)
    return PromotionStore(pool)


__all__ = [
    "OptimizedSQLitePool",
    "init_db_pool",
    "run_migrations",
    "open_store",
    "Location",
    "VisitAttempt",
    "VisitAttemptResult",
    "WinnerRecord",
    "PromotionStore",
    "VisitLogRepository",
    "WinnerRepository",
]
