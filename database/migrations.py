"""Database schema migrations."""

from __future__ import annotations

from .connection import OptimizedSQLitePool


SCHEMA_SQL: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS winners (
        location_id TEXT PRIMARY KEY,
        attempt_id INTEGER NOT NULL,
        access_time TEXT,
        ip TEXT,
        user_agent TEXT,
        timestamp TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS visit_logs (
        id INTEGER PRIMARY KEY,
        location_id TEXT NOT NULL,
        access_time TEXT,
        ip TEXT,
        user_agent TEXT,
        timestamp TEXT NOT NULL,
        is_winner BOOLEAN NOT NULL DEFAULT FALSE
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_visit_logs_location ON visit_logs(location_id);",
)


async def run_migrations(pool: OptimizedSQLitePool) -> None:
    async with pool.connection() as conn:
        await conn.execute("BEGIN")
        try:
            for statement in SCHEMA_SQL:
                await conn.execute(statement)
        except Exception:
            await conn.rollback()
            raise
        else:
            await conn.commit()
