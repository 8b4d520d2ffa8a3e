"""Database access layer helpers."""

from __future__ import annotations

import sqlite3
from typing import Dict, List, Optional

from database.base_repository import BaseRepository
from database.connection import OptimizedSQLitePool
from database.models import VisitAttempt, WinnerRecord


def _winner_from_row(row: sqlite3.Row) -> WinnerRecord:
    return WinnerRecord(
        location_id=row["location_id"],
        attempt_id=row["attempt_id"],
        access_time=row["access_time"],
        ip=row["ip"],
        user_agent=row["user_agent"],
        timestamp=row["timestamp"],
    )


def _attempt_from_row(row: sqlite3.Row) -> VisitAttempt:
    return VisitAttempt(
        id=row["id"],
        location_id=row["location_id"],
        access_time=row["access_time"],
        ip=row["ip"],
        user_agent=row["user_agent"],
        timestamp=row["timestamp"],
        is_winner=bool(row["is_winner"]),
    )


class WinnerRepository(BaseRepository):
    """Repository for the winners-by-location collection."""

    async def get(self, location_id: str) -> Optional[WinnerRecord]:
        row = await self.fetch_one(
            "SELECT * FROM winners WHERE location_id=?",
            (location_id,)
        )
        return _winner_from_row(row) if row else None

    async def get_all(self) -> Dict[str, WinnerRecord]:
        rows = await self.fetch_all("SELECT * FROM winners ORDER BY attempt_id")
        return {row["location_id"]: _winner_from_row(row) for row in rows}

    async def insert_if_absent(self, record: WinnerRecord) -> bool:
        """Store the record unless the location already has a winner.

        Returns:
            True if this record became the winner
        """
        inserted = await self.execute(
            """
            INSERT INTO winners (location_id, attempt_id, access_time, ip, user_agent, timestamp)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(location_id) DO NOTHING
            """,
            (
                record.location_id,
                record.attempt_id,
                record.access_time,
                record.ip,
                record.user_agent,
                record.timestamp,
            )
        )
        return inserted == 1

    async def count(self) -> int:
        return await self.fetch_value("SELECT COUNT(*) FROM winners") or 0

    async def max_attempt_id(self) -> int:
        return await self.fetch_value("SELECT MAX(attempt_id) FROM winners") or 0


class VisitLogRepository(BaseRepository):
    """Repository for the bounded visit log."""

    async def append(self, attempt: VisitAttempt, retention: int) -> None:
        """Insert the attempt and evict everything older than the newest ``retention`` entries."""
        await self.transaction([
            (
                """
                INSERT INTO visit_logs (id, location_id, access_time, ip, user_agent, timestamp, is_winner)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    attempt.id,
                    attempt.location_id,
                    attempt.access_time,
                    attempt.ip,
                    attempt.user_agent,
                    attempt.timestamp,
                    attempt.is_winner,
                ),
            ),
            (
                """
                DELETE FROM visit_logs
                WHERE id NOT IN (SELECT id FROM visit_logs ORDER BY id DESC LIMIT ?)
                """,
                (retention,),
            ),
        ])

    async def recent(self, limit: int) -> List[VisitAttempt]:
        """Return the most recent entries, newest first."""
        rows = await self.fetch_all(
            "SELECT * FROM visit_logs ORDER BY id DESC LIMIT ?",
            (limit,)
        )
        return [_attempt_from_row(row) for row in rows]

    async def all(self) -> List[VisitAttempt]:
        """Return every retained entry, oldest first."""
        rows = await self.fetch_all("SELECT * FROM visit_logs ORDER BY id")
        return [_attempt_from_row(row) for row in rows]

    async def count(self) -> int:
        return await self.fetch_value("SELECT COUNT(*) FROM visit_logs") or 0

    async def count_by_location(self) -> Dict[str, int]:
        rows = await self.fetch_all(
            "SELECT location_id, COUNT(*) FROM visit_logs GROUP BY location_id"
        )
        return {row[0]: row[1] for row in rows}

    async def contains(self, attempt_id: int) -> bool:
        found = await self.fetch_value(
            "SELECT 1 FROM visit_logs WHERE id=?",
            (attempt_id,)
        )
        return found is not None

    async def oldest_id(self) -> Optional[int]:
        return await self.fetch_value("SELECT MIN(id) FROM visit_logs")

    async def max_id(self) -> int:
        return await self.fetch_value("SELECT MAX(id) FROM visit_logs") or 0


class PromotionStore:
    """Durable state of one promotion event: winners plus the visit log."""

    def __init__(self, pool: OptimizedSQLitePool) -> None:
        self.pool = pool
        self.winners = WinnerRepository(pool)
        self.visit_logs = VisitLogRepository(pool)

    async def max_attempt_id(self) -> int:
        return max(await self.winners.max_attempt_id(), await self.visit_logs.max_id())

    async def reset(self) -> None:
        """Empty both collections in a single transaction."""
        await self.winners.transaction([
            ("DELETE FROM winners", ()),
            ("DELETE FROM visit_logs", ()),
        ])

    async def close(self) -> None:
        await self.pool.close()
