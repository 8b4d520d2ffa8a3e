"""First-visitor-wins adjudication."""

from __future__ import annotations

import asyncio
import time
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import AsyncIterator, Callable, Dict, Iterable, Optional

from core import get_logger
from core.constants import PromotionDefaults, VisitOutcome
from database.models import VisitAttempt, VisitAttemptResult, WinnerRecord
from database.repositories import PromotionStore
from services.audit_log import AuditLogWriter
from services.catalog import LocationCatalog
from utils.performance import visits_total

logger = get_logger(__name__)


def utc_timestamp() -> str:
    """Server receipt time as ISO-8601 UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LocationLocks:
    """One asyncio lock per location.

    Adjudications for the same location serialize on its lock; different
    locations never contend. ``hold_all`` takes every lock in sorted order so
    it cannot deadlock against single-location holders.
    """

    def __init__(self, location_ids: Iterable[str]) -> None:
        self._locks: Dict[str, asyncio.Lock] = {
            location_id: asyncio.Lock() for location_id in location_ids
        }

    def lock_for(self, location_id: str) -> asyncio.Lock:
        lock = self._locks.get(location_id)
        if lock is None:
            lock = self._locks.setdefault(location_id, asyncio.Lock())
        return lock

    @asynccontextmanager
    async def hold(self, location_id: str) -> AsyncIterator[None]:
        async with self.lock_for(location_id):
            yield

    @asynccontextmanager
    async def hold_all(self) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for location_id in sorted(self._locks):
                await stack.enter_async_context(self._locks[location_id])
            yield


class AttemptIdAllocator:
    """Monotonic attempt ids: wall clock microseconds, never below last id + 1."""

    def __init__(self, clock: Callable[[], int] = time.time_ns) -> None:
        self._clock = clock
        self._last_id = 0

    def seed(self, last_id: int) -> None:
        self._last_id = max(self._last_id, last_id)

    def next_id(self) -> int:
        self._last_id = max(self._clock() // 1000, self._last_id + 1)
        return self._last_id


class WinnerAdjudicator:
    """Decides, exactly once per location, which visit wins the prize."""

    def __init__(
        self,
        catalog: LocationCatalog,
        store: PromotionStore,
        audit_log: AuditLogWriter,
        locks: Optional[LocationLocks] = None,
        ids: Optional[AttemptIdAllocator] = None,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._audit_log = audit_log
        self.locks = locks or LocationLocks(catalog.ids())
        self._ids = ids or AttemptIdAllocator()
        self._clock = clock

    async def restore_id_sequence(self) -> None:
        """Continue attempt ids after the largest one already persisted."""
        self._ids.seed(await self._store.max_attempt_id())

    async def adjudicate(
        self,
        location_id: str,
        access_time: Optional[str],
        ip: Optional[str],
        user_agent: Optional[str],
    ) -> VisitAttemptResult:
        """Register a visit and decide whether it is the location's winner.

        Raises:
            UnknownLocationError: If the location is not in the catalog
            PersistenceError: If the winner lookup or commit fails
        """
        location = self._catalog.get(location_id)
        source = ip or PromotionDefaults.FALLBACK_ADDRESS

        async with self.locks.hold(location.id):
            existing = await self._store.winners.get(location.id)
            attempt = VisitAttempt(
                id=self._ids.next_id(),
                location_id=location.id,
                access_time=access_time,
                ip=source,
                user_agent=user_agent,
                timestamp=self._clock(),
                is_winner=existing is None,
            )

            if attempt.is_winner:
                committed = await self._store.winners.insert_if_absent(
                    WinnerRecord.from_attempt(attempt)
                )
                if not committed:
                    # Another writer got the row in first
                    existing = await self._store.winners.get(location.id)
                    attempt = replace(attempt, is_winner=False)

            await self._audit_log.append(attempt)

        if attempt.is_winner:
            visits_total.labels(location=location.id, outcome=VisitOutcome.WINNER.value).inc()
            logger.info(f"🎉 New winner! {location.name} - IP: {source}")
            winner_time = None
        else:
            visits_total.labels(location=location.id, outcome=VisitOutcome.LOSER.value).inc()
            logger.debug(f"😢 {location.name} - already has a winner - IP: {source}")
            winner_time = existing.timestamp if existing else None

        return VisitAttemptResult(
            is_winner=attempt.is_winner,
            location_name=location.name,
            prize=location.prize,
            emoji=location.emoji,
            access_time=access_time,
            winner_time=winner_time,
        )
