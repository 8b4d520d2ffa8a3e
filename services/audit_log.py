"""Bounded audit log of every adjudicated visit."""

from __future__ import annotations

from core import get_logger
from core.constants import PromotionDefaults
from core.exceptions import PersistenceError
from database.models import VisitAttempt
from database.repositories import PromotionStore
from utils.performance import audit_failures_total

logger = get_logger(__name__)


class AuditLogWriter:
    """Appends visits to the log, keeping only the newest ``retention`` entries.

    Logging is advisory: a failed append is reported and swallowed so an
    already committed winner is never invalidated by it.
    """

    def __init__(self, store: PromotionStore, retention: int = PromotionDefaults.LOG_RETENTION) -> None:
        if retention < 1:
            raise ValueError("Log retention must be at least 1")
        self._store = store
        self.retention = retention

    async def append(self, attempt: VisitAttempt) -> bool:
        """Append an attempt to the log.

        Returns:
            True if the entry was written
        """
        try:
            await self._store.visit_logs.append(attempt, self.retention)
        except PersistenceError as exc:
            audit_failures_total.inc()
            logger.error(
                f"Failed to write audit entry {attempt.id} for {attempt.location_id} "
                f"(winner={attempt.is_winner}): {exc}"
            )
            return False
        return True

    async def restore_missing_winners(self) -> int:
        """Re-append winner entries lost between the winner commit and the log write.

        A winner older than the oldest retained entry of a full log was
        evicted normally and is left alone.

        Returns:
            Number of entries restored
        """
        winners = await self._store.winners.get_all()
        if not winners:
            return 0

        log_is_full = await self._store.visit_logs.count() >= self.retention
        oldest_id = await self._store.visit_logs.oldest_id()

        restored = 0
        for record in winners.values():
            if await self._store.visit_logs.contains(record.attempt_id):
                continue
            if log_is_full and oldest_id is not None and record.attempt_id < oldest_id:
                continue
            if await self.append(record.to_attempt()):
                restored += 1
                logger.warning(
                    f"Restored missing audit entry for winner of {record.location_id} "
                    f"(attempt {record.attempt_id})"
                )
        return restored
