"""Read-only views over the promotion store, plus the event reset."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from core import get_logger
from core.constants import PromotionDefaults
from database.repositories import PromotionStore
from services.adjudicator import LocationLocks
from services.catalog import LocationCatalog

logger = get_logger(__name__)


class ReportingService:
    """Statistics, winner and log views recomputed from the store on every call."""

    def __init__(
        self,
        catalog: LocationCatalog,
        store: PromotionStore,
        locks: LocationLocks,
        recent_logs_limit: int = PromotionDefaults.RECENT_LOGS_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._store = store
        self._locks = locks
        self._recent_logs_limit = recent_logs_limit

    def _location_info(self, location_id: str) -> Optional[Dict[str, str]]:
        location = self._catalog.find(location_id)
        return location.info() if location else None

    async def stats(self) -> Dict[str, Any]:
        winners = await self._store.winners.get_all()
        counts = await self._store.visit_logs.count_by_location()
        total = await self._store.visit_logs.count()

        return {
            "totalLocations": len(self._catalog),
            "winnersCount": len(winners),
            "totalParticipants": total,
            "participantsByLocation": {
                location.id: {
                    "name": location.name,
                    "count": counts.get(location.id, 0),
                    "hasWinner": location.id in winners,
                }
                for location in self._catalog
            },
        }

    async def winners(self) -> Dict[str, Dict[str, Any]]:
        winners = await self._store.winners.get_all()
        return {
            location_id: {**record.to_dict(), "locationInfo": self._location_info(location_id)}
            for location_id, record in winners.items()
        }

    async def logs(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Most recent log entries, newest first, never more than the configured limit."""
        if limit is None or limit < 1:
            limit = self._recent_logs_limit
        entries = await self._store.visit_logs.recent(min(limit, self._recent_logs_limit))
        return [
            {**entry.to_dict(), "locationInfo": self._location_info(entry.location_id)}
            for entry in entries
        ]

    async def location_status(self, location_id: str) -> Dict[str, Any]:
        """Location card data: metadata plus whether the prize is gone.

        Raises:
            UnknownLocationError: If the location is not in the catalog
        """
        location = self._catalog.get(location_id)
        winner = await self._store.winners.get(location.id)
        return {
            **location.info(),
            "locationId": location.id,
            "hasWinner": winner is not None,
            "winnerTime": winner.timestamp if winner else None,
        }

    async def reset(self) -> None:
        """Clear winners and the visit log; locations are untouched."""
        async with self._locks.hold_all():
            await self._store.reset()
        logger.warning("🔄 Event has been reset")
