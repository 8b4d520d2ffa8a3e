"""Wiring of the promotion services around one store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config import Config
from core import get_logger
from database import PromotionStore, open_store
from services.adjudicator import LocationLocks, WinnerAdjudicator
from services.audit_log import AuditLogWriter
from services.catalog import LocationCatalog, load_catalog
from services.reporting import ReportingService

logger = get_logger(__name__)


@dataclass
class PromotionServices:
    catalog: LocationCatalog
    store: PromotionStore
    audit_log: AuditLogWriter
    adjudicator: WinnerAdjudicator
    reporting: ReportingService

    async def close(self) -> None:
        await self.store.close()


async def build_services(
    catalog: LocationCatalog,
    store: PromotionStore,
    log_retention: int,
    recent_logs_limit: int,
) -> PromotionServices:
    """Build the services, continue the attempt id sequence and repair the audit log."""
    locks = LocationLocks(catalog.ids())
    audit_log = AuditLogWriter(store, retention=log_retention)
    adjudicator = WinnerAdjudicator(catalog, store, audit_log, locks=locks)
    reporting = ReportingService(catalog, store, locks, recent_logs_limit=recent_logs_limit)

    await adjudicator.restore_id_sequence()
    restored = await audit_log.restore_missing_winners()
    if restored:
        logger.warning(f"Restored {restored} winner entries missing from the visit log")

    return PromotionServices(
        catalog=catalog,
        store=store,
        audit_log=audit_log,
        adjudicator=adjudicator,
        reporting=reporting,
    )


async def create_promotion_services(
    config: Config,
    catalog: Optional[LocationCatalog] = None,
) -> PromotionServices:
    """Open the configured store and build every service on top of it."""
    catalog = catalog or load_catalog(config.locations_file)
    store = await open_store(
        config.database_path,
        pool_size=config.db_pool_size,
        busy_timeout_ms=config.db_busy_timeout,
    )
    return await build_services(
        catalog,
        store,
        log_retention=config.log_retention,
        recent_logs_limit=config.recent_logs_limit,
    )
