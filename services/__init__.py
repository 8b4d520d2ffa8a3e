"""Services package."""

from .async_runner import BackgroundLoop, set_main_loop, get_main_loop, run_coroutine_sync
from .catalog import LocationCatalog, load_catalog
from .audit_log import AuditLogWriter
from .adjudicator import AttemptIdAllocator, LocationLocks, WinnerAdjudicator
from .reporting import ReportingService
from .promotion import PromotionServices, build_services, create_promotion_services

__all__ = [
    "BackgroundLoop",
    "set_main_loop",
    "get_main_loop",
    "run_coroutine_sync",
    "LocationCatalog",
    "load_catalog",
    "AuditLogWriter",
    "AttemptIdAllocator",
    "LocationLocks",
    "WinnerAdjudicator",
    "ReportingService",
    "PromotionServices",
    "build_services",
    "create_promotion_services",
]
