"""Application-wide constants and configuration values."""

from __future__ import annotations

from enum import Enum


# Database constants
class DatabaseDefaults:
    """Default database configuration."""
    POOL_SIZE = 8
    BUSY_TIMEOUT = 5000  # milliseconds


# Promotion constants
class PromotionDefaults:
    """Promotion event configuration."""
    LOG_RETENTION = 1000  # visit log entries kept
    RECENT_LOGS_LIMIT = 100  # entries returned by the admin log view
    FALLBACK_ADDRESS = "127.0.0.1"


class VisitOutcome(str, Enum):
    """Adjudication outcome labels used in logs and metrics."""
    WINNER = "winner"
    LOSER = "loser"


# Built-in catalog used when no LOCATIONS_FILE is configured
DEFAULT_LOCATIONS: dict[str, dict[str, str]] = {
    "gangnam": {"name": "강남역", "prize": "스타벅스 아메리카노", "emoji": "☕"},
    "hongdae": {"name": "홍대입구역", "prize": "투썸플레이스 케이크", "emoji": "🍰"},
    "myeongdong": {"name": "명동역", "prize": "이디야 아이스크림", "emoji": "🍦"},
    "itaewon": {"name": "이태원역", "prize": "할리스 원두커피", "emoji": "☕"},
    "jamsil": {"name": "잠실역", "prize": "메가커피 음료수", "emoji": "🥤"},
}
