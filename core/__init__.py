"""Core application components."""

from core.logger import setup_logger, get_logger
from core.constants import (
    DatabaseDefaults,
    PromotionDefaults,
    VisitOutcome,
    DEFAULT_LOCATIONS,
)
from core.exceptions import (
    ApplicationError,
    ConfigurationError,
    DatabaseError,
    PersistenceError,
    ServiceError,
    PromotionError,
    UnknownLocationError,
    ValidationError,
)

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    # Constants
    'DatabaseDefaults',
    'PromotionDefaults',
    'VisitOutcome',
    'DEFAULT_LOCATIONS',
    # Exceptions
    'ApplicationError',
    'ConfigurationError',
    'DatabaseError',
    'PersistenceError',
    'ServiceError',
    'PromotionError',
    'UnknownLocationError',
    'ValidationError',
]
