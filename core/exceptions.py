"""Application-wide exception classes."""

from __future__ import annotations


class ApplicationError(Exception):
    """Base exception for all application errors."""

    code = "APPLICATION_ERROR"


class ConfigurationError(ApplicationError):
    """Raised when configuration is invalid."""

    code = "CONFIGURATION_ERROR"


class DatabaseError(ApplicationError):
    """Base exception for database-related errors."""

    code = "DATABASE_ERROR"


class ConnectionPoolError(DatabaseError):
    """Raised when database connection pool has issues."""

    code = "CONNECTION_POOL_ERROR"


class PersistenceError(DatabaseError):
    """Raised when a read or write against the promotion store fails."""

    code = "PERSISTENCE_FAILURE"


class ServiceError(ApplicationError):
    """Base exception for service-level errors."""

    code = "SERVICE_ERROR"


class PromotionError(ServiceError):
    """Base exception for promotion operations."""

    code = "PROMOTION_ERROR"


class UnknownLocationError(PromotionError):
    """Raised when a location id is not in the catalog."""

    code = "UNKNOWN_LOCATION"

    def __init__(self, location_id: object) -> None:
        super().__init__(f"Unknown location: {location_id!r}")
        self.location_id = location_id


class ValidationError(ApplicationError):
    """Raised when data validation fails."""

    code = "VALIDATION_FAILURE"
