"""
Registry error taxonomy.

Every error carries the HTTP status the API layer renders it with, so
services raise domain errors and the gateway never inspects store
exceptions itself.
"""

from fastapi import status


class RegistryError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(RegistryError):
    """Malformed or incomplete client payload."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(RegistryError):
    status_code = status.HTTP_404_NOT_FOUND


class ConstraintViolation(RegistryError):
    """Uniqueness or referential integrity failure."""

    status_code = status.HTTP_409_CONFLICT


class StoreUnavailable(RegistryError):
    """I/O failure against the persistent store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StoreInitError(StoreUnavailable):
    """Schema creation or default seeding failed; the service must not start."""
