"""Service-level error taxonomy.

Validation, conflict and transition errors are raised before any store call.
Store errors wrap driver failures and are never retried here.
"""


class ServiceError(Exception):
    """Base class for errors raised by the scheduling services."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Bad input shape (e.g. inverted time range)."""


class InvalidTimeFormatError(ValidationError):
    pass


class InvalidRangeError(ValidationError):
    pass


class ConflictError(ServiceError):
    """Request conflicts with existing state."""


class OverlapError(ConflictError):
    pass


class ReservedSlotError(ConflictError):
    pass


class SlotUnavailableError(ConflictError):
    pass


class TransitionError(ServiceError):
    """Illegal appointment status change."""


class NotFoundError(ServiceError):
    pass


class StoreError(ServiceError):
    """Network, permission or database-side failure."""


class FetchError(StoreError):
    pass


class PersistError(StoreError):
    pass


class NotificationError(ServiceError):
    """Email could not be delivered."""


class BlobStoreError(ServiceError):
    """Object storage upload/delete failed."""
