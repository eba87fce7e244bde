# services/booking-service/src/apps/core/services/exceptions.py
"""
Booking Engine Exceptions

Raised by the storage collaborator. The engine services translate them
into tagged ``Err`` results before they reach callers.
"""


class BookingServiceError(Exception):
    """Base exception for booking service errors."""
    pass


class RecordNotFoundError(BookingServiceError):
    """Referenced facility, reservation or maintenance window does not exist."""
    pass


class ReservationConflictError(BookingServiceError):
    """Write-time overlap detected by the storage layer."""

    def __init__(self, message: str, conflicts=None):
        super().__init__(message)
        self.conflicts = list(conflicts or [])


class StorageUnavailableError(BookingServiceError):
    """Storage unreachable or timed out. Safe for the caller to retry."""
    pass
