# services/booking-service/src/apps/core/services/__init__.py
"""
Facility Booking Business Logic
"""

from .availability_service import AvailabilityService
from .booking_service import BookingService
from .exceptions import (
    BookingServiceError,
    RecordNotFoundError,
    ReservationConflictError,
    StorageUnavailableError,
)
from .intervals import TimeInterval, overlaps, contains, duration_hours
from .maintenance_service import MaintenanceService
from .operating_hours import OpeningHours, OperatingHoursPolicy
from .pricing import calculate_price
from .report_service import ReportRange, ReportService
from .results import BookingError, BookingErrorKind, Err, ErrorCategory, Ok
from .storage import DjangoReservationStore, ReservationStore

__all__ = [
    'AvailabilityService',
    'BookingService',
    'MaintenanceService',
    'ReportService',
    'ReportRange',
    'OperatingHoursPolicy',
    'OpeningHours',
    'TimeInterval',
    'overlaps',
    'contains',
    'duration_hours',
    'calculate_price',
    'ReservationStore',
    'DjangoReservationStore',
    'BookingError',
    'BookingErrorKind',
    'ErrorCategory',
    'Ok',
    'Err',
    'BookingServiceError',
    'RecordNotFoundError',
    'ReservationConflictError',
    'StorageUnavailableError',
]
