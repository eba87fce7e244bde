# services/booking-service/src/apps/api/messages.py
"""
User-Facing Booking Messages

Maps engine error kinds to the message shown to end users and to the API
exception that carries it.
"""

import logging

from apps.core.constants import get_booking_setting
from apps.core.services import BookingError, BookingErrorKind, ErrorCategory
from shared.common.exceptions import (
    BadRequestException,
    BaseAPIException,
    ConflictException,
    NotFoundException,
    ServiceUnavailableException,
)

logger = logging.getLogger(__name__)


USER_MESSAGES = {
    BookingErrorKind.PAST_DATE: 'You cannot book a date that has already passed.',
    BookingErrorKind.PAST_START_TIME: 'The start time has already passed. Please choose a later time.',
    BookingErrorKind.INVALID_ORDER: 'The end time must be after the start time.',
    BookingErrorKind.OUTSIDE_OPERATING_HOURS: 'The facility is closed at the requested time.',
    BookingErrorKind.OVERLAP: 'The requested time is not available. Please choose another slot.',
    BookingErrorKind.NOT_FOUND: 'The requested resource was not found.',
    BookingErrorKind.INVALID_TRANSITION: 'This change is not allowed for the reservation in its current state.',
    BookingErrorKind.STORAGE_UNAVAILABLE: 'The service is temporarily unavailable. Please try again.',
}

_EXCEPTIONS = {
    ErrorCategory.VALIDATION: BadRequestException,
    ErrorCategory.CONFLICT: ConflictException,
    ErrorCategory.NOT_FOUND: NotFoundException,
    ErrorCategory.STATE: ConflictException,
    ErrorCategory.TRANSIENT: ServiceUnavailableException,
}


def user_message(kind: BookingErrorKind) -> str:
    # Limits come from FACILITY_BOOKING so the wording follows the policy
    if kind == BookingErrorKind.TOO_FAR_AHEAD:
        months = get_booking_setting('MAX_ADVANCE_MONTHS')
        unit = 'month' if months == 1 else 'months'
        return f'Bookings can only be made up to {months} {unit} in advance.'
    if kind == BookingErrorKind.TOO_SHORT:
        minutes = get_booking_setting('MIN_BOOKING_MINUTES')
        return f'Bookings must last at least {minutes} minutes.'
    return USER_MESSAGES.get(kind, 'The request could not be completed.')


def to_api_exception(error: BookingError) -> BaseAPIException:
    """Build the API exception for an engine error."""
    exception_class = _EXCEPTIONS[error.category]

    # Internal storage errors are not shown to users
    details = None if error.retryable else error.detail

    return exception_class(
        detail=user_message(error.kind),
        error_code=error.kind.value,
        details=details,
    )


def raise_for_error(error: BookingError):
    logger.info(f"Booking request rejected: {error}")
    raise to_api_exception(error)
