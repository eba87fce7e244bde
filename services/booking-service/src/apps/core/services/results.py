# services/booking-service/src/apps/core/services/results.py
"""
Booking Results

Tagged results returned by the booking engine. Every public engine
operation returns either ``Ok(value)`` or ``Err(BookingError)`` so callers
branch on the outcome instead of catching exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

T = TypeVar('T')


class ErrorCategory(str, Enum):
    """How a caller is expected to react to an error."""
    VALIDATION = 'validation'
    CONFLICT = 'conflict'
    NOT_FOUND = 'not_found'
    STATE = 'state'
    TRANSIENT = 'transient'


class BookingErrorKind(str, Enum):
    """Machine-readable rejection reasons."""
    PAST_DATE = 'PAST_DATE'
    TOO_FAR_AHEAD = 'TOO_FAR_AHEAD'
    PAST_START_TIME = 'PAST_START_TIME'
    INVALID_ORDER = 'INVALID_ORDER'
    OUTSIDE_OPERATING_HOURS = 'OUTSIDE_OPERATING_HOURS'
    TOO_SHORT = 'TOO_SHORT'
    OVERLAP = 'OVERLAP'
    NOT_FOUND = 'NOT_FOUND'
    INVALID_TRANSITION = 'INVALID_TRANSITION'
    STORAGE_UNAVAILABLE = 'STORAGE_UNAVAILABLE'

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES.get(self, ErrorCategory.VALIDATION)

    @property
    def retryable(self) -> bool:
        return self.category == ErrorCategory.TRANSIENT


_CATEGORIES = {
    BookingErrorKind.OVERLAP: ErrorCategory.CONFLICT,
    BookingErrorKind.NOT_FOUND: ErrorCategory.NOT_FOUND,
    BookingErrorKind.INVALID_TRANSITION: ErrorCategory.STATE,
    BookingErrorKind.STORAGE_UNAVAILABLE: ErrorCategory.TRANSIENT,
}


@dataclass(frozen=True)
class BookingError:
    kind: BookingErrorKind
    detail: str

    @property
    def category(self) -> ErrorCategory:
        return self.kind.category

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def __str__(self):
        return f"{self.kind.value}: {self.detail}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: BookingError

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def kind(self) -> BookingErrorKind:
        return self.error.kind


Result = Union[Ok[Any], Err]


def err(kind: BookingErrorKind, detail: str) -> Err:
    return Err(BookingError(kind, detail))
