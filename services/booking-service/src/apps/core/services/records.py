# services/booking-service/src/apps/core/services/records.py
"""
Booking Engine Records

Plain value objects exchanged between the booking engine and its storage
collaborator. They carry no persistence behaviour.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import List, Optional

from .intervals import TimeInterval


class ReservationStatus:
    """Reservation lifecycle states."""
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'

    ALL = (PENDING, CONFIRMED, CANCELLED)


@dataclass(frozen=True)
class FacilityRecord:
    """Read-only view of a facility."""
    id: uuid.UUID
    name: str
    category: str
    hourly_rate: Decimal


@dataclass(frozen=True)
class OperatingHoursRule:
    """Opening and closing time for one day of the week (0 = Sunday)."""
    day_of_week: int
    opening: time
    closing: time


@dataclass(frozen=True)
class ReservationDraft:
    """A validated reservation that has not been stored yet."""
    facility_id: uuid.UUID
    requester_id: uuid.UUID
    interval: TimeInterval
    status: str
    total_price: Decimal


@dataclass(frozen=True)
class ReservationRecord:
    """A stored reservation."""
    id: uuid.UUID
    facility_id: uuid.UUID
    requester_id: uuid.UUID
    interval: TimeInterval
    status: str
    total_price: Decimal
    reservation_number: str = ''

    @property
    def is_confirmed(self) -> bool:
        return self.status == ReservationStatus.CONFIRMED


@dataclass(frozen=True)
class MaintenanceDraft:
    facility_id: uuid.UUID
    interval: TimeInterval
    description: str = ''
    created_by: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class MaintenanceRecord:
    """A stored maintenance window."""
    id: uuid.UUID
    facility_id: uuid.UUID
    interval: TimeInterval
    description: str = ''
    finished_at: Optional[datetime] = None

    def status_at(self, now: datetime) -> str:
        if self.finished_at or now >= self.interval.end:
            return 'finished'
        # Nothing has run yet at the start instant
        if now > self.interval.start:
            return 'active'
        return 'scheduled'


@dataclass(frozen=True)
class Slot:
    """One fixed-size display slot of a facility's day."""
    hour: int
    start: datetime
    end: datetime
    available: bool


@dataclass(frozen=True)
class FacilitySlotReport:
    """Availability of a single facility on a single date."""
    facility_id: uuid.UUID
    name: str
    category: str
    date: date
    opening: time
    closing: time
    slots: List[Slot] = field(default_factory=list)

    @property
    def available_count(self) -> int:
        return sum(1 for slot in self.slots if slot.available)
