# services/booking-service/src/apps/core/services/availability_service.py
"""
Availability Service

Computes per-facility slot availability for a calendar date.
"""

import logging
import uuid
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, List, Optional

from django.utils import timezone

from apps.core.constants import get_booking_setting
from .exceptions import RecordNotFoundError, StorageUnavailableError
from .intervals import TimeInterval, overlaps
from .operating_hours import OpeningHours, OperatingHoursPolicy
from .records import FacilityRecord, FacilitySlotReport, Slot
from .results import BookingErrorKind, Ok, Result, err
from .storage import DjangoReservationStore, ReservationStore

logger = logging.getLogger(__name__)


def count_slots(hours: OpeningHours, slot_minutes: int) -> int:
    """Number of whole slots between opening and closing."""
    open_minutes = hours.opening.hour * 60 + hours.opening.minute
    close_minutes = hours.closing.hour * 60 + hours.closing.minute
    if close_minutes <= open_minutes:
        return 0
    return (close_minutes - open_minutes) // slot_minutes


class AvailabilityService:
    """
    Service for computing availability.

    Handles:
    - Slot generation from operating hours
    - Marking slots taken by confirmed reservations
    - Marking slots taken by maintenance windows

    Read-only: every call goes back to storage, nothing is cached.
    """

    def __init__(
        self,
        store: Optional[ReservationStore] = None,
        policy: Optional[OperatingHoursPolicy] = None,
        tz: Optional[tzinfo] = None,
        slot_minutes: Optional[int] = None
    ):
        self.store = store or DjangoReservationStore()
        self.policy = policy or OperatingHoursPolicy(store=self.store)
        self.tz = tz
        self.slot_minutes = slot_minutes or get_booking_setting('SLOT_MINUTES')

    @property
    def local_tz(self) -> tzinfo:
        return self.tz or timezone.get_current_timezone()

    def compute_availability(
        self,
        facility_id: Optional[uuid.UUID],
        target_date: date
    ) -> Result:
        """
        Slot availability for one facility, or every active facility when
        ``facility_id`` is None.

        Returns:
            Ok(list of FacilitySlotReport) or Err(NOT_FOUND / STORAGE_UNAVAILABLE)
        """
        try:
            if facility_id is None:
                facilities = self.store.list_facilities()
            else:
                facilities = [self.store.get_facility(facility_id, active_only=True)]

            reports = [
                self._facility_report(facility, target_date)
                for facility in facilities
            ]
        except RecordNotFoundError as e:
            return err(BookingErrorKind.NOT_FOUND, str(e))
        except StorageUnavailableError as e:
            logger.warning(f"Availability for {target_date} failed: {e}")
            return err(BookingErrorKind.STORAGE_UNAVAILABLE, str(e))

        return Ok(reports)

    def generate_slots(
        self,
        target_date: date,
        hours: OpeningHours,
        busy: Iterable[TimeInterval] = ()
    ) -> List[Slot]:
        """
        Fixed-size slots from opening up to closing.

        A slot is unavailable when any busy interval overlaps it, even
        partially. A trailing remainder shorter than one slot is dropped.
        """
        tz = self.local_tz
        step = timedelta(minutes=self.slot_minutes)
        cursor = datetime.combine(target_date, hours.opening, tzinfo=tz)
        closing = datetime.combine(target_date, hours.closing, tzinfo=tz)
        busy = list(busy)

        slots = []
        while cursor + step <= closing:
            slot = TimeInterval(cursor, cursor + step)
            taken = any(overlaps(slot, interval) for interval in busy)
            slots.append(Slot(
                hour=cursor.hour,
                start=slot.start,
                end=slot.end,
                available=not taken,
            ))
            cursor += step

        return slots

    # ==========================================================================
    # Private Methods
    # ==========================================================================

    def _facility_report(
        self,
        facility: FacilityRecord,
        target_date: date
    ) -> FacilitySlotReport:
        hours = self.policy.hours_for(target_date, facility_id=facility.id)
        day = TimeInterval.for_day(target_date, self.local_tz)

        busy = [
            reservation.interval
            for reservation in self.store.get_confirmed_reservations(facility.id, day)
        ]
        busy += [
            window.interval
            for window in self.store.get_active_maintenance(facility.id, day)
        ]

        return FacilitySlotReport(
            facility_id=facility.id,
            name=facility.name,
            category=facility.category,
            date=target_date,
            opening=hours.opening,
            closing=hours.closing,
            slots=self.generate_slots(target_date, hours, busy),
        )
