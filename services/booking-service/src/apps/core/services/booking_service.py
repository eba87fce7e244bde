# services/booking-service/src/apps/core/services/booking_service.py
"""
Booking Service

Validates, prices and stores reservations, and drives their status
lifecycle.
"""

import logging
import uuid
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from apps.core.constants import get_booking_setting
from .exceptions import (
    RecordNotFoundError,
    ReservationConflictError,
    StorageUnavailableError,
)
from .intervals import TimeInterval, overlaps
from .operating_hours import OperatingHoursPolicy
from .pricing import price_for_interval
from .records import FacilityRecord, ReservationDraft, ReservationStatus
from .results import BookingErrorKind, Ok, Result, err
from .storage import DjangoReservationStore, ReservationStore

logger = logging.getLogger(__name__)


class BookingService:
    """
    Service for managing reservations.

    Handles:
    - Booking validation chain
    - Pricing and creation
    - Status transitions
    """

    # Allowed status transitions
    TRANSITIONS = {
        ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED},
        ReservationStatus.CONFIRMED: {ReservationStatus.CANCELLED},
        ReservationStatus.CANCELLED: {ReservationStatus.CONFIRMED},
    }

    INITIAL_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)

    def __init__(
        self,
        store: Optional[ReservationStore] = None,
        policy: Optional[OperatingHoursPolicy] = None,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None
    ):
        self.store = store or DjangoReservationStore()
        self.policy = policy or OperatingHoursPolicy(store=self.store)
        self.clock = clock or timezone.now
        self.tz = tz

    @property
    def local_tz(self) -> tzinfo:
        return self.tz or timezone.get_current_timezone()

    # ==========================================================================
    # Booking
    # ==========================================================================

    def validate_booking(
        self,
        facility_id: uuid.UUID,
        interval: TimeInterval
    ) -> Result:
        """
        Run the validation chain without storing anything.

        Returns:
            Ok(price) or Err(BookingError)
        """
        try:
            checked = self._run_checks(facility_id, interval)
        except RecordNotFoundError as e:
            return err(BookingErrorKind.NOT_FOUND, str(e))
        except StorageUnavailableError as e:
            logger.warning(f"Validation for facility {facility_id} failed: {e}")
            return err(BookingErrorKind.STORAGE_UNAVAILABLE, str(e))

        if not checked.is_ok:
            return checked

        return Ok(price_for_interval(interval, checked.value.hourly_rate))

    def validate_and_create_booking(
        self,
        facility_id: uuid.UUID,
        requester_id: uuid.UUID,
        interval: TimeInterval,
        requested_status: str = ReservationStatus.CONFIRMED
    ) -> Result:
        """
        Validate, price and store a reservation.

        The overlap check here is advisory; the store repeats it inside the
        insert transaction and a conflict found there is reported as OVERLAP.

        Returns:
            Ok(ReservationRecord) or Err(BookingError)
        """
        if requested_status not in self.INITIAL_STATUSES:
            return err(
                BookingErrorKind.INVALID_TRANSITION,
                f"A reservation cannot be created as '{requested_status}'"
            )

        try:
            checked = self._run_checks(facility_id, interval)
            if not checked.is_ok:
                return checked

            facility = checked.value
            draft = ReservationDraft(
                facility_id=facility.id,
                requester_id=requester_id,
                interval=interval,
                status=requested_status,
                total_price=price_for_interval(interval, facility.hourly_rate),
            )
            record = self.store.insert_reservation(draft)

        except RecordNotFoundError as e:
            return err(BookingErrorKind.NOT_FOUND, str(e))
        except ReservationConflictError as e:
            logger.info(f"Write-time overlap for facility {facility_id}: {e}")
            return err(BookingErrorKind.OVERLAP, str(e))
        except StorageUnavailableError as e:
            logger.warning(f"Booking for facility {facility_id} failed: {e}")
            return err(BookingErrorKind.STORAGE_UNAVAILABLE, str(e))

        logger.info(
            f"Created reservation {record.reservation_number or record.id} "
            f"for facility {facility_id}: {interval}"
        )
        return Ok(record)

    # ==========================================================================
    # Status Transitions
    # ==========================================================================

    def change_reservation_status(
        self,
        reservation_id: uuid.UUID,
        new_status: str,
        reason: Optional[str] = None
    ) -> Result:
        """
        Move a reservation through its lifecycle.

        Returns:
            Ok(ReservationRecord) or Err(NOT_FOUND / INVALID_TRANSITION /
            OVERLAP / STORAGE_UNAVAILABLE)
        """
        try:
            reservation = self.store.get_reservation(reservation_id)

            allowed = self.TRANSITIONS.get(reservation.status, set())
            if new_status not in allowed:
                return err(
                    BookingErrorKind.INVALID_TRANSITION,
                    f"Cannot move reservation from '{reservation.status}' to '{new_status}'"
                )

            if new_status == ReservationStatus.CONFIRMED:
                blocked = self._maintenance_conflict(reservation.facility_id, reservation.interval)
                if blocked:
                    return blocked

            updated = self.store.update_reservation_status(
                reservation_id,
                new_status,
                reason=reason or '',
                at=self.clock(),
            )

        except RecordNotFoundError as e:
            return err(BookingErrorKind.NOT_FOUND, str(e))
        except ReservationConflictError as e:
            logger.info(f"Cannot confirm reservation {reservation_id}: {e}")
            return err(BookingErrorKind.OVERLAP, str(e))
        except StorageUnavailableError as e:
            logger.warning(f"Status change for reservation {reservation_id} failed: {e}")
            return err(BookingErrorKind.STORAGE_UNAVAILABLE, str(e))

        logger.info(
            f"Reservation {reservation_id}: {reservation.status} -> {new_status}"
        )
        return Ok(updated)

    # ==========================================================================
    # Private Methods
    # ==========================================================================

    def _run_checks(self, facility_id: uuid.UUID, interval: TimeInterval) -> Result:
        """
        Resolve the facility and apply the rules in order, stopping at the
        first failure. Returns Ok(FacilityRecord) when every rule passes.
        """
        facility = self.store.get_facility(facility_id, active_only=True)

        checks = (
            self._check_dates,
            self._check_order,
            self._check_operating_hours,
            self._check_duration,
            self._check_overlap,
        )
        for check in checks:
            rejection = check(facility, interval)
            if rejection:
                logger.info(
                    f"Rejected booking for facility {facility_id} "
                    f"({rejection.kind.value}): {rejection.error.detail}"
                )
                return rejection

        return Ok(facility)

    def _check_dates(self, facility: FacilityRecord, interval: TimeInterval):
        now = self.clock().astimezone(self.local_tz)
        today = now.date()
        start_date = interval.start.astimezone(self.local_tz).date()

        if start_date < today:
            return err(
                BookingErrorKind.PAST_DATE,
                f"{start_date.isoformat()} is before today ({today.isoformat()})"
            )

        months = get_booking_setting('MAX_ADVANCE_MONTHS')
        horizon = today + relativedelta(months=months)
        if start_date > horizon:
            return err(
                BookingErrorKind.TOO_FAR_AHEAD,
                f"Bookings open up to {months} months ahead (until {horizon.isoformat()})"
            )

        if start_date == today and interval.start < now:
            return err(
                BookingErrorKind.PAST_START_TIME,
                f"Start time {interval.start.isoformat()} has already passed"
            )

        return None

    def _check_order(self, facility: FacilityRecord, interval: TimeInterval):
        if interval.is_empty:
            return err(
                BookingErrorKind.INVALID_ORDER,
                f"End time must be after start time {interval}"
            )
        return None

    def _check_operating_hours(self, facility: FacilityRecord, interval: TimeInterval):
        start = interval.start.astimezone(self.local_tz)
        end = interval.end.astimezone(self.local_tz)
        hours = self.policy.hours_for(start.date(), facility_id=facility.id)

        within = (
            start.date() == end.date()
            and hours.opening <= start.time()
            and end.time() <= hours.closing
        )
        if not within:
            return err(
                BookingErrorKind.OUTSIDE_OPERATING_HOURS,
                self.policy.describe(start.date(), hours)
            )
        return None

    def _check_duration(self, facility: FacilityRecord, interval: TimeInterval):
        minutes = get_booking_setting('MIN_BOOKING_MINUTES')
        if interval.duration < timedelta(minutes=minutes):
            return err(
                BookingErrorKind.TOO_SHORT,
                f"Minimum booking is {minutes} minutes"
            )
        return None

    def _check_overlap(self, facility: FacilityRecord, interval: TimeInterval):
        for reservation in self.store.get_confirmed_reservations(facility.id, interval):
            if overlaps(reservation.interval, interval):
                return err(
                    BookingErrorKind.OVERLAP,
                    f"Overlaps confirmed reservation "
                    f"{reservation.reservation_number or reservation.id} {reservation.interval}"
                )

        return self._maintenance_conflict(facility.id, interval)

    def _maintenance_conflict(self, facility_id: uuid.UUID, interval: TimeInterval):
        for window in self.store.get_active_maintenance(facility_id, interval):
            if overlaps(window.interval, interval):
                return err(
                    BookingErrorKind.OVERLAP,
                    f"Facility is under maintenance {window.interval}"
                )
        return None
