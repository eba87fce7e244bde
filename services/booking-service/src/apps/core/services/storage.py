# services/booking-service/src/apps/core/services/storage.py
"""
Reservation Storage

The storage collaborator used by the booking engine. ``ReservationStore``
defines the contract; ``DjangoReservationStore`` implements it on the ORM
and is the final guard against double booking: every write that could
create an overlapping confirmed reservation re-checks inside a transaction
holding a row lock on the facility.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from functools import wraps
from typing import List, Optional

from django.db import transaction, InterfaceError, OperationalError

from apps.core.models import Facility, MaintenanceWindow, OperatingHours, Reservation
from .exceptions import (
    RecordNotFoundError,
    ReservationConflictError,
    StorageUnavailableError,
)
from .intervals import TimeInterval
from .records import (
    FacilityRecord,
    MaintenanceDraft,
    MaintenanceRecord,
    OperatingHoursRule,
    ReservationDraft,
    ReservationRecord,
    ReservationStatus,
)

logger = logging.getLogger(__name__)


class ReservationStore(ABC):
    """Read/write operations the booking engine needs from storage."""

    @abstractmethod
    def get_facility(self, facility_id: uuid.UUID, active_only: bool = False) -> FacilityRecord:
        """
        Raise ``RecordNotFoundError`` if the facility does not exist, or is
        deactivated when ``active_only`` is set.
        """

    @abstractmethod
    def list_facilities(self) -> List[FacilityRecord]:
        """Active facilities, in display order."""

    def get_facility_hourly_rate(self, facility_id: uuid.UUID) -> Decimal:
        return self.get_facility(facility_id).hourly_rate

    @abstractmethod
    def get_operating_hours_override(
        self, facility_id: uuid.UUID
    ) -> Optional[List[OperatingHoursRule]]:
        """Facility-specific weekday rules, or ``None`` when there are none."""

    @abstractmethod
    def get_confirmed_reservations(
        self, facility_id: Optional[uuid.UUID], interval: TimeInterval
    ) -> List[ReservationRecord]:
        """Confirmed reservations intersecting ``interval``; all facilities when id is None."""

    @abstractmethod
    def get_active_maintenance(
        self, facility_id: uuid.UUID, interval: TimeInterval
    ) -> List[MaintenanceRecord]:
        """Maintenance windows intersecting ``interval``."""

    @abstractmethod
    def insert_reservation(self, draft: ReservationDraft) -> ReservationRecord:
        """
        Store a reservation.

        Raise ``ReservationConflictError`` when a confirmed draft overlaps a
        confirmed reservation or a maintenance window at write time, and
        ``RecordNotFoundError`` when the facility is missing or deactivated.
        """

    @abstractmethod
    def get_reservation(self, reservation_id: uuid.UUID) -> ReservationRecord:
        """Raise ``RecordNotFoundError`` if the reservation does not exist."""

    @abstractmethod
    def update_reservation_status(
        self,
        reservation_id: uuid.UUID,
        status: str,
        reason: str = '',
        at: Optional[datetime] = None
    ) -> ReservationRecord:
        """
        Move a reservation to ``status``.

        Moving to confirmed re-checks overlap at write time and raises
        ``ReservationConflictError`` on conflict.
        """

    @abstractmethod
    def get_maintenance(self, window_id: uuid.UUID) -> MaintenanceRecord:
        """Raise ``RecordNotFoundError`` if the window does not exist."""

    @abstractmethod
    def insert_maintenance(self, draft: MaintenanceDraft) -> MaintenanceRecord:
        """Raise ``ReservationConflictError`` if a confirmed reservation overlaps."""

    @abstractmethod
    def finish_maintenance(self, window_id: uuid.UUID, at: datetime) -> MaintenanceRecord:
        """Truncate the window's end to ``at`` and mark it finished."""


def _storage_call(func):
    """Translate database connectivity failures into ``StorageUnavailableError``."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (OperationalError, InterfaceError) as e:
            logger.warning(f"Storage unavailable during {func.__name__}: {e}")
            raise StorageUnavailableError(str(e)) from e

    return wrapper


class DjangoReservationStore(ReservationStore):
    """``ReservationStore`` backed by the Django ORM."""

    # ==========================================================================
    # Facilities
    # ==========================================================================

    @_storage_call
    def get_facility(self, facility_id: uuid.UUID, active_only: bool = False) -> FacilityRecord:
        try:
            facility = Facility.objects.get(id=facility_id)
        except Facility.DoesNotExist:
            raise RecordNotFoundError(f"Facility {facility_id} not found")

        if active_only and not facility.is_active:
            raise RecordNotFoundError(f"Facility {facility_id} is not active")
        return facility.to_record()

    @_storage_call
    def list_facilities(self) -> List[FacilityRecord]:
        return [
            facility.to_record()
            for facility in Facility.objects.filter(is_active=True).order_by('name')
        ]

    @_storage_call
    def get_operating_hours_override(
        self, facility_id: uuid.UUID
    ) -> Optional[List[OperatingHoursRule]]:
        rows = OperatingHours.objects.filter(
            facility_id=facility_id,
            is_active=True
        ).order_by('day_of_week')

        rules = [row.to_rule() for row in rows]
        return rules or None

    # ==========================================================================
    # Reservations
    # ==========================================================================

    @_storage_call
    def get_confirmed_reservations(
        self, facility_id: Optional[uuid.UUID], interval: TimeInterval
    ) -> List[ReservationRecord]:
        queryset = Reservation.confirmed_overlapping(
            facility_id, interval.start, interval.end
        )
        return [reservation.to_record() for reservation in queryset]

    @_storage_call
    def insert_reservation(self, draft: ReservationDraft) -> ReservationRecord:
        with transaction.atomic():
            self._lock_facility(draft.facility_id)

            if draft.status == ReservationStatus.CONFIRMED:
                self._ensure_no_confirmed_overlap(draft.facility_id, draft.interval)
                self._ensure_no_maintenance(draft.facility_id, draft.interval)

            reservation = Reservation.objects.create(
                facility_id=draft.facility_id,
                requester_id=draft.requester_id,
                start_time=draft.interval.start,
                end_time=draft.interval.end,
                status=draft.status,
                total_price=draft.total_price,
            )

        logger.info(
            f"Stored reservation {reservation.reservation_number} "
            f"({reservation.status}) for facility {draft.facility_id}"
        )
        return reservation.to_record()

    @_storage_call
    def get_reservation(self, reservation_id: uuid.UUID) -> ReservationRecord:
        try:
            return Reservation.objects.get(id=reservation_id).to_record()
        except Reservation.DoesNotExist:
            raise RecordNotFoundError(f"Reservation {reservation_id} not found")

    @_storage_call
    def update_reservation_status(
        self,
        reservation_id: uuid.UUID,
        status: str,
        reason: str = '',
        at: Optional[datetime] = None
    ) -> ReservationRecord:
        with transaction.atomic():
            try:
                reservation = Reservation.objects.select_for_update().get(id=reservation_id)
            except Reservation.DoesNotExist:
                raise RecordNotFoundError(f"Reservation {reservation_id} not found")

            if status == ReservationStatus.CONFIRMED:
                interval = TimeInterval(reservation.start_time, reservation.end_time)
                self._lock_facility(reservation.facility_id)
                self._ensure_no_confirmed_overlap(
                    reservation.facility_id, interval, exclude_id=reservation.id
                )
                self._ensure_no_maintenance(reservation.facility_id, interval)

            reservation.status = status
            update_fields = ['status', 'updated_at']

            if status == ReservationStatus.CANCELLED:
                reservation.cancelled_at = at
                reservation.cancellation_reason = reason or ''
                update_fields += ['cancelled_at', 'cancellation_reason']

            reservation.save(update_fields=update_fields)

        return reservation.to_record()

    # ==========================================================================
    # Maintenance
    # ==========================================================================

    @_storage_call
    def get_active_maintenance(
        self, facility_id: uuid.UUID, interval: TimeInterval
    ) -> List[MaintenanceRecord]:
        windows = MaintenanceWindow.overlapping(facility_id, interval.start, interval.end)
        return [window.to_record() for window in windows]

    @_storage_call
    def get_maintenance(self, window_id: uuid.UUID) -> MaintenanceRecord:
        try:
            return MaintenanceWindow.objects.get(id=window_id).to_record()
        except MaintenanceWindow.DoesNotExist:
            raise RecordNotFoundError(f"Maintenance window {window_id} not found")

    @_storage_call
    def insert_maintenance(self, draft: MaintenanceDraft) -> MaintenanceRecord:
        with transaction.atomic():
            self._lock_facility(draft.facility_id)
            self._ensure_no_confirmed_overlap(draft.facility_id, draft.interval)

            window = MaintenanceWindow.objects.create(
                facility_id=draft.facility_id,
                start_time=draft.interval.start,
                end_time=draft.interval.end,
                description=draft.description,
                created_by=draft.created_by,
            )

        logger.info(f"Stored maintenance window {window.id} for facility {draft.facility_id}")
        return window.to_record()

    @_storage_call
    def finish_maintenance(self, window_id: uuid.UUID, at: datetime) -> MaintenanceRecord:
        with transaction.atomic():
            try:
                window = MaintenanceWindow.objects.select_for_update().get(id=window_id)
            except MaintenanceWindow.DoesNotExist:
                raise RecordNotFoundError(f"Maintenance window {window_id} not found")

            window.end_time = at
            window.finished_at = at
            window.save(update_fields=['end_time', 'finished_at', 'updated_at'])

        return window.to_record()

    # ==========================================================================
    # Private Methods
    # ==========================================================================

    def _lock_facility(self, facility_id: uuid.UUID) -> Facility:
        """
        Serialize writers per facility for the rest of the transaction.
        Deactivated facilities take no new bookings or maintenance.
        """
        facility = Facility.objects.select_for_update().filter(id=facility_id).first()
        if facility is None:
            raise RecordNotFoundError(f"Facility {facility_id} not found")
        if not facility.is_active:
            raise RecordNotFoundError(f"Facility {facility_id} is not active")
        return facility

    def _ensure_no_maintenance(self, facility_id: uuid.UUID, interval: TimeInterval):
        windows = list(MaintenanceWindow.overlapping(facility_id, interval.start, interval.end))
        if windows:
            raise ReservationConflictError(
                f"Facility {facility_id} is under maintenance during {interval}"
            )

    def _ensure_no_confirmed_overlap(
        self,
        facility_id: uuid.UUID,
        interval: TimeInterval,
        exclude_id: Optional[uuid.UUID] = None
    ):
        conflicts = Reservation.confirmed_overlapping(
            facility_id, interval.start, interval.end
        )
        if exclude_id:
            conflicts = conflicts.exclude(id=exclude_id)

        conflicts = list(conflicts)
        if conflicts:
            raise ReservationConflictError(
                f"Facility {facility_id} already has a confirmed reservation in {interval}",
                conflicts=[c.to_record() for c in conflicts],
            )
