# services/booking-service/src/apps/core/services/maintenance_service.py
"""
Maintenance Service

Schedules maintenance windows and ends them early. A window may not be
placed over a confirmed reservation.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Optional

from django.utils import timezone

from .exceptions import (
    RecordNotFoundError,
    ReservationConflictError,
    StorageUnavailableError,
)
from .intervals import TimeInterval, overlaps
from .records import MaintenanceDraft
from .results import BookingErrorKind, Ok, Result, err
from .storage import DjangoReservationStore, ReservationStore

logger = logging.getLogger(__name__)


class MaintenanceService:
    """Service for managing maintenance windows."""

    def __init__(
        self,
        store: Optional[ReservationStore] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store or DjangoReservationStore()
        self.clock = clock or timezone.now

    def schedule_maintenance(
        self,
        facility_id: uuid.UUID,
        interval: TimeInterval,
        description: str = '',
        created_by: Optional[uuid.UUID] = None
    ) -> Result:
        """
        Block a facility for maintenance.

        Returns:
            Ok(MaintenanceRecord) or Err(INVALID_ORDER / NOT_FOUND / OVERLAP /
            STORAGE_UNAVAILABLE)
        """
        if interval.is_empty:
            return err(
                BookingErrorKind.INVALID_ORDER,
                f"End time must be after start time {interval}"
            )

        try:
            self.store.get_facility(facility_id, active_only=True)

            conflicts = [
                reservation
                for reservation in self.store.get_confirmed_reservations(facility_id, interval)
                if overlaps(reservation.interval, interval)
            ]
            if conflicts:
                numbers = ', '.join(
                    r.reservation_number or str(r.id) for r in conflicts
                )
                logger.info(
                    f"Rejected maintenance for facility {facility_id}: "
                    f"overlaps {numbers}"
                )
                return err(
                    BookingErrorKind.OVERLAP,
                    f"Overlaps confirmed reservations: {numbers}"
                )

            window = self.store.insert_maintenance(MaintenanceDraft(
                facility_id=facility_id,
                interval=interval,
                description=description,
                created_by=created_by,
            ))

        except RecordNotFoundError as e:
            return err(BookingErrorKind.NOT_FOUND, str(e))
        except ReservationConflictError as e:
            logger.info(f"Write-time overlap for maintenance on {facility_id}: {e}")
            return err(BookingErrorKind.OVERLAP, str(e))
        except StorageUnavailableError as e:
            logger.warning(f"Scheduling maintenance for {facility_id} failed: {e}")
            return err(BookingErrorKind.STORAGE_UNAVAILABLE, str(e))

        logger.info(f"Scheduled maintenance {window.id} for facility {facility_id}: {interval}")
        return Ok(window)

    def finish_early(self, window_id: uuid.UUID) -> Result:
        """End an active window now. Only active windows can be finished."""
        try:
            window = self.store.get_maintenance(window_id)
            now = self.clock()

            status = window.status_at(now)
            if status != 'active':
                return err(
                    BookingErrorKind.INVALID_TRANSITION,
                    f"Maintenance window {window_id} is {status}, not active"
                )

            finished = self.store.finish_maintenance(window_id, now)

        except RecordNotFoundError as e:
            return err(BookingErrorKind.NOT_FOUND, str(e))
        except StorageUnavailableError as e:
            logger.warning(f"Finishing maintenance {window_id} failed: {e}")
            return err(BookingErrorKind.STORAGE_UNAVAILABLE, str(e))

        logger.info(f"Finished maintenance {window_id} early at {now.isoformat()}")
        return Ok(finished)
