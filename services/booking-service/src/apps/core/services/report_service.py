# services/booking-service/src/apps/core/services/report_service.py
"""
Report Service

Aggregates confirmed reservations over a day, month, year or explicit
date range.
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from apps.core.constants import get_booking_setting
from .availability_service import count_slots
from .exceptions import RecordNotFoundError, StorageUnavailableError
from .intervals import TimeInterval, duration_hours
from .operating_hours import OperatingHoursPolicy
from .results import BookingErrorKind, Ok, Result, err
from .storage import DjangoReservationStore, ReservationStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportRange:
    """Inclusive range of calendar dates with a display label."""
    label: str
    start_date: date
    end_date: date

    @classmethod
    def for_day(cls, day: date) -> 'ReportRange':
        return cls(day.isoformat(), day, day)

    @classmethod
    def for_month(cls, year: int, month: int) -> 'ReportRange':
        first = date(year, month, 1)
        last = first + relativedelta(months=1) - timedelta(days=1)
        return cls(first.strftime('%Y-%m'), first, last)

    @classmethod
    def for_year(cls, year: int) -> 'ReportRange':
        return cls(str(year), date(year, 1, 1), date(year, 12, 31))

    @classmethod
    def between(cls, start_date: date, end_date: date) -> 'ReportRange':
        if end_date < start_date:
            raise ValueError(f"Range end {end_date} is before start {start_date}")
        return cls(f"{start_date.isoformat()}..{end_date.isoformat()}", start_date, end_date)

    def dates(self) -> Iterator[date]:
        current = self.start_date
        while current <= self.end_date:
            yield current
            current += timedelta(days=1)

    def to_interval(self, tz: tzinfo) -> TimeInterval:
        return TimeInterval(
            TimeInterval.for_day(self.start_date, tz).start,
            TimeInterval.for_day(self.end_date, tz).end,
        )


@dataclass(frozen=True)
class AggregateStats:
    label: str
    total_reservations: int
    total_revenue: Decimal
    top_facility: Optional[str]
    occupancy_percent: float


@dataclass(frozen=True)
class FacilityStats:
    facility_id: uuid.UUID
    facility_name: str
    total_reservations: int
    revenue: Decimal
    hours_booked: float
    occupancy_percent: float


@dataclass(frozen=True)
class Report:
    range: ReportRange
    summary: AggregateStats
    per_facility: List[FacilityStats] = field(default_factory=list)


def occupancy(count: int, slots: int) -> float:
    """Booked count as a percentage of bookable slots; 0 when there are none."""
    if slots <= 0:
        return 0.0
    return round(count / slots * 100, 2)


class ReportService:
    """
    Service for reservation statistics.

    Counts confirmed reservations whose start falls inside the range.
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

    def compute_report(self, report_range: ReportRange) -> Result:
        """
        Build summary and per-facility statistics.

        Returns:
            Ok(Report) or Err(NOT_FOUND / STORAGE_UNAVAILABLE)
        """
        try:
            report = self._build(report_range)
        except RecordNotFoundError as e:
            return err(BookingErrorKind.NOT_FOUND, str(e))
        except StorageUnavailableError as e:
            logger.warning(f"Report {report_range.label} failed: {e}")
            return err(BookingErrorKind.STORAGE_UNAVAILABLE, str(e))

        logger.info(
            f"Computed report {report_range.label}: "
            f"{report.summary.total_reservations} reservations"
        )
        return Ok(report)

    # ==========================================================================
    # Private Methods
    # ==========================================================================

    def _build(self, report_range: ReportRange) -> Report:
        interval = report_range.to_interval(self.local_tz)

        reservations = sorted(
            (
                r for r in self.store.get_confirmed_reservations(None, interval)
                if interval.contains(r.interval.start)
            ),
            key=lambda r: r.interval.start
        )

        facilities = OrderedDict(
            (facility.id, facility) for facility in self.store.list_facilities()
        )

        # Facility ids in order of their first reservation
        counts: Dict[uuid.UUID, int] = OrderedDict()
        revenue: Dict[uuid.UUID, Decimal] = {}
        hours: Dict[uuid.UUID, float] = {}

        for reservation in reservations:
            fid = reservation.facility_id
            counts[fid] = counts.get(fid, 0) + 1
            revenue[fid] = revenue.get(fid, Decimal('0.00')) + reservation.total_price
            hours[fid] = hours.get(fid, 0.0) + duration_hours(reservation.interval)

            if fid not in facilities:
                # Inactive facilities still report their bookings
                facilities[fid] = self.store.get_facility(fid)

        per_facility = []
        total_slots = 0
        for fid, facility in facilities.items():
            slots = self._bookable_slots(fid, report_range)
            total_slots += slots
            count = counts.get(fid, 0)

            per_facility.append(FacilityStats(
                facility_id=fid,
                facility_name=facility.name,
                total_reservations=count,
                revenue=revenue.get(fid, Decimal('0.00')),
                hours_booked=round(hours.get(fid, 0.0), 2),
                occupancy_percent=occupancy(count, slots),
            ))

        top_facility = None
        if counts:
            # max() keeps the first of equal counts
            top_id = max(counts, key=lambda fid: counts[fid])
            top_facility = facilities[top_id].name

        summary = AggregateStats(
            label=report_range.label,
            total_reservations=len(reservations),
            total_revenue=sum(revenue.values(), Decimal('0.00')),
            top_facility=top_facility,
            occupancy_percent=occupancy(len(reservations), total_slots),
        )

        return Report(range=report_range, summary=summary, per_facility=per_facility)

    def _bookable_slots(self, facility_id: uuid.UUID, report_range: ReportRange) -> int:
        overrides = self.store.get_operating_hours_override(facility_id)
        return sum(
            count_slots(
                self.policy.hours_for(day, overrides=overrides or ()),
                self.slot_minutes
            )
            for day in report_range.dates()
        )
