# services/booking-service/src/tests/conftest.py
"""
Pytest Configuration and Fixtures

Provides common fixtures for facility booking tests. Engine tests run
against ``InMemoryReservationStore`` with a fixed clock; API and storage
tests use the database.
"""

import dataclasses
import uuid
from datetime import datetime, time, timedelta, timezone as dt_timezone
from decimal import Decimal
from typing import Dict, List

import pytest

from apps.core.services.exceptions import (
    RecordNotFoundError,
    ReservationConflictError,
    StorageUnavailableError,
)
from apps.core.services.intervals import TimeInterval, overlaps
from apps.core.services.records import (
    FacilityRecord,
    MaintenanceRecord,
    OperatingHoursRule,
    ReservationRecord,
    ReservationStatus,
)
from apps.core.services.storage import ReservationStore
from shared.common.authentication import JWTTokenGenerator

UTC = dt_timezone.utc

# Wednesday; the engine tests treat this instant as "now".
NOW = datetime(2025, 6, 4, 9, 0, tzinfo=UTC)


def _at(day: int, hour: int, minute: int = 0, month: int = 6) -> datetime:
    """Aware UTC datetime in 2025, June by default."""
    return datetime(2025, month, day, hour, minute, tzinfo=UTC)


class InMemoryReservationStore(ReservationStore):
    """
    Dict-backed store with the same contract as the database store.

    Set ``unavailable`` to make every call fail as if the database were
    unreachable.
    """

    def __init__(self):
        self.facilities: Dict[uuid.UUID, FacilityRecord] = {}
        self.inactive = set()
        self.overrides: Dict[uuid.UUID, List[OperatingHoursRule]] = {}
        self.reservations: Dict[uuid.UUID, ReservationRecord] = {}
        self.maintenance: Dict[uuid.UUID, MaintenanceRecord] = {}
        self.cancellations = {}
        self.unavailable = False

    # Test data helpers

    def add_facility(self, name='Court 1', category='basketball',
                     hourly_rate=Decimal('100.00'), active=True) -> FacilityRecord:
        facility = FacilityRecord(uuid.uuid4(), name, category, Decimal(hourly_rate))
        self.facilities[facility.id] = facility
        if not active:
            self.inactive.add(facility.id)
        return facility

    def add_reservation(self, facility_id, start, end, status=ReservationStatus.CONFIRMED,
                        total_price=Decimal('0.00'), requester_id=None) -> ReservationRecord:
        record = ReservationRecord(
            id=uuid.uuid4(),
            facility_id=facility_id,
            requester_id=requester_id or uuid.uuid4(),
            interval=TimeInterval(start, end),
            status=status,
            total_price=Decimal(total_price),
            reservation_number=f"RES-TEST-{len(self.reservations) + 1:04d}",
        )
        self.reservations[record.id] = record
        return record

    def add_maintenance(self, facility_id, start, end, description='') -> MaintenanceRecord:
        record = MaintenanceRecord(uuid.uuid4(), facility_id, TimeInterval(start, end), description)
        self.maintenance[record.id] = record
        return record

    def set_override(self, facility_id, day_of_week, opening, closing):
        rules = self.overrides.setdefault(facility_id, [])
        rules.append(OperatingHoursRule(day_of_week, opening, closing))

    def confirmed(self) -> List[ReservationRecord]:
        return [r for r in self.reservations.values() if r.is_confirmed]

    def _check(self):
        if self.unavailable:
            raise StorageUnavailableError('connection refused')

    # ReservationStore

    def get_facility(self, facility_id, active_only=False):
        self._check()
        try:
            facility = self.facilities[facility_id]
        except KeyError:
            raise RecordNotFoundError(f"Facility {facility_id} not found")
        if active_only and facility_id in self.inactive:
            raise RecordNotFoundError(f"Facility {facility_id} is not active")
        return facility

    def list_facilities(self):
        self._check()
        return [f for f in self.facilities.values() if f.id not in self.inactive]

    def get_operating_hours_override(self, facility_id):
        self._check()
        return self.overrides.get(facility_id) or None

    def get_confirmed_reservations(self, facility_id, interval):
        self._check()
        return sorted(
            (
                r for r in self.confirmed()
                if (facility_id is None or r.facility_id == facility_id)
                and overlaps(r.interval, interval)
            ),
            key=lambda r: r.interval.start
        )

    def get_active_maintenance(self, facility_id, interval):
        self._check()
        return [
            m for m in self.maintenance.values()
            if m.facility_id == facility_id and overlaps(m.interval, interval)
        ]

    def insert_reservation(self, draft):
        self.get_facility(draft.facility_id, active_only=True)
        if draft.status == ReservationStatus.CONFIRMED:
            self._ensure_free(draft.facility_id, draft.interval)
            self._ensure_no_maintenance(draft.facility_id, draft.interval)
        return self.add_reservation(
            draft.facility_id,
            draft.interval.start,
            draft.interval.end,
            status=draft.status,
            total_price=draft.total_price,
            requester_id=draft.requester_id,
        )

    def get_reservation(self, reservation_id):
        self._check()
        try:
            return self.reservations[reservation_id]
        except KeyError:
            raise RecordNotFoundError(f"Reservation {reservation_id} not found")

    def update_reservation_status(self, reservation_id, status, reason='', at=None):
        record = self.get_reservation(reservation_id)
        if status == ReservationStatus.CONFIRMED:
            self.get_facility(record.facility_id, active_only=True)
            self._ensure_free(record.facility_id, record.interval, exclude=record.id)
            self._ensure_no_maintenance(record.facility_id, record.interval)
        if status == ReservationStatus.CANCELLED:
            self.cancellations[reservation_id] = (at, reason)
        updated = dataclasses.replace(record, status=status)
        self.reservations[reservation_id] = updated
        return updated

    def get_maintenance(self, window_id):
        self._check()
        try:
            return self.maintenance[window_id]
        except KeyError:
            raise RecordNotFoundError(f"Maintenance window {window_id} not found")

    def insert_maintenance(self, draft):
        self.get_facility(draft.facility_id, active_only=True)
        self._ensure_free(draft.facility_id, draft.interval)
        return self.add_maintenance(
            draft.facility_id, draft.interval.start, draft.interval.end, draft.description
        )

    def finish_maintenance(self, window_id, at):
        window = self.get_maintenance(window_id)
        finished = dataclasses.replace(
            window,
            interval=TimeInterval(window.interval.start, at),
            finished_at=at,
        )
        self.maintenance[window_id] = finished
        return finished

    def _ensure_free(self, facility_id, interval, exclude=None):
        # Reads the dict directly so patching the query methods cannot hide rows
        conflicts = [
            r for r in self.confirmed()
            if r.facility_id == facility_id and r.id != exclude
            and overlaps(r.interval, interval)
        ]
        if conflicts:
            raise ReservationConflictError('overlapping confirmed reservation', conflicts)

    def _ensure_no_maintenance(self, facility_id, interval):
        for window in self.maintenance.values():
            if window.facility_id == facility_id and overlaps(window.interval, interval):
                raise ReservationConflictError('facility under maintenance')


# =============================================================================
# Engine fixtures
# =============================================================================

@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Fixed clock for the engine services."""
    return lambda: NOW


@pytest.fixture
def at():
    """Build aware datetimes around ``NOW``: ``at(day, hour, minute=0, month=6)``."""
    return _at


@pytest.fixture
def store():
    return InMemoryReservationStore()


@pytest.fixture
def facility(store):
    """Basketball court at 100.00 per hour."""
    return store.add_facility(name='Central Court', hourly_rate=Decimal('100.00'))


# =============================================================================
# API fixtures
# =============================================================================

@pytest.fixture
def user_id():
    """Provide a test user ID."""
    return uuid.uuid4()


@pytest.fixture
def admin_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    """Provide bearer token headers for a regular user."""
    token = JWTTokenGenerator.generate_access_token(
        user_id, roles=['user'], email='player@example.com'
    )
    return {'HTTP_AUTHORIZATION': f'Bearer {token}'}


@pytest.fixture
def admin_headers(admin_id):
    """Provide bearer token headers for a facility administrator."""
    token = JWTTokenGenerator.generate_access_token(
        admin_id, roles=['admin'], email='admin@example.com'
    )
    return {'HTTP_AUTHORIZATION': f'Bearer {token}'}


@pytest.fixture
def create_facility(db):
    """Factory fixture for creating facilities."""
    from apps.core.models import Facility

    def _create_facility(**kwargs):
        defaults = {
            'name': f'Facility {uuid.uuid4().hex[:6]}',
            'category': Facility.Category.SOCCER,
            'surface': Facility.Surface.SYNTHETIC_GRASS,
            'hourly_rate': Decimal('100.00'),
            'capacity': 22,
        }
        defaults.update(kwargs)
        return Facility.objects.create(**defaults)

    return _create_facility


@pytest.fixture
def create_reservation(db):
    """Factory fixture for creating reservations directly in the database."""
    from apps.core.models import Reservation

    def _create_reservation(facility, start, end, **kwargs):
        defaults = {
            'requester_id': uuid.uuid4(),
            'status': Reservation.Status.CONFIRMED,
            'total_price': Decimal('100.00'),
        }
        defaults.update(kwargs)
        return Reservation.objects.create(
            facility=facility,
            start_time=start,
            end_time=end,
            **defaults
        )

    return _create_reservation


@pytest.fixture
def create_maintenance(db):
    """Factory fixture for creating maintenance windows."""
    from apps.core.models import MaintenanceWindow

    def _create_maintenance(facility, start, end, **kwargs):
        return MaintenanceWindow.objects.create(
            facility=facility,
            start_time=start,
            end_time=end,
            **kwargs
        )

    return _create_maintenance


@pytest.fixture
def tomorrow_at():
    """Aware datetimes on tomorrow's date in the current time zone."""
    from django.utils import timezone

    def _tomorrow_at(hour, minute=0):
        tomorrow = timezone.localdate() + timedelta(days=1)
        return datetime.combine(
            tomorrow, time(hour, minute), tzinfo=timezone.get_current_timezone()
        )

    return _tomorrow_at
