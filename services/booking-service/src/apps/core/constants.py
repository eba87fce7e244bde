# services/booking-service/src/apps/core/constants.py
"""
Booking Engine Constants

Defaults for the booking policy. Deployments override them through the
``FACILITY_BOOKING`` settings dict.
"""

from datetime import time
from typing import Any

from django.conf import settings

SLOT_MINUTES = 60
MIN_BOOKING_MINUTES = 30
MAX_ADVANCE_MONTHS = 3

# Day of week (0 = Sunday) -> (opening, closing)
DEFAULT_OPERATING_HOURS = {
    0: (time(8, 0), time(20, 0)),
    1: (time(6, 0), time(22, 0)),
    2: (time(6, 0), time(22, 0)),
    3: (time(6, 0), time(22, 0)),
    4: (time(6, 0), time(22, 0)),
    5: (time(6, 0), time(22, 0)),
    6: (time(7, 0), time(21, 0)),
}

DAY_NAMES = [
    'sunday', 'monday', 'tuesday', 'wednesday',
    'thursday', 'friday', 'saturday',
]

_DEFAULTS = {
    'SLOT_MINUTES': SLOT_MINUTES,
    'MIN_BOOKING_MINUTES': MIN_BOOKING_MINUTES,
    'MAX_ADVANCE_MONTHS': MAX_ADVANCE_MONTHS,
    'DEFAULT_OPERATING_HOURS': DEFAULT_OPERATING_HOURS,
}


def get_booking_setting(name: str) -> Any:
    """Read a booking policy value from settings, falling back to the default."""
    overrides = getattr(settings, 'FACILITY_BOOKING', None) or {}
    return overrides.get(name, _DEFAULTS[name])


def js_day_of_week(target_date) -> int:
    """Day of week with Sunday as 0, the convention used by operating hours."""
    return (target_date.weekday() + 1) % 7
