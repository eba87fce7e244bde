# services/booking-service/src/apps/core/services/operating_hours.py
"""
Operating-Hours Policy

Maps a calendar date to the opening and closing time of a facility.
"""

import logging
import uuid
from datetime import date, time
from typing import Dict, Iterable, NamedTuple, Optional, Tuple

from apps.core.constants import get_booking_setting, js_day_of_week, DAY_NAMES

logger = logging.getLogger(__name__)


class OpeningHours(NamedTuple):
    opening: time
    closing: time

    def __str__(self):
        return f"{self.opening.strftime('%H:%M')}-{self.closing.strftime('%H:%M')}"


class OperatingHoursPolicy:
    """
    Resolves opening hours for a date.

    A facility-specific override row for the weekday wins over the global
    default table. The lookup never fails: without an override the global
    default for the weekday is returned.
    """

    def __init__(
        self,
        store=None,
        default_hours: Optional[Dict[int, Tuple[time, time]]] = None
    ):
        self.store = store
        table = default_hours or get_booking_setting('DEFAULT_OPERATING_HOURS')
        self.default_hours = {
            day: OpeningHours(*hours) for day, hours in table.items()
        }

    def hours_for(
        self,
        target_date: date,
        facility_id: Optional[uuid.UUID] = None,
        overrides: Optional[Iterable] = None
    ) -> OpeningHours:
        """
        Opening hours for ``target_date``.

        ``overrides`` may be passed in when the caller already loaded the
        facility's rules; otherwise they are fetched from the store.
        """
        if overrides is None and facility_id is not None and self.store is not None:
            overrides = self.store.get_operating_hours_override(facility_id)

        day = js_day_of_week(target_date)
        for rule in overrides or ():
            if rule.day_of_week == day:
                return OpeningHours(rule.opening, rule.closing)

        return self.default_hours[day]

    def describe(self, target_date: date, hours: OpeningHours) -> str:
        day_name = DAY_NAMES[js_day_of_week(target_date)].capitalize()
        return f"{day_name} {target_date.isoformat()}: open {hours}"
