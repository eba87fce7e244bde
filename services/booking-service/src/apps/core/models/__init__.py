# services/booking-service/src/apps/core/models/__init__.py
"""
Facility Booking Models
"""

from .facility import Facility, OperatingHours
from .reservation import Reservation
from .maintenance import MaintenanceWindow

__all__ = [
    'Facility',
    'OperatingHours',
    'Reservation',
    'MaintenanceWindow',
]
