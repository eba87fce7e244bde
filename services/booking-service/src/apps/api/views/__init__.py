# services/booking-service/src/apps/api/views/__init__.py
"""
Facility Booking API Views
"""

from .facility_views import (
    FacilityViewSet,
    OperatingHoursViewSet,
)

from .reservation_views import (
    ReservationViewSet,
)

from .maintenance_views import (
    MaintenanceWindowViewSet,
)

from .availability_views import (
    AvailabilityView,
)

from .report_views import (
    ReportView,
)

__all__ = [
    'FacilityViewSet',
    'OperatingHoursViewSet',
    'ReservationViewSet',
    'MaintenanceWindowViewSet',
    'AvailabilityView',
    'ReportView',
]
