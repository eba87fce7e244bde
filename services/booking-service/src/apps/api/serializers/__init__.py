# services/booking-service/src/apps/api/serializers/__init__.py
"""
Facility Booking API Serializers
"""

from .facility_serializers import (
    FacilitySerializer,
    FacilityListSerializer,
    OperatingHoursSerializer,
)

from .reservation_serializers import (
    ReservationSerializer,
    ReservationCreateSerializer,
    ReservationStatusSerializer,
    ReservationValidationResultSerializer,
)

from .maintenance_serializers import (
    MaintenanceWindowSerializer,
    MaintenanceWindowCreateSerializer,
)

from .availability_serializers import (
    AvailabilityQuerySerializer,
    SlotSerializer,
    FacilitySlotReportSerializer,
)

from .report_serializers import (
    ReportQuerySerializer,
    AggregateStatsSerializer,
    FacilityStatsSerializer,
    ReportSerializer,
)

__all__ = [
    # Facility
    'FacilitySerializer',
    'FacilityListSerializer',
    'OperatingHoursSerializer',
    # Reservation
    'ReservationSerializer',
    'ReservationCreateSerializer',
    'ReservationStatusSerializer',
    'ReservationValidationResultSerializer',
    # Maintenance
    'MaintenanceWindowSerializer',
    'MaintenanceWindowCreateSerializer',
    # Availability
    'AvailabilityQuerySerializer',
    'SlotSerializer',
    'FacilitySlotReportSerializer',
    # Reports
    'ReportQuerySerializer',
    'AggregateStatsSerializer',
    'FacilityStatsSerializer',
    'ReportSerializer',
]
