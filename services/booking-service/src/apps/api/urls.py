# services/booking-service/src/apps/api/urls.py
"""
Facility Booking API URL Configuration
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    FacilityViewSet,
    OperatingHoursViewSet,
    ReservationViewSet,
    MaintenanceWindowViewSet,
    AvailabilityView,
    ReportView,
)

app_name = 'api'

router = DefaultRouter()
router.register(r'facilities', FacilityViewSet, basename='facility')
router.register(r'operating-hours', OperatingHoursViewSet, basename='operating-hours')
router.register(r'reservations', ReservationViewSet, basename='reservation')
router.register(r'maintenance', MaintenanceWindowViewSet, basename='maintenance')

urlpatterns = [
    path('', include(router.urls)),
    path('availability/', AvailabilityView.as_view(), name='availability'),
    path('reports/', ReportView.as_view(), name='reports'),
]
