# services/booking-service/src/apps/api/views/filters.py
"""
API Filters

Django Filter classes for the facility booking API.
"""

import django_filters

from apps.core.models import Facility, MaintenanceWindow, OperatingHours, Reservation


class FacilityFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(choices=Facility.Category.choices)
    surface = django_filters.ChoiceFilter(choices=Facility.Surface.choices)
    is_active = django_filters.BooleanFilter()
    max_rate = django_filters.NumberFilter(
        field_name='hourly_rate',
        lookup_expr='lte'
    )

    class Meta:
        model = Facility
        fields = ['category', 'surface', 'is_active']


class OperatingHoursFilter(django_filters.FilterSet):
    facility = django_filters.UUIDFilter(field_name='facility_id')
    day_of_week = django_filters.ChoiceFilter(choices=OperatingHours.DayOfWeek.choices)

    class Meta:
        model = OperatingHours
        fields = ['facility', 'day_of_week', 'is_active']


class ReservationFilter(django_filters.FilterSet):
    """Filter for reservation queries."""

    # Date filters
    date = django_filters.DateFilter(
        field_name='start_time',
        lookup_expr='date'
    )
    date_from = django_filters.DateFilter(
        field_name='start_time',
        lookup_expr='date__gte'
    )
    date_to = django_filters.DateFilter(
        field_name='start_time',
        lookup_expr='date__lte'
    )

    status = django_filters.ChoiceFilter(
        choices=Reservation.Status.choices
    )

    facility = django_filters.UUIDFilter(field_name='facility_id')
    requester_id = django_filters.UUIDFilter()

    reservation_number = django_filters.CharFilter(
        lookup_expr='icontains'
    )

    class Meta:
        model = Reservation
        fields = [
            'date', 'date_from', 'date_to',
            'status', 'facility', 'requester_id',
            'reservation_number',
        ]


class MaintenanceWindowFilter(django_filters.FilterSet):
    facility = django_filters.UUIDFilter(field_name='facility_id')
    date = django_filters.DateFilter(
        field_name='start_time',
        lookup_expr='date'
    )

    class Meta:
        model = MaintenanceWindow
        fields = ['facility', 'date']
