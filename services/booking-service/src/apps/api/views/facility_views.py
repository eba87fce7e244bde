# services/booking-service/src/apps/api/views/facility_views.py
"""
Facility API Views

Facility catalogue and per-weekday operating hours overrides.
"""

import logging

from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend

from apps.core.models import Facility, OperatingHours
from apps.api.serializers import (
    FacilitySerializer,
    FacilityListSerializer,
    OperatingHoursSerializer,
)
from shared.common.mixins import MultiSerializerMixin
from shared.common.permissions import IsAdminOrReadOnly, is_admin
from .filters import FacilityFilter, OperatingHoursFilter

logger = logging.getLogger(__name__)


class FacilityViewSet(MultiSerializerMixin, viewsets.ModelViewSet):
    """
    ViewSet for facility management.

    Everyone authenticated can browse active facilities; admins manage the
    catalogue and also see inactive facilities.
    """

    queryset = Facility.objects.prefetch_related('operating_hours')
    serializer_class = FacilitySerializer
    serializer_classes = {
        'list': FacilityListSerializer,
    }
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = FacilityFilter
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'hourly_rate', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        queryset = super().get_queryset()

        if not is_admin(self.request):
            queryset = queryset.filter(is_active=True)

        return queryset

    def perform_create(self, serializer):
        facility = serializer.save()
        logger.info(f"Created facility {facility.id} ({facility.name})")

    def perform_destroy(self, instance):
        # Facilities with reservations are kept for history
        if instance.reservations.exists():
            instance.is_active = False
            instance.save(update_fields=['is_active', 'updated_at'])
            logger.info(f"Deactivated facility {instance.id}")
            return

        instance.delete()
        logger.info(f"Deleted facility {instance.id}")


class OperatingHoursViewSet(viewsets.ModelViewSet):
    """
    ViewSet for facility operating hours overrides.

    A row replaces the default opening hours of its facility for one
    weekday.
    """

    queryset = OperatingHours.objects.select_related('facility')
    serializer_class = OperatingHoursSerializer
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = OperatingHoursFilter
    ordering = ['facility', 'day_of_week']
