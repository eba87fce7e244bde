# services/booking-service/src/apps/api/views/maintenance_views.py
"""
Maintenance API Views
"""

import logging

from rest_framework import mixins, viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.core.models import MaintenanceWindow
from apps.core.services import MaintenanceService, TimeInterval
from apps.api.messages import raise_for_error
from apps.api.serializers import (
    MaintenanceWindowSerializer,
    MaintenanceWindowCreateSerializer,
)
from shared.common.mixins import MultiSerializerMixin
from shared.common.permissions import IsAdminOrReadOnly
from .filters import MaintenanceWindowFilter

logger = logging.getLogger(__name__)


class MaintenanceWindowViewSet(
    MultiSerializerMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for facility maintenance windows.

    Scheduling refuses windows that overlap a confirmed reservation.
    """

    queryset = MaintenanceWindow.objects.select_related('facility')
    serializer_class = MaintenanceWindowSerializer
    serializer_classes = {
        'create': MaintenanceWindowCreateSerializer,
    }
    permission_classes = [IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_class = MaintenanceWindowFilter
    ordering_fields = ['start_time', 'created_at']
    ordering = ['-start_time']

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.maintenance_service = MaintenanceService()

    def create(self, request, *args, **kwargs):
        """Schedule a maintenance window."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = self.maintenance_service.schedule_maintenance(
            facility_id=data['facility_id'],
            interval=TimeInterval(data['start_time'], data['end_time']),
            description=data.get('description', ''),
            created_by=request.user.id,
        )
        if not result.is_ok:
            raise_for_error(result.error)

        window = MaintenanceWindow.objects.select_related('facility').get(id=result.value.id)
        return Response(
            MaintenanceWindowSerializer(window).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'])
    def finish(self, request, pk=None):
        """End an active maintenance window now."""
        window = self.get_object()

        result = self.maintenance_service.finish_early(window.id)
        if not result.is_ok:
            raise_for_error(result.error)

        window.refresh_from_db()
        return Response(MaintenanceWindowSerializer(window).data)
