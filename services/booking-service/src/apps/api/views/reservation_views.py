# services/booking-service/src/apps/api/views/reservation_views.py
"""
Reservation API Views

Booking goes through the booking engine; the views only translate HTTP
input and engine results.
"""

import logging

from rest_framework import mixins, viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from apps.core.models import Reservation
from apps.core.services import BookingService, TimeInterval
from apps.api.messages import raise_for_error
from apps.api.serializers import (
    ReservationSerializer,
    ReservationCreateSerializer,
    ReservationStatusSerializer,
    ReservationValidationResultSerializer,
)
from shared.common.exceptions import ForbiddenException
from shared.common.mixins import MultiSerializerMixin
from shared.common.permissions import IsAdmin, IsAuthenticated, is_admin
from .filters import ReservationFilter

logger = logging.getLogger(__name__)


class ReservationViewSet(
    MultiSerializerMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for reservations.

    Users see and manage their own reservations; admins see all of them
    and may book on behalf of other users.
    """

    queryset = Reservation.objects.select_related('facility')
    serializer_class = ReservationSerializer
    serializer_classes = {
        'create': ReservationCreateSerializer,
        'change_status': ReservationStatusSerializer,
    }
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = ReservationFilter
    search_fields = ['reservation_number']
    ordering_fields = ['start_time', 'created_at', 'total_price', 'status']
    ordering = ['-start_time']

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.booking_service = BookingService()

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAdmin()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = super().get_queryset()

        if not is_admin(self.request):
            queryset = queryset.filter(requester_id=self.request.user.id)

        return queryset

    def create(self, request, *args, **kwargs):
        """Create a reservation, or only validate it with ``validate_only``."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        requester_id = data.get('requester_id') or request.user.id
        if requester_id != request.user.id and not is_admin(request):
            raise ForbiddenException('Only administrators can book for other users.')

        interval = TimeInterval(data['start_time'], data['end_time'])

        if data['validate_only']:
            result = self.booking_service.validate_booking(data['facility_id'], interval)
            if not result.is_ok:
                raise_for_error(result.error)

            output = ReservationValidationResultSerializer({
                'valid': True,
                'total_price': result.value,
            })
            return Response(output.data, status=status.HTTP_200_OK)

        result = self.booking_service.validate_and_create_booking(
            facility_id=data['facility_id'],
            requester_id=requester_id,
            interval=interval,
            requested_status=data['status'],
        )
        if not result.is_ok:
            raise_for_error(result.error)

        reservation = Reservation.objects.select_related('facility').get(id=result.value.id)
        return Response(
            ReservationSerializer(reservation).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=['post'], url_path='status')
    def change_status(self, request, pk=None):
        """Confirm, cancel or reactivate a reservation."""
        reservation = self.get_object()

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']

        if not is_admin(request) and new_status != Reservation.Status.CANCELLED:
            raise ForbiddenException('You can only cancel your own reservations.')

        result = self.booking_service.change_reservation_status(
            reservation.id,
            new_status,
            reason=serializer.validated_data.get('reason'),
        )
        if not result.is_ok:
            raise_for_error(result.error)

        reservation.refresh_from_db()
        return Response(ReservationSerializer(reservation).data)

    def perform_destroy(self, instance):
        logger.info(f"Deleting reservation {instance.reservation_number}")
        instance.delete()
