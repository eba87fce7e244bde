# services/booking-service/src/apps/api/views/availability_views.py
"""
Availability API Views
"""

import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.services import AvailabilityService
from apps.api.messages import raise_for_error
from apps.api.serializers import (
    AvailabilityQuerySerializer,
    FacilitySlotReportSerializer,
)
from shared.common.permissions import IsAuthenticated

logger = logging.getLogger(__name__)


class AvailabilityView(APIView):
    """
    Slot availability for a date.

    GET /availability/?date=YYYY-MM-DD[&facility_id=<uuid>]
    """

    permission_classes = [IsAuthenticated]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.availability_service = AvailabilityService()

    def get(self, request):
        serializer = AvailabilityQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        target_date = serializer.validated_data['date']
        facility_id = serializer.validated_data.get('facility_id')

        result = self.availability_service.compute_availability(facility_id, target_date)
        if not result.is_ok:
            raise_for_error(result.error)

        return Response({
            'date': target_date.isoformat(),
            'facilities': FacilitySlotReportSerializer(result.value, many=True).data,
        })
