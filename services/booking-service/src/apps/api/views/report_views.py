# services/booking-service/src/apps/api/views/report_views.py
"""
Report API Views
"""

import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.services import ReportService
from apps.api.messages import raise_for_error
from apps.api.serializers import ReportQuerySerializer, ReportSerializer
from shared.common.permissions import IsAdmin

logger = logging.getLogger(__name__)


class ReportView(APIView):
    """
    Reservation statistics for a day, month, year or date range.

    GET /reports/?period=day|month|year|range&date=...&start_date=...&end_date=...
    """

    permission_classes = [IsAdmin]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.report_service = ReportService()

    def get(self, request):
        serializer = ReportQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        result = self.report_service.compute_report(serializer.to_report_range())
        if not result.is_ok:
            raise_for_error(result.error)

        return Response(ReportSerializer(result.value).data)
