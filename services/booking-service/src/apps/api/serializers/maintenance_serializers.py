# services/booking-service/src/apps/api/serializers/maintenance_serializers.py
"""
Maintenance Window Serializers
"""

from rest_framework import serializers

from apps.core.models import MaintenanceWindow


class MaintenanceWindowSerializer(serializers.ModelSerializer):
    facility_name = serializers.CharField(source='facility.name', read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = MaintenanceWindow
        fields = [
            'id', 'facility', 'facility_name',
            'start_time', 'end_time', 'description',
            'status', 'finished_at', 'created_by',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class MaintenanceWindowCreateSerializer(serializers.Serializer):
    facility_id = serializers.UUIDField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    description = serializers.CharField(required=False, allow_blank=True, default='')
