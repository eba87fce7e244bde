# services/booking-service/src/apps/api/serializers/facility_serializers.py
"""
Facility Serializers
"""

from rest_framework import serializers

from apps.core.models import Facility, OperatingHours


class OperatingHoursSerializer(serializers.ModelSerializer):
    """Per-weekday operating hours override."""

    day_name = serializers.CharField(
        source='get_day_of_week_display',
        read_only=True
    )

    class Meta:
        model = OperatingHours
        fields = [
            'id', 'facility', 'day_of_week', 'day_name',
            'open_time', 'close_time', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate(self, attrs):
        open_time = attrs.get('open_time', getattr(self.instance, 'open_time', None))
        close_time = attrs.get('close_time', getattr(self.instance, 'close_time', None))

        if open_time and close_time and close_time <= open_time:
            raise serializers.ValidationError({
                'close_time': 'Closing time must be after opening time'
            })

        return attrs


class FacilitySerializer(serializers.ModelSerializer):
    """Facility with its operating hours overrides."""

    category_display = serializers.CharField(
        source='get_category_display',
        read_only=True
    )
    surface_display = serializers.CharField(
        source='get_surface_display',
        read_only=True
    )
    operating_hours = OperatingHoursSerializer(many=True, read_only=True)

    class Meta:
        model = Facility
        fields = [
            'id', 'name', 'category', 'category_display',
            'surface', 'surface_display',
            'description', 'image_url', 'capacity',
            'hourly_rate', 'is_active', 'operating_hours',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class FacilityListSerializer(FacilitySerializer):
    """Compact serializer for facility lists."""

    class Meta(FacilitySerializer.Meta):
        fields = [
            'id', 'name', 'category', 'category_display',
            'surface', 'image_url', 'capacity',
            'hourly_rate', 'is_active',
        ]
