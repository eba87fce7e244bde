# services/booking-service/src/apps/api/serializers/availability_serializers.py
"""
Availability Serializers

Query parameters and slot output for the availability endpoint.
"""

from rest_framework import serializers


class AvailabilityQuerySerializer(serializers.Serializer):
    """Query parameters for availability."""

    date = serializers.DateField()
    facility_id = serializers.UUIDField(required=False)


class SlotSerializer(serializers.Serializer):
    """One display slot."""

    hour = serializers.IntegerField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    available = serializers.BooleanField()


class FacilitySlotReportSerializer(serializers.Serializer):
    """Slots of one facility for one date."""

    facility_id = serializers.UUIDField()
    name = serializers.CharField()
    category = serializers.CharField()
    date = serializers.DateField()
    opening = serializers.TimeField(format='%H:%M')
    closing = serializers.TimeField(format='%H:%M')
    available_count = serializers.IntegerField()
    slots = SlotSerializer(many=True)
