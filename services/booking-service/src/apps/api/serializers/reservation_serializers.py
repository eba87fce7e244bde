# services/booking-service/src/apps/api/serializers/reservation_serializers.py
"""
Reservation Serializers
"""

from rest_framework import serializers

from apps.core.models import Reservation


class ReservationSerializer(serializers.ModelSerializer):
    """Stored reservation."""

    facility_name = serializers.CharField(source='facility.name', read_only=True)
    status_display = serializers.CharField(
        source='get_status_display',
        read_only=True
    )
    duration_hours = serializers.FloatField(read_only=True)

    class Meta:
        model = Reservation
        fields = [
            'id', 'reservation_number',
            'facility', 'facility_name', 'requester_id',
            'start_time', 'end_time', 'duration_hours',
            'status', 'status_display', 'total_price',
            'cancelled_at', 'cancellation_reason',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ReservationCreateSerializer(serializers.Serializer):
    """Booking request."""

    facility_id = serializers.UUIDField()
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    status = serializers.ChoiceField(
        choices=[Reservation.Status.PENDING, Reservation.Status.CONFIRMED],
        default=Reservation.Status.CONFIRMED
    )
    requester_id = serializers.UUIDField(
        required=False,
        help_text='Book on behalf of another user (admins only)'
    )
    validate_only = serializers.BooleanField(default=False)


class ReservationStatusSerializer(serializers.Serializer):
    """Status change request."""

    status = serializers.ChoiceField(choices=Reservation.Status.choices)
    reason = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=500
    )


class ReservationValidationResultSerializer(serializers.Serializer):
    """Result of a validate-only booking request."""

    valid = serializers.BooleanField()
    total_price = serializers.DecimalField(max_digits=10, decimal_places=2)
