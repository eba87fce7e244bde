# services/booking-service/src/apps/api/serializers/report_serializers.py
"""
Report Serializers
"""

from rest_framework import serializers

from apps.core.services import ReportRange


class ReportQuerySerializer(serializers.Serializer):
    """
    Query parameters for reports.

    ``date`` selects the day, month or year for those periods; ``range``
    needs ``start_date`` and ``end_date``.
    """

    PERIOD_CHOICES = ['day', 'month', 'year', 'range']

    period = serializers.ChoiceField(choices=PERIOD_CHOICES, default='month')
    date = serializers.DateField(required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        period = attrs['period']

        if period == 'range':
            if not attrs.get('start_date') or not attrs.get('end_date'):
                raise serializers.ValidationError(
                    'start_date and end_date are required for a range report'
                )
            if attrs['end_date'] < attrs['start_date']:
                raise serializers.ValidationError({
                    'end_date': 'End date must not be before start date'
                })
        elif not attrs.get('date'):
            raise serializers.ValidationError({
                'date': f'date is required for a {period} report'
            })

        return attrs

    def to_report_range(self) -> ReportRange:
        data = self.validated_data
        period = data['period']

        if period == 'day':
            return ReportRange.for_day(data['date'])
        if period == 'month':
            return ReportRange.for_month(data['date'].year, data['date'].month)
        if period == 'year':
            return ReportRange.for_year(data['date'].year)
        return ReportRange.between(data['start_date'], data['end_date'])


class AggregateStatsSerializer(serializers.Serializer):
    label = serializers.CharField()
    total_reservations = serializers.IntegerField()
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    top_facility = serializers.CharField(allow_null=True)
    occupancy_percent = serializers.FloatField()


class FacilityStatsSerializer(serializers.Serializer):
    facility_id = serializers.UUIDField()
    facility_name = serializers.CharField()
    total_reservations = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    hours_booked = serializers.FloatField()
    occupancy_percent = serializers.FloatField()


class ReportSerializer(serializers.Serializer):
    period = serializers.CharField(source='range.label')
    start_date = serializers.DateField(source='range.start_date')
    end_date = serializers.DateField(source='range.end_date')
    summary = AggregateStatsSerializer()
    per_facility = FacilityStatsSerializer(many=True)
