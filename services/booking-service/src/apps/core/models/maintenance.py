# services/booking-service/src/apps/core/models/maintenance.py
"""
Maintenance Window Model

Time ranges during which a facility cannot be booked.
"""

from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class MaintenanceWindow(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Scheduled maintenance for a facility.

    The lifecycle (scheduled, active, finished) is derived from the current
    instant. Finishing a window early truncates its end to that instant.
    """

    class Status(models.TextChoices):
        SCHEDULED = 'scheduled', 'Scheduled'
        ACTIVE = 'active', 'Active'
        FINISHED = 'finished', 'Finished'

    facility = models.ForeignKey(
        'core.Facility',
        on_delete=models.CASCADE,
        related_name='maintenance_windows'
    )

    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(db_index=True)
    description = models.TextField(blank=True, default='')

    finished_at = models.DateTimeField(blank=True, null=True)
    created_by = models.UUIDField(blank=True, null=True)

    class Meta:
        db_table = 'maintenance_windows'
        ordering = ['start_time']
        indexes = [
            models.Index(fields=['facility', 'start_time', 'end_time']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='valid_maintenance_times'
            ),
        ]

    def __str__(self):
        return f"{self.facility_id}: {self.start_time:%Y-%m-%d %H:%M} - {self.end_time:%Y-%m-%d %H:%M}"

    def status_at(self, now=None) -> str:
        now = now or timezone.now()
        if self.finished_at or now >= self.end_time:
            return self.Status.FINISHED
        if now > self.start_time:
            return self.Status.ACTIVE
        return self.Status.SCHEDULED

    @property
    def status(self) -> str:
        return self.status_at()

    @classmethod
    def overlapping(cls, facility_id, start, end):
        """Maintenance windows of a facility that overlap ``[start, end)``."""
        return cls.objects.filter(
            facility_id=facility_id,
            start_time__lt=end,
            end_time__gt=start,
        ).order_by('start_time')

    def to_record(self):
        from apps.core.services.intervals import TimeInterval
        from apps.core.services.records import MaintenanceRecord

        return MaintenanceRecord(
            id=self.id,
            facility_id=self.facility_id,
            interval=TimeInterval(self.start_time, self.end_time),
            description=self.description,
            finished_at=self.finished_at,
        )
