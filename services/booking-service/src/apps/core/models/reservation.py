# services/booking-service/src/apps/core/models/reservation.py
"""
Reservation Model

A requester's claim on a facility for a time interval.
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    Facility reservation.

    Two confirmed reservations for the same facility never overlap. The
    storage layer enforces this at write time, see
    ``apps.core.services.storage.DjangoReservationStore``.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        CONFIRMED = 'confirmed', 'Confirmed'
        CANCELLED = 'cancelled', 'Cancelled'

    reservation_number = models.CharField(max_length=20, unique=True, db_index=True)

    facility = models.ForeignKey(
        'core.Facility',
        on_delete=models.PROTECT,
        related_name='reservations'
    )
    requester_id = models.UUIDField(db_index=True)

    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(db_index=True)

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )

    cancelled_at = models.DateTimeField(blank=True, null=True)
    cancellation_reason = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'reservations'
        ordering = ['start_time']
        indexes = [
            models.Index(fields=['facility', 'status', 'start_time', 'end_time']),
            models.Index(fields=['requester_id', 'start_time']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_time__gt=models.F('start_time')),
                name='valid_reservation_times'
            ),
        ]

    def __str__(self):
        return f"{self.reservation_number}: {self.start_time.strftime('%Y-%m-%d %H:%M')}"

    def save(self, *args, **kwargs):
        if not self.reservation_number:
            self.reservation_number = self._generate_reservation_number()
        super().save(*args, **kwargs)

    def _generate_reservation_number(self) -> str:
        """Generate a unique, human-readable reservation number."""
        today = timezone.now()
        count = Reservation.objects.filter(
            created_at__date=today.date()
        ).count() + 1
        number = f"RES-{today.strftime('%Y%m%d')}-{count:04d}"
        while Reservation.objects.filter(reservation_number=number).exists():
            count += 1
            number = f"RES-{today.strftime('%Y%m%d')}-{count:04d}"
        return number

    @property
    def duration_hours(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 3600

    @property
    def is_confirmed(self) -> bool:
        return self.status == self.Status.CONFIRMED

    @classmethod
    def confirmed_overlapping(cls, facility_id, start, end):
        """Confirmed reservations of a facility that overlap ``[start, end)``."""
        queryset = cls.objects.filter(status=cls.Status.CONFIRMED).filter(
            start_time__lt=end,
            end_time__gt=start,
        )
        if facility_id is not None:
            queryset = queryset.filter(facility_id=facility_id)
        return queryset.order_by('start_time')

    def to_record(self):
        from apps.core.services.intervals import TimeInterval
        from apps.core.services.records import ReservationRecord

        return ReservationRecord(
            id=self.id,
            reservation_number=self.reservation_number,
            facility_id=self.facility_id,
            requester_id=self.requester_id,
            interval=TimeInterval(self.start_time, self.end_time),
            status=self.status,
            total_price=self.total_price,
        )
