# services/booking-service/src/apps/core/models/facility.py
"""
Facility Models

Bookable sports facilities and their per-weekday operating hours.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from shared.common.mixins import UUIDPrimaryKeyMixin, TimestampMixin


class Facility(UUIDPrimaryKeyMixin, TimestampMixin, models.Model):
    """
    A bookable sports facility (pitch, court or pool).

    The booking engine only reads the identity, name, category and hourly
    rate; everything else is descriptive data managed by administrators.
    """

    class Category(models.TextChoices):
        SOCCER = 'soccer', 'Soccer'
        BASKETBALL = 'basketball', 'Basketball'
        VOLLEYBALL = 'volleyball', 'Volleyball'
        SWIMMING = 'swimming', 'Swimming'

    class Surface(models.TextChoices):
        GRASS = 'grass', 'Natural Grass'
        SYNTHETIC_GRASS = 'synthetic_grass', 'Synthetic Grass'
        CONCRETE = 'concrete', 'Concrete'
        WOOD = 'wood', 'Wood'

    name = models.CharField(max_length=150)
    category = models.CharField(max_length=20, choices=Category.choices)
    surface = models.CharField(
        max_length=20,
        choices=Surface.choices,
        blank=True,
        null=True
    )
    description = models.TextField(blank=True, default='')
    image_url = models.URLField(blank=True, default='')
    capacity = models.PositiveIntegerField(default=0)

    hourly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'facilities'
        ordering = ['name']
        verbose_name_plural = 'facilities'

    def __str__(self):
        return f"{self.name} ({self.get_category_display()})"

    def to_record(self):
        from apps.core.services.records import FacilityRecord

        return FacilityRecord(
            id=self.id,
            name=self.name,
            category=self.category,
            hourly_rate=self.hourly_rate,
        )


class OperatingHours(models.Model):
    """
    Per-facility operating hours override for one day of the week.

    When a facility has no row for a weekday the global default policy
    applies.
    """

    class DayOfWeek(models.IntegerChoices):
        SUNDAY = 0, 'Sunday'
        MONDAY = 1, 'Monday'
        TUESDAY = 2, 'Tuesday'
        WEDNESDAY = 3, 'Wednesday'
        THURSDAY = 4, 'Thursday'
        FRIDAY = 5, 'Friday'
        SATURDAY = 6, 'Saturday'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    facility = models.ForeignKey(
        Facility,
        on_delete=models.CASCADE,
        related_name='operating_hours'
    )

    day_of_week = models.IntegerField(choices=DayOfWeek.choices)
    open_time = models.TimeField()
    close_time = models.TimeField()

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'operating_hours'
        ordering = ['facility', 'day_of_week']
        constraints = [
            models.UniqueConstraint(
                fields=['facility', 'day_of_week'],
                name='unique_facility_day_of_week'
            ),
            models.CheckConstraint(
                condition=models.Q(close_time__gt=models.F('open_time')),
                name='valid_operating_hours'
            ),
        ]

    def __str__(self):
        return f"{self.get_day_of_week_display()}: {self.open_time} - {self.close_time}"

    def to_rule(self):
        from apps.core.services.records import OperatingHoursRule

        return OperatingHoursRule(
            day_of_week=self.day_of_week,
            opening=self.open_time,
            closing=self.close_time,
        )
