# services/booking-service/src/apps/core/services/pricing.py
"""
Pricing Calculator
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from .intervals import TimeInterval

CENTS = Decimal('0.01')


def calculate_price(
    duration_hours: Union[float, Decimal],
    hourly_rate: Union[Decimal, int, str]
) -> Decimal:
    """Duration times hourly rate, rounded half-up to two decimal places."""
    if not duration_hours:
        return Decimal('0.00')

    hours = Decimal(str(duration_hours))
    rate = Decimal(str(hourly_rate))
    return (hours * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


def price_for_interval(interval: TimeInterval, hourly_rate) -> Decimal:
    """Price an interval, converting its length to exact decimal hours first."""
    seconds = int(interval.duration.total_seconds())
    if seconds <= 0:
        return Decimal('0.00')
    return calculate_price(Decimal(seconds) / Decimal(3600), hourly_rate)
