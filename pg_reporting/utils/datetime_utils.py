"""
Date and time helpers for reporting windows.

All report datetimes are naive wall-clock values in the configured
reporting timezone, matching how rows are stored.
"""

from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

import pytz

from pg_reporting.config.settings import settings

TWO_PLACES = Decimal("0.01")

Number = Union[int, float, Decimal, None]


def local_now(timezone_name: Optional[str] = None) -> datetime:
    """Current wall-clock time in the reporting timezone, tz-naive."""
    tz = pytz.timezone(timezone_name or settings.REPORT_TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None)


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def end_of_day(value: date) -> datetime:
    # millisecond precision, same as the stored timestamps
    return datetime.combine(value, time(23, 59, 59, 999000))


def js_weekday(value: date) -> int:
    """Day of week with Sunday = 0 ... Saturday = 6."""
    return value.isoweekday() % 7


def to_decimal(value: Number) -> Decimal:
    """Coerce a possibly-null amount into a Decimal, treating None as zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    """Round half-up to two decimal places."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def safe_ratio(numerator: Number, denominator: Number) -> Decimal:
    """numerator / denominator, or 0 when the denominator is zero."""
    den = to_decimal(denominator)
    if den == 0:
        return Decimal("0")
    return to_decimal(numerator) / den


def percentage(numerator: Number, denominator: Number) -> Decimal:
    """numerator / denominator * 100 rounded to 2 places, 0 on a zero denominator."""
    return round2(safe_ratio(numerator, denominator) * 100)
