"""
Report period resolution.

Maps (report type, period index, year) to a concrete window and classifies
periods as current or completed.

Week numbering is specific to this system and is NOT ISO-8601:

- week 1 of a year starts on the first Sunday on or after 1 January;
- week ``n`` starts ``(n - 1) * 7`` days later and ends six days after its
  start, at end of day;
- days before the first Sunday belong to the last week of the previous year.

The week containing a moment is derived from the same anchor, so
``week_range(*week_of(now))`` always contains ``now``. Cached rows are keyed
by these numbers; do not swap in a library week calculation.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Tuple

from pg_reporting.core.exceptions import InvalidPeriodError
from pg_reporting.models.enums import ReportType
from pg_reporting.schemas.report import PeriodWindow
from pg_reporting.utils.datetime_utils import end_of_day, js_weekday, local_now, start_of_day

logger = logging.getLogger(__name__)

MAX_WEEK = 53
MAX_MONTH = 12

# Week 1 of a year rolls back to this week of the previous year. This is an
# approximation; some years have a 53rd week under the numbering above.
PREVIOUS_YEAR_LAST_WEEK = 52


class PeriodResolver:
    """Date-boundary math for weekly and monthly report periods."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or local_now

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------ #
    # Windows
    # ------------------------------------------------------------------ #
    @staticmethod
    def first_sunday(year: int) -> date:
        """Start of week 1: the first Sunday on or after 1 January."""
        first_day = date(year, 1, 1)
        return first_day + timedelta(days=(7 - js_weekday(first_day)) % 7)

    @staticmethod
    def week_range(week: int, year: int) -> PeriodWindow:
        """Window of a week index within a year."""
        PeriodResolver.validate(ReportType.WEEKLY, week, year)
        start = PeriodResolver.first_sunday(year) + timedelta(days=(week - 1) * 7)
        end = start + timedelta(days=6)
        return PeriodWindow(start=start_of_day(start), end=end_of_day(end))

    @staticmethod
    def month_range(month: int, year: int) -> PeriodWindow:
        """First calendar day to last calendar day of a month."""
        PeriodResolver.validate(ReportType.MONTHLY, month, year)
        start = date(year, month, 1)
        if month == MAX_MONTH:
            next_month = date(year + 1, 1, 1)
        else:
            next_month = date(year, month + 1, 1)
        end = next_month - timedelta(days=1)
        return PeriodWindow(start=start_of_day(start), end=end_of_day(end))

    def resolve(self, report_type: ReportType, period: int, year: int) -> PeriodWindow:
        if report_type == ReportType.WEEKLY:
            return self.week_range(period, year)
        return self.month_range(period, year)

    @staticmethod
    def validate(report_type: ReportType, period: int, year: int) -> None:
        upper = MAX_WEEK if report_type == ReportType.WEEKLY else MAX_MONTH
        if not 1 <= year <= 9998:
            raise InvalidPeriodError(
                f"Year {year} is out of range",
                details={"report_type": report_type.value, "period": period, "year": year},
            )
        if not 1 <= period <= upper:
            raise InvalidPeriodError(
                f"{report_type.value} period {period} is out of range 1..{upper}",
                details={"report_type": report_type.value, "period": period, "year": year},
            )

    # ------------------------------------------------------------------ #
    # Current / previous
    # ------------------------------------------------------------------ #
    @staticmethod
    def week_of(value: datetime) -> Tuple[int, int]:
        """(week, year) whose window contains the given moment."""
        day = value.date()
        year = day.year
        anchor = PeriodResolver.first_sunday(year)
        if day < anchor:
            year -= 1
            anchor = PeriodResolver.first_sunday(year)
        return (day - anchor).days // 7 + 1, year

    def current_period(self, report_type: ReportType) -> Tuple[int, int]:
        """(period, year) containing now."""
        now = self.now()
        if report_type == ReportType.WEEKLY:
            return self.week_of(now)
        return now.month, now.year

    def is_current(self, report_type: ReportType, period: int, year: int) -> bool:
        """
        True only for the period containing now. Past and future periods are
        both non-current.
        """
        current_period, current_year = self.current_period(report_type)
        return year == current_year and period == current_period

    @staticmethod
    def previous(report_type: ReportType, period: int, year: int) -> Tuple[int, int]:
        """Immediately preceding (period, year)."""
        if period > 1:
            return period - 1, year
        if report_type == ReportType.WEEKLY:
            return PREVIOUS_YEAR_LAST_WEEK, year - 1
        return MAX_MONTH, year - 1

    def last_completed_period(self, report_type: ReportType) -> Tuple[int, int]:
        """
        The period right before the current one. For weeks this is the week
        containing the day before the current window starts, so a 53rd week
        of the previous year is not skipped.
        """
        period, year = self.current_period(report_type)
        if report_type == ReportType.WEEKLY:
            window = self.week_range(period, year)
            return self.week_of(window.start - timedelta(days=1))
        return self.previous(report_type, period, year)
