"""
Trend calculation for the report cards.
"""

from decimal import Decimal

from pg_reporting.schemas.report import CardMetrics, ReportCards
from pg_reporting.utils.datetime_utils import Number, round2, to_decimal

CARD_FIELDS = (
    "new_members",
    "rent_collected",
    "member_departures",
    "total_expenses",
    "net_profit",
)


def pct_change(current: Number, previous: Number) -> Decimal:
    """
    Percentage change from previous to current, two decimal places.

    The change is measured against the size of the baseline, so a negative
    baseline (a loss) still reports growth as positive. A zero baseline
    yields 100 for growth and 0 otherwise, never an infinite value.
    """
    current = to_decimal(current)
    previous = to_decimal(previous)
    if previous == 0:
        return Decimal("100.00") if current > 0 else Decimal("0.00")
    return round2((current - previous) / abs(previous) * 100)


class TrendCalculator:
    """Pairs each card with its change against the preceding period."""

    def apply(self, current: CardMetrics, previous: CardMetrics) -> ReportCards:
        values = current.model_dump()
        for name in CARD_FIELDS:
            values[f"{name}_trend_percent"] = pct_change(
                getattr(current, name), getattr(previous, name)
            )
        return ReportCards(**values)
