from decimal import Decimal

from pg_reporting.schemas.report import CardMetrics
from pg_reporting.services.analytics.trend_calculator import TrendCalculator, pct_change


def test_pct_change_zero_baseline():
    assert pct_change(0, 0) == Decimal("0")
    assert pct_change(10000, 0) == Decimal("100")
    assert pct_change(Decimal("0.01"), 0) == Decimal("100")
    assert pct_change(-50, 0) == Decimal("0")


def test_pct_change_rounds_to_two_places():
    assert pct_change(150, 100) == Decimal("50.00")
    assert pct_change(50, 100) == Decimal("-50.00")
    assert pct_change(1, 3) == Decimal("-66.67")
    assert pct_change(2, 3) == Decimal("-33.33")


def test_pct_change_sign_follows_delta():
    for current, previous in [(5, 3), (3, 5), (7, 7), (-2, 4), (-5, -10), (-10, -5), (2, -4)]:
        change = pct_change(current, previous)
        delta = current - previous
        if delta == 0:
            assert change == 0
        else:
            assert (change > 0) == (delta > 0)


def test_pct_change_negative_baseline():
    # loss shrinking from 10 to 5 is an improvement
    assert pct_change(Decimal("-5"), Decimal("-10")) == Decimal("50.00")
    assert pct_change(Decimal("-10"), Decimal("-5")) == Decimal("-100.00")
    assert pct_change(Decimal("4000"), Decimal("-2000")) == Decimal("300.00")


def test_apply_pairs_every_card_with_trend():
    current = CardMetrics(
        new_members=3,
        rent_collected=Decimal("10000"),
        member_departures=1,
        total_expenses=Decimal("2000"),
        net_profit=Decimal("8000"),
    )
    previous = CardMetrics(
        new_members=2,
        rent_collected=Decimal("0"),
        member_departures=1,
        total_expenses=Decimal("4000"),
        net_profit=Decimal("-4000"),
    )

    cards = TrendCalculator().apply(current, previous)

    assert cards.rent_collected == Decimal("10000")
    assert cards.new_members_trend_percent == Decimal("50.00")
    assert cards.rent_collected_trend_percent == Decimal("100")
    assert cards.member_departures_trend_percent == Decimal("0")
    assert cards.total_expenses_trend_percent == Decimal("-50.00")
    assert cards.net_profit_trend_percent == Decimal("300.00")
