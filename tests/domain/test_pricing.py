from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from voicedesk.domain.pricing import (
    base_price_from_rate,
    parse_amount,
    resolve_price,
    rule_applies,
    sunday_weekday,
)
from voicedesk.models import AdjustmentType


@dataclass
class Rule:
    name: str
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    priority: int = 0
    id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    days_of_week: list[int] = field(default_factory=list)
    is_active: bool = True


SATURDAY = date(2025, 6, 7)
MONDAY = date(2025, 6, 9)


def test_sunday_weekday_numbering():
    assert sunday_weekday(date(2025, 6, 8)) == 0
    assert sunday_weekday(MONDAY) == 1
    assert sunday_weekday(SATURDAY) == 6


def test_rules_compose_in_priority_order():
    rules = [
        Rule("Weekend surcharge", AdjustmentType.FIXED_AMOUNT, Decimal("10"), priority=2, id=1),
        Rule("High season", AdjustmentType.PERCENTAGE, Decimal("20"), priority=1, id=2),
    ]

    resolved = resolve_price(SATURDAY, base_price=Decimal("100"), rules=rules)

    assert resolved.price == Decimal("130.00")
    assert resolved.active_rule == "Weekend surcharge"
    assert resolved.base_price == Decimal("100")
    assert not resolved.overridden


def test_percentage_after_fixed_amount_compounds():
    rules = [
        Rule("Flat", AdjustmentType.FIXED_AMOUNT, Decimal("10"), priority=1, id=1),
        Rule("Season", AdjustmentType.PERCENTAGE, Decimal("20"), priority=2, id=2),
    ]

    assert resolve_price(SATURDAY, base_price=Decimal("100"), rules=rules).price == Decimal("132.00")


def test_fixed_price_replaces_running_price():
    rules = [
        Rule("Season", AdjustmentType.PERCENTAGE, Decimal("50"), priority=1, id=1),
        Rule("Promo", AdjustmentType.FIXED_PRICE, Decimal("89.99"), priority=5, id=2),
    ]

    resolved = resolve_price(MONDAY, base_price=Decimal("100"), rules=rules)

    assert resolved.price == Decimal("89.99")
    assert resolved.active_rule == "Promo"


def test_override_wins_over_rules():
    rules = [Rule("Season", AdjustmentType.PERCENTAGE, Decimal("20"), id=1)]

    resolved = resolve_price(MONDAY, base_price=Decimal("100"), rules=rules, override=Decimal("75"))

    assert resolved.price == Decimal("75.00")
    assert resolved.overridden
    assert resolved.active_rule is None


def test_no_applicable_rule_returns_base():
    rules = [Rule("Weekends", AdjustmentType.FIXED_AMOUNT, Decimal("25"), days_of_week=[0, 6])]

    resolved = resolve_price(MONDAY, base_price=Decimal("100"), rules=rules)

    assert resolved.price == Decimal("100.00")
    assert resolved.active_rule is None


def test_rule_window_bounds_are_inclusive():
    rule = Rule(
        "June",
        AdjustmentType.FIXED_AMOUNT,
        Decimal("5"),
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 30),
    )

    assert rule_applies(rule, date(2025, 6, 1))
    assert rule_applies(rule, date(2025, 6, 30))
    assert not rule_applies(rule, date(2025, 7, 1))
    assert not rule_applies(rule, date(2025, 5, 31))


def test_inactive_rule_is_ignored():
    rule = Rule("Off", AdjustmentType.FIXED_AMOUNT, Decimal("5"), is_active=False)

    assert not rule_applies(rule, MONDAY)


def test_rule_days_of_week_filter():
    rule = Rule("Saturday", AdjustmentType.FIXED_AMOUNT, Decimal("5"), days_of_week=[6])

    assert rule_applies(rule, SATURDAY)
    assert not rule_applies(rule, MONDAY)


def test_price_is_rounded_half_up():
    rules = [Rule("Odd", AdjustmentType.PERCENTAGE, Decimal("12.5"), id=1)]

    assert resolve_price(MONDAY, base_price=Decimal("99.99"), rules=rules).price == Decimal("112.49")


def test_parse_amount():
    assert parse_amount("120") == Decimal("120")
    assert parse_amount("99,50") == Decimal("99.50")
    assert parse_amount("") is None
    assert parse_amount(None) is None
    assert parse_amount("n/a") is None
    assert parse_amount("0") is None


def test_base_price_from_rate_by_occupancy():
    rate = {"ppPrice": "60", "single": "90", "dbl": "", "triple": "200"}

    assert base_price_from_rate(rate, 1, Decimal("100")) == Decimal("90")
    assert base_price_from_rate(rate, 2, Decimal("100")) == Decimal("120")
    assert base_price_from_rate(rate, 4, Decimal("100")) == Decimal("200")


def test_base_price_falls_back_without_usable_rate():
    assert base_price_from_rate(None, 2, Decimal("100")) == Decimal("100")
    assert base_price_from_rate({"ppPrice": "", "single": ""}, 1, Decimal("80")) == Decimal("80")
