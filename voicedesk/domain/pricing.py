"""Nightly price resolution for a room type.

Resolution order for one date:

1. a ``RoomAvailability.price_override`` wins outright;
2. otherwise every matching active rule is applied, in ascending priority
   (then id), against a running price that starts at the base price. A
   percentage rule therefore compounds on what earlier rules produced, and
   the reported rule name is the last one applied.

The base price comes from the knowledge document's daily rate row when one
prices the date, else from ``RoomType.price_per_night``.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable, Protocol, Sequence

from voicedesk.models.rooms import AdjustmentType

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


class RuleLike(Protocol):
    id: int | None
    name: str
    priority: int
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    start_date: date | None
    end_date: date | None
    days_of_week: list[int] | None
    is_active: bool


@dataclass(frozen=True)
class ResolvedPrice:
    day: date
    price: Decimal
    base_price: Decimal
    active_rule: str | None = None
    overridden: bool = False


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday as 0, the convention stored on price rules."""

    return (day.weekday() + 1) % 7


def rule_applies(rule: RuleLike, day: date) -> bool:
    if not rule.is_active:
        return False
    if rule.start_date is not None and day < rule.start_date:
        return False
    if rule.end_date is not None and day > rule.end_date:
        return False
    if rule.days_of_week:
        return sunday_weekday(day) in rule.days_of_week
    return True


def ordered_rules(rules: Iterable[RuleLike]) -> list[RuleLike]:
    return sorted(rules, key=lambda rule: (rule.priority, rule.id or 0))


def apply_adjustment(running: Decimal, rule: RuleLike) -> Decimal:
    value = Decimal(rule.adjustment_value)
    kind = AdjustmentType(rule.adjustment_type)
    if kind is AdjustmentType.FIXED_PRICE:
        return value
    if kind is AdjustmentType.FIXED_AMOUNT:
        return running + value
    return running + running * value / HUNDRED


def parse_amount(value: Any) -> Decimal | None:
    """Decimal from a daily-rate cell; blanks and junk yield ``None``."""

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() and amount > 0 else None


def base_price_from_rate(
    daily_rate: dict[str, Any] | None, guests: int | None, fallback: Decimal
) -> Decimal:
    """Pick the size-class price for ``guests`` from a daily rate row.

    One guest uses ``single``, two ``dbl``, three or more ``triple``; when that
    cell is blank the per-person price times the guest count is used, and
    ``fallback`` covers a row with no usable prices at all.
    """

    if not daily_rate:
        return Decimal(fallback)
    size_class = None
    if guests is not None:
        field = "single" if guests <= 1 else "dbl" if guests == 2 else "triple"
        size_class = parse_amount(daily_rate.get(field))
    if size_class is not None:
        return size_class
    per_person = parse_amount(daily_rate.get("ppPrice"))
    if per_person is not None:
        return per_person * max(guests or 1, 1)
    return Decimal(fallback)


def resolve_price(
    day: date,
    *,
    base_price: Decimal,
    rules: Sequence[RuleLike] = (),
    override: Decimal | None = None,
) -> ResolvedPrice:
    base = Decimal(base_price)
    if override is not None:
        return ResolvedPrice(
            day=day,
            price=Decimal(override).quantize(CENT, rounding=ROUND_HALF_UP),
            base_price=base,
            overridden=True,
        )
    running = base
    active_rule = None
    for rule in ordered_rules(rules):
        if rule_applies(rule, day):
            running = apply_adjustment(running, rule)
            active_rule = rule.name
    return ResolvedPrice(
        day=day,
        price=running.quantize(CENT, rounding=ROUND_HALF_UP),
        base_price=base,
        active_rule=active_rule,
    )
