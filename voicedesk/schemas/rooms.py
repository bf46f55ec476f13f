"""Schemas for the room calendar and stay quotes."""
from __future__ import annotations

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, field_serializer


class CalendarDayOut(BaseModel):
    date: dt.date
    is_blocked: bool
    price: Decimal
    stock: int
    rule_name: str | None = None

    @field_serializer("price")
    def _serialize_price(cls, value: Decimal) -> str:
        return str(value)


class CalendarRowOut(BaseModel):
    room_type_id: int
    room_type_name: str
    days: list[CalendarDayOut]


class CalendarOut(BaseModel):
    month: dt.date
    grid: list[CalendarRowOut]


class QuoteNightOut(BaseModel):
    date: dt.date
    price: Decimal
    base_price: Decimal
    active_rule: str | None = None
    overridden: bool = False

    @field_serializer("price", "base_price")
    def _serialize_decimal(cls, value: Decimal) -> str:
        return str(value)


class QuoteOut(BaseModel):
    room_type_id: int
    room_type_name: str
    check_in: dt.date
    check_out: dt.date
    guests: int | None = None
    nights: list[QuoteNightOut]
    total: Decimal

    @field_serializer("total")
    def _serialize_total(cls, value: Decimal) -> str:
        return str(value)
