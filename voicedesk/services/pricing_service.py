"""Nightly prices, stay quotes and the monthly room calendar."""
from __future__ import annotations

import calendar as month_calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from voicedesk.core.errors import ValidationError
from voicedesk.core.logger import get_logger
from voicedesk.domain import knowledge_document
from voicedesk.domain.pricing import ResolvedPrice, base_price_from_rate, resolve_price
from voicedesk.models import RoomType
from voicedesk.repositories import KnowledgeDocumentStore, RoomRepository

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StayQuote:
    room_type_id: int
    room_type_name: str
    check_in: date
    check_out: date
    guests: int | None
    nights: tuple[ResolvedPrice, ...]

    @property
    def total(self) -> Decimal:
        return sum((night.price for night in self.nights), Decimal("0"))


@dataclass(frozen=True)
class CalendarDay:
    date: date
    is_blocked: bool
    price: Decimal
    stock: int
    rule_name: str | None


@dataclass(frozen=True)
class CalendarRow:
    room_type_id: int
    room_type_name: str
    days: tuple[CalendarDay, ...]


def month_bounds(anchor: date) -> tuple[date, date]:
    """First day of ``anchor``'s month and first day of the next month."""

    first = anchor.replace(day=1)
    days_in_month = month_calendar.monthrange(anchor.year, anchor.month)[1]
    return first, first + timedelta(days=days_in_month)


class PricingService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._rooms = RoomRepository(session)
        self._documents = KnowledgeDocumentStore(session)
        self._records: dict[int, dict[str, Any] | None] = {}

    def _record(self, customer_id: int) -> dict[str, Any] | None:
        if customer_id not in self._records:
            self._records[customer_id] = self._documents.first_record_for_customer(customer_id)
        return self._records[customer_id]

    def _resolve(
        self,
        room_type: RoomType,
        day: date,
        *,
        guests: int | None,
        override: Decimal | None,
    ) -> ResolvedPrice:
        rate = knowledge_document.daily_rate_for(self._record(room_type.customer_id), room_type.name, day)
        base = base_price_from_rate(rate, guests, room_type.price_per_night)
        return resolve_price(day, base_price=base, rules=room_type.price_rules, override=override)

    def resolve(self, room_type: RoomType | int, day: date, *, guests: int | None = None) -> ResolvedPrice:
        """Nightly price for one room type and date."""

        if not isinstance(room_type, RoomType):
            room_type = self._rooms.get_room_type(room_type)
        override = self._rooms.price_override(room_type.id, day)
        return self._resolve(room_type, day, guests=guests, override=override)

    def quote_stay(
        self,
        room_type_id: int,
        check_in: date,
        check_out: date,
        guests: int | None = None,
    ) -> StayQuote:
        if check_out <= check_in:
            raise ValidationError("check_out must be after check_in")
        room_type = self._rooms.get_room_type(room_type_id)
        rows = self._rooms.availability_rows(room_type.id, check_in, check_out)
        nights = []
        for day in knowledge_document.stay_dates(check_in, check_out):
            row = rows.get(day)
            override = row.price_override if row is not None else None
            nights.append(self._resolve(room_type, day, guests=guests, override=override))
        quote = StayQuote(
            room_type_id=room_type.id,
            room_type_name=room_type.name,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            nights=tuple(nights),
        )
        LOGGER.debug("Quoted %s night(s) of %s at %s", len(nights), room_type.name, quote.total)
        return quote

    def calendar(self, customer_id: int, month: date) -> list[CalendarRow]:
        """Per active room type, the price, block flag, stock and rule of every day in ``month``."""

        start, end = month_bounds(month)
        grid: list[CalendarRow] = []
        for room_type in self._rooms.active_room_types(customer_id):
            rows = self._rooms.availability_rows(room_type.id, start, end)
            occupancy = self._rooms.nightly_occupancy(room_type.id, start, end)
            days = []
            for day in knowledge_document.stay_dates(start, end):
                row = rows.get(day)
                resolved = self._resolve(
                    room_type,
                    day,
                    guests=None,
                    override=row.price_override if row is not None else None,
                )
                days.append(
                    CalendarDay(
                        date=day,
                        is_blocked=bool(row is not None and row.is_blocked),
                        price=resolved.price,
                        stock=max(0, room_type.total_rooms - occupancy[day]),
                        rule_name=resolved.active_rule,
                    )
                )
            grid.append(CalendarRow(room_type.id, room_type.name, tuple(days)))
        return grid
