"""Room inventory queries: room types, blocks, overrides and reservation overlap."""
from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import and_, func, or_, select

from voicedesk.core.errors import NotFoundError
from voicedesk.models import Reservation, RoomAvailability, RoomType
from voicedesk.models.rooms import OCCUPYING_STATUSES

from .base import BaseRepository


class RoomRepository(BaseRepository):
    def get_room_type(self, room_type_id: int) -> RoomType:
        room_type = self._session.get(RoomType, room_type_id)
        if room_type is None:
            raise NotFoundError("RoomType", room_type_id)
        return room_type

    def get_reservation(self, reservation_id: int) -> Reservation:
        reservation = self._session.get(Reservation, reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    def active_room_types(
        self,
        customer_id: int,
        *,
        min_guests: int | None = None,
        name: str | None = None,
    ) -> list[RoomType]:
        statement = select(RoomType).where(
            RoomType.customer_id == customer_id, RoomType.is_active.is_(True)
        )
        if min_guests is not None:
            statement = statement.where(RoomType.max_guests >= min_guests)
        pattern = self._search_pattern(name)
        if pattern:
            statement = statement.where(func.lower(RoomType.name).like(pattern, escape="\\"))
        return list(self._session.scalars(statement.order_by(RoomType.id)))

    def find_room_type(self, customer_id: int, name: str) -> RoomType | None:
        matches = self.active_room_types(customer_id, name=name)
        return matches[0] if matches else None

    def has_blocked_date(self, room_type_id: int, start: date, end: date) -> bool:
        """Any blocked day in ``[start, end)``."""

        statement = select(func.count(RoomAvailability.id)).where(
            RoomAvailability.room_type_id == room_type_id,
            RoomAvailability.is_blocked.is_(True),
            RoomAvailability.date >= start,
            RoomAvailability.date < end,
        )
        return (self._session.scalar(statement) or 0) > 0

    def count_overlapping(self, room_type_id: int, start: date, end: date) -> int:
        """Occupying reservations touching ``[start, end]``, boundaries included.

        Back-to-back stays sharing a turnover day are counted against each
        other; see DESIGN.md before tightening this.
        """

        statement = select(func.count(Reservation.id)).where(
            Reservation.room_type_id == room_type_id,
            Reservation.status.in_(OCCUPYING_STATUSES),
            or_(
                and_(Reservation.check_in >= start, Reservation.check_in <= end),
                and_(Reservation.check_out >= start, Reservation.check_out <= end),
                and_(Reservation.check_in <= start, Reservation.check_out >= end),
            ),
        )
        return int(self._session.scalar(statement) or 0)

    def count_active_since(self, room_type_id: int, today: date) -> int:
        statement = select(func.count(Reservation.id)).where(
            Reservation.room_type_id == room_type_id,
            Reservation.status.in_(OCCUPYING_STATUSES),
            Reservation.check_out >= today,
        )
        return int(self._session.scalar(statement) or 0)

    def nightly_occupancy(self, room_type_id: int, start: date, end: date) -> Counter[date]:
        """Occupying reservations per night in ``[start, end)``."""

        statement = select(Reservation.check_in, Reservation.check_out).where(
            Reservation.room_type_id == room_type_id,
            Reservation.status.in_(OCCUPYING_STATUSES),
            Reservation.check_in < end,
            Reservation.check_out > start,
        )
        occupancy: Counter[date] = Counter()
        for check_in, check_out in self._session.execute(statement):
            day = max(self._coerce_date(check_in), start)
            last = min(self._coerce_date(check_out), end)
            while day < last:
                occupancy[day] += 1
                day += timedelta(days=1)
        return occupancy

    def availability_rows(
        self, room_type_id: int, start: date, end: date
    ) -> dict[date, RoomAvailability]:
        statement = select(RoomAvailability).where(
            RoomAvailability.room_type_id == room_type_id,
            RoomAvailability.date >= start,
            RoomAvailability.date < end,
        )
        return {self._coerce_date(row.date): row for row in self._session.scalars(statement)}

    def price_override(self, room_type_id: int, day: date) -> Decimal | None:
        row = self.availability_rows(room_type_id, day, day + timedelta(days=1)).get(day)
        if row is None or row.price_override is None:
            return None
        return self._to_decimal(row.price_override)
