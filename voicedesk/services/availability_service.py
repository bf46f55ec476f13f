"""Room availability search with nearby alternative dates."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from voicedesk.core.errors import ValidationError
from voicedesk.core.logger import get_logger
from voicedesk.repositories import RoomRepository

LOGGER = get_logger(__name__)

ALTERNATIVE_OFFSETS = (-3, -2, -1, 1, 2, 3)
MAX_ALTERNATIVES = 3


@dataclass(frozen=True)
class RoomOption:
    room_type_id: int
    name: str
    price_per_night: Decimal
    max_guests: int
    available_rooms: int


@dataclass(frozen=True)
class AlternativeWindow:
    check_in: date
    check_out: date
    room_types: tuple[str, ...]


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    check_in: date
    check_out: date
    guests: int
    message: str
    room_types: tuple[RoomOption, ...] = ()
    lowest_price: Decimal | None = None
    alternatives: tuple[AlternativeWindow, ...] = ()


@dataclass(frozen=True)
class RoomTypeOverview:
    room_type_id: int
    name: str
    description: str | None
    price_per_night: Decimal
    max_guests: int
    features: tuple[str, ...]
    total_rooms: int
    available_rooms: int


def _stay_label(check_in: date, check_out: date) -> str:
    return f"{check_in.isoformat()} to {check_out.isoformat()}"


class AvailabilityService:
    def __init__(self, session: Session) -> None:
        self._session = session
        self._rooms = RoomRepository(session)

    def available_room_types(
        self,
        customer_id: int,
        start: date,
        end: date,
        guests: int,
        room_type: str | None = None,
    ) -> list[RoomOption]:
        """Room types with at least one free room for ``[start, end)``."""

        options = []
        for candidate in self._rooms.active_room_types(customer_id, min_guests=guests, name=room_type):
            if self._rooms.has_blocked_date(candidate.id, start, end):
                continue
            free = candidate.total_rooms - self._rooms.count_overlapping(candidate.id, start, end)
            if free > 0:
                options.append(
                    RoomOption(
                        room_type_id=candidate.id,
                        name=candidate.name,
                        price_per_night=candidate.price_per_night,
                        max_guests=candidate.max_guests,
                        available_rooms=free,
                    )
                )
        return options

    def search(
        self,
        customer_id: int,
        check_in: date,
        check_out: date,
        guests: int,
        room_type: str | None = None,
        *,
        today: date | None = None,
    ) -> AvailabilityResult:
        if check_out <= check_in:
            raise ValidationError("check_out must be after check_in")
        if guests < 1:
            raise ValidationError("guests must be at least 1")

        today = today or date.today()
        options = self.available_room_types(customer_id, check_in, check_out, guests, room_type)
        if options:
            lowest = min(option.price_per_night for option in options)
            names = ", ".join(option.name for option in options)
            message = (
                f"Rooms are available for {_stay_label(check_in, check_out)}: {names}. "
                f"Prices start from {lowest} per night."
            )
            return AvailabilityResult(
                available=True,
                check_in=check_in,
                check_out=check_out,
                guests=guests,
                message=message,
                room_types=tuple(options),
                lowest_price=lowest,
            )

        alternatives: list[AlternativeWindow] = []
        for offset in ALTERNATIVE_OFFSETS:
            start = check_in + timedelta(days=offset)
            if start < today:
                continue
            end = check_out + timedelta(days=offset)
            matches = self.available_room_types(customer_id, start, end, guests, room_type)
            if matches:
                alternatives.append(AlternativeWindow(start, end, tuple(option.name for option in matches)))
            if len(alternatives) >= MAX_ALTERNATIVES:
                break

        LOGGER.info(
            "No availability for customer %s on %s; %s alternative(s)",
            customer_id,
            _stay_label(check_in, check_out),
            len(alternatives),
        )
        if alternatives:
            listed = "; ".join(
                f"{_stay_label(window.check_in, window.check_out)} ({', '.join(window.room_types)})"
                for window in alternatives
            )
            message = (
                f"Sorry, no rooms are available for {_stay_label(check_in, check_out)}. "
                f"Available alternative dates: {listed}."
            )
        else:
            message = f"Sorry, no rooms are available for {_stay_label(check_in, check_out)}."
        return AvailabilityResult(
            available=False,
            check_in=check_in,
            check_out=check_out,
            guests=guests,
            message=message,
            alternatives=tuple(alternatives),
        )

    def room_type_overview(self, customer_id: int, today: date | None = None) -> list[RoomTypeOverview]:
        """Active room types with rooms not held by current or upcoming stays."""

        today = today or date.today()
        overview = []
        for room_type in self._rooms.active_room_types(customer_id):
            active = self._rooms.count_active_since(room_type.id, today)
            overview.append(
                RoomTypeOverview(
                    room_type_id=room_type.id,
                    name=room_type.name,
                    description=room_type.description,
                    price_per_night=room_type.price_per_night,
                    max_guests=room_type.max_guests,
                    features=tuple(room_type.features or ()),
                    total_rooms=room_type.total_rooms,
                    available_rooms=max(0, room_type.total_rooms - active),
                )
            )
        return overview
