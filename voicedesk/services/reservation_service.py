"""Reservation lifecycle and its effect on room inventory."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from voicedesk.core.errors import NotFoundError, ValidationError
from voicedesk.core.logger import get_logger, log_context
from voicedesk.models import Reservation, ReservationStatus
from voicedesk.repositories import RoomRepository

from .background import Defer, run_inline
from .pricing_service import PricingService
from .projection_service import update_projection

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StatusChange:
    reservation: Reservation
    previous_status: ReservationStatus
    inventory_delta: int


def parse_status(value: ReservationStatus | str) -> ReservationStatus:
    if isinstance(value, ReservationStatus):
        return value
    try:
        return ReservationStatus(str(value).upper())
    except ValueError as exc:
        raise ValidationError(f"Unknown reservation status: {value}") from exc


class ReservationService:
    """Status transitions; only entering or leaving CANCELLED moves inventory."""

    def __init__(
        self,
        session: Session,
        *,
        defer: Defer = run_inline,
        session_factory: Optional[sessionmaker] = None,
    ) -> None:
        self._session = session
        self._defer = defer
        self._session_factory = session_factory
        self._rooms = RoomRepository(session)

    def change_status(
        self,
        reservation_id: int,
        new_status: ReservationStatus | str,
        *,
        now: datetime | None = None,
    ) -> StatusChange:
        status = parse_status(new_status)
        reservation = self._rooms.get_reservation(reservation_id)
        previous = reservation.status

        with log_context.scoped(reservation_id=reservation_id):
            # +1 consumes a room, -1 frees one
            delta = 0
            room_type = reservation.room_type
            if previous != status:
                if status is ReservationStatus.CANCELLED:
                    delta = -1
                    if room_type is not None:
                        room_type.total_rooms += 1
                elif previous is ReservationStatus.CANCELLED:
                    delta = 1
                    if room_type is not None:
                        room_type.total_rooms = max(0, room_type.total_rooms - 1)
            if status is ReservationStatus.CONFIRMED and previous is not ReservationStatus.CONFIRMED:
                reservation.confirmed_at = now or datetime.now(timezone.utc)
            reservation.status = status
            room_key = reservation.room_key
            self._session.commit()
            LOGGER.info("Reservation %s moved %s -> %s", reservation_id, previous.value, status.value)

            if delta:
                self._defer(
                    update_projection,
                    reservation.customer_id,
                    room_key,
                    reservation.check_in,
                    reservation.check_out,
                    delta,
                    session_factory=self._session_factory,
                )

        return StatusChange(reservation=reservation, previous_status=previous, inventory_delta=delta)

    def create_pending(
        self,
        customer_id: int,
        *,
        guest_name: str,
        check_in: date,
        check_out: date,
        guests: int,
        room_type: str,
        guest_phone: str | None = None,
        children: int = 0,
        special_requests: str | None = None,
        call_id: str | None = None,
        total_price: Decimal | None = None,
    ) -> Reservation:
        """Record a booking taken during a call; staff confirm it later."""

        if check_out <= check_in:
            raise ValidationError("check_out must be after check_in")
        if guests < 1:
            raise ValidationError("guests must be at least 1")
        matched = self._rooms.find_room_type(customer_id, room_type)
        if matched is None:
            raise NotFoundError("RoomType", room_type)

        if total_price is None:
            total_price = PricingService(self._session).quote_stay(
                matched.id, check_in, check_out, guests
            ).total

        reservation = Reservation(
            customer_id=customer_id,
            room_type_id=matched.id,
            room_type_name=room_type,
            call_id=call_id,
            guest_name=guest_name,
            guest_phone=guest_phone,
            check_in=check_in,
            check_out=check_out,
            number_of_guests=guests,
            number_of_children=children,
            status=ReservationStatus.PENDING,
            total_price=total_price,
            special_requests=special_requests,
        )
        self._session.add(reservation)
        self._session.commit()
        LOGGER.info("Created pending reservation %s for %s", reservation.id, matched.name)
        return reservation
