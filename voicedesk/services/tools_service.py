"""Queries the voice agent runs during a call.

Each tool call names a bot; the bot is resolved to the customer it answers
for and the answer is read from that customer's knowledge document and room
tables. A missing or unreadable document yields empty payloads so the agent
can keep talking.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.orm import Session, sessionmaker

from voicedesk.core.errors import NotFoundError
from voicedesk.core.logger import get_logger, log_context
from voicedesk.domain import knowledge_document, pricing_prompt
from voicedesk.models import Customer
from voicedesk.repositories import BotRepository, KnowledgeDocumentStore, RoomRepository

from .availability_service import AvailabilityResult, AvailabilityService, RoomTypeOverview
from .background import Defer, run_inline
from .pricing_service import PricingService
from .reservation_service import ReservationService

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class BookingOutcome:
    success: bool
    message: str
    reservation_id: int | None = None
    confirmation_code: str | None = None
    total_price: Decimal | None = None


def confirmation_code(reservation_id: int) -> str:
    return f"R{reservation_id:06d}"


class ToolService:
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
        self._bots = BotRepository(session)
        self._documents = KnowledgeDocumentStore(session)
        self._rooms = RoomRepository(session)

    def customer_for_bot(self, bot_id: int) -> Customer:
        bot = self._bots.get(bot_id)
        customer = self._bots.owning_customer(bot)
        if customer is None:
            raise NotFoundError("Customer for bot", bot_id)
        return customer

    def _record(self, customer: Customer) -> dict[str, Any] | None:
        return self._documents.first_record_for_customer(customer.id)

    def room_types(self, bot_id: int, *, today: date | None = None) -> list[RoomTypeOverview]:
        customer = self.customer_for_bot(bot_id)
        return AvailabilityService(self._session).room_type_overview(customer.id, today)

    def pricing_info(
        self,
        bot_id: int,
        *,
        day: date | None = None,
        room_type: str | None = None,
        guests: int | None = None,
    ) -> dict[str, Any]:
        customer = self.customer_for_bot(bot_id)
        with log_context.scoped(bot_id=bot_id, customer_id=customer.id):
            record = self._record(customer)
            pricing = knowledge_document.pricing_section(record)
            document_room_types = knowledge_document.room_types(record)
            payload: dict[str, Any] = {
                "dailyRates": knowledge_document.resolve_daily_rates(
                    pricing,
                    room_type=room_type,
                    document_room_types=document_room_types,
                    day=day,
                ),
                "rules": pricing_prompt.normalize_rules(pricing.get("rules")),
                "discounts": pricing_prompt.normalize_discounts(pricing.get("discounts")),
                "roomTypes": [item.get("name") for item in document_room_types if item.get("name")],
            }
            if day is not None:
                payload["resolvedPrices"] = self._resolved_prices(customer.id, day, room_type, guests)
            LOGGER.debug("Pricing info: %s daily rate row(s)", len(payload["dailyRates"]))
            return payload

    def _resolved_prices(
        self, customer_id: int, day: date, room_type: str | None, guests: int | None
    ) -> list[dict[str, Any]]:
        pricing = PricingService(self._session)
        resolved = []
        for candidate in self._rooms.active_room_types(customer_id, name=room_type):
            price = pricing.resolve(candidate, day, guests=guests)
            resolved.append(
                {
                    "roomType": candidate.name,
                    "date": day.isoformat(),
                    "price": str(price.price),
                    "activeRule": price.active_rule,
                    "overridden": price.overridden,
                }
            )
        return resolved

    def hotel_info(self, bot_id: int, section: str = "all") -> dict[str, Any]:
        customer = self.customer_for_bot(bot_id)
        return knowledge_document.knowledge_sections(self._record(customer), section)

    def check_availability(
        self,
        bot_id: int,
        check_in: date,
        check_out: date,
        guests: int,
        room_type: str | None = None,
        *,
        today: date | None = None,
    ) -> AvailabilityResult:
        customer = self.customer_for_bot(bot_id)
        return AvailabilityService(self._session).search(
            customer.id, check_in, check_out, guests, room_type, today=today
        )

    def create_reservation(self, bot_id: int, **booking: Any) -> BookingOutcome:
        customer = self.customer_for_bot(bot_id)
        service = ReservationService(
            self._session, defer=self._defer, session_factory=self._session_factory
        )
        try:
            reservation = service.create_pending(customer.id, **booking)
        except NotFoundError:
            LOGGER.info("Booking for bot %s named unknown room type %r", bot_id, booking.get("room_type"))
            return BookingOutcome(
                success=False,
                message="Room type not found. Please say the full room type name.",
            )
        code = confirmation_code(reservation.id)
        return BookingOutcome(
            success=True,
            message=f"Reservation created. Your confirmation code is {code}. Thank you for choosing us.",
            reservation_id=reservation.id,
            confirmation_code=code,
            total_price=reservation.total_price,
        )
