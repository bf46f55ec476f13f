"""Room calendar grid and stay quotes."""
from __future__ import annotations

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Query

from voicedesk.dependencies import get_pricing_service
from voicedesk.schemas.rooms import CalendarOut, CalendarRowOut, QuoteNightOut, QuoteOut
from voicedesk.services import PricingService
from voicedesk.services.pricing_service import month_bounds

router = APIRouter(prefix="/api/rooms", tags=["rooms"])


@router.get("/calendar", response_model=CalendarOut)
def room_calendar(
    customer_id: int,
    month: date | None = Query(None, alias="date"),
    service: PricingService = Depends(get_pricing_service),
) -> CalendarOut:
    anchor = month or date.today()
    grid = service.calendar(customer_id, anchor)
    return CalendarOut(
        month=month_bounds(anchor)[0],
        grid=[CalendarRowOut.model_validate(asdict(row)) for row in grid],
    )


@router.get("/{room_type_id}/quote", response_model=QuoteOut)
def quote_stay(
    room_type_id: int,
    check_in: date,
    check_out: date,
    guests: int | None = Query(None, ge=1),
    service: PricingService = Depends(get_pricing_service),
) -> QuoteOut:
    quote = service.quote_stay(room_type_id, check_in, check_out, guests)
    return QuoteOut(
        room_type_id=quote.room_type_id,
        room_type_name=quote.room_type_name,
        check_in=quote.check_in,
        check_out=quote.check_out,
        guests=quote.guests,
        nights=[
            QuoteNightOut(
                date=night.day,
                price=night.price,
                base_price=night.base_price,
                active_rule=night.active_rule,
                overridden=night.overridden,
            )
            for night in quote.nights
        ],
        total=quote.total,
    )
