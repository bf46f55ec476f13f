"""Endpoints the voice platform calls while a conversation is running."""
from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from voicedesk.core.logger import log_context
from voicedesk.dependencies import get_tool_service
from voicedesk.schemas.tools import (
    AvailabilityRequest,
    AvailabilityResponse,
    BookingResponse,
    CreateReservationRequest,
    RoomTypeOut,
)
from voicedesk.services import ToolService

router = APIRouter(prefix="/api/tools", tags=["tools"])


@router.post("/availability", response_model=AvailabilityResponse)
def check_availability(
    payload: AvailabilityRequest,
    service: ToolService = Depends(get_tool_service),
) -> AvailabilityResponse:
    with log_context.scoped(bot_id=payload.bot_id, tool="availability"):
        result = service.check_availability(
            payload.bot_id,
            payload.check_in,
            payload.check_out,
            payload.guests,
            payload.room_type,
        )
    return AvailabilityResponse.model_validate(asdict(result))


@router.post("/create-reservation", response_model=BookingResponse)
def create_reservation(
    payload: CreateReservationRequest,
    service: ToolService = Depends(get_tool_service),
) -> BookingResponse:
    booking = payload.model_dump(exclude={"bot_id"})
    with log_context.scoped(bot_id=payload.bot_id, tool="create_reservation"):
        outcome = service.create_reservation(payload.bot_id, **booking)
    return BookingResponse.model_validate(asdict(outcome))


@router.get("/pricing")
def pricing_info(
    bot_id: int,
    day: date | None = Query(None, alias="date"),
    room_type: str | None = Query(None, alias="roomType"),
    guests: int | None = Query(None, ge=1),
    service: ToolService = Depends(get_tool_service),
) -> dict[str, Any]:
    return service.pricing_info(bot_id, day=day, room_type=room_type, guests=guests)


@router.get("/room-types", response_model=list[RoomTypeOut])
def room_types(
    bot_id: int,
    service: ToolService = Depends(get_tool_service),
) -> list[RoomTypeOut]:
    return [RoomTypeOut.model_validate(asdict(item)) for item in service.room_types(bot_id)]


@router.get("/hotel-info")
def hotel_info(
    bot_id: int,
    section: str = "all",
    service: ToolService = Depends(get_tool_service),
) -> dict[str, Any]:
    return service.hotel_info(bot_id, section)
