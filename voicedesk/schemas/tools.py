"""Request and response bodies for call-time tools."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer


class AvailabilityRequest(BaseModel):
    bot_id: int
    check_in: date
    check_out: date
    guests: int = Field(1, ge=1)
    room_type: str | None = None


class RoomOptionOut(BaseModel):
    room_type_id: int
    name: str
    price_per_night: Decimal
    max_guests: int
    available_rooms: int

    @field_serializer("price_per_night")
    def _serialize_price(cls, value: Decimal) -> str:
        return str(value)


class AlternativeWindowOut(BaseModel):
    check_in: date
    check_out: date
    room_types: list[str]


class AvailabilityResponse(BaseModel):
    available: bool
    check_in: date
    check_out: date
    guests: int
    message: str
    room_types: list[RoomOptionOut] = Field(default_factory=list)
    lowest_price: Decimal | None = None
    alternatives: list[AlternativeWindowOut] = Field(default_factory=list)

    @field_serializer("lowest_price")
    def _serialize_lowest(cls, value: Decimal | None) -> str | None:
        return str(value) if value is not None else None


class CreateReservationRequest(BaseModel):
    bot_id: int
    check_in: date
    check_out: date
    guests: int = Field(ge=1)
    room_type: str
    guest_name: str = Field(min_length=2)
    guest_phone: str | None = None
    children: int = Field(0, ge=0)
    special_requests: str | None = None
    call_id: str | None = None


class BookingResponse(BaseModel):
    success: bool
    message: str
    reservation_id: int | None = None
    confirmation_code: str | None = None
    total_price: Decimal | None = None

    @field_serializer("total_price")
    def _serialize_total(cls, value: Decimal | None) -> str | None:
        return str(value) if value is not None else None


class RoomTypeOut(BaseModel):
    room_type_id: int
    name: str
    description: str | None = None
    price_per_night: Decimal
    max_guests: int
    features: list[str] = Field(default_factory=list)
    total_rooms: int
    available_rooms: int

    @field_serializer("price_per_night")
    def _serialize_price(cls, value: Decimal) -> str:
        return str(value)
