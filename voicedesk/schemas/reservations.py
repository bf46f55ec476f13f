"""Schemas for reservation status changes."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer

from voicedesk.models import ReservationStatus


class StatusUpdate(BaseModel):
    status: ReservationStatus


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    room_type_id: int | None = None
    room_type_name: str | None = None
    guest_name: str
    check_in: date
    check_out: date
    number_of_guests: int
    status: ReservationStatus
    total_price: Decimal | None = None
    confirmed_at: datetime | None = None

    @field_serializer("total_price")
    def _serialize_total(cls, value: Decimal | None) -> str | None:
        return str(value) if value is not None else None


class StatusChangeOut(BaseModel):
    reservation: ReservationOut
    previous_status: ReservationStatus
    inventory_delta: int
