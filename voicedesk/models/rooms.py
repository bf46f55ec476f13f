"""Room inventory, pricing rules, per-date overrides and reservations."""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import ID_TYPE, Base
from .tenants import Customer


class AdjustmentType(str, Enum):
    """How a price rule changes the running nightly price."""

    FIXED_PRICE = "FIXED_PRICE"
    FIXED_AMOUNT = "FIXED_AMOUNT"
    PERCENTAGE = "PERCENTAGE"


class ReservationStatus(str, Enum):
    """Reservation lifecycle; only CANCELLED frees inventory."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"


OCCUPYING_STATUSES = (ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN)


class RoomType(Base):
    """A sellable room category; ``total_rooms`` is mutated in place."""

    __tablename__ = "room_type"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(ID_TYPE, nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("customer.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    total_rooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    customer: Mapped[Customer] = relationship()
    price_rules: Mapped[list["PriceRule"]] = relationship(
        back_populates="room_type",
        cascade="all, delete-orphan",
        order_by=lambda: [PriceRule.priority, PriceRule.id],
    )
    availability: Mapped[list["RoomAvailability"]] = relationship(
        back_populates="room_type", cascade="all, delete-orphan"
    )


class PriceRule(Base):
    """Priority-ordered adjustment applied to a room type's nightly price."""

    __tablename__ = "price_rule"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    room_type_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("room_type.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    adjustment_type: Mapped[AdjustmentType] = mapped_column(
        SAEnum(AdjustmentType, native_enum=False, length=16), nullable=False
    )
    adjustment_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    # 0=Sunday .. 6=Saturday; empty means every day
    days_of_week: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    room_type: Mapped[RoomType] = relationship(back_populates="price_rules")


class RoomAvailability(Base):
    """Manual per-date block or price override for a room type."""

    __tablename__ = "room_availability"
    __table_args__ = (UniqueConstraint("room_type_id", "date", name="uq_room_availability_date"),)

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    room_type_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("room_type.id"), nullable=False)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    is_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    price_override: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))

    room_type: Mapped[RoomType] = relationship(back_populates="availability")


class Reservation(Base):
    """A guest stay; ``check_out`` is exclusive."""

    __tablename__ = "reservation"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("customer.id"), nullable=False, index=True)
    room_type_id: Mapped[int | None] = mapped_column(ID_TYPE, ForeignKey("room_type.id"), index=True)
    room_type_name: Mapped[str | None] = mapped_column(String(120))
    call_id: Mapped[str | None] = mapped_column(String(128))
    guest_name: Mapped[str] = mapped_column(String(160), nullable=False)
    guest_phone: Mapped[str | None] = mapped_column(String(40))
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    number_of_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    number_of_children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[ReservationStatus] = mapped_column(
        SAEnum(ReservationStatus, native_enum=False, length=16),
        nullable=False,
        default=ReservationStatus.PENDING,
    )
    total_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    special_requests: Mapped[str | None] = mapped_column(Text)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False
    )

    room_type: Mapped[RoomType | None] = relationship()
    customer: Mapped[Customer] = relationship()

    @property
    def room_key(self) -> str | None:
        """Name used to locate this stay's sub-table in the knowledge document."""

        if self.room_type is not None:
            return self.room_type.name
        return self.room_type_name
