"""Tenant customers (hotels and restaurants) served by the voice bots."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from .base import ID_TYPE, Base


class CustomerType(str, Enum):
    """Business vertical of a customer; HOTEL is the lodging vertical."""

    HOTEL = "HOTEL"
    RESTAURANT = "RESTAURANT"


class Customer(Base):
    """A hotel or restaurant account owning rooms, documents and reservations."""

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(ID_TYPE, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    customer_type: Mapped[CustomerType | None] = mapped_column(
        SAEnum(CustomerType, native_enum=False, length=16)
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.current_timestamp(), nullable=False
    )

    @property
    def is_lodging(self) -> bool:
        return self.customer_type == CustomerType.HOTEL
