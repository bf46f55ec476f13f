"""Database models for the voice desk domain."""
from __future__ import annotations

from .base import ID_TYPE, Base
from .bots import DEFAULT_FILTER_SCORE, DEFAULT_TOP_K, Bot, BotAssignment, BotKnowledgeBase
from .knowledge import PLACEHOLDER_PREFIX, KnowledgeBase, is_placeholder_remote_id
from .rooms import (
    OCCUPYING_STATUSES,
    AdjustmentType,
    PriceRule,
    Reservation,
    ReservationStatus,
    RoomAvailability,
    RoomType,
)
from .tenants import Customer, CustomerType

__all__ = [
    "ID_TYPE",
    "Base",
    "Bot",
    "BotAssignment",
    "BotKnowledgeBase",
    "DEFAULT_FILTER_SCORE",
    "DEFAULT_TOP_K",
    "Customer",
    "CustomerType",
    "KnowledgeBase",
    "PLACEHOLDER_PREFIX",
    "is_placeholder_remote_id",
    "AdjustmentType",
    "OCCUPYING_STATUSES",
    "PriceRule",
    "Reservation",
    "ReservationStatus",
    "RoomAvailability",
    "RoomType",
]
