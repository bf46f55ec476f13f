"""Schemas for knowledge-base assignment endpoints."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from voicedesk.models.bots import DEFAULT_FILTER_SCORE, DEFAULT_TOP_K


class AssignRequest(BaseModel):
    """Move a knowledge base to ``bot_id``; ``null`` removes it from every bot."""

    bot_id: int | None = None
    top_k: int = Field(DEFAULT_TOP_K, ge=1, le=20)
    filter_score: float = Field(DEFAULT_FILTER_SCORE, ge=0, le=1)


class BotAssignRequest(BaseModel):
    knowledge_base_id: int
    top_k: int = Field(DEFAULT_TOP_K, ge=1, le=20)
    filter_score: float = Field(DEFAULT_FILTER_SCORE, ge=0, le=1)


class AssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bot_id: int
    knowledge_base_id: int
    top_k: int
    filter_score: float


class AssignmentResultOut(BaseModel):
    """Outcome of an assignment change; ``remote_degraded`` flags a stale platform copy."""

    model_config = ConfigDict(from_attributes=True)

    knowledge_base_id: int
    bot_id: int | None = None
    assignment_id: int | None = None
    released_bot_ids: list[int] = Field(default_factory=list)
    remote_degraded: bool = False
    pricing_refresh_bot_ids: list[int] = Field(default_factory=list)
