"""Knowledge documents: text blobs mirrored to the voice platform."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from .base import ID_TYPE, Base
from .tenants import Customer

PLACEHOLDER_PREFIX = "temp_"


def is_placeholder_remote_id(remote_id: str | None) -> bool:
    """True when ``remote_id`` is missing or a locally generated placeholder."""

    return not remote_id or remote_id.startswith(PLACEHOLDER_PREFIX)


class KnowledgeBase(Base):
    """A tenant's knowledge document; ``texts[0]`` holds the structured JSON record."""

    __tablename__ = "knowledge_base"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(ID_TYPE, nullable=False, index=True)
    customer_id: Mapped[int | None] = mapped_column(ID_TYPE, ForeignKey("customer.id"), index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    texts: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    remote_knowledge_base_id: Mapped[str | None] = mapped_column(String(128))
    enable_auto_refresh: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
        nullable=False,
    )

    customer: Mapped[Customer | None] = relationship()
    assignments: Mapped[list["BotKnowledgeBase"]] = relationship(  # noqa: F821
        back_populates="knowledge_base", cascade="all, delete-orphan"
    )

    @property
    def has_remote_mirror(self) -> bool:
        return not is_placeholder_remote_id(self.remote_knowledge_base_id)
