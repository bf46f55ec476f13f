"""Voice bots and their links to knowledge documents and customers."""
from __future__ import annotations

from sqlalchemy import JSON, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import ID_TYPE, Base
from .knowledge import KnowledgeBase
from .tenants import Customer

DEFAULT_TOP_K = 3
DEFAULT_FILTER_SCORE = 0.5


class Bot(Base):
    """A conversational agent hosted on the voice platform."""

    __tablename__ = "bot"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(ID_TYPE, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    remote_agent_id: Mapped[str | None] = mapped_column(String(128), unique=True)
    remote_llm_id: Mapped[str | None] = mapped_column(String(128))
    general_prompt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tools: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)

    knowledge_bases: Mapped[list["BotKnowledgeBase"]] = relationship(
        back_populates="bot", cascade="all, delete-orphan", order_by="BotKnowledgeBase.id"
    )


class BotKnowledgeBase(Base):
    """Assignment of a knowledge document to a bot with retrieval parameters.

    The table does not enforce one row per document; the assignment service
    deletes prior rows before inserting.
    """

    __tablename__ = "bot_knowledge_base"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    bot_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("bot.id"), nullable=False, index=True)
    knowledge_base_id: Mapped[int] = mapped_column(
        ID_TYPE, ForeignKey("knowledge_base.id"), nullable=False, index=True
    )
    top_k: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_TOP_K)
    filter_score: Mapped[float] = mapped_column(Float, nullable=False, default=DEFAULT_FILTER_SCORE)

    bot: Mapped[Bot] = relationship(back_populates="knowledge_bases")
    knowledge_base: Mapped[KnowledgeBase] = relationship(back_populates="assignments")


class BotAssignment(Base):
    """Links a bot to the customer whose calls it answers."""

    __tablename__ = "bot_assignment"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    bot_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("bot.id"), nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ID_TYPE, ForeignKey("customer.id"), nullable=False)

    bot: Mapped[Bot] = relationship()
    customer: Mapped[Customer] = relationship()
