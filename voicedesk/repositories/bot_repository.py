"""Bots, their knowledge-base assignments and owning customers."""
from __future__ import annotations

from sqlalchemy import select

from voicedesk.core.errors import NotFoundError
from voicedesk.models import (
    Bot,
    BotAssignment,
    BotKnowledgeBase,
    Customer,
    CustomerType,
)
from voicedesk.models.bots import DEFAULT_FILTER_SCORE, DEFAULT_TOP_K

from .base import BaseRepository


class BotRepository(BaseRepository):
    def get(self, bot_id: int) -> Bot:
        bot = self._session.get(Bot, bot_id)
        if bot is None:
            raise NotFoundError("Bot", bot_id)
        return bot

    def get_assignment(self, assignment_id: int) -> BotKnowledgeBase:
        assignment = self._session.get(BotKnowledgeBase, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment", assignment_id)
        return assignment

    def assignments_for_document(self, knowledge_base_id: int) -> list[BotKnowledgeBase]:
        statement = (
            select(BotKnowledgeBase)
            .where(BotKnowledgeBase.knowledge_base_id == knowledge_base_id)
            .order_by(BotKnowledgeBase.id)
        )
        return list(self._session.scalars(statement))

    def assignments_for_bot(self, bot_id: int) -> list[BotKnowledgeBase]:
        statement = (
            select(BotKnowledgeBase)
            .where(BotKnowledgeBase.bot_id == bot_id)
            .order_by(BotKnowledgeBase.id)
        )
        return list(self._session.scalars(statement))

    def delete_assignments_for_document(self, knowledge_base_id: int, *, bot_id: int | None = None) -> int:
        assignments = [
            assignment
            for assignment in self.assignments_for_document(knowledge_base_id)
            if bot_id is None or assignment.bot_id == bot_id
        ]
        for assignment in assignments:
            self._session.delete(assignment)
        self._session.flush()
        return len(assignments)

    def add_assignment(
        self,
        bot_id: int,
        knowledge_base_id: int,
        *,
        top_k: int = DEFAULT_TOP_K,
        filter_score: float = DEFAULT_FILTER_SCORE,
    ) -> BotKnowledgeBase:
        assignment = BotKnowledgeBase(
            bot_id=bot_id,
            knowledge_base_id=knowledge_base_id,
            top_k=top_k,
            filter_score=filter_score,
        )
        self._session.add(assignment)
        self._session.flush()
        return assignment

    def owning_customer(self, bot: Bot) -> Customer | None:
        """Customer a bot answers for: explicit assignment, else first hotel in its organization."""

        assigned = self._session.scalar(
            select(Customer)
            .join(BotAssignment, BotAssignment.customer_id == Customer.id)
            .where(BotAssignment.bot_id == bot.id)
            .order_by(BotAssignment.id)
            .limit(1)
        )
        if assigned is not None:
            return assigned
        return self._session.scalar(
            select(Customer)
            .where(
                Customer.organization_id == bot.organization_id,
                Customer.customer_type == CustomerType.HOTEL,
            )
            .order_by(Customer.id)
            .limit(1)
        )
