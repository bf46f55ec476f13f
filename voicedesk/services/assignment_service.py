"""Reconcile knowledge-document assignments across the database, prompts and the platform.

A knowledge document is assigned to at most one bot. Moving it touches three
places that cannot share a transaction: the assignment rows, the marked
regions inside each affected bot's prompt, and each bot's remote knowledge
base list. Remote pushes are full replacements computed from local rows, and
a failed push leaves the local state authoritative.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from sqlalchemy.orm import Session, sessionmaker

from voicedesk.core.errors import (
    NotFoundError,
    RemoteGatewayError,
    RemoteNotFoundError,
    ValidationError,
)
from voicedesk.core.logger import get_logger, log_context
from voicedesk.domain import prompt_markers
from voicedesk.integrations.voice_platform import KnowledgeBaseRef, VoicePlatformGateway
from voicedesk.models import Bot, BotKnowledgeBase, KnowledgeBase
from voicedesk.models.bots import DEFAULT_FILTER_SCORE, DEFAULT_TOP_K
from voicedesk.repositories import BotRepository, KnowledgeDocumentStore

from .background import Defer, run_inline
from .prompt_service import refresh_pricing_block

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class AssignmentResult:
    knowledge_base_id: int
    bot_id: int | None = None
    assignment_id: int | None = None
    released_bot_ids: tuple[int, ...] = ()
    remote_degraded: bool = False
    pricing_refresh_bot_ids: tuple[int, ...] = ()


class AssignmentService:
    """Assign, move, unassign and delete knowledge documents."""

    def __init__(
        self,
        session: Session,
        gateway: VoicePlatformGateway,
        *,
        defer: Defer = run_inline,
        session_factory: Optional[sessionmaker] = None,
    ) -> None:
        self._session = session
        self._gateway = gateway
        self._defer = defer
        self._session_factory = session_factory
        self._documents = KnowledgeDocumentStore(session)
        self._bots = BotRepository(session)

    # ------------------------------------------------------------------
    # remote helpers
    # ------------------------------------------------------------------
    def _remote_refs(
        self, bot_id: int, *, exclude_document: int | None = None
    ) -> list[KnowledgeBaseRef]:
        """Full remote list for ``bot_id`` from its rows, minus every row of ``exclude_document``."""

        refs = []
        for assignment in self._bots.assignments_for_bot(bot_id):
            if assignment.knowledge_base_id == exclude_document:
                continue
            document = assignment.knowledge_base
            if not document.has_remote_mirror:
                continue
            refs.append(
                KnowledgeBaseRef(
                    knowledge_base_id=document.remote_knowledge_base_id,
                    top_k=assignment.top_k,
                    filter_score=assignment.filter_score,
                )
            )
        return refs

    def _push(
        self,
        description: str,
        func: Callable[..., Any],
        *args: Any,
        missing_ok: bool = False,
        **kwargs: Any,
    ) -> bool:
        """Run a gateway call; ``False`` means the remote side is now stale."""

        try:
            func(*args, **kwargs)
        except RemoteNotFoundError as exc:
            if missing_ok:
                LOGGER.info("%s: remote object already gone", description)
                return True
            LOGGER.warning("%s: remote object missing, keeping local state (%s)", description, exc)
            return False
        except RemoteGatewayError as exc:
            LOGGER.warning("%s failed, keeping local state: %s", description, exc)
            return False
        return True

    def _detach_from_bot(self, bot: Bot, document: KnowledgeBase) -> bool:
        """Excise the document from ``bot``'s prompt and remote list.

        The edited prompt is kept locally whatever the remote outcome.
        """

        prompt = prompt_markers.remove_knowledge_region(bot.general_prompt, document.id)
        pushed = True
        if bot.remote_llm_id:
            refs = self._remote_refs(bot.id, exclude_document=document.id)
            pushed = self._push(
                f"Releasing knowledge base {document.id} from bot {bot.id}",
                self._gateway.replace_knowledge_bases,
                bot.remote_llm_id,
                refs,
                general_prompt=prompt,
            )
        else:
            LOGGER.info("Bot %s has no remote LLM; skipping remote update", bot.id)
        bot.general_prompt = prompt
        return pushed

    def _holders(self, knowledge_base_id: int, *, skip_bot_id: int | None = None) -> list[Bot]:
        """Distinct bots holding the document, in assignment order."""

        holders: dict[int, Bot] = {}
        for assignment in self._bots.assignments_for_document(knowledge_base_id):
            if assignment.bot_id != skip_bot_id:
                holders.setdefault(assignment.bot_id, assignment.bot)
        return list(holders.values())

    @staticmethod
    def _is_lodging(document: KnowledgeBase) -> bool:
        return document.customer is not None and document.customer.is_lodging

    def _schedule_pricing_refresh(self, lodging: bool, bot_ids: Iterable[int]) -> tuple[int, ...]:
        if not lodging:
            return ()
        scheduled = tuple(dict.fromkeys(bot_ids))
        for bot_id in scheduled:
            self._defer(
                refresh_pricing_block,
                bot_id,
                gateway=self._gateway,
                session_factory=self._session_factory,
            )
        return scheduled

    # ------------------------------------------------------------------
    # operations
    # ------------------------------------------------------------------
    def assign(
        self,
        knowledge_base_id: int,
        bot_id: int | None,
        *,
        top_k: int = DEFAULT_TOP_K,
        filter_score: float = DEFAULT_FILTER_SCORE,
    ) -> AssignmentResult:
        """Make ``bot_id`` the only holder of the document (``None`` releases it everywhere)."""

        if not 1 <= top_k <= 20:
            raise ValidationError("top_k must be between 1 and 20")
        if not 0 <= filter_score <= 1:
            raise ValidationError("filter_score must be between 0 and 1")

        document = self._documents.get(knowledge_base_id)
        target = self._bots.get(bot_id) if bot_id is not None else None

        with log_context.scoped(knowledge_base_id=knowledge_base_id, bot_id=bot_id):
            degraded = False
            released: list[int] = []
            skip_bot_id = target.id if target is not None else None
            for holder in self._holders(knowledge_base_id, skip_bot_id=skip_bot_id):
                released.append(holder.id)
                if not self._detach_from_bot(holder, document):
                    degraded = True

            removed = self._bots.delete_assignments_for_document(knowledge_base_id)
            LOGGER.debug("Removed %s assignment row(s)", removed)

            created: BotKnowledgeBase | None = None
            if target is not None:
                created = self._bots.add_assignment(
                    target.id, knowledge_base_id, top_k=top_k, filter_score=filter_score
                )
                if document.has_remote_mirror and target.remote_llm_id:
                    if not self._push(
                        f"Attaching knowledge base {knowledge_base_id} to bot {target.id}",
                        self._gateway.replace_knowledge_bases,
                        target.remote_llm_id,
                        self._remote_refs(target.id),
                    ):
                        degraded = True

            self._session.commit()
            LOGGER.info(
                "Knowledge base %s assigned to %s (released from %s)",
                knowledge_base_id,
                target.id if target is not None else "no bot",
                released or "none",
            )

            refresh_ids = ([target.id] if target is not None else []) + released
            scheduled = self._schedule_pricing_refresh(self._is_lodging(document), refresh_ids)

        return AssignmentResult(
            knowledge_base_id=knowledge_base_id,
            bot_id=target.id if target is not None else None,
            assignment_id=created.id if created is not None else None,
            released_bot_ids=tuple(released),
            remote_degraded=degraded,
            pricing_refresh_bot_ids=scheduled,
        )

    def unassign(self, assignment_id: int, *, bot_id: int | None = None) -> AssignmentResult:
        assignment = self._bots.get_assignment(assignment_id)
        if bot_id is not None and assignment.bot_id != bot_id:
            raise NotFoundError("Assignment", assignment_id)
        bot = assignment.bot
        document = assignment.knowledge_base

        with log_context.scoped(knowledge_base_id=document.id, bot_id=bot.id):
            degraded = not self._detach_from_bot(bot, document)
            removed = self._bots.delete_assignments_for_document(document.id, bot_id=bot.id)
            LOGGER.debug("Removed %s assignment row(s)", removed)
            self._session.commit()
            LOGGER.info("Removed knowledge base %s from bot %s", document.id, bot.id)
            scheduled = self._schedule_pricing_refresh(self._is_lodging(document), [bot.id])

        return AssignmentResult(
            knowledge_base_id=document.id,
            released_bot_ids=(bot.id,),
            remote_degraded=degraded,
            pricing_refresh_bot_ids=scheduled,
        )

    def delete_knowledge_base(self, knowledge_base_id: int) -> AssignmentResult:
        """Detach the document from every bot, drop its remote copy, then delete it."""

        document = self._documents.get(knowledge_base_id)
        with log_context.scoped(knowledge_base_id=knowledge_base_id):
            degraded = False
            released: list[int] = []
            for holder in self._holders(knowledge_base_id):
                released.append(holder.id)
                if not self._detach_from_bot(holder, document):
                    degraded = True

            if document.has_remote_mirror:
                if not self._push(
                    f"Deleting remote knowledge base {document.remote_knowledge_base_id}",
                    self._gateway.delete_knowledge_base,
                    document.remote_knowledge_base_id,
                    missing_ok=True,
                ):
                    degraded = True

            lodging = self._is_lodging(document)
            self._documents.delete(document)
            self._session.commit()
            LOGGER.info("Deleted knowledge base %s", knowledge_base_id)
            scheduled = self._schedule_pricing_refresh(lodging, released)

        return AssignmentResult(
            knowledge_base_id=knowledge_base_id,
            released_bot_ids=tuple(released),
            remote_degraded=degraded,
            pricing_refresh_bot_ids=scheduled,
        )

    def list_bot_assignments(self, bot_id: int) -> list[BotKnowledgeBase]:
        self._bots.get(bot_id)
        return self._bots.assignments_for_bot(bot_id)
