"""Keep the ``PRICING_PROMPT`` block of a bot's prompt in step with its documents."""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from voicedesk.core.errors import RemoteGatewayError, RemoteNotFoundError
from voicedesk.core.logger import get_logger, log_context
from voicedesk.db.session import session_scope
from voicedesk.domain import knowledge_document, prompt_markers
from voicedesk.domain.pricing_prompt import generate_pricing_prompt
from voicedesk.integrations.voice_platform import VoicePlatformGateway
from voicedesk.repositories import BotRepository

LOGGER = get_logger(__name__)

PROMPT_SEPARATOR = "\n\n---\n\n"
_PRICING_DATA_KEYS = ("dailyRates", "dailyRatesByRoomType", "rules", "discounts")


class PricingPromptService:
    """Regenerate and push one bot's pricing instructions."""

    def __init__(self, session: Session, gateway: VoicePlatformGateway) -> None:
        self._session = session
        self._gateway = gateway
        self._bots = BotRepository(session)

    def collect_pricing_prompts(self, bot_id: int) -> list[str]:
        prompts: list[str] = []
        for assignment in self._bots.assignments_for_bot(bot_id):
            document = assignment.knowledge_base
            record = knowledge_document.parse_record(document.texts)
            pricing = knowledge_document.pricing_section(record)
            authored = str(pricing.get("pricingPrompt") or "").strip()
            if authored:
                prompts.append(authored)
            elif any(pricing.get(key) for key in _PRICING_DATA_KEYS):
                prompts.append(generate_pricing_prompt(pricing))
            else:
                LOGGER.debug("Knowledge base %s has no pricing section", document.id)
        return prompts

    def refresh(self, bot_id: int) -> bool:
        """Rewrite the bot's pricing block; returns ``True`` when the prompt changed."""

        bot = self._bots.get(bot_id)
        prompts = self.collect_pricing_prompts(bot_id)
        current = bot.general_prompt or ""
        if prompts:
            updated = prompt_markers.upsert_pricing_block(current, PROMPT_SEPARATOR.join(prompts))
        else:
            updated = prompt_markers.remove_pricing_block(current)
        if updated == current:
            LOGGER.debug("Pricing block for bot %s already current", bot_id)
            return False

        if bot.remote_llm_id:
            try:
                self._gateway.update_prompt(bot.remote_llm_id, updated)
            except RemoteNotFoundError:
                LOGGER.warning("LLM %s not found remotely; updating local prompt only", bot.remote_llm_id)
            except RemoteGatewayError as exc:
                LOGGER.warning("Failed to push pricing block for bot %s: %s", bot_id, exc)

        bot.general_prompt = updated
        self._session.flush()
        LOGGER.info("Updated pricing block for bot %s from %s document(s)", bot_id, len(prompts))
        return True


def refresh_pricing_block(
    bot_id: int,
    *,
    gateway: VoicePlatformGateway,
    session_factory: Optional[sessionmaker] = None,
) -> None:
    """Background job wrapper; failures are logged and never propagate."""

    with log_context.scoped(bot_id=bot_id, job="pricing_prompt"):
        try:
            with session_scope(session_factory) as session:
                PricingPromptService(session, gateway).refresh(bot_id)
        except Exception:
            LOGGER.exception("Pricing prompt refresh failed for bot %s", bot_id)
