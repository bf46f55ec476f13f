"""Delimited regions inside a bot's free-text general prompt.

Knowledge documents that were inlined into the prompt are wrapped in
``<!--KB:{id}-->`` / ``<!--/KB:{id}-->`` comment markers, and the generated
pricing instructions live between ``<!--PRICING_PROMPT-->`` markers. Every
operation here is idempotent: applying it twice yields the same prompt.
"""
from __future__ import annotations

import re

PRICING_BEGIN = "<!--PRICING_PROMPT-->"
PRICING_END = "<!--/PRICING_PROMPT-->"
_PRICING_PATTERN = re.compile(
    re.escape(PRICING_BEGIN) + r".*?" + re.escape(PRICING_END), re.DOTALL
)
_PRICING_REMOVAL = re.compile(r"\n*" + _PRICING_PATTERN.pattern, re.DOTALL)


def kb_markers(document_id: int | str) -> tuple[str, str]:
    return f"<!--KB:{document_id}-->", f"<!--/KB:{document_id}-->"


def _kb_pattern(document_id: int | str) -> re.Pattern[str]:
    begin, end = kb_markers(document_id)
    return re.compile(re.escape(begin) + r".*?" + re.escape(end), re.DOTALL)


def remove_knowledge_region(prompt: str | None, document_id: int | str) -> str:
    """Drop every inlined region for ``document_id``; surrounding text is untouched."""

    if not prompt:
        return ""
    return _kb_pattern(document_id).sub("", prompt)


def upsert_pricing_block(prompt: str | None, text: str) -> str:
    """Replace the pricing region in place, or append it after a blank line."""

    block = f"{PRICING_BEGIN}\n{text.strip()}\n{PRICING_END}"
    prompt = prompt or ""
    if _PRICING_PATTERN.search(prompt):
        return _PRICING_PATTERN.sub(lambda _match: block, prompt, count=1)
    stripped = prompt.rstrip()
    return f"{stripped}\n\n{block}" if stripped else block


def remove_pricing_block(prompt: str | None) -> str:
    """Drop the pricing region with the blank lines that introduced it."""

    if not prompt:
        return ""
    return _PRICING_REMOVAL.sub("", prompt)
