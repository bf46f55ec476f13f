"""HTTP client for the remote voice platform's agent and LLM configuration.

This is the only module that talks to the platform. Knowledge-base lists are
always pushed as a full replacement, never as a diff.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Optional

import httpx

from voicedesk.core.config import VoicePlatformSettings, get_settings
from voicedesk.core.errors import RemoteGatewayError, RemoteNotFoundError
from voicedesk.core.logger import get_logger
from voicedesk.models.knowledge import is_placeholder_remote_id

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class KnowledgeBaseRef:
    """One entry of an LLM's ``knowledge_base_ids`` list."""

    knowledge_base_id: str
    top_k: int = 3
    filter_score: float = 0.5

    def to_payload(self) -> dict[str, Any]:
        return {
            "knowledge_base_id": self.knowledge_base_id,
            "top_k": self.top_k,
            "filter_score": self.filter_score,
        }


class VoicePlatformGateway:
    """Synchronous wrapper around the platform's REST API."""

    def __init__(
        self,
        settings: VoicePlatformSettings,
        *,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._settings = settings
        self._client = client or httpx.Client(
            base_url=settings.base_url, timeout=settings.timeout
        )

    def _headers(self) -> dict[str, str]:
        if not self._settings.configured:
            raise RemoteGatewayError("Voice platform API key not configured. Set VOICE_PLATFORM_API_KEY.")
        return {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        headers = self._headers()
        try:
            response = self._client.request(method, path, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            LOGGER.error("Voice platform %s %s failed: %s", method, path, exc)
            raise RemoteGatewayError(f"Voice platform request failed: {exc}") from exc

        if response.status_code == 404:
            raise RemoteNotFoundError(f"{method} {path} returned 404", status_code=404)
        if response.is_error:
            LOGGER.error(
                "Voice platform %s %s returned %s: %s",
                method,
                path,
                response.status_code,
                response.text[:500],
            )
            raise RemoteGatewayError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {"data": data}

    def replace_knowledge_bases(
        self,
        llm_id: str,
        entries: Iterable[KnowledgeBaseRef],
        general_prompt: str | None = None,
    ) -> dict[str, Any]:
        """Overwrite the LLM's knowledge-base list, optionally with a new prompt."""

        refs = list(entries)
        placeholders = [ref.knowledge_base_id for ref in refs if is_placeholder_remote_id(ref.knowledge_base_id)]
        if placeholders:
            raise ValueError(f"Refusing to push placeholder knowledge base ids: {placeholders}")

        payload: dict[str, Any] = {"knowledge_base_ids": [ref.to_payload() for ref in refs]}
        if general_prompt is not None:
            payload["general_prompt"] = general_prompt
        LOGGER.info("Pushing %s knowledge base(s) to LLM %s", len(refs), llm_id)
        return self._request("PATCH", f"/update-retell-llm/{llm_id}", payload)

    def update_prompt(self, llm_id: str, general_prompt: str) -> dict[str, Any]:
        LOGGER.info("Pushing general prompt (%s chars) to LLM %s", len(general_prompt), llm_id)
        return self._request("PATCH", f"/update-retell-llm/{llm_id}", {"general_prompt": general_prompt})

    def delete_knowledge_base(self, remote_id: str) -> None:
        if is_placeholder_remote_id(remote_id):
            raise ValueError(f"Refusing to delete placeholder knowledge base {remote_id}")
        LOGGER.info("Deleting remote knowledge base %s", remote_id)
        self._request("DELETE", f"/delete-knowledge-base/{remote_id}")

    def close(self) -> None:
        self._client.close()


@lru_cache(maxsize=1)
def get_voice_gateway() -> VoicePlatformGateway:
    """Process-wide gateway built from ``get_settings()``."""

    return VoicePlatformGateway(get_settings().voice_platform)
