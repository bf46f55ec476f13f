"""Clients for systems outside the relational store."""

from .voice_platform import KnowledgeBaseRef, VoicePlatformGateway, get_voice_gateway

__all__ = ["KnowledgeBaseRef", "VoicePlatformGateway", "get_voice_gateway"]
