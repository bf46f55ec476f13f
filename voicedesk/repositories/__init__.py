"""Data access layer."""

from .base import BaseRepository
from .bot_repository import BotRepository
from .knowledge_repository import KnowledgeDocumentStore
from .room_repository import RoomRepository

__all__ = [
    "BaseRepository",
    "BotRepository",
    "KnowledgeDocumentStore",
    "RoomRepository",
]
