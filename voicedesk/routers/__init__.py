"""FastAPI routers for the voice desk back office."""

from .bots import router as bots_router
from .knowledge_bases import router as knowledge_bases_router
from .reservations import router as reservations_router
from .rooms import router as rooms_router
from .tools import router as tools_router

__all__ = [
    "bots_router",
    "knowledge_bases_router",
    "reservations_router",
    "rooms_router",
    "tools_router",
]
