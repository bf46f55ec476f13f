"""Deferred work that runs after the request's transaction has committed."""
from __future__ import annotations

from typing import Any, Callable, Protocol

from voicedesk.core.logger import get_logger

LOGGER = get_logger(__name__)


class Defer(Protocol):
    """Schedule ``func(*args, **kwargs)``; ``BackgroundTasks.add_task`` fits."""

    def __call__(self, func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> None: ...


def run_inline(func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> None:
    """Run the job immediately; used by scripts and tests."""

    LOGGER.debug("Running deferred job %s inline", getattr(func, "__name__", func))
    func(*args, **kwargs)
