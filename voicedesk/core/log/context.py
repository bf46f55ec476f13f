"""Context helpers that tag log records with the ids being worked on."""
from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator


_context_var: contextvars.ContextVar[dict[str, object]] = contextvars.ContextVar(
    "log_context", default={}
)


class LogContext:
    """Bind key/value pairs (``bot_id=3``) to subsequent log records."""

    def bind(self, **values: object) -> None:
        current = dict(_context_var.get())
        current.update({k: v for k, v in values.items() if v is not None})
        _context_var.set(current)

    @contextmanager
    def scoped(self, **values: object) -> Iterator[None]:
        token = _context_var.set(
            {**_context_var.get(), **{k: v for k, v in values.items() if v is not None}}
        )
        try:
            yield
        finally:
            _context_var.reset(token)


class ContextFilter(logging.Filter):
    """Render the bound context as a ``key=value`` prefix."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _context_var.get()
        if context:
            record.context = " ".join(f"{k}={v}" for k, v in context.items()) + " "
        else:
            record.context = ""
        return True


log_context = LogContext()
