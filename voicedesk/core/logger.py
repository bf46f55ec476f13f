"""Logging entry points used across the service, re-exported from ``core.log``."""
from __future__ import annotations

from .log import get_logger, init_logging, log_context, progress_manager, shutdown_logging, timeit

__all__ = ["get_logger", "init_logging", "log_context", "progress_manager", "shutdown_logging", "timeit"]
