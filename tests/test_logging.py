import logging

import pytest

from voicedesk.core.logger import get_logger, init_logging, log_context, shutdown_logging


@pytest.fixture()
def quiet_logging():
    shutdown_logging()
    init_logging(console=False, log_dir=None, queue=False, rich_tracebacks=False)
    yield
    shutdown_logging()


def test_http_client_loggers_are_capped_at_warning(quiet_logging):
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_repeated_init_with_same_options_is_a_no_op(quiet_logging):
    before = list(logging.getLogger().handlers)

    init_logging(console=False, log_dir=None, queue=False, rich_tracebacks=False)

    assert logging.getLogger().handlers == before


def test_daily_file_carries_context(tmp_path):
    shutdown_logging()
    init_logging(console=False, log_dir=tmp_path, queue=False, rich_tracebacks=False)
    try:
        with log_context.scoped(bot_id=7):
            get_logger("voicedesk.test").info("pricing block refreshed")
    finally:
        shutdown_logging()

    [log_file] = list(tmp_path.glob("*.log"))
    line = log_file.read_text(encoding="utf-8").strip()
    assert "bot_id=7" in line
    assert line.endswith("pricing block refreshed")
