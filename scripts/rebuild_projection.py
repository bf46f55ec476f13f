#!/usr/bin/env python3
"""Recompute knowledge-document room availability from reservations."""
from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import select  # noqa: E402

from voicedesk.core.logger import (  # noqa: E402
    get_logger,
    init_logging,
    log_context,
    progress_manager,
    shutdown_logging,
    timeit,
)
from voicedesk.db.session import session_scope  # noqa: E402
from voicedesk.models import Customer, CustomerType  # noqa: E402
from voicedesk.services import ProjectionService  # noqa: E402

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--customer-id",
        type=int,
        action="append",
        dest="customer_ids",
        help="Hotel customer to rebuild (repeatable). Defaults to every hotel customer.",
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=None,
        help="First date to rebuild (YYYY-MM-DD). Defaults to today.",
    )
    parser.add_argument("--days", type=int, default=90, help="Number of nights to rebuild")
    return parser.parse_args(argv)


def hotel_customer_ids() -> list[int]:
    with session_scope() as session:
        statement = select(Customer.id).where(Customer.customer_type == CustomerType.HOTEL)
        return list(session.scalars(statement.order_by(Customer.id)))


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    start = args.start or date.today()
    end = start + timedelta(days=args.days)
    customer_ids = args.customer_ids or hotel_customer_ids()
    logger.info("Rebuilding availability for %s customer(s), %s to %s", len(customer_ids), start, end)

    with timeit("projection rebuild", logger=logger, unit="dates") as timer:
        for customer_id in progress_manager.track(
            customer_ids, description="Rebuilding projections", total=len(customer_ids)
        ):
            with log_context.scoped(customer_id=customer_id), session_scope() as session:
                result = ProjectionService(session).rebuild(customer_id, start, end)
                timer.add(result.dates)
                if result.skipped:
                    logger.warning("Skipped %s unreadable document(s)", result.skipped)


if __name__ == "__main__":
    init_logging(app_name="rebuild-projection")
    log_context.bind(job="rebuild_projection")
    try:
        main()
    finally:
        shutdown_logging()
