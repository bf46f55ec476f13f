"""Shared FastAPI dependency definitions."""
from __future__ import annotations

from collections.abc import Generator

from fastapi import BackgroundTasks, Depends
from sqlalchemy.orm import Session, sessionmaker

from voicedesk.db.session import get_session_factory as _configured_session_factory
from voicedesk.integrations.voice_platform import VoicePlatformGateway, get_voice_gateway
from voicedesk.services import (
    AssignmentService,
    PricingService,
    ReservationService,
    ToolService,
)


def get_session_factory() -> sessionmaker:
    """Session factory used by requests and the background jobs they schedule."""

    return _configured_session_factory()


def get_db_session(
    factory: sessionmaker = Depends(get_session_factory),
) -> Generator[Session, None, None]:
    """Yield a database session suitable for request-scoped usage."""

    session = factory()
    try:
        yield session
    finally:
        session.close()


def get_gateway() -> VoicePlatformGateway:
    return get_voice_gateway()


def get_assignment_service(
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db_session),
    gateway: VoicePlatformGateway = Depends(get_gateway),
    factory: sessionmaker = Depends(get_session_factory),
) -> AssignmentService:
    return AssignmentService(
        session, gateway, defer=background_tasks.add_task, session_factory=factory
    )


def get_reservation_service(
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db_session),
    factory: sessionmaker = Depends(get_session_factory),
) -> ReservationService:
    return ReservationService(session, defer=background_tasks.add_task, session_factory=factory)


def get_pricing_service(session: Session = Depends(get_db_session)) -> PricingService:
    return PricingService(session)


def get_tool_service(
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db_session),
    factory: sessionmaker = Depends(get_session_factory),
) -> ToolService:
    return ToolService(session, defer=background_tasks.add_task, session_factory=factory)
