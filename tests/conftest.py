"""Shared fixtures: an in-memory database and builders for the common rows."""
from __future__ import annotations

import json
from datetime import date
from decimal import Decimal
from unittest.mock import create_autospec

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from voicedesk.integrations.voice_platform import VoicePlatformGateway
from voicedesk.models import (
    Base,
    Bot,
    BotKnowledgeBase,
    Customer,
    CustomerType,
    KnowledgeBase,
    Reservation,
    ReservationStatus,
    RoomType,
)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def session(session_factory) -> Session:
    """Provide an in-memory database session for each test."""

    with session_factory() as session:
        yield session


@pytest.fixture()
def gateway():
    return create_autospec(VoicePlatformGateway, instance=True)


@pytest.fixture()
def hotel(session) -> Customer:
    customer = Customer(
        organization_id=1,
        name="Seaside Hotel",
        email="desk@seaside.example",
        customer_type=CustomerType.HOTEL,
    )
    session.add(customer)
    session.commit()
    return customer


@pytest.fixture()
def restaurant(session) -> Customer:
    customer = Customer(organization_id=1, name="Harbour Grill", customer_type=CustomerType.RESTAURANT)
    session.add(customer)
    session.commit()
    return customer


@pytest.fixture()
def make_bot(session):
    def _make(
        name: str = "Front desk",
        *,
        llm_id: str | None = "llm_front",
        prompt: str = "You are the hotel receptionist.",
        organization_id: int = 1,
    ) -> Bot:
        bot = Bot(
            organization_id=organization_id,
            name=name,
            remote_agent_id=f"agent_{name.lower().replace(' ', '_')}",
            remote_llm_id=llm_id,
            general_prompt=prompt,
            tools=[],
        )
        session.add(bot)
        session.commit()
        return bot

    return _make


@pytest.fixture()
def make_document(session, hotel):
    def _make(
        record: dict | None = None,
        *,
        remote_id: str | None = "kb_remote_1",
        customer: Customer | None = hotel,
        name: str = "Hotel facts",
        extra_texts: list[str] | None = None,
    ) -> KnowledgeBase:
        texts = [json.dumps(record)] if record is not None else []
        document = KnowledgeBase(
            organization_id=1,
            customer_id=customer.id if customer is not None else None,
            name=name,
            texts=texts + list(extra_texts or []),
            remote_knowledge_base_id=remote_id,
        )
        session.add(document)
        session.commit()
        return document

    return _make


@pytest.fixture()
def assign_row(session):
    def _assign(bot: Bot, document: KnowledgeBase, *, top_k: int = 3, filter_score: float = 0.5) -> BotKnowledgeBase:
        row = BotKnowledgeBase(
            bot_id=bot.id, knowledge_base_id=document.id, top_k=top_k, filter_score=filter_score
        )
        session.add(row)
        session.commit()
        return row

    return _assign


@pytest.fixture()
def make_room_type(session, hotel):
    def _make(
        name: str = "Deluxe",
        *,
        total_rooms: int = 2,
        price: str = "100.00",
        max_guests: int = 2,
        customer: Customer | None = None,
        is_active: bool = True,
    ) -> RoomType:
        owner = customer or hotel
        room_type = RoomType(
            organization_id=owner.organization_id,
            customer_id=owner.id,
            name=name,
            total_rooms=total_rooms,
            price_per_night=Decimal(price),
            max_guests=max_guests,
            features=["Sea view"],
            is_active=is_active,
        )
        session.add(room_type)
        session.commit()
        return room_type

    return _make


@pytest.fixture()
def make_reservation(session, hotel):
    def _make(
        room_type: RoomType | None,
        check_in: date,
        check_out: date,
        *,
        status: ReservationStatus = ReservationStatus.CONFIRMED,
        guests: int = 2,
        room_type_name: str | None = None,
    ) -> Reservation:
        reservation = Reservation(
            customer_id=hotel.id,
            room_type_id=room_type.id if room_type is not None else None,
            room_type_name=room_type_name,
            guest_name="Ada Guest",
            guest_phone="+100000000",
            check_in=check_in,
            check_out=check_out,
            number_of_guests=guests,
            status=status,
        )
        session.add(reservation)
        session.commit()
        return reservation

    return _make


def hotel_record(**pricing) -> dict:
    """A minimal hotel record with two document room types."""

    return {
        "facilityInfo": {"name": "Seaside Hotel", "checkIn": "14:00"},
        "policies": ["No smoking"],
        "roomTypes": [{"id": "rt-1", "name": "Deluxe"}, {"id": "rt-2", "name": "Family Suite"}],
        "pricing": pricing,
    }


@pytest.fixture()
def record_factory():
    return hotel_record
