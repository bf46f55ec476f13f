import json
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from voicedesk.core.errors import NotFoundError, ValidationError
from voicedesk.models import KnowledgeBase, ReservationStatus, RoomType
from voicedesk.services import ReservationService
from voicedesk.services.reservation_service import parse_status


def _deluxe_record(available: str = "2") -> dict:
    return {
        "roomTypes": [{"id": "rt-1", "name": "Deluxe"}],
        "pricing": {
            "dailyRatesByRoomType": {
                "rt-1": [
                    {"date": "2025-06-01", "availableRooms": available, "dbl": "150"},
                    {"date": "2025-06-02", "availableRooms": available, "dbl": "150"},
                ]
            }
        },
    }


def _counters(session, document_id) -> list[str]:
    session.expire_all()
    record = json.loads(session.get(KnowledgeBase, document_id).texts[0])
    return [row["availableRooms"] for row in record["pricing"]["dailyRatesByRoomType"]["rt-1"]]


@pytest.fixture()
def deferred():
    return []


@pytest.fixture()
def recording_service(session, deferred):
    def record(func, *args, **kwargs):
        deferred.append((func.__name__, args))

    return ReservationService(session, defer=record)


def test_parse_status():
    assert parse_status("cancelled") is ReservationStatus.CANCELLED
    assert parse_status(ReservationStatus.PENDING) is ReservationStatus.PENDING
    with pytest.raises(ValidationError):
        parse_status("lost")


def test_cancel_and_restore_are_symmetric(session, session_factory, make_room_type, make_reservation, make_document):
    room_type = make_room_type("Deluxe", total_rooms=2)
    document = make_document(_deluxe_record("2"), extra_texts=["Late checkout on request"])
    reservation = make_reservation(room_type, date(2025, 6, 1), date(2025, 6, 3))
    service = ReservationService(session, session_factory=session_factory)

    cancelled = service.change_status(reservation.id, "CANCELLED")

    assert cancelled.inventory_delta == -1
    assert cancelled.previous_status is ReservationStatus.CONFIRMED
    assert room_type.total_rooms == 3
    assert _counters(session, document.id) == ["3", "3"]

    restored = service.change_status(reservation.id, ReservationStatus.CONFIRMED)

    assert restored.inventory_delta == 1
    assert session.get(RoomType, room_type.id).total_rooms == 2
    assert _counters(session, document.id) == ["2", "2"]
    assert session.get(KnowledgeBase, document.id).texts[1] == "Late checkout on request"


def test_confirming_pending_stamps_time_without_inventory_change(
    recording_service, deferred, make_room_type, make_reservation
):
    room_type = make_room_type(total_rooms=2)
    reservation = make_reservation(
        room_type, date(2025, 6, 1), date(2025, 6, 3), status=ReservationStatus.PENDING
    )
    now = datetime(2025, 5, 20, 9, 30, tzinfo=timezone.utc)

    change = recording_service.change_status(reservation.id, "CONFIRMED", now=now)

    assert change.inventory_delta == 0
    assert reservation.confirmed_at == now
    assert room_type.total_rooms == 2
    assert deferred == []


@pytest.mark.parametrize(
    "start, target",
    [
        (ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN),
        (ReservationStatus.CHECKED_IN, ReservationStatus.CHECKED_OUT),
        (ReservationStatus.CANCELLED, ReservationStatus.CANCELLED),
    ],
)
def test_transitions_not_touching_cancelled_leave_inventory(
    recording_service, deferred, make_room_type, make_reservation, start, target
):
    room_type = make_room_type(total_rooms=4)
    reservation = make_reservation(room_type, date(2025, 6, 1), date(2025, 6, 3), status=start)

    change = recording_service.change_status(reservation.id, target)

    assert change.inventory_delta == 0
    assert room_type.total_rooms == 4
    assert deferred == []


def test_restore_never_drives_total_below_zero(recording_service, make_room_type, make_reservation):
    room_type = make_room_type(total_rooms=0)
    reservation = make_reservation(
        room_type, date(2025, 6, 1), date(2025, 6, 3), status=ReservationStatus.CANCELLED
    )

    recording_service.change_status(reservation.id, "PENDING")

    assert room_type.total_rooms == 0


def test_cancel_without_room_type_uses_stored_name(recording_service, deferred, make_reservation, hotel):
    reservation = make_reservation(None, date(2025, 6, 1), date(2025, 6, 2), room_type_name="Garden Room")

    change = recording_service.change_status(reservation.id, "CANCELLED")

    assert change.inventory_delta == -1
    assert deferred == [
        ("update_projection", (hotel.id, "Garden Room", date(2025, 6, 1), date(2025, 6, 2), -1))
    ]


def test_change_status_unknown_reservation(recording_service):
    with pytest.raises(NotFoundError):
        recording_service.change_status(404, "CANCELLED")


def test_create_pending_prices_the_stay(recording_service, make_room_type, hotel):
    make_room_type("Family Suite", price="180.00", max_guests=4)

    reservation = recording_service.create_pending(
        hotel.id,
        guest_name="Grace",
        check_in=date(2025, 6, 9),
        check_out=date(2025, 6, 11),
        guests=3,
        room_type="suite",
        call_id="call_1",
    )

    assert reservation.status is ReservationStatus.PENDING
    assert reservation.room_type_name == "suite"
    assert reservation.room_type.name == "Family Suite"
    assert reservation.total_price == Decimal("360.00")


def test_create_pending_rejects_unknown_room_type(recording_service, hotel):
    with pytest.raises(NotFoundError):
        recording_service.create_pending(
            hotel.id,
            guest_name="Grace",
            check_in=date(2025, 6, 9),
            check_out=date(2025, 6, 11),
            guests=2,
            room_type="Penthouse",
        )
