import json
from datetime import date
from unittest.mock import MagicMock

from voicedesk.models import KnowledgeBase, ReservationStatus
from voicedesk.services import ProjectionService, update_projection


def _record(session, document_id) -> dict:
    session.expire_all()
    return json.loads(session.get(KnowledgeBase, document_id).texts[0])


def _available(rows) -> dict[str, str]:
    return {row["date"]: row["availableRooms"] for row in rows}


def test_rebuild_per_room_type(session, hotel, make_room_type, make_reservation, make_document, record_factory):
    deluxe = make_room_type("Deluxe", total_rooms=2)
    make_room_type("Family Suite", total_rooms=4)
    make_reservation(deluxe, date(2025, 6, 1), date(2025, 6, 3))
    make_reservation(deluxe, date(2025, 6, 1), date(2025, 6, 2), status=ReservationStatus.CANCELLED)
    document = make_document(
        record_factory(
            dailyRatesByRoomType={
                "rt-1": [{"date": "2025-06-01", "availableRooms": "9", "dbl": "150"}],
                "rt-2": [],
            }
        )
    )

    update = ProjectionService(session).rebuild(hotel.id, date(2025, 6, 1), date(2025, 6, 4))
    session.commit()

    buckets = _record(session, document.id)["pricing"]["dailyRatesByRoomType"]
    assert _available(buckets["rt-1"]) == {"2025-06-01": "1", "2025-06-02": "1", "2025-06-03": "2"}
    assert buckets["rt-1"][0]["dbl"] == "150"
    assert _available(buckets["rt-2"]) == {"2025-06-01": "4", "2025-06-02": "4", "2025-06-03": "4"}
    assert update.documents == 1
    assert update.dates == 6


def test_rebuild_flat_list_sums_room_types(session, hotel, make_room_type, make_reservation, make_document):
    deluxe = make_room_type("Deluxe", total_rooms=2)
    make_room_type("Family Suite", total_rooms=4)
    make_reservation(deluxe, date(2025, 6, 1), date(2025, 6, 2))
    document = make_document({"pricing": {"dailyRates": []}})

    ProjectionService(session).rebuild(hotel.id, date(2025, 6, 1), date(2025, 6, 3))
    session.commit()

    rows = _record(session, document.id)["pricing"]["dailyRates"]
    assert _available(rows) == {"2025-06-01": "5", "2025-06-02": "6"}


def test_unreadable_and_non_lodging_documents_are_skipped(
    session, hotel, restaurant, make_document, make_room_type
):
    make_room_type("Deluxe")
    broken = make_document(None, extra_texts=["plain words, no JSON"])
    other = make_document({"pricing": {"dailyRates": []}}, customer=restaurant)

    update = ProjectionService(session).apply_delta(hotel.id, "Deluxe", date(2025, 6, 1), date(2025, 6, 2), 1)
    session.commit()

    assert update.skipped == 1
    assert update.documents == 0
    assert session.get(KnowledgeBase, broken.id).texts == ["plain words, no JSON"]
    assert _record(session, other.id) == {"pricing": {"dailyRates": []}}


def test_update_projection_job_commits(session, session_factory, hotel, make_document, record_factory):
    document = make_document(
        record_factory(dailyRatesByRoomType={"rt-2": [{"date": "2025-06-01", "availableRooms": "3"}]})
    )

    update_projection(
        hotel.id, "Family Suite", date(2025, 6, 1), date(2025, 6, 2), 1, session_factory=session_factory
    )

    rows = _record(session, document.id)["pricing"]["dailyRatesByRoomType"]["rt-2"]
    assert _available(rows) == {"2025-06-01": "2"}


def test_update_projection_job_swallows_failures(hotel):
    factory = MagicMock(side_effect=RuntimeError("database unavailable"))

    update_projection(hotel.id, "Deluxe", date(2025, 6, 1), date(2025, 6, 2), 1, session_factory=factory)

    factory.assert_called_once_with()
