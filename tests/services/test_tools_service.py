from datetime import date
from decimal import Decimal

import pytest

from voicedesk.core.errors import NotFoundError
from voicedesk.models import BotAssignment, Customer, CustomerType, Reservation, ReservationStatus
from voicedesk.services import ToolService
from voicedesk.services.tools_service import confirmation_code


@pytest.fixture()
def tools(session, session_factory):
    return ToolService(session, defer=lambda *args, **kwargs: None, session_factory=session_factory)


@pytest.fixture()
def hotel_with_rates(make_document, make_room_type, record_factory):
    make_room_type("Deluxe", total_rooms=2, price="100.00")
    make_room_type("Family Suite", total_rooms=1, price="160.00", max_guests=4)
    return make_document(
        record_factory(
            dailyRatesByRoomType={
                "rt-1": [
                    {"date": "2025-06-10", "availableRooms": "2", "dbl": "140"},
                    {"date": "2025-06-11", "availableRooms": "2", "dbl": "145"},
                ],
                "rt-2": [{"date": "2025-06-10", "availableRooms": "1", "dbl": "210"}],
            },
            rules={"releaseDays": 2},
            discounts=[{"name": "Early bird", "discountRate": 10}],
        )
    )


def test_confirmation_code_format():
    assert confirmation_code(42) == "R000042"


def test_customer_for_bot_prefers_explicit_assignment(session, tools, make_bot, hotel):
    second = Customer(organization_id=1, name="Mountain Lodge", customer_type=CustomerType.HOTEL)
    session.add(second)
    session.commit()
    bot = make_bot()

    assert tools.customer_for_bot(bot.id).id == hotel.id

    session.add(BotAssignment(bot_id=bot.id, customer_id=second.id))
    session.commit()

    assert tools.customer_for_bot(bot.id).id == second.id


def test_customer_for_bot_without_hotel(tools, make_bot, hotel):
    bot = make_bot(organization_id=2)

    with pytest.raises(NotFoundError):
        tools.customer_for_bot(bot.id)


def test_hotel_info_sections(tools, make_bot, hotel_with_rates):
    bot = make_bot()

    everything = tools.hotel_info(bot.id)
    policies = tools.hotel_info(bot.id, "policies")

    assert everything["facilityInfo"]["name"] == "Seaside Hotel"
    assert everything["menus"] == []
    assert policies == {"policies": ["No smoking"]}


def test_hotel_info_without_document(tools, make_bot, hotel):
    bot = make_bot()

    assert tools.hotel_info(bot.id, "facility") == {"facilityInfo": {}}


def test_pricing_info_for_named_room_type(tools, make_bot, hotel_with_rates):
    bot = make_bot()

    payload = tools.pricing_info(bot.id, day=date(2025, 6, 10), room_type="Deluxe", guests=2)

    assert [row["dbl"] for row in payload["dailyRates"]] == ["140"]
    assert payload["rules"] == {"releaseDays": 2}
    assert payload["discounts"][0]["name"] == "Early bird"
    assert payload["roomTypes"] == ["Deluxe", "Family Suite"]
    assert payload["resolvedPrices"] == [
        {
            "roomType": "Deluxe",
            "date": "2025-06-10",
            "price": "140.00",
            "activeRule": None,
            "overridden": False,
        }
    ]


def test_pricing_info_without_filters_merges_room_types(tools, make_bot, hotel_with_rates):
    bot = make_bot()

    payload = tools.pricing_info(bot.id)

    assert len(payload["dailyRates"]) == 3
    assert {row["roomTypeName"] for row in payload["dailyRates"]} == {"Deluxe", "Family Suite"}
    assert "resolvedPrices" not in payload


def test_check_availability_and_room_types(tools, make_bot, hotel_with_rates):
    bot = make_bot()

    result = tools.check_availability(bot.id, date(2025, 6, 10), date(2025, 6, 12), 3, today=date(2025, 6, 1))
    overview = tools.room_types(bot.id, today=date(2025, 6, 1))

    assert [option.name for option in result.room_types] == ["Family Suite"]
    assert [item.name for item in overview] == ["Deluxe", "Family Suite"]


def test_create_reservation_records_pending_booking(session, tools, make_bot, hotel_with_rates):
    bot = make_bot()

    outcome = tools.create_reservation(
        bot.id,
        guest_name="Grace Hopper",
        check_in=date(2025, 6, 10),
        check_out=date(2025, 6, 12),
        guests=2,
        room_type="deluxe",
        guest_phone="+15550100",
    )

    assert outcome.success
    assert outcome.confirmation_code == confirmation_code(outcome.reservation_id)
    assert outcome.confirmation_code in outcome.message
    assert outcome.total_price == Decimal("285.00")
    reservation = session.get(Reservation, outcome.reservation_id)
    assert reservation.status is ReservationStatus.PENDING
    assert reservation.guest_phone == "+15550100"


def test_create_reservation_with_unknown_room_type(tools, make_bot, hotel_with_rates):
    bot = make_bot()

    outcome = tools.create_reservation(
        bot.id,
        guest_name="Grace Hopper",
        check_in=date(2025, 6, 10),
        check_out=date(2025, 6, 12),
        guests=2,
        room_type="Penthouse",
    )

    assert not outcome.success
    assert outcome.reservation_id is None
    assert outcome.message == "Room type not found. Please say the full room type name."


def test_pricing_info_reports_canonical_rule_keys(tools, make_bot, make_document, record_factory):
    make_document(
        record_factory(
            rules={"singleCarpani": "1.4"},
            discounts=[{"aksiyonAdi": "Erken rezervasyon", "indirimOrani": "15"}],
        )
    )
    bot = make_bot()

    payload = tools.pricing_info(bot.id)

    assert payload["rules"] == {"singleMultiplier": "1.4"}
    assert payload["discounts"] == [{"name": "Erken rezervasyon", "discountRate": "15"}]
