"""Views over the structured JSON record stored in a knowledge document.

A knowledge document is an ordered list of text blobs and, by convention, the
first blob is a JSON object. That one object carries two logically separate
things:

* the knowledge view: ``facilityInfo``, ``services``, ``policies``,
  ``conceptFeatures``, ``menus`` and ``roomTypes`` read by call-time tools;
* the pricing projection: ``pricing.dailyRates`` (legacy flat list) or
  ``pricing.dailyRatesByRoomType`` (per document room type id, with an
  optional ``_legacy`` bucket), plus ``rules``, ``discounts`` and an optional
  authored ``pricingPrompt``.

The per-date ``availableRooms`` counters are derived from relational state and
may lag behind it; nothing here ever feeds them back into the database.
"""
from __future__ import annotations

import json
from datetime import date, timedelta
from typing import Any, Iterable

from voicedesk.core.logger import get_logger

LOGGER = get_logger(__name__)

LEGACY_BUCKET = "_legacy"
PRICE_FIELDS = ("ppPrice", "single", "dbl", "triple")
KNOWLEDGE_SECTIONS = {
    "facility": ("facilityInfo", dict),
    "services": ("services", lambda: {"free": [], "paid": []}),
    "policies": ("policies", list),
    "concept": ("conceptFeatures", dict),
    "menus": ("menus", list),
}


def parse_record(texts: list[str] | None) -> dict[str, Any] | None:
    """Return the structured record from ``texts[0]`` or ``None`` when unusable."""

    if not texts:
        return None
    try:
        record = json.loads(texts[0])
    except (TypeError, ValueError):
        LOGGER.warning("Knowledge document record is not valid JSON; treating as empty")
        return None
    if not isinstance(record, dict):
        LOGGER.warning("Knowledge document record is %s, expected an object", type(record).__name__)
        return None
    return record


def replace_record(texts: list[str] | None, record: dict[str, Any]) -> list[str]:
    """Return a new blob list with ``record`` in the first slot, other blobs kept."""

    encoded = json.dumps(record, ensure_ascii=False)
    return [encoded, *(texts or [])[1:]]


def stay_dates(check_in: date, check_out: date) -> list[date]:
    """Nights of a stay: ``check_in`` inclusive, ``check_out`` exclusive."""

    nights = (check_out - check_in).days
    return [check_in + timedelta(days=offset) for offset in range(max(nights, 0))]


def empty_daily_rate(day: date, available: int) -> dict[str, str]:
    entry = {"date": day.isoformat(), "availableRooms": str(available)}
    entry.update({field: "" for field in PRICE_FIELDS})
    return entry


def room_types(record: dict[str, Any] | None) -> list[dict[str, Any]]:
    values = (record or {}).get("roomTypes") or []
    return [item for item in values if isinstance(item, dict)]


def pricing_section(record: dict[str, Any] | None) -> dict[str, Any]:
    pricing = (record or {}).get("pricing")
    return pricing if isinstance(pricing, dict) else {}


def knowledge_sections(record: dict[str, Any] | None, section: str = "all") -> dict[str, Any]:
    """Facility/policy text for the hotel-info tool; unknown sections yield ``{}``."""

    record = record or {}
    payload: dict[str, Any] = {}
    for key, (field, default) in KNOWLEDGE_SECTIONS.items():
        if section in ("all", key):
            payload[field] = record.get(field) or default()
    return payload


def _by_room_type(pricing: dict[str, Any]) -> dict[str, list[dict[str, Any]]]:
    buckets = pricing.get("dailyRatesByRoomType")
    return buckets if isinstance(buckets, dict) else {}


def match_room_type(
    candidates: Iterable[dict[str, Any]], key: str | None, *, allow_substring: bool = False
) -> dict[str, Any] | None:
    """Find a document room type by id, then case-insensitive name."""

    if not key:
        return None
    candidates = list(candidates)
    lowered = key.lower()
    for item in candidates:
        if str(item.get("id")) == key:
            return item
    for item in candidates:
        name = item.get("name")
        if name and name.lower() == lowered:
            return item
    if allow_substring:
        for item in candidates:
            name = item.get("name")
            if name and lowered in name.lower():
                return item
    return None


def target_bucket(record: dict[str, Any], room_key: str | None) -> str | None:
    """Sub-table of ``dailyRatesByRoomType`` a stay should touch.

    ``None`` means the document has no per-room-type tables (or no match and no
    ``_legacy`` bucket) and the flat ``dailyRates`` list is used instead.
    """

    buckets = _by_room_type(pricing_section(record))
    if not buckets or not room_key:
        return None
    match = match_room_type(room_types(record), room_key)
    if match is not None and str(match.get("id")) in buckets:
        return str(match.get("id"))
    if LEGACY_BUCKET in buckets:
        return LEGACY_BUCKET
    return None


def _rates_for_update(record: dict[str, Any], bucket: str | None) -> list[dict[str, Any]]:
    pricing = record.setdefault("pricing", {})
    if bucket is not None:
        buckets = pricing.setdefault("dailyRatesByRoomType", {})
        rates = buckets.get(bucket)
        if not isinstance(rates, list):
            rates = buckets[bucket] = []
        return rates
    rates = pricing.get("dailyRates")
    if not isinstance(rates, list):
        rates = pricing["dailyRates"] = []
    return rates


def _available(entry: dict[str, Any]) -> int:
    try:
        return int(str(entry.get("availableRooms") or "0").strip() or 0)
    except ValueError:
        return 0


def apply_availability_delta(
    record: dict[str, Any], dates: Iterable[date], delta: int, room_key: str | None = None
) -> int:
    """Shift ``availableRooms`` by ``-delta`` for each date, clamped at zero.

    ``delta`` is ``+1`` when a stay consumes a room and ``-1`` when it frees
    one. Dates missing from the table get a fresh entry with
    ``max(0, -delta)`` rooms and blank prices. Returns the number of dates
    touched.
    """

    rates = _rates_for_update(record, target_bucket(record, room_key))
    by_date = {entry.get("date"): entry for entry in rates if isinstance(entry, dict)}
    touched = 0
    for day in dates:
        key = day.isoformat()
        entry = by_date.get(key)
        if entry is not None:
            entry["availableRooms"] = str(max(0, _available(entry) - delta))
        else:
            entry = empty_daily_rate(day, max(0, -delta))
            rates.append(entry)
            by_date[key] = entry
        touched += 1
    return touched


def set_available_rooms(
    record: dict[str, Any], room_key: str | None, counts: dict[date, int]
) -> int:
    """Overwrite ``availableRooms`` for each date with an absolute value."""

    rates = _rates_for_update(record, target_bucket(record, room_key))
    by_date = {entry.get("date"): entry for entry in rates if isinstance(entry, dict)}
    for day, available in counts.items():
        entry = by_date.get(day.isoformat())
        if entry is None:
            rates.append(empty_daily_rate(day, max(0, available)))
        else:
            entry["availableRooms"] = str(max(0, available))
    return len(counts)


def tracked_room_keys(record: dict[str, Any]) -> list[str | None]:
    """Room keys whose availability the document tracks (``None`` = flat list)."""

    buckets = _by_room_type(pricing_section(record))
    if not buckets:
        return [None] if isinstance(pricing_section(record).get("dailyRates"), list) else []
    names = {str(item.get("id")): item.get("name") for item in room_types(record)}
    return [names.get(bucket) or bucket for bucket in buckets if bucket != LEGACY_BUCKET]


def resolve_daily_rates(
    pricing: dict[str, Any],
    *,
    room_type: str | None = None,
    document_room_types: list[dict[str, Any]] | None = None,
    day: date | str | None = None,
) -> list[dict[str, Any]]:
    """Daily rate rows handed to the conversational agent.

    Per-room-type documents return the matched room type's rows (exact name
    first, then substring); without a match every bucket is merged and each
    row is annotated with ``roomTypeId``/``roomTypeName``. Legacy documents
    return the flat list.
    """

    known = document_room_types or []
    buckets = _by_room_type(pricing)
    rates: list[dict[str, Any]] = []

    def _annotated(bucket_id: str, rows: list[dict[str, Any]], name: str | None = None):
        label = name or next(
            (item.get("name") for item in known if str(item.get("id")) == bucket_id), None
        )
        return [{**row, "roomTypeId": bucket_id, "roomTypeName": label or bucket_id} for row in rows]

    if buckets:
        matched = None
        if room_type and known:
            matched = match_room_type(
                [item for item in known if item.get("name")], room_type, allow_substring=True
            )
        if matched is not None and str(matched.get("id")) in buckets:
            bucket_id = str(matched["id"])
            rates = _annotated(bucket_id, buckets[bucket_id], matched.get("name"))
        else:
            for bucket_id, rows in buckets.items():
                if bucket_id == LEGACY_BUCKET and not room_type:
                    rates.extend(rows)
                else:
                    rates.extend(_annotated(bucket_id, rows))
    elif isinstance(pricing.get("dailyRates"), list):
        rates = list(pricing["dailyRates"])

    if day is not None:
        wanted = day.isoformat() if isinstance(day, date) else str(day)
        rates = [row for row in rates if row.get("date") == wanted]
    return rates


def daily_rate_for(record: dict[str, Any] | None, room_key: str | None, day: date) -> dict[str, Any] | None:
    """The daily rate row that prices ``room_key`` on ``day``, if any."""

    if record is None:
        return None
    pricing = pricing_section(record)
    bucket = target_bucket(record, room_key)
    if bucket is not None:
        rows = _by_room_type(pricing).get(bucket) or []
    elif _by_room_type(pricing):
        return None
    else:
        rows = pricing.get("dailyRates") or []
    wanted = day.isoformat()
    return next((row for row in rows if isinstance(row, dict) and row.get("date") == wanted), None)
