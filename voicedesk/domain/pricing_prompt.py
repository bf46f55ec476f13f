"""Price-calculation protocol injected into a lodging bot's prompt.

The agent layers child, infant and campaign discounts itself at call time, so
the text explains the document's pricing structure rather than precomputing
prices. Field names below are the canonical keys of ``pricing.rules`` and
``pricing.discounts``. Documents saved by the Turkish back-office form use
keys such as ``singleCarpani`` and ``aksiyonAdi``; ``normalize_rules`` and
``normalize_discounts`` map those onto the canonical names so the prompt
and the get_pricing_info tool agree.
"""
from __future__ import annotations

from typing import Any

RULE_FIELDS: dict[str, str] = {
    "singleMultiplier": "Single room multiplier applied to the per-person price",
    "tripleMultiplier": "Triple room multiplier applied to the per-person price",
    "infantDiscount": "Infant (0-2.99) discount percentage",
    "singleRoomChildDiscount": "Child (3-11.99) discount percentage in a single room",
    "doubleRoomFirstChildDiscount": "First child (0-6.99) discount percentage in a double room",
    "doubleRoomSecondChildDiscount": "Second child (3-6.99) discount percentage in a double room",
    "doubleRoomFirstChild7To11Discount": "First child (7-11.99) discount percentage in a double room",
    "releaseDays": "Minimum number of days between booking and arrival",
    "flatPriceRoomTypes": "Room types priced per room regardless of guest count",
}

DISCOUNT_FIELDS: dict[str, str] = {
    "name": "Campaign name",
    "discountRate": "Discount percentage",
    "saleStart": "First booking date the campaign accepts (YYYY-MM-DD)",
    "saleEnd": "Last booking date the campaign accepts (YYYY-MM-DD)",
    "stayStart": "First stay date covered (YYYY-MM-DD)",
    "stayEnd": "Last stay date covered (YYYY-MM-DD)",
    "roomType": "Room type the campaign applies to",
}

LEGACY_RULE_KEYS: dict[str, str] = {
    "singleCarpani": "singleMultiplier",
    "tripleCarpani": "tripleMultiplier",
    "bebekIndirimi": "infantDiscount",
    "singleOdaCocukInd": "singleRoomChildDiscount",
    "dblOdaIlkCocukInd": "doubleRoomFirstChildDiscount",
    "dblOdaIkinciCocukInd": "doubleRoomSecondChildDiscount",
    "dblOdaIlk7_11CocukInd": "doubleRoomFirstChild7To11Discount",
    "realiseDate": "releaseDays",
    "odaTipiBagimsizFiyat": "flatPriceRoomTypes",
}

LEGACY_DISCOUNT_KEYS: dict[str, str] = {
    "aksiyonAdi": "name",
    "indirimOrani": "discountRate",
    "satisTarihiBaslangic": "saleStart",
    "satisTarihiBitis": "saleEnd",
    "konaklamaTarihiBaslangic": "stayStart",
    "konaklamaTarihiBitis": "stayEnd",
    "odaTipi": "roomType",
}

_HEADER = """## PRICE CALCULATION RULES

Use this section to answer every price question. Read all values dynamically
from the get_pricing_info tool and skip any rule whose value is missing or
blank.

### 1. Data structure

#### Daily rates (dailyRates)
get_pricing_info returns a dailyRates list. When the guest names a room type
(for example "Deluxe" or "Suite"), call it with the roomType parameter so the
rows belong to that room type. Each row carries:
- **date**: stay date (YYYY-MM-DD)
- **availableRooms**: rooms still on sale for that night
- **ppPrice**: per-person price
- **single**, **dbl**, **triple**: room price by occupancy
- **roomTypeName** (optional): which room type the row belongs to
"""

_STEPS = """### 2. Calculation steps

1. Identify the room type, the stay dates and the number and ages of guests.
2. Find each night in dailyRates. If a date is missing, tell the guest.
3. Occupancy: 1 guest uses **single**, 2 guests **dbl**, 3 or more **triple**.
4. Base price: use the occupancy price when present, otherwise **ppPrice**
   multiplied by the number of guests (or by the single/triple multiplier).
5. Children and infants: 0-2.99 infant, 3-6.99 young child, 7-11.99 child,
   12 and over adult. Apply the matching discount for the room occupancy.
6. Room types listed in **flatPriceRoomTypes** cost the same for any number
   of guests.
7. Campaigns: a discount applies when today is inside its sale window, every
   night is inside its stay window and the room type matches. Skip any window
   whose dates are blank.
8. Final price: base price, then multipliers, then child and infant
   discounts, then campaign discounts. Quote the total for the whole stay and
   check **availableRooms** before confirming availability.
"""


def _present(value: Any) -> bool:
    return value not in (None, "", [], {})


def _canonical(values: dict[str, Any], legacy: dict[str, str]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in values.items():
        name = legacy.get(key, key)
        # a filled canonical key wins over a blank or legacy duplicate
        if name in result and _present(result[name]) and (key != name or not _present(value)):
            continue
        result[name] = value
    return result


def normalize_rules(rules: Any) -> dict[str, Any]:
    if not isinstance(rules, dict):
        return {}
    return _canonical(rules, LEGACY_RULE_KEYS)


def normalize_discounts(discounts: Any) -> list[dict[str, Any]]:
    if not isinstance(discounts, list):
        return []
    return [_canonical(item, LEGACY_DISCOUNT_KEYS) for item in discounts if isinstance(item, dict)]


def _field_list(fields: dict[str, str], values: dict[str, Any] | None = None) -> str:
    lines = []
    for key, label in fields.items():
        line = f"- **{key}**: {label}"
        if values is not None and _present(values.get(key)):
            line += f" (currently {values[key]})"
        lines.append(line)
    return "\n".join(lines)


def generate_pricing_prompt(pricing: dict[str, Any]) -> str:
    """Render the protocol text for one document's pricing section."""

    rules = normalize_rules(pricing.get("rules"))
    discounts = normalize_discounts(pricing.get("discounts"))

    sections = [
        _HEADER,
        "#### Pricing rules (rules)\n" + _field_list(RULE_FIELDS, rules),
        "#### Campaigns (discounts)\n" + _field_list(DISCOUNT_FIELDS),
    ]
    if discounts:
        names = ", ".join(str(item.get("name") or "unnamed") for item in discounts)
        sections.append(f"Configured campaigns: {names}.")
    sections.append(_STEPS)
    return "\n\n".join(section.strip() for section in sections)
