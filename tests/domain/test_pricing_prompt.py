from voicedesk.domain.pricing_prompt import generate_pricing_prompt, normalize_discounts, normalize_rules


def test_prompt_lists_current_rule_values():
    text = generate_pricing_prompt(
        {"rules": {"singleMultiplier": 1.5, "releaseDays": "", "flatPriceRoomTypes": ["Suite"]}}
    )

    assert text.startswith("## PRICE CALCULATION RULES")
    assert "- **singleMultiplier**: Single room multiplier applied to the per-person price (currently 1.5)" in text
    assert "- **releaseDays**: Minimum number of days between booking and arrival\n" in text
    assert "(currently ['Suite'])" in text
    assert "### 2. Calculation steps" in text


def test_prompt_names_configured_campaigns():
    text = generate_pricing_prompt({"discounts": [{"name": "Early bird"}, {"discountRate": 10}]})

    assert "Configured campaigns: Early bird, unnamed." in text


def test_prompt_without_campaigns():
    text = generate_pricing_prompt({"dailyRates": []})

    assert "Configured campaigns" not in text
    assert text.index("#### Campaigns (discounts)") < text.index("### 2. Calculation steps")


def test_prompt_reads_turkish_form_keys():
    text = generate_pricing_prompt(
        {
            "rules": {"singleCarpani": "1.4", "realiseDate": "3", "bebekIndirimi": ""},
            "discounts": [{"aksiyonAdi": "Erken rezervasyon", "indirimOrani": "15"}],
        }
    )

    assert "(currently 1.4)" in text
    assert "- **releaseDays**: Minimum number of days between booking and arrival (currently 3)" in text
    assert "- **infantDiscount**: Infant (0-2.99) discount percentage\n" in text
    assert "Configured campaigns: Erken rezervasyon." in text


def test_normalize_rules_prefers_filled_canonical_key():
    rules = normalize_rules({"singleMultiplier": "1.5", "singleCarpani": "1.2", "tripleCarpani": "2"})

    assert rules == {"singleMultiplier": "1.5", "tripleMultiplier": "2"}
    assert normalize_rules(None) == {}


def test_normalize_discounts_maps_campaign_keys():
    discounts = normalize_discounts(
        [{"aksiyonAdi": "Yaz", "satisTarihiBaslangic": "2025-01-01", "odaTipi": "Deluxe"}, "bad"]
    )

    assert discounts == [{"name": "Yaz", "saleStart": "2025-01-01", "roomType": "Deluxe"}]
