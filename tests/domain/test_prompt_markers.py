from voicedesk.domain import prompt_markers
from voicedesk.domain.prompt_markers import PRICING_BEGIN, PRICING_END


def test_remove_knowledge_region_drops_every_copy():
    prompt = (
        "Intro\n\n<!--KB:7-->\nold facts\n<!--/KB:7-->\n"
        "middle\n<!--KB:7-->again<!--/KB:7-->\n\n"
    )

    cleaned = prompt_markers.remove_knowledge_region(prompt, 7)

    assert cleaned == "Intro\n\n\nmiddle\n\n\n"
    assert prompt_markers.remove_knowledge_region(cleaned, 7) == cleaned


def test_remove_knowledge_region_keeps_surrounding_whitespace():
    prompt = "Intro\n<!--KB:3-->x<!--/KB:3-->\nOutro\n"

    assert prompt_markers.remove_knowledge_region(prompt, 3) == "Intro\n\nOutro\n"


def test_remove_knowledge_region_without_markers_returns_prompt_unchanged():
    prompt = "  You are the receptionist.\n\nBe polite.\n"

    assert prompt_markers.remove_knowledge_region(prompt, 9) == prompt


def test_remove_knowledge_region_leaves_other_documents():
    prompt = "<!--KB:1-->one<!--/KB:1-->\n<!--KB:2-->two<!--/KB:2-->"

    cleaned = prompt_markers.remove_knowledge_region(prompt, 1)

    assert cleaned == "\n<!--KB:2-->two<!--/KB:2-->"


def test_remove_knowledge_region_handles_empty_prompt():
    assert prompt_markers.remove_knowledge_region(None, 3) == ""
    assert prompt_markers.remove_knowledge_region("", 3) == ""


def test_upsert_pricing_block_appends_after_blank_line():
    updated = prompt_markers.upsert_pricing_block("You are helpful.\n", "Rates text")

    assert updated == f"You are helpful.\n\n{PRICING_BEGIN}\nRates text\n{PRICING_END}"


def test_upsert_pricing_block_replaces_in_place():
    prompt = f"Head\n\n{PRICING_BEGIN}\nold\n{PRICING_END}\n\nTail"

    updated = prompt_markers.upsert_pricing_block(prompt, "new")

    assert updated == f"Head\n\n{PRICING_BEGIN}\nnew\n{PRICING_END}\n\nTail"
    assert prompt_markers.upsert_pricing_block(updated, "new") == updated


def test_upsert_pricing_block_on_empty_prompt():
    assert prompt_markers.upsert_pricing_block(None, "x") == f"{PRICING_BEGIN}\nx\n{PRICING_END}"


def test_remove_pricing_block():
    prompt = f"Head\n\n{PRICING_BEGIN}\nrates\n{PRICING_END}"

    assert prompt_markers.remove_pricing_block(prompt) == "Head"
    assert prompt_markers.remove_pricing_block(f"Head\n\n{PRICING_BEGIN}\nx\n{PRICING_END}\n\nTail") == "Head\n\nTail"


def test_remove_pricing_block_without_markers_returns_prompt_unchanged():
    prompt = "  Head\n\nBody\n"

    assert prompt_markers.remove_pricing_block(prompt) == prompt
