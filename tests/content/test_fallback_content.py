from __future__ import annotations

from talegate.content import fallback_payload, fallback_seed
from talegate.types import CONTENT_TYPES


def test_fallback_covers_every_content_type():
    for kind in CONTENT_TYPES:
        payload = fallback_payload(kind, f"prompt for {kind}")
        assert isinstance(payload, dict)
        assert payload


def test_fallback_is_deterministic_for_type_and_prompt():
    for kind in CONTENT_TYPES:
        assert fallback_payload(kind, "same prompt") == fallback_payload(kind, "same prompt")


def test_fallback_seed_changes_with_prompt_and_type():
    assert fallback_seed("event", "a") != fallback_seed("event", "b")
    assert fallback_seed("event", "a") != fallback_seed("note", "a")


def test_fallback_shapes_match_extracted_shapes():
    assert set(fallback_payload("event", "p")) == {"summary"}
    assert set(fallback_payload("history", "p")) == {"summary"}
    assert set(fallback_payload("note", "p")) == {"text"}
    assert set(fallback_payload("mail", "p")) == {"from", "content", "date"}
    assert all("text" in line for line in fallback_payload("dialogue", "p")["lines"])


def test_fallback_uses_context_names():
    payload = fallback_payload("dialogue", "p", {"speaker": "长姐", "addressee": "幼妹"})
    assert payload["lines"][0]["speaker"] == "长姐"
    assert payload["lines"][1]["speaker"] == "幼妹"
    assert fallback_payload("family", "p", {"surname": "沈"})["surname"] == "沈"
    assert "西厢" in fallback_payload("explore", "p", {"area": "西厢"})["summary"]


def test_unknown_type_gets_generic_text():
    assert fallback_payload("poem", "p") == {"text": "AI模拟内容：poem"}
