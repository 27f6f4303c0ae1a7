from __future__ import annotations

import pytest

from talegate.content import (
    DEFAULT_TEMPLATES,
    PromptLibrary,
    PromptTemplateError,
    extract_json_object,
    extract_payload,
)
from talegate.types import CONTENT_TYPES


def test_every_content_type_has_a_template():
    for kind in CONTENT_TYPES:
        assert kind in DEFAULT_TEMPLATES


def test_templates_render_with_empty_context():
    library = PromptLibrary()
    for kind in CONTENT_TYPES:
        assert library.render(kind, {})


def test_event_template_uses_context_and_defaults():
    library = PromptLibrary()
    rendered = library.render(
        "event",
        {"characterName": "李昭华", "yearName": "洪武", "year": 3, "characterAttr": {"诗词": 60}},
    )
    assert "明朝洪武3" in rendered
    assert "李昭华" in rendered
    assert '{"诗词": 60}' in rendered

    assert "女主" in library.render("event", {"characterName": ""})


def test_family_template_mentions_surname_only_when_given():
    library = PromptLibrary()
    assert "姓氏：王" in library.render("family", {"surname": "王"})
    assert "姓氏：" not in library.render("family", {})


def test_broken_override_raises_template_error():
    library = PromptLibrary({"note": "{{ unclosed "})
    with pytest.raises(PromptTemplateError):
        library.render("note", {})

    strict = PromptLibrary({"note": "{{ requiredValue }}"})
    with pytest.raises(PromptTemplateError):
        strict.render("note", {})


def test_templates_load_from_directory(tmp_path):
    (tmp_path / "note.j2").write_text("手记给{{ characterName }}", encoding="utf-8")
    library = PromptLibrary.from_directory(tmp_path)
    assert library.render("note", {"characterName": "昭宁"}) == "手记给昭宁"
    assert library.render("event", {}) == PromptLibrary().render("event", {})


def test_summary_types_extract_summary():
    for kind in ("event", "history", "explore"):
        assert extract_payload(kind, "  一年过去了  ") == {"summary": "一年过去了"}


def test_dialogue_splits_lines_and_speakers():
    payload = extract_payload("dialogue", "姐姐：“去花园吧？”\n\n妹妹: 好呀\n（两人相视一笑）")
    assert payload == {
        "lines": [
            {"speaker": "姐姐", "text": "“去花园吧？”"},
            {"speaker": "妹妹", "text": "好呀"},
            {"text": "（两人相视一笑）"},
        ]
    }


def test_mail_without_labels_keeps_whole_text_as_content():
    assert extract_payload("mail", "见字如面，一切安好。") == {
        "from": "",
        "date": "",
        "content": "见字如面，一切安好。",
    }


def test_mail_with_english_labels():
    payload = extract_payload("mail", "From: Mother\nDate: Spring, year 3\nContent: All is well.")
    assert payload["from"] == "Mother"
    assert payload["date"] == "Spring"
    assert payload["content"] == "All is well."


def test_structured_types_prefer_embedded_json():
    raw = '好的，以下是角色：\n```json\n{"name": "王昭仪", "age": 16}\n```'
    assert extract_payload("character", raw) == {"name": "王昭仪", "age": 16}
    assert extract_payload("family", "没有结构化内容") == {"text": "没有结构化内容"}


def test_extract_json_object_ignores_arrays_and_garbage():
    assert extract_json_object("[1, 2]") is None
    assert extract_json_object("{broken") is None
    assert extract_json_object('前言 {"a": 1} 后记') == {"a": 1}


def test_note_and_unknown_types_return_text():
    assert extract_payload("note", "心静如水") == {"text": "心静如水"}
    assert extract_payload("mystery", "内容") == {"text": "内容"}
    assert extract_payload("note", "   ") == {}


def test_mail_sender_label_needs_a_colon():
    text = "From afar I write, all is well at home."
    payload = extract_payload("mail", text)
    assert payload["from"] == ""
    assert payload["content"] == text


def test_render_wraps_filter_failures():
    library = PromptLibrary()
    with pytest.raises(PromptTemplateError):
        library.render("event", {"characterAttr": {("tuple", "key"): 1}})
