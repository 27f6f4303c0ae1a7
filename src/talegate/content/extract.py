"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Turn raw provider text into the structured payload each content type uses.
"""

from __future__ import annotations

import json
import re

from ..types import JSONObject

SUMMARY_TYPES = frozenset({"event", "history", "explore"})
STRUCTURED_TYPES = frozenset({"family", "character", "relationship", "asset-skills"})

_FROM_RE = re.compile(r"^\s*(?:发信人|寄信人|来信人|from)\s*[:：]\s*(.+?)\s*(?:[;；，,]|$)", re.IGNORECASE | re.MULTILINE)
_DATE_RE = re.compile(r"(?:时间|日期|date)\s*[:：]\s*(.+?)\s*(?:[;；，,]|$)", re.IGNORECASE | re.MULTILINE)
_LABEL_LINE_RE = re.compile(r"^\s*(?:发信人|寄信人|来信人|时间|日期|from|date)\s*[:：]", re.IGNORECASE)
_BODY_LABEL_RE = re.compile(r"^\s*(?:正文|内容|content)\s*[:：]\s*", re.IGNORECASE)
_SPEAKER_RE = re.compile(r"^\s*([^:：\s\"“][^:：\"“]{0,19})\s*[:：]\s*(.+)$")
_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def extract_payload(content_type: str, raw: str) -> JSONObject:
    """Structured payload for `content_type`; unknown types get `{text}`."""
    text = (raw or "").strip()
    if not text:
        return {}
    if content_type in SUMMARY_TYPES:
        return {"summary": text}
    if content_type == "dialogue":
        return extract_dialogue(text)
    if content_type == "mail":
        return extract_mail(text)
    if content_type in STRUCTURED_TYPES:
        found = extract_json_object(text)
        if found is not None:
            return found
    return {"text": text}


def extract_dialogue(text: str) -> JSONObject:
    lines: list[JSONObject] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        match = _SPEAKER_RE.match(line)
        if match:
            lines.append({"speaker": match.group(1).strip(), "text": match.group(2).strip()})
        else:
            lines.append({"text": line})
    return {"lines": lines}


def extract_mail(text: str) -> JSONObject:
    """
    Split a letter into sender, date and body.

    Header lines labelled with a sender or date are removed from the body;
    when nothing is labelled the whole text is the body.
    """
    sender = ""
    date = ""
    found = _FROM_RE.search(text)
    if found:
        sender = found.group(1).strip()
    found = _DATE_RE.search(text)
    if found:
        date = found.group(1).strip()

    body_lines = [
        _BODY_LABEL_RE.sub("", line)
        for line in text.splitlines()
        if not _LABEL_LINE_RE.match(line)
    ]
    content = "\n".join(body_lines).strip() or text
    return {"from": sender, "date": date, "content": content}


def extract_json_object(text: str) -> JSONObject | None:
    """First JSON object embedded in `text` (fenced or bare), else None."""
    candidates = [block.strip() for block in _FENCE_RE.findall(text)]
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])
    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None
