"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Prompt templates per content type, rendered with jinja2.

Context keys follow the game front-end (camelCase): `characterName`,
`characterAttr`, `dynasty`, `yearName`, `year`, `speaker`, `addressee`,
`speakerPersonality`, `surname`, `area`. Missing keys fall back to the
defaults written into each template.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from ..errors import ConfigError
from ..utils import json_text

logger = logging.getLogger("talegate.content")

GENERIC_TEMPLATE_KEY = "generic"

DEFAULT_TEMPLATES: dict[str, str] = {
    "event": (
        "请生成一个发生在{{ dynasty | default('明朝', true) }}{{ yearName | default('') }}"
        "{{ year | default('') }}的家庭/人生年度大事件，角色：{{ characterName | default('女主', true) }}，"
        "属性：{{ characterAttr | default({}) | json }}，要求短篇叙述，突出事件影响与后续走向。"
    ),
    "dialogue": (
        "请生成一段{{ speaker | default('李昭华', true) }}与{{ addressee | default('家人/姐妹', true) }}"
        "之间的互动对话（性格：{{ speakerPersonality | default('') }}），包含对话内容及情感变化、互动后果。"
        "每行一句，格式为“说话人：内容”。"
    ),
    "family": (
        "请设定一个随机古风家族{% if surname is defined and surname %}（姓氏：{{ surname }}）{% endif %}，"
        "输出家族姓氏、风格、身份、资产、家训、家人（性格）、当前动态。请以JSON对象输出。"
    ),
    "character": (
        "请生成一个女性NPC角色，包含姓名、年龄、性格、外貌、技能专长等属性，背景符合古风。请以JSON对象输出。"
    ),
    "note": (
        "请为{{ characterName | default('女主', true) }}随机生成一篇年度个人心情手记，"
        "反映当年经历与成长感悟，三句话内。"
    ),
    "mail": (
        "生成一份古风家书（发信人、正文内容、时间），用于{{ characterName | default('主角', true) }}"
        "收到来自亲友的信件。请按“发信人：…”“时间：…”“正文：…”分行输出。"
    ),
    "relationship": (
        "输出家族及主要相关人物、身份及与主角的亲密度分数（0-100）、关系描述，"
        "用于构建设计人物关系图谱。请以JSON对象输出，包含nodes与links。"
    ),
    "asset-skills": (
        "生成主角年度资产增减记录及技能成长情况，突出具体数值变化与原因。请以JSON对象输出。"
    ),
    "history": (
        "请简要回顾并总结{{ characterName | default('主角', true) }}一年内所有大事件/家庭/互动/成长变化，"
        "木讷但不要省略重要影响。"
    ),
    "explore": (
        "生成一次在家宅{{ area | default('任意场所', true) }}的探索事件描述，包括主角/家人/事件变化。"
    ),
    GENERIC_TEMPLATE_KEY: "请生成一段与古风人生模拟相关的内容。",
}


class PromptTemplateError(ConfigError):
    """Template could not be compiled or rendered."""

    error_class = "PromptTemplateError"
    remediation = "Fix the prompt template or the context values passed to it."


class PromptLibrary:
    """
    Content-type to template mapping with compiled-template caching.

    Unknown content types render the generic template.
    """

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._lock = threading.RLock()
        self._sources: dict[str, str] = dict(DEFAULT_TEMPLATES)
        self._sources.update(overrides or {})
        self._compiled: dict[str, Template] = {}
        self._jinja = Environment(undefined=StrictUndefined, autoescape=False)
        self._jinja.filters["json"] = json_text

    @classmethod
    def from_directory(cls, path: str | Path) -> "PromptLibrary":
        """Load `<content-type>.j2` files from `path` over the defaults."""
        root = Path(path)
        if not root.is_dir():
            raise PromptTemplateError(f"prompt directory not found: {root}")
        overrides = {
            item.stem: item.read_text(encoding="utf-8")
            for item in sorted(root.glob("*.j2"))
            if item.is_file()
        }
        logger.debug("Loaded %s prompt template(s) from %s", len(overrides), root)
        return cls(overrides)

    def source(self, content_type: str) -> str:
        return self._sources.get(content_type, self._sources[GENERIC_TEMPLATE_KEY])

    def set_template(self, content_type: str, text: str) -> None:
        with self._lock:
            self._sources[content_type] = text

    def render(self, content_type: str, context: Mapping[str, Any] | None = None) -> str:
        """Render the prompt for `content_type`; raises `PromptTemplateError`."""
        text = self.source(content_type)
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
        with self._lock:
            template = self._compiled.get(digest)
        if template is None:
            try:
                compiled = self._jinja.from_string(text)
            except TemplateError as exc:
                raise PromptTemplateError(
                    f"invalid prompt template for '{content_type}': {exc}"
                ) from exc
            with self._lock:
                template = self._compiled.setdefault(digest, compiled)
        try:
            return template.render(dict(context or {})).strip()
        except Exception as exc:
            raise PromptTemplateError(
                f"failed to render prompt for '{content_type}': {exc}"
            ) from exc
