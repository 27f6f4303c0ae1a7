"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Local stand-in content used when the provider cannot answer.

Selection is seeded from the content type and prompt, so the same request
always yields the same payload.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping
from typing import Any

from ..types import JSONObject
from ..utils import sha256_text

_SURNAMES = ("李", "王", "张", "刘", "赵", "陈", "杨", "黄")


def _ctx(context: Mapping[str, Any], key: str, default: str) -> str:
    value = context.get(key)
    return str(value) if value not in (None, "") else default


def _event(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    name = _ctx(context, "characterName", "你")
    return {
        "summary": rng.choice(
            (
                f"春日书会中，{name}展现诗才，一时声名鹊起，结识新友。影响：诗词+5，社交圈扩展。",
                "家族遭遇小变故，父亲外放升任，家庭搬迁新地，需重新适应。影响：家族声望波动。",
                "偶染小疾，卧床数日，母亲悉心照料，姐妹互动增多。影响：健康-10，好感提升。",
                "遇贵人介绍，获上乘刺绣机巧，技艺大进。刺绣+8。",
            )
        )
    }


def _character(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    name = rng.choice(_SURNAMES) + rng.choice(("昭华", "昭宁", "昭仪", "昭媛", "昭容"))
    age = rng.randint(12, 21)
    talent = "天赋异禀，" if rng.random() < 0.4 else "平凡出众，"
    hobby = rng.choice(("爱好读书", "乐于交友", "思虑周密", "喜静好诗"))
    return {
        "name": name,
        "age": age,
        "personality": rng.choice(("温柔贤淑", "活泼开朗", "内向细腻", "自信果断", "知书达理")),
        "appearance": rng.choice(("国色天香", "眉清目秀", "清新脱俗", "小家碧玉")),
        "skills": {"poetry": rng.randint(0, 79), "embroidery": rng.randint(0, 79)},
        "desc": f"{name}，{age}岁，{talent}{hobby}",
    }


def _dialogue(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    speaker = _ctx(context, "speaker", "姐姐")
    addressee = _ctx(context, "addressee", "妹妹")
    first = rng.choice(
        (
            "今天天气真好，不如去后花园走走吧？",
            "妹妹刺绣进步很快呢，要继续努力哦！",
            "今晚母亲可能会讲睡前故事，你来一起听吗？",
        )
    )
    second = rng.choice(("好的！我刚好也有新故事要分享~", "谢谢姐姐表扬！我会继续的。", "太好了，我们一起吧！"))
    return {
        "lines": [
            {"speaker": speaker, "text": first},
            {"speaker": addressee, "text": second},
        ],
        "effect": f"{speaker}与{addressee}关系略升",
    }


def _family(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    return {
        "surname": _ctx(context, "surname", rng.choice(_SURNAMES[:5])),
        "style": rng.choice(("诗书传家", "乐善好施", "清正自守", "重商轻文")),
        "status": rng.choice(("官宦之家", "商贾巨富", "书香门第", "农家小康")),
        "assets": rng.choice(("富裕", "中等", "清贫")),
        "precept": rng.choice(("自强不息", "勤俭持家", "温良恭俭让", "敦亲睦邻")),
        "members": [
            {"name": "父亲", "personality": "谨慎聪明"},
            {"name": "母亲", "personality": "温婉贤淑"},
            {"name": "主角", "personality": "善良正直"},
        ],
        "dynamic": rng.choice(("家有喜事，全体齐聚一堂", "近期风调雨顺，家业日隆", "长辈筹备家宴，热闹非常")),
    }


def _note(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    return {
        "text": rng.choice(
            ("春日阳光融融，姐妹共度欢喜时光。", "岁岁年年，心境渐变，渐懂人生要义。", "新知渐多，人情练达，颇有成长。")
        )
    }


def _mail(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    return {
        "from": rng.choice(("母亲", "父亲", "好友周兰儿", "表姐王素素")),
        "content": rng.choice(
            (
                "近来天气渐暖，记得添衣注意身体。母亲常念你，家中一切安好，无需挂怀。",
                "听说你最近诗艺精进，望能多加练习，勿负天分。记得来信。",
                "大家都很想你，有空常回家。——父亲",
            )
        ),
        "date": f"{2025 - rng.randint(0, 9)}年{rng.randint(1, 12)}月{rng.randint(1, 25)}日",
    }


def _relationship(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    name = _ctx(context, "characterName", "李昭华")
    return {
        "nodes": [
            {"name": name, "id": "主角", "role": "本人", "intimacy": 100},
            {"name": "母亲", "id": "母", "role": "母亲", "intimacy": rng.randint(80, 95)},
            {"name": "父亲", "id": "父", "role": "父亲", "intimacy": rng.randint(70, 90)},
            {"name": "昭仪", "id": "a", "role": "二姐", "intimacy": rng.randint(70, 90)},
            {"name": "昭媛", "id": "b", "role": "三姐", "intimacy": rng.randint(65, 85)},
            {"name": "昭宁", "id": "c", "role": "四妹", "intimacy": rng.randint(70, 90)},
        ],
        "links": [
            {"from": "主角", "to": "母", "label": "母女"},
            {"from": "主角", "to": "a", "label": "姐妹"},
            {"from": "母", "to": "父", "label": "夫妻"},
        ],
    }


def _asset_skills(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    skills = []
    for skill in ("诗词", "刺绣"):
        before = rng.randint(50, 75)
        gain = rng.randint(1, 9)
        skills.append({"name": skill, "before": before, "after": before + gain, "gain": f"+{gain}"})
    return {
        "asset": {
            "change": f"+{rng.choice((10, 20, 30, 50))}两",
            "reason": rng.choice(("贩卖手工作品", "理财有方", "长辈赏赐")),
        },
        "skills": skills,
        "summary": "今年家中收支平衡，生活安稳，技能微有进步。",
    }


def _history(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    items = ["参加城中书会，收获友谊", "家族搬迁，结识新邻", "完成母亲交办家事", "身体小恙，恢复如初"]
    rng.shuffle(items)
    return {"summary": "；".join(items) + "。"}


def _explore(rng: random.Random, context: Mapping[str, Any]) -> JSONObject:
    area = _ctx(context, "area", "后花园")
    finding = rng.choice(
        (
            "发现一只慵懒的猫，每到傍晚便守在秋千下",
            "拾到一枚旧年的银簪，簪尾刻着小字",
            "撞见丫鬟们在廊下斗草，笑声不断",
        )
    )
    return {"summary": f"你在{area}{finding}，偶遇妹妹，谈笑片刻，心情大好。"}


FALLBACK_BUILDERS: dict[str, Callable[[random.Random, Mapping[str, Any]], JSONObject]] = {
    "event": _event,
    "character": _character,
    "dialogue": _dialogue,
    "family": _family,
    "note": _note,
    "mail": _mail,
    "relationship": _relationship,
    "asset-skills": _asset_skills,
    "history": _history,
    "explore": _explore,
}


def fallback_seed(content_type: str, prompt: str) -> int:
    return int(sha256_text(f"{content_type}\n{prompt}")[:16], 16)


def fallback_payload(
    content_type: str,
    prompt: str,
    context: Mapping[str, Any] | None = None,
) -> JSONObject:
    """Deterministic stand-in payload for `content_type`."""
    rng = random.Random(fallback_seed(content_type, prompt))
    builder = FALLBACK_BUILDERS.get(content_type)
    if builder is None:
        return {"text": f"AI模拟内容：{content_type}"}
    return builder(rng, context or {})
