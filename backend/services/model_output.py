"""
Turning a text-generation reply into narrative fields.

extract_json_object is the one place that decides what part of a reply is
JSON: everything from the first "{" to the last "}". Replies with two
separate objects, or prose with stray braces, decode as invalid and fall back
to the raw text.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from core.ids import generate_id
from schemas.insights import Action, Driver, Insight

logger = logging.getLogger(__name__)


@dataclass
class Narrative:
    semantic_context: str = ""
    key_highlights: list[str] = field(default_factory=list)
    drivers: list[Driver] = field(default_factory=list)
    insights: list[Insight] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def extract_json_object(text: str) -> dict[str, Any] | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def raw_text_fallback(text: str) -> dict[str, Any]:
    return {
        "semantic_context": text,
        "key_highlights": [],
        "drivers": [],
        "insights": [],
        "actions": [],
    }


def parse_model_reply(text: str) -> dict[str, Any]:
    """Decoded JSON object from the reply, or the raw text as semantic_context. Never raises."""
    parsed = extract_json_object(text)
    if parsed is None:
        logger.warning("Model reply has no decodable JSON object; using raw text fallback")
        return raw_text_fallback(text)
    return parsed


def _build_items(model, items, prefix: str | None, label: str, warnings: list[str]) -> list:
    if not isinstance(items, list):
        if items is not None:
            warnings.append(f"{label}: expected a list, got {type(items).__name__}")
        return []
    built = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            warnings.append(f"{label}[{index}]: expected an object")
            continue
        data = dict(item)
        if prefix and not data.get("id"):
            data["id"] = generate_id(prefix)
        try:
            built.append(model.model_validate(data))
        except ValidationError as exc:
            warnings.append(f"{label}[{index}]: dropped ({exc.error_count()} validation error(s))")
    return built


def normalize_narrative(parsed: dict[str, Any], max_insights: int | None = None) -> Narrative:
    """Coerce a parsed reply into typed narrative fields; invalid items are dropped with a warning."""
    warnings: list[str] = []

    semantic_context = parsed.get("semantic_context")
    if not isinstance(semantic_context, str):
        warnings.append("semantic_context: missing or not a string")
        semantic_context = "" if semantic_context is None else json.dumps(semantic_context, ensure_ascii=False)

    highlights = parsed.get("key_highlights")
    if isinstance(highlights, list):
        key_highlights = [str(h) for h in highlights if h is not None]
    else:
        if highlights is not None:
            warnings.append("key_highlights: expected a list")
        key_highlights = []

    insights = _build_items(Insight, parsed.get("insights"), "insight", "insights", warnings)
    if max_insights is not None:
        insights = insights[: max(max_insights, 0)]

    return Narrative(
        semantic_context=semantic_context,
        key_highlights=key_highlights,
        drivers=_build_items(Driver, parsed.get("drivers"), None, "drivers", warnings),
        insights=insights,
        actions=_build_items(Action, parsed.get("actions"), "action", "actions", warnings),
        warnings=warnings,
    )
