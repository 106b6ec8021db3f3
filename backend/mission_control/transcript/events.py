"""Transcript layer: total decoding of loosely-typed JSONL events into tagged content items."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal, Union

_TOOL_CALL_KINDS = frozenset({"toolCall", "tool_use", "tool_call", "function_call"})
_TOOL_RESULT_KINDS = frozenset({"toolResult", "tool_result"})
_TOOL_RESULT_ROLES = frozenset({"toolResult", "tool_result", "tool"})
_MAX_TOKEN_COUNT = 2**63
_MAX_TEXT_DEPTH = 32


@dataclass(frozen=True)
class TextItem:
    text: str
    kind: Literal["text"] = "text"


@dataclass(frozen=True)
class ThinkingItem:
    text: str
    kind: Literal["thinking"] = "thinking"


@dataclass(frozen=True)
class ToolCallItem:
    name: str
    arguments: Any = None
    kind: Literal["tool_call"] = "tool_call"


@dataclass(frozen=True)
class ToolResultItem:
    output: str
    is_error: bool = False
    kind: Literal["tool_result"] = "tool_result"


@dataclass(frozen=True)
class IgnoredItem:
    """Content item with a `type` this service does not render."""

    source_kind: str
    kind: Literal["ignored"] = "ignored"


ContentItem = Union[TextItem, ThinkingItem, ToolCallItem, ToolResultItem, IgnoredItem]


@dataclass(frozen=True)
class TranscriptEvent:
    """One decoded transcript line; `raw` keeps the original JSON object untouched."""

    raw: dict[str, Any]
    role: str | None
    timestamp: Any
    items: tuple[ContentItem, ...]
    total_tokens: int | None
    model: str | None

    @property
    def is_assistant(self) -> bool:
        return self.role == "assistant"

    @property
    def has_tool_call(self) -> bool:
        return any(isinstance(item, ToolCallItem) for item in self.items)


def _as_text(value: Any, depth: int = 0) -> str:
    if value is None or depth > _MAX_TEXT_DEPTH:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts = []
        for part in value:
            if isinstance(part, dict):
                parts.append(_as_text(part.get("text", ""), depth + 1))
            else:
                parts.append(_as_text(part, depth + 1))
        return "\n".join(part for part in parts if part)
    if isinstance(value, dict):
        return ""
    return str(value)


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if abs(value) < _MAX_TOKEN_COUNT else None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def _is_error(payload: dict[str, Any]) -> bool:
    return bool(payload.get("isError") or payload.get("is_error"))


def decode_item(raw: Any, *, role: str | None = None) -> ContentItem:
    """Map one content entry to its tagged variant; unknown shapes become `IgnoredItem`."""
    if isinstance(raw, str):
        if role in _TOOL_RESULT_ROLES:
            return ToolResultItem(output=raw)
        return TextItem(text=raw)
    if not isinstance(raw, dict):
        return IgnoredItem(source_kind=type(raw).__name__)

    kind = raw.get("type")
    if not isinstance(kind, str):
        return IgnoredItem(source_kind=type(kind).__name__ if kind is not None else "unknown")
    if kind == "text":
        text = _as_text(raw.get("text"))
        if role in _TOOL_RESULT_ROLES:
            return ToolResultItem(output=text)
        return TextItem(text=text)
    if kind == "thinking":
        return ThinkingItem(text=_as_text(raw.get("thinking") or raw.get("text")))
    if kind in _TOOL_CALL_KINDS:
        function = raw.get("function") if isinstance(raw.get("function"), dict) else {}
        name = raw.get("name") or function.get("name") or "tool"
        arguments = raw.get("arguments", raw.get("input", function.get("arguments")))
        return ToolCallItem(name=str(name), arguments=arguments)
    if kind in _TOOL_RESULT_KINDS:
        output = raw.get("content", raw.get("output", raw.get("text")))
        return ToolResultItem(output=_as_text(output), is_error=_is_error(raw))
    return IgnoredItem(source_kind=kind)


def decode_event(raw: dict[str, Any]) -> TranscriptEvent:
    """Decode a parsed JSON object; never raises for any dict input."""
    message = raw.get("message")
    body = message if isinstance(message, dict) else raw

    role = body.get("role") or raw.get("role")
    role = str(role) if role is not None else None

    content = body.get("content")
    if isinstance(content, list):
        entries = content
    elif content is None or content == "":
        entries = []
    else:
        entries = [content]
    items = [decode_item(entry, role=role) for entry in entries]
    if role in _TOOL_RESULT_ROLES and _is_error(body):
        items = [
            ToolResultItem(output=item.output, is_error=True)
            if isinstance(item, ToolResultItem)
            else item
            for item in items
        ]

    usage = body.get("usage") if isinstance(body.get("usage"), dict) else raw.get("usage")
    total_tokens = None
    if isinstance(usage, dict):
        total_tokens = _as_int(usage.get("totalTokens", usage.get("total_tokens")))

    model = body.get("model") or raw.get("model")
    return TranscriptEvent(
        raw=raw,
        role=role,
        timestamp=raw.get("timestamp") or body.get("timestamp") or raw.get("time"),
        items=tuple(items),
        total_tokens=total_tokens,
        model=str(model) if model else None,
    )
