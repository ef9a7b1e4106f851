"""logfmt-style text encoder.

Each record becomes one line of ``key=value`` pairs. Group members are
written with dotted keys (``group.key=value``).
"""

import json
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from logctx.core.levels import level_name
from logctx.core.models import (
    Attribute,
    Kind,
    LogEntry,
    ReplaceAttr,
    Value,
    iter_leaves,
    string,
    timestamp,
)


def format_time(value: datetime) -> str:
    """Render a datetime as ISO-8601 with millisecond precision."""
    text = value.isoformat(timespec="milliseconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def time_from_timestamp(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


def _needs_quoting(text: str) -> bool:
    if not text:
        return True
    for ch in text:
        if ch in ' ="\\' or not ch.isprintable():
            return True
    return False


def _quote(text: str) -> str:
    if _needs_quoting(text):
        return json.dumps(text, ensure_ascii=False)
    return text


def format_value(value: Value) -> str:
    """Render a non-group value as text."""
    kind = value.kind
    payload: Any = value.payload
    if kind is Kind.STRING:
        return _quote(payload)
    if kind is Kind.BOOL:
        return "true" if payload else "false"
    if kind is Kind.INT or kind is Kind.FLOAT:
        return str(payload)
    if kind is Kind.DURATION:
        return _quote(str(payload))
    if kind is Kind.TIME:
        return format_time(payload)
    if kind is Kind.GROUP:
        raise ValueError("group values are flattened, not formatted")
    return _quote(str(payload))


def encode_text(
    attrs: Iterable[Attribute], replace_attr: ReplaceAttr | None = None
) -> str:
    """Encode attributes as a single line (without trailing newline).

    Args:
        attrs: Attributes to encode, groups nested.
        replace_attr: Optional hook applied to every leaf attribute.

    Returns:
        Space-separated ``key=value`` pairs.
    """
    parts = []
    for path, leaf in iter_leaves(attrs, replace_attr):
        key = ".".join(path + (leaf.key,))
        parts.append(f"{_quote(key)}={format_value(leaf.value)}")
    return " ".join(parts)


def entry_attrs(entry: LogEntry) -> list[Attribute]:
    """Built-in fields followed by the entry's own attributes."""
    return [
        timestamp("time", time_from_timestamp(entry.timestamp)),
        string("level", level_name(entry.level)),
        string("msg", entry.message),
        *entry.attrs,
    ]


def encode_entry(entry: LogEntry, replace_attr: ReplaceAttr | None = None) -> str:
    """Encode one entry as a text line, newline included."""
    return encode_text(entry_attrs(entry), replace_attr) + "\n"
