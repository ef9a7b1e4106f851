"""NDJSON encoder for log entries.

Objects are assembled by hand rather than through a dict so that
duplicate keys survive, in order.
"""

import json
import math
from collections.abc import Iterable
from typing import Any

from logctx.core.encoding.text import entry_attrs, format_time
from logctx.core.models import (
    Attribute,
    Kind,
    LogEntry,
    ReplaceAttr,
    Value,
)


def _encode_scalar(value: Value) -> str:
    kind = value.kind
    payload: Any = value.payload
    if kind is Kind.BOOL:
        return "true" if payload else "false"
    if kind is Kind.INT:
        return str(payload)
    if kind is Kind.FLOAT:
        if math.isfinite(payload):
            return json.dumps(payload)
        return json.dumps(str(payload))
    if kind is Kind.DURATION:
        return json.dumps(payload.total_seconds())
    if kind is Kind.TIME:
        return json.dumps(format_time(payload))
    if kind is Kind.STRING:
        return json.dumps(payload, ensure_ascii=False)
    try:
        return json.dumps(payload, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError):
        return json.dumps(str(payload), ensure_ascii=False)


def _members(
    attrs: Iterable[Attribute],
    replace_attr: ReplaceAttr | None,
    groups: tuple[str, ...],
) -> list[str]:
    members: list[str] = []
    for attribute in attrs:
        if not attribute.is_group and replace_attr is not None:
            replaced = replace_attr(groups, attribute)
            if replaced is None:
                continue
            attribute = replaced
        if attribute.is_group:
            if not attribute.key:
                members.extend(_members(attribute.value.attrs, replace_attr, groups))
                continue
            inner = _members(
                attribute.value.attrs, replace_attr, groups + (attribute.key,)
            )
            if inner:
                members.append(f"{json.dumps(attribute.key)}:{{{','.join(inner)}}}")
            continue
        members.append(f"{json.dumps(attribute.key)}:{_encode_scalar(attribute.value)}")
    return members


def encode_attrs(
    attrs: Iterable[Attribute], replace_attr: ReplaceAttr | None = None
) -> str:
    """Encode attributes as one JSON object; groups become nested objects."""
    return "{" + ",".join(_members(attrs, replace_attr, ())) + "}"


def encode_logs(
    entries: Iterable[LogEntry], replace_attr: ReplaceAttr | None = None
) -> str:
    """Encode log entries to newline-delimited JSON.

    Args:
        entries: An iterable of LogEntry objects.
        replace_attr: Optional hook applied to every leaf attribute.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no entries.
    """
    lines = [encode_attrs(entry_attrs(entry), replace_attr) for entry in entries]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
