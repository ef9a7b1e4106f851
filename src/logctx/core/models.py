"""Core domain models: attribute values, attributes and log records."""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any


class Kind(enum.Enum):
    """The closed set of attribute value kinds."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DURATION = "duration"
    TIME = "time"
    GROUP = "group"
    ANY = "any"


@dataclass(frozen=True)
class Value:
    """A tagged attribute value.

    Attributes:
        kind: Which variant the payload belongs to.
        payload: The raw value. For GROUP this is a tuple of Attribute.
    """

    kind: Kind
    payload: Any

    @classmethod
    def of(cls, obj: Any) -> Value:
        """Classify an arbitrary Python object into a Value."""
        if isinstance(obj, Value):
            return obj
        # bool is a subclass of int, so it has to be checked first
        if isinstance(obj, bool):
            return cls(Kind.BOOL, obj)
        if isinstance(obj, int):
            return cls(Kind.INT, obj)
        if isinstance(obj, float):
            return cls(Kind.FLOAT, obj)
        if isinstance(obj, str):
            return cls(Kind.STRING, obj)
        if isinstance(obj, timedelta):
            return cls(Kind.DURATION, obj)
        if isinstance(obj, datetime):
            return cls(Kind.TIME, obj)
        return cls(Kind.ANY, obj)

    @property
    def attrs(self) -> tuple[Attribute, ...]:
        """Members of a GROUP value; empty for every other kind."""
        if self.kind is Kind.GROUP:
            return self.payload
        return ()

    def resolve(self) -> Any:
        """Return the plain Python value (a tuple of Attribute for groups)."""
        return self.payload


@dataclass(frozen=True)
class Attribute:
    """A single structured key/value field."""

    key: str
    value: Value

    @property
    def is_group(self) -> bool:
        return self.value.kind is Kind.GROUP


def attr(key: str, value: Any) -> Attribute:
    """Build an attribute, classifying ``value`` automatically."""
    return Attribute(key, Value.of(value))


def string(key: str, value: str) -> Attribute:
    return Attribute(key, Value(Kind.STRING, value))


def integer(key: str, value: int) -> Attribute:
    return Attribute(key, Value(Kind.INT, value))


def floating(key: str, value: float) -> Attribute:
    return Attribute(key, Value(Kind.FLOAT, value))


def boolean(key: str, value: bool) -> Attribute:
    return Attribute(key, Value(Kind.BOOL, value))


def duration(key: str, value: timedelta) -> Attribute:
    return Attribute(key, Value(Kind.DURATION, value))


def timestamp(key: str, value: datetime) -> Attribute:
    return Attribute(key, Value(Kind.TIME, value))


def any_attr(key: str, value: Any) -> Attribute:
    """Build an opaque attribute without classifying the value."""
    return Attribute(key, Value(Kind.ANY, value))


def group(key: str, *members: Attribute) -> Attribute:
    """Build a named group of attributes."""
    return Attribute(key, Value(Kind.GROUP, tuple(members)))


@dataclass(frozen=True)
class Record:
    """A log record produced by a single log call.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Integer severity (see logctx.core.levels).
        message: The log message.
        attrs: Attributes supplied at the call site, in order.
        context: The carrier active at the call site, if any.
    """

    timestamp: float
    level: int
    message: str
    attrs: tuple[Attribute, ...] = field(default_factory=tuple)
    context: Any = None

    def add_attrs(self, *attrs: Attribute) -> Record:
        """Return a copy with ``attrs`` appended after the existing ones."""
        if not attrs:
            return self
        return replace(self, attrs=self.attrs + attrs)

    def with_attrs(self, attrs: tuple[Attribute, ...]) -> Record:
        """Return a copy whose attributes are replaced by ``attrs``."""
        return replace(self, attrs=tuple(attrs))


ReplaceAttr = Callable[[tuple[str, ...], Attribute], "Attribute | None"]


def iter_leaves(
    attrs: Iterable[Attribute],
    replace_attr: ReplaceAttr | None = None,
    groups: tuple[str, ...] = (),
) -> Iterator[tuple[tuple[str, ...], Attribute]]:
    """Walk an attribute tree, yielding ``(group path, leaf attribute)``.

    Empty groups produce nothing; groups with an empty key are inlined
    into their parent. ``replace_attr`` is applied to every leaf and may
    return None to drop it.
    """
    for attribute in attrs:
        if attribute.is_group:
            path = groups + (attribute.key,) if attribute.key else groups
            yield from iter_leaves(attribute.value.attrs, replace_attr, path)
            continue
        if replace_attr is not None:
            replaced = replace_attr(groups, attribute)
            if replaced is None:
                continue
            attribute = replaced
            if attribute.is_group:
                yield from iter_leaves([attribute], None, groups)
                continue
        yield groups, attribute


def flatten(attrs: Iterable[Attribute]) -> list[tuple[str, Any]]:
    """Flatten an attribute tree into ``("group.key", value)`` pairs.

    Duplicate keys are kept, in order.
    """
    return [
        (".".join(path + (leaf.key,)), leaf.value.resolve())
        for path, leaf in iter_leaves(attrs)
    ]


@dataclass(frozen=True)
class LogEntry:
    """A record as seen by a sink, after its own bound attributes and
    groups have been applied.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Integer severity.
        message: The log message.
        attrs: Fully assembled attributes (groups nested).
    """

    timestamp: float
    level: int
    message: str
    attrs: tuple[Attribute, ...] = field(default_factory=tuple)

    @property
    def attributes(self) -> list[tuple[str, Any]]:
        """Flat ``(dotted key, value)`` view of ``attrs``."""
        return flatten(self.attrs)
