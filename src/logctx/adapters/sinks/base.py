"""Shared behaviour for the built-in sinks.

A sink keeps the groups opened with ``with_group`` and the attributes
bound with ``with_attrs`` (each remembered together with the group depth
it was bound at). When a record arrives the two are assembled into one
nested attribute list, and the concrete sink writes the resulting
LogEntry.
"""

import copy
import threading
from dataclasses import dataclass
from typing import Any

from logctx.core.levels import INFO
from logctx.core.models import Attribute, LogEntry, Record, ReplaceAttr, group
from logctx.core.ports import Carrier


@dataclass(frozen=True)
class SinkOptions:
    """Configuration shared by the built-in sinks.

    Attributes:
        level: Minimum level handled. Defaults to INFO.
        replace_attr: Hook called with ``(group path, attribute)`` for every
            leaf attribute, including the built-in time/level/msg fields.
            Returns the attribute to write, or None to drop it.
    """

    level: int = INFO
    replace_attr: ReplaceAttr | None = None


class BaseSink:
    """Base class for sinks supporting ``with_attrs`` and ``with_group``.

    Derived sinks share the output target and the lock of the sink they
    were derived from.
    """

    def __init__(self, options: SinkOptions | None = None) -> None:
        self._options = options or SinkOptions()
        self._groups: tuple[str, ...] = ()
        self._bound: tuple[tuple[int, Attribute], ...] = ()
        self._lock = threading.Lock()

    @property
    def options(self) -> SinkOptions:
        return self._options

    def enabled(self, context: Carrier | None, level: int) -> bool:
        return level >= self._options.level

    def with_attrs(self, attrs: Any) -> "BaseSink":
        attrs = tuple(attrs)
        if not attrs:
            return self
        clone = copy.copy(self)
        depth = len(self._groups)
        clone._bound = self._bound + tuple((depth, a) for a in attrs)
        return clone

    def with_group(self, name: str) -> "BaseSink":
        if not name:
            return self
        clone = copy.copy(self)
        clone._groups = self._groups + (name,)
        return clone

    def assemble(self, record: Record) -> LogEntry:
        """Nest bound and record attributes under the open groups."""
        levels: list[list[Attribute]] = [[] for _ in range(len(self._groups) + 1)]
        for depth, attribute in self._bound:
            levels[depth].append(attribute)
        levels[-1].extend(record.attrs)
        attrs = levels[-1]
        for depth in range(len(self._groups) - 1, -1, -1):
            attrs = levels[depth] + [group(self._groups[depth], *attrs)]
        return LogEntry(
            timestamp=record.timestamp,
            level=record.level,
            message=record.message,
            attrs=tuple(attrs),
        )

    def handle(self, record: Record) -> None:
        entry = self.assemble(record)
        with self._lock:
            self.emit(entry)

    def emit(self, entry: LogEntry) -> None:
        """Write an assembled entry. Called with the sink lock held."""
        raise NotImplementedError
