"""Sink decorator that merges carrier state into every record.

The EnrichingHandler keeps its own stack of pending groups instead of
forwarding ``with_group`` to the wrapped sink. That way attributes stored
in a carrier can be written at the top level of a record while call-site
attributes still nest under their groups.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from logctx.core.enrichment import resolve
from logctx.core.models import Attribute, Record, group
from logctx.core.ports import Carrier, Sink


@dataclass(frozen=True)
class GroupFrame:
    """A group opened with ``with_group`` but not yet handed to the sink.

    Attributes:
        name: Group name.
        attrs: Attributes bound inside this group with ``with_attrs``.
    """

    name: str
    attrs: tuple[Attribute, ...] = ()


@dataclass(frozen=True)
class EnrichingHandler:
    """Wraps a Sink with support for carrier attributes and level overrides.

    Instances are immutable. ``with_attrs`` and ``with_group`` return new
    handlers that share the wrapped sink, so handlers derived from a common
    parent evolve independently.

    Attributes:
        sink: The wrapped backend.
        groups: Pending groups, outermost first.
    """

    sink: Sink
    groups: tuple[GroupFrame, ...] = ()

    def enabled(self, context: Carrier | None, level: int) -> bool:
        """Report whether ``level`` is enabled for ``context``.

        A level override found in the carrier is authoritative; the sink's
        own threshold is only consulted when there is none.
        """
        state = resolve(context)
        if state.has_level:
            return level >= state.level
        return self.sink.enabled(context, level)

    def handle(self, record: Record) -> Any:
        """Rebuild pending groups around the record and add carrier attributes."""
        if self.groups:
            record = record.with_attrs((self._nest(record.attrs),))
        state = resolve(record.context)
        return self.sink.handle(record.add_attrs(*state.attrs))

    def _nest(self, attrs: tuple[Attribute, ...]) -> Attribute:
        innermost = self.groups[-1]
        result = group(innermost.name, *innermost.attrs, *attrs)
        for frame in reversed(self.groups[:-1]):
            result = group(frame.name, *frame.attrs, result)
        return result

    def with_attrs(self, attrs: Sequence[Attribute]) -> "EnrichingHandler":
        if not attrs:
            return self
        if not self.groups:
            return EnrichingHandler(self.sink.with_attrs(attrs))
        last = self.groups[-1]
        frame = GroupFrame(last.name, last.attrs + tuple(attrs))
        return EnrichingHandler(self.sink, self.groups[:-1] + (frame,))

    def with_group(self, name: str) -> "EnrichingHandler":
        if not name:
            return self
        return EnrichingHandler(self.sink, self.groups + (GroupFrame(name),))


def wrap_sink(sink: Sink) -> Sink:
    """Wrap ``sink`` so it honors carrier attributes and level overrides.

    Wrapping an already wrapped sink returns it unchanged.
    """
    if isinstance(sink, EnrichingHandler):
        return sink
    return EnrichingHandler(sink)
