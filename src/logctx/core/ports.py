"""Port interfaces for sinks and carriers.

These protocols define the contracts that backends and propagation
primitives must satisfy. The core depends only on these interfaces,
not on concrete implementations.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from logctx.core.models import Attribute, Record


@runtime_checkable
class Carrier(Protocol):
    """Port for scoped key/value propagation.

    Examples: logctx.Context, or any request-scoped object exposing the
    same two methods.
    """

    def with_value(self, key: Any, value: Any) -> "Carrier":
        """Return a derived carrier in which ``key`` maps to ``value``."""
        ...

    def value(self, key: Any) -> Any | None:
        """Return the value for ``key``, or None if absent."""
        ...


@runtime_checkable
class Sink(Protocol):
    """Port for structured-logging backends.

    Adapters implementing this protocol own formatting and writing.
    Examples: TextSink, JSONSink, InMemorySink, StdlibSink.
    """

    def enabled(self, context: Carrier | None, level: int) -> bool:
        """Report whether records at ``level`` would be handled.

        Args:
            context: The carrier active at the call site. Plain sinks
                ignore it; decorating sinks may consult it.
            level: Integer severity.
        """
        ...

    def handle(self, record: Record) -> Any:
        """Process a record. Errors propagate to the caller."""
        ...

    def with_attrs(self, attrs: Sequence[Attribute]) -> "Sink":
        """Return a sink that includes ``attrs`` in every record."""
        ...

    def with_group(self, name: str) -> "Sink":
        """Return a sink that nests subsequent attributes under ``name``."""
        ...
