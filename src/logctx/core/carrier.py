"""Immutable scoped key/value carrier.

A ``Context`` is a chain of key/value links. Deriving a child with
``with_value`` never touches the parent, so the same parent can be shared
between threads or tasks and extended independently by each of them.
"""

from __future__ import annotations

from typing import Any


class Context:
    """Scoped, immutable key/value carrier.

    Example:
        ```python
        ctx = Context.background()
        child = ctx.with_value("tenant", "acme")
        child.value("tenant")  # "acme"
        ctx.value("tenant")    # None
        ```
    """

    __slots__ = ("_parent", "_key", "_value")

    def __init__(
        self,
        parent: Context | None = None,
        key: Any = None,
        value: Any = None,
    ) -> None:
        self._parent = parent
        self._key = key
        self._value = value

    @classmethod
    def background(cls) -> Context:
        """Return the empty root carrier."""
        return _BACKGROUND

    def with_value(self, key: Any, value: Any) -> Context:
        """Return a child carrier in which ``key`` maps to ``value``."""
        if key is None:
            raise TypeError("carrier key must not be None")
        return Context(self, key, value)

    def value(self, key: Any) -> Any | None:
        """Look up ``key``, walking from the most specific link outward."""
        node: Context | None = self
        while node is not None:
            if node._key is not None and node._key == key:
                return node._value
            node = node._parent
        return None

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, name):
            raise AttributeError("Context is immutable")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        depth = 0
        node = self._parent
        while node is not None:
            depth += 1
            node = node._parent
        return f"<Context depth={depth}>"


_BACKGROUND = Context()
