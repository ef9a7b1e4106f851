"""Attributes and level overrides carried by a context.

State is stored under a single private key of the carrier. Each call to
``add_attributes`` or ``set_minimum_level`` publishes a new CarrierState
on a derived carrier; published states are never modified.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from logctx.core.carrier import Context
from logctx.core.models import Attribute, attr, string
from logctx.core.ports import Carrier

BADKEY = "!BADKEY"


class _StateKey:
    """Private carrier key; only identity matters."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<logctx state key>"


_STATE_KEY = _StateKey()


@dataclass(frozen=True)
class CarrierState:
    """Enrichment state attached to a carrier.

    Attributes:
        attrs: Accumulated attributes, oldest first.
        level: Minimum level override, or None when not overridden.
    """

    attrs: tuple[Attribute, ...] = ()
    level: int | None = None

    @property
    def has_level(self) -> bool:
        return self.level is not None


EMPTY_STATE = CarrierState()


def resolve(context: Carrier | None) -> CarrierState:
    """Return the most specific CarrierState reachable from ``context``.

    A None carrier, or one without attached state, resolves to the empty
    state.
    """
    if context is None:
        return EMPTY_STATE
    state = context.value(_STATE_KEY)
    if isinstance(state, CarrierState):
        return state
    return EMPTY_STATE


def add_attributes(context: Carrier | None, *args: Any) -> Carrier:
    """Attach attributes to a derived carrier.

    Arguments are parsed like a log call: ``"key", value`` pairs and
    prebuilt Attribute objects, in any mix. A None carrier is treated as the background carrier.

    Example:
        ```python
        ctx = add_attributes(ctx, "request_id", "abc123")
        ```
    """
    if context is None:
        context = Context.background()
    current = resolve(context)
    new_state = CarrierState(
        attrs=current.attrs + tuple(args_to_attrs(args)),
        level=current.level,
    )
    return context.with_value(_STATE_KEY, new_state)


def set_minimum_level(context: Carrier | None, level: int) -> Carrier:
    """Override the minimum level for every log call using the derived carrier.

    The override replaces the sink's own threshold; it can lower it as well
    as raise it.
    """
    if context is None:
        context = Context.background()
    current = resolve(context)
    return context.with_value(_STATE_KEY, CarrierState(current.attrs, level))


def args_to_attr(args: Sequence[Any]) -> tuple[Attribute, Sequence[Any]]:
    """Turn a prefix of the non-empty ``args`` into an Attribute.

    Returns:
        The attribute and the unconsumed remainder of ``args``.
    """
    first = args[0]
    if isinstance(first, str):
        if len(args) == 1:
            return string(BADKEY, first), ()
        return attr(first, args[1]), args[2:]
    if isinstance(first, Attribute):
        return first, args[1:]
    return attr(BADKEY, first), args[1:]


def args_to_attrs(args: Sequence[Any]) -> list[Attribute]:
    """Parse a variadic argument list into attributes. Never raises."""
    attrs: list[Attribute] = []
    while args:
        attribute, args = args_to_attr(args)
        attrs.append(attribute)
    return attrs
