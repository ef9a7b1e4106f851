"""Helpers shared between test modules."""

from logctx.core.models import Attribute


def drop_time(groups: tuple[str, ...], attribute: Attribute) -> Attribute | None:
    """replace_attr hook removing the top-level time field."""
    if not groups and attribute.key == "time":
        return None
    return attribute
