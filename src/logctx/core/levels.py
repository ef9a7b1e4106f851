"""Severity levels.

Levels are plain integers so that any value between the named anchors is
still ordered correctly (e.g. ``INFO + 2`` sits between INFO and WARN).
"""

import re

DEBUG = -4
INFO = 0
WARN = 4
ERROR = 8

_NAMES = [(ERROR, "ERROR"), (WARN, "WARN"), (INFO, "INFO"), (DEBUG, "DEBUG")]

_ALIASES = {
    "DEBUG": DEBUG,
    "INFO": INFO,
    "WARN": WARN,
    "WARNING": WARN,
    "ERROR": ERROR,
}

_LEVEL_RE = re.compile(r"^\s*([A-Za-z]+)\s*(?:([+-])\s*(\d+))?\s*$")


def level_name(level: int) -> str:
    """Render a level as its anchor name plus an offset.

    Args:
        level: Integer severity.

    Returns:
        "INFO" for an exact anchor, "INFO+2" / "DEBUG-1" otherwise.
    """
    for anchor, name in _NAMES:
        if level >= anchor:
            return _with_offset(name, level - anchor)
    return _with_offset("DEBUG", level - DEBUG)


def _with_offset(name: str, offset: int) -> str:
    if offset == 0:
        return name
    return f"{name}{offset:+d}"


def parse_level(text: str) -> int:
    """Parse a level name such as "info", "WARNING" or "DEBUG+2".

    Raises:
        ValueError: If the text is not a known level name.
    """
    match = _LEVEL_RE.match(text)
    if match is None:
        raise ValueError(f"invalid log level: {text!r}")
    name, sign, offset = match.groups()
    base = _ALIASES.get(name.upper())
    if base is None:
        raise ValueError(f"invalid log level: {text!r}")
    if offset is None:
        return base
    return base + int(offset) if sign == "+" else base - int(offset)
