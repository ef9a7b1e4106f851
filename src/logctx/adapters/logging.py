"""Sink adapter for Python's standard library logging module.

This adapter forwards records to a ``logging.Logger`` so that logctx can
sit on top of an existing handler/formatter configuration.
"""

import logging

from logctx.adapters.sinks.base import BaseSink, SinkOptions
from logctx.core.levels import INFO
from logctx.core.models import LogEntry, Record
from logctx.core.ports import Carrier

# Standard LogRecord attributes that must not be overwritten by extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "attributes",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


def to_stdlib_level(level: int) -> int:
    """Map a logctx level onto the stdlib scale (DEBUG=10 ... ERROR=40)."""
    return logging.INFO + round((level - INFO) * 2.5)


def from_stdlib_level(levelno: int) -> int:
    """Inverse of to_stdlib_level, rounded to the nearest integer level."""
    return INFO + round((levelno - logging.INFO) / 2.5)


class StdlibSink(BaseSink):
    """Sink that forwards records to a stdlib logger.

    The threshold comes from the stdlib logger (``isEnabledFor``); the
    ``level`` in options is not used. Attributes are attached to the
    LogRecord both as a flat ``(dotted key, value)`` list under
    ``record.attributes`` and, where the key does not clash with a
    standard LogRecord field, as individual record attributes.

    Example:
        ```python
        logging.basicConfig(level=logging.INFO)
        sink = StdlibSink(logging.getLogger("app"))
        logger = Logger(wrap_sink(sink))
        ```
    """

    def __init__(
        self, logger: logging.Logger, options: SinkOptions | None = None
    ) -> None:
        super().__init__(options)
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def enabled(self, context: Carrier | None, level: int) -> bool:
        return self._logger.isEnabledFor(to_stdlib_level(level))

    def handle(self, record: Record) -> None:
        # stdlib handlers do their own locking
        self.emit(self.assemble(record))

    def emit(self, entry: LogEntry) -> None:
        attributes = entry.attributes
        extra: dict[str, object] = {"attributes": attributes}
        for key, value in attributes:
            if key not in _STANDARD_LOGRECORD_ATTRS:
                extra[key] = value
        record = self._logger.makeRecord(
            self._logger.name,
            to_stdlib_level(entry.level),
            fn="",
            lno=0,
            msg=entry.message,
            args=(),
            exc_info=None,
            extra=extra,
        )
        record.created = entry.timestamp
        record.msecs = (entry.timestamp - int(entry.timestamp)) * 1000
        self._logger.handle(record)
