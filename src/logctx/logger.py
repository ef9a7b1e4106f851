"""Logger facade with a mandatory context argument.

Every log call takes the carrier active at the call site as its first
argument, so attributes and level overrides attached with
``add_attributes`` / ``set_minimum_level`` reach the handler.

The module-level functions (``info``, ``error``...) use a process-wide
default logger. Install or replace it once at startup with
``set_default`` / ``wrap_default``; it is not meant to be swapped while
other threads are logging.
"""

import logging
import sys
import time
from typing import Any

from logctx.adapters.sinks import TextSink
from logctx.core.enrichment import args_to_attrs
from logctx.core.handler import wrap_sink
from logctx.core.levels import DEBUG, ERROR, INFO, WARN
from logctx.core.models import Record, string
from logctx.core.ports import Carrier, Sink

ERROR_KEY = "err"

_log = logging.getLogger(__name__)


class Logger:
    """Binds a Sink and exposes carrier-taking emit methods.

    Example:
        ```python
        logger = Logger(wrap_sink(TextSink(sys.stderr)))
        ctx = add_attributes(Context.background(), "request_id", "abc")
        logger.info(ctx, "request started", "path", "/orders")
        ```
    """

    __slots__ = ("_handler",)

    def __init__(self, handler: Sink) -> None:
        self._handler = handler

    @property
    def handler(self) -> Sink:
        return self._handler

    def enabled(self, context: Carrier | None, level: int) -> bool:
        """Report whether a call at ``level`` with ``context`` would be logged."""
        return self._handler.enabled(context, level)

    def with_(self, *args: Any) -> "Logger":
        """Return a Logger that includes ``args`` in every record.

        Arguments are parsed like a log call. The binding is permanent for
        the returned logger and independent of any carrier.
        """
        if not args:
            return self
        return Logger(self._handler.with_attrs(args_to_attrs(args)))

    def with_group(self, name: str) -> "Logger":
        """Return a Logger that nests subsequent attributes under ``name``."""
        if not name:
            return self
        return Logger(self._handler.with_group(name))

    def log(self, context: Carrier | None, level: int, msg: str, *args: Any) -> None:
        """Emit a record at an arbitrary level."""
        if not self._handler.enabled(context, level):
            return
        record = Record(
            timestamp=time.time(),
            level=level,
            message=msg,
            attrs=tuple(args_to_attrs(args)),
            context=context,
        )
        self._handler.handle(record)

    def debug(self, context: Carrier | None, msg: str, *args: Any) -> None:
        self.log(context, DEBUG, msg, *args)

    def info(self, context: Carrier | None, msg: str, *args: Any) -> None:
        self.log(context, INFO, msg, *args)

    def warn(self, context: Carrier | None, msg: str, *args: Any) -> None:
        self.log(context, WARN, msg, *args)

    def error(
        self,
        context: Carrier | None,
        msg: str,
        err: BaseException | None = None,
        *args: Any,
    ) -> None:
        """Emit at ERROR. A non-None ``err`` is appended as ``err=<message>``.

        ``err`` is the third positional argument. Pass None there when
        logging key/value pairs without an error, e.g.
        ``logger.error(ctx, "msg", None, "k", "v")``; otherwise the first
        key would be taken as the error.
        """
        if err is not None:
            args = (*args, string(ERROR_KEY, str(err)))
        self.log(context, ERROR, msg, *args)


def _initial_logger() -> Logger:
    return Logger(TextSink(sys.stderr))


_default = _initial_logger()


def default() -> Logger:
    """Return the process-wide default logger."""
    return _default


def set_default(logger: Logger) -> None:
    """Replace the process-wide default logger. Call at startup."""
    global _default
    _default = logger


def wrap_default() -> None:
    """Wrap the default logger's sink so it honors carrier state.

    Calling it more than once has no further effect.
    """
    current = default().handler
    wrapped = wrap_sink(current)
    if wrapped is not current:
        _log.debug("wrapping default sink %r", current)
        set_default(Logger(wrapped))


def log(context: Carrier | None, level: int, msg: str, *args: Any) -> None:
    default().log(context, level, msg, *args)


def debug(context: Carrier | None, msg: str, *args: Any) -> None:
    default().log(context, DEBUG, msg, *args)


def info(context: Carrier | None, msg: str, *args: Any) -> None:
    default().log(context, INFO, msg, *args)


def warn(context: Carrier | None, msg: str, *args: Any) -> None:
    default().log(context, WARN, msg, *args)


def error(
    context: Carrier | None,
    msg: str,
    err: BaseException | None = None,
    *args: Any,
) -> None:
    default().error(context, msg, err, *args)
