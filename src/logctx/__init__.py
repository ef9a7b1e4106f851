"""logctx: carry structured log attributes and level overrides in a context.

Example:
    ```python
    import logctx

    logctx.wrap_default()
    ctx = logctx.add_attributes(logctx.Context.background(), "request_id", "1234")
    logctx.info(ctx, "processing request")

    ctx = logctx.set_minimum_level(ctx, logctx.DEBUG)
    logctx.debug(ctx, "low-level information")
    ```
"""

from logctx.adapters.logging import StdlibSink
from logctx.adapters.sinks import InMemorySink, JSONSink, SinkOptions, TextSink
from logctx.core.carrier import Context
from logctx.core.enrichment import (
    CarrierState,
    add_attributes,
    args_to_attrs,
    resolve,
    set_minimum_level,
)
from logctx.core.handler import EnrichingHandler, GroupFrame, wrap_sink
from logctx.core.levels import DEBUG, ERROR, INFO, WARN, level_name, parse_level
from logctx.core.models import (
    Attribute,
    Kind,
    LogEntry,
    Record,
    Value,
    any_attr,
    attr,
    boolean,
    duration,
    floating,
    group,
    integer,
    string,
    timestamp,
)
from logctx.core.ports import Carrier, Sink
from logctx.logger import (
    Logger,
    debug,
    default,
    error,
    info,
    log,
    set_default,
    warn,
    wrap_default,
)

__all__ = [
    # Levels
    "DEBUG",
    "INFO",
    "WARN",
    "ERROR",
    "level_name",
    "parse_level",
    # Models
    "Attribute",
    "Kind",
    "LogEntry",
    "Record",
    "Value",
    "any_attr",
    "attr",
    "boolean",
    "duration",
    "floating",
    "group",
    "integer",
    "string",
    "timestamp",
    # Ports
    "Carrier",
    "Sink",
    # Carrier and enrichment
    "Context",
    "CarrierState",
    "add_attributes",
    "args_to_attrs",
    "resolve",
    "set_minimum_level",
    # Handler
    "EnrichingHandler",
    "GroupFrame",
    "wrap_sink",
    # Logger
    "Logger",
    "default",
    "set_default",
    "wrap_default",
    "log",
    "debug",
    "info",
    "warn",
    "error",
    # Sinks
    "SinkOptions",
    "TextSink",
    "JSONSink",
    "InMemorySink",
    "StdlibSink",
]
