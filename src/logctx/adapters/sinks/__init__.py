"""Built-in sink adapters."""

from logctx.adapters.sinks.base import BaseSink, SinkOptions
from logctx.adapters.sinks.in_memory import InMemorySink
from logctx.adapters.sinks.stream import JSONSink, TextSink

__all__ = [
    "BaseSink",
    "InMemorySink",
    "JSONSink",
    "SinkOptions",
    "TextSink",
]
