"""Sinks that write encoded lines to a text stream."""

from typing import TextIO

from logctx.adapters.sinks.base import BaseSink, SinkOptions
from logctx.core.encoding.ndjson import encode_attrs
from logctx.core.encoding.text import encode_entry, entry_attrs
from logctx.core.models import LogEntry


class _StreamSink(BaseSink):
    def __init__(self, stream: TextIO, options: SinkOptions | None = None) -> None:
        if not callable(getattr(stream, "write", None)):
            raise TypeError("stream must have a write() method")
        super().__init__(options)
        self._stream = stream

    def _write(self, line: str) -> None:
        self._stream.write(line)
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()


class TextSink(_StreamSink):
    """Writes records as ``key=value`` lines.

    Example:
        ```python
        sink = TextSink(sys.stderr, SinkOptions(level=DEBUG))
        logger = Logger(wrap_sink(sink))
        ```
    """

    def emit(self, entry: LogEntry) -> None:
        self._write(encode_entry(entry, self._options.replace_attr))


class JSONSink(_StreamSink):
    """Writes records as newline-delimited JSON objects."""

    def emit(self, entry: LogEntry) -> None:
        line = encode_attrs(entry_attrs(entry), self._options.replace_attr)
        self._write(line + "\n")
