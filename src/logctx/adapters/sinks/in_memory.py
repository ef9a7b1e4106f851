"""In-memory sink.

Keeps assembled entries in a list, or in a bounded ring buffer when
``max_size`` is given. Suitable for testing and for exposing recent logs
from a running service.
"""

from collections import deque

from logctx.adapters.sinks.base import BaseSink, SinkOptions
from logctx.core.encoding.ndjson import encode_logs
from logctx.core.models import LogEntry


class InMemorySink(BaseSink):
    """Sink that stores LogEntry objects in memory.

    All sinks derived with ``with_attrs`` / ``with_group`` append to the
    same buffer.

    Args:
        options: Sink options.
        max_size: Maximum number of entries kept; the oldest entry is
            evicted when full. None keeps everything.
    """

    def __init__(
        self, options: SinkOptions | None = None, max_size: int | None = None
    ) -> None:
        super().__init__(options)
        self._buffer: deque[LogEntry] = deque(maxlen=max_size)

    def emit(self, entry: LogEntry) -> None:
        self._buffer.append(entry)

    @property
    def entries(self) -> list[LogEntry]:
        """Snapshot of stored entries, oldest first."""
        with self._lock:
            return list(self._buffer)

    def read(self, since: float = 0) -> list[LogEntry]:
        """Return entries with timestamp > since, ordered by timestamp."""
        return sorted(
            (e for e in self.entries if e.timestamp > since),
            key=lambda e: e.timestamp,
        )

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    def dump(self) -> str:
        """Encode stored entries as NDJSON."""
        return encode_logs(self.entries, self._options.replace_attr)
