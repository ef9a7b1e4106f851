"""Shared test fixtures for all test modules."""

import io
from collections.abc import Callable, Iterator

import pytest

import logctx
from logctx.adapters.sinks import InMemorySink, SinkOptions, TextSink
from tests.helpers import drop_time


@pytest.fixture
def memory_sink() -> InMemorySink:
    """Fresh in-memory sink at the default INFO threshold."""
    return InMemorySink()


@pytest.fixture
def text_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def text_sink(text_buffer: io.StringIO) -> TextSink:
    """Text sink writing to ``text_buffer`` without the time field."""
    return TextSink(text_buffer, SinkOptions(replace_attr=drop_time))


@pytest.fixture
def check_output(text_buffer: io.StringIO) -> Callable[[str], None]:
    """Assert on (and reset) what was written to ``text_buffer``.

    Usage:
        def test_something(text_sink, check_output):
            ...
            check_output("level=INFO msg=hi")
            check_output("")  # nothing written
    """

    def _check(want: str) -> None:
        got = text_buffer.getvalue()
        text_buffer.seek(0)
        text_buffer.truncate()
        if want:
            want += "\n"
        assert got == want

    return _check


@pytest.fixture
def default_text_logger(text_sink: TextSink) -> Iterator[TextSink]:
    """Install a text sink as the default logger, restoring the original after."""
    original = logctx.default()
    logctx.set_default(logctx.Logger(text_sink))
    yield text_sink
    logctx.set_default(original)


@pytest.fixture
def background() -> logctx.Context:
    return logctx.Context.background()
