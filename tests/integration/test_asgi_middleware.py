"""Integration tests for the ASGI request context middleware."""

import httpx
import pytest

from logctx.adapters.frameworks.asgi import (
    SCOPE_KEY,
    Receive,
    RequestContextMiddleware,
    Scope,
    Send,
    _get_log_level_for_status,
    context_from_scope,
)
from logctx.adapters.sinks import InMemorySink
from logctx.core.carrier import Context
from logctx.core.enrichment import resolve
from logctx.core.handler import wrap_sink
from logctx.core.levels import DEBUG, ERROR, INFO, WARN
from logctx.logger import Logger

pytestmark = [
    pytest.mark.integration,
    pytest.mark.tier(2),
]


@pytest.fixture
def sink() -> InMemorySink:
    return InMemorySink()


@pytest.fixture
def logger(sink: InMemorySink) -> Logger:
    return Logger(wrap_sink(sink))


def _endpoint(logger: Logger, status: int = 200):
    """ASGI app that logs through the request carrier and returns ``status``."""

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        ctx = context_from_scope(scope)
        logger.debug(ctx, "handler detail")
        logger.info(ctx, "handler called", "path", scope["path"])
        await send({"type": "http.response.start", "status": status, "headers": []})
        await send({"type": "http.response.body", "body": b"OK"})

    return app


def _client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_request_id_from_header_reaches_endpoint_logs(
    logger: Logger, sink: InMemorySink
) -> None:
    """Endpoint logs carry the request id without passing it explicitly."""
    app = RequestContextMiddleware(_endpoint(logger), logger)

    async with _client(app) as client:
        response = await client.get("/orders", headers={"X-Request-ID": "abc-123"})

    assert response.status_code == 200
    handler_entry, summary = sink.entries
    assert handler_entry.attributes == [("path", "/orders"), ("request_id", "abc-123")]
    assert summary.message == "GET /orders"
    assert ("status", 200) in summary.attributes
    assert ("request_id", "abc-123") in summary.attributes


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(
    logger: Logger, sink: InMemorySink
) -> None:
    app = RequestContextMiddleware(_endpoint(logger), logger)

    async with _client(app) as client:
        await client.get("/orders")

    request_id = dict(sink.entries[0].attributes)["request_id"]
    assert isinstance(request_id, str)
    assert len(request_id) == 36
    assert request_id.count("-") == 4


@pytest.mark.asyncio
async def test_custom_request_id_header(logger: Logger, sink: InMemorySink) -> None:
    app = RequestContextMiddleware(
        _endpoint(logger), logger, request_id_header="X-Correlation-ID"
    )

    async with _client(app) as client:
        await client.get("/", headers={"X-Correlation-ID": "corr-1"})

    assert ("request_id", "corr-1") in sink.entries[0].attributes


@pytest.mark.asyncio
async def test_level_header_enables_debug_for_one_request(
    logger: Logger, sink: InMemorySink
) -> None:
    app = RequestContextMiddleware(_endpoint(logger), logger)

    async with _client(app) as client:
        await client.get("/a", headers={"X-Log-Level": "debug"})
        debug_messages = [e.message for e in sink.entries]
        sink.clear()
        await client.get("/b")

    assert debug_messages == ["handler detail", "handler called", "GET /a"]
    assert [e.message for e in sink.entries] == ["handler called", "GET /b"]


@pytest.mark.asyncio
async def test_invalid_level_header_is_ignored(logger: Logger, sink: InMemorySink) -> None:
    app = RequestContextMiddleware(_endpoint(logger), logger)

    async with _client(app) as client:
        response = await client.get("/a", headers={"X-Log-Level": "chatty"})

    assert response.status_code == 200
    assert [e.message for e in sink.entries] == ["handler called", "GET /a"]


@pytest.mark.asyncio
async def test_summary_level_follows_status(logger: Logger, sink: InMemorySink) -> None:
    app = RequestContextMiddleware(_endpoint(logger, status=404), logger)

    async with _client(app) as client:
        await client.get("/missing")

    assert sink.entries[-1].level == WARN


@pytest.mark.asyncio
async def test_excluded_paths_get_context_but_no_summary(
    logger: Logger, sink: InMemorySink
) -> None:
    app = RequestContextMiddleware(
        _endpoint(logger), logger, exclude_paths=["/health", "/internal/*"]
    )

    async with _client(app) as client:
        await client.get("/internal/stats", headers={"X-Request-ID": "r1"})

    assert [e.message for e in sink.entries] == ["handler called"]
    assert ("request_id", "r1") in sink.entries[0].attributes


@pytest.mark.asyncio
async def test_log_requests_disabled(logger: Logger, sink: InMemorySink) -> None:
    app = RequestContextMiddleware(_endpoint(logger), logger)
    app.set_log_requests(False)

    async with _client(app) as client:
        await client.get("/")

    assert [e.message for e in sink.entries] == ["handler called"]


@pytest.mark.asyncio
async def test_log_requests_disabled_by_constructor(
    logger: Logger, sink: InMemorySink
) -> None:
    app = RequestContextMiddleware(_endpoint(logger), logger, log_requests=False)

    async with _client(app) as client:
        await client.get("/", headers={"X-Request-ID": "r4"})

    assert [e.message for e in sink.entries] == ["handler called"]
    assert ("request_id", "r4") in sink.entries[0].attributes


@pytest.mark.asyncio
async def test_exception_is_logged_and_reraised(logger: Logger, sink: InMemorySink) -> None:
    async def failing_app(scope: Scope, receive: Receive, send: Send) -> None:
        raise RuntimeError("boom")

    app = RequestContextMiddleware(failing_app, logger)

    async with _client(app) as client:
        with pytest.raises(RuntimeError, match="boom"):
            await client.get("/explode", headers={"X-Request-ID": "r2"})

    entry = sink.entries[-1]
    assert entry.level == ERROR
    assert entry.message == "GET /explode"
    assert entry.attributes[0] == ("status", 500)
    assert ("err", "boom") in entry.attributes
    assert entry.attributes[-1] == ("request_id", "r2")


@pytest.mark.asyncio
async def test_non_http_scope_passes_through(logger: Logger, sink: InMemorySink) -> None:
    seen: list[Scope] = []

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        seen.append(scope)

    middleware = RequestContextMiddleware(app, logger)
    scope: Scope = {"type": "lifespan"}

    async def receive():
        return {"type": "lifespan.startup"}

    async def send(message):
        pass

    await middleware(scope, receive, send)

    assert seen == [scope]
    assert SCOPE_KEY not in seen[0]
    assert sink.entries == []


@pytest.mark.asyncio
async def test_does_not_mutate_incoming_scope(logger: Logger) -> None:
    seen: list[Scope] = []

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        seen.append(scope)
        await send({"type": "http.response.start", "status": 204, "headers": []})
        await send({"type": "http.response.body", "body": b""})

    middleware = RequestContextMiddleware(app, logger)
    scope: Scope = {
        "type": "http",
        "method": "GET",
        "path": "/x",
        "query_string": b"",
        "headers": [(b"x-request-id", b"r3")],
    }

    async def receive():
        return {"type": "http.request", "body": b""}

    async def send(message):
        pass

    await middleware(scope, receive, send)

    assert SCOPE_KEY not in scope
    assert [a.key for a in resolve(seen[0][SCOPE_KEY]).attrs] == ["request_id"]


def test_context_from_scope_defaults_to_background() -> None:
    assert context_from_scope({}) is Context.background()


@pytest.mark.parametrize(
    ("status", "level"),
    [(200, INFO), (302, INFO), (404, WARN), (503, ERROR), (0, INFO)],
)
def test_status_to_level(status: int, level: int) -> None:
    assert _get_log_level_for_status(status) == level


def test_level_header_accepts_offsets(logger: Logger) -> None:
    middleware = RequestContextMiddleware(_endpoint(logger), logger)
    scope: Scope = {"type": "http", "headers": [(b"x-log-level", b"DEBUG+1")]}
    assert resolve(middleware.build_context(scope)).level == DEBUG + 1


def test_level_header_can_be_disabled(logger: Logger) -> None:
    middleware = RequestContextMiddleware(_endpoint(logger), logger, level_header=None)
    scope: Scope = {"type": "http", "headers": [(b"x-log-level", b"DEBUG")]}
    assert not resolve(middleware.build_context(scope)).has_level
