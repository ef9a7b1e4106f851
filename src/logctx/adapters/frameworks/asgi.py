"""ASGI middleware that seeds a per-request logging context.

Each HTTP request gets a carrier holding its request id (taken from a
header or generated) and, when the level header is present and valid, a
minimum level override for that request only. The carrier is stored in
the ASGI scope; endpoints read it with ``context_from_scope`` and pass it
to their log calls.
"""

import fnmatch
import time
import uuid
from collections.abc import Callable, Coroutine
from typing import Any

from logctx.core.carrier import Context
from logctx.core.enrichment import add_attributes, set_minimum_level
from logctx.core.levels import ERROR, INFO, WARN, parse_level
from logctx.core.ports import Carrier
from logctx.logger import Logger

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]

SCOPE_KEY = "logctx.context"


def context_from_scope(scope: Scope) -> Carrier:
    """Return the carrier stored by the middleware, or the background one."""
    context = scope.get(SCOPE_KEY)
    if context is None:
        return Context.background()
    return context


def _find_header(scope: Scope, header_name: str) -> str | None:
    """Return the first value of a header (case-insensitive), or None."""
    header_bytes = header_name.lower().encode()
    headers: list[tuple[bytes, bytes]] = scope.get("headers", [])
    for name, value in headers:
        if name.lower() == header_bytes:
            return str(value.decode("utf-8", errors="replace"))
    return None


def _extract_request_id(scope: Scope, header_name: str = "X-Request-ID") -> str:
    """Extract a request ID from the headers, generating a UUID if missing."""
    request_id = _find_header(scope, header_name)
    if request_id:
        return request_id
    return str(uuid.uuid4())


def _extract_level(scope: Scope, header_name: str) -> int | None:
    """Parse the level override header; invalid or missing values give None."""
    raw = _find_header(scope, header_name)
    if not raw:
        return None
    try:
        return parse_level(raw)
    except ValueError:
        return None


def _get_log_level_for_status(status_code: int) -> int:
    """Map an HTTP status code to a log level.

    - 2xx and anything unexpected -> INFO
    - 4xx -> WARN
    - 5xx -> ERROR
    """
    if 400 <= status_code < 500:
        return WARN
    if 500 <= status_code < 600:
        return ERROR
    return INFO


class RequestContextMiddleware:
    """ASGI middleware that attaches request identity to a logging context.

    Example:
        ```python
        logger = Logger(wrap_sink(JSONSink(sys.stdout)))
        app = RequestContextMiddleware(app, logger)
        ```
    """

    def __init__(
        self,
        app: ASGIApp,
        logger: Logger,
        request_id_header: str = "X-Request-ID",
        level_header: str | None = "X-Log-Level",
        exclude_paths: list[str] | None = None,
        log_requests: bool = True,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application to wrap.
            logger: Logger used for the per-request summary line.
            request_id_header: Header carrying the request ID.
            level_header: Header carrying a per-request minimum level
                (e.g. "DEBUG"). None disables the override.
            exclude_paths: Paths that get a context but no summary line.
                Supports exact matches and wildcard patterns
                (e.g., "/internal/*").
            log_requests: Whether to write the per-request summary line.
        """
        self.app = app
        self.logger = logger
        self.request_id_header = request_id_header
        self.level_header = level_header
        self.exclude_paths = exclude_paths or []
        self.log_requests = log_requests

    def set_log_requests(self, enabled: bool) -> None:
        """Enable or disable the per-request summary line.

        The context is attached to the scope either way.
        """
        self.log_requests = enabled

    def _path_excluded(self, path: str) -> bool:
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude_paths)

    def build_context(self, scope: Scope) -> Carrier:
        """Derive the request carrier from the scope headers."""
        context = context_from_scope(scope)
        request_id = _extract_request_id(scope, self.request_id_header)
        context = add_attributes(context, "request_id", request_id)
        if self.level_header:
            level = _extract_level(scope, self.level_header)
            if level is not None:
                context = set_minimum_level(context, level)
        return context

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start_time = time.perf_counter()
        context = self.build_context(scope)
        scope = {**scope, SCOPE_KEY: context}
        captured: dict[str, Any] = {"status": None}

        async def wrapped_send(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                captured["status"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, wrapped_send)
        except Exception as exc:
            duration = time.perf_counter() - start_time
            self._log_request(context, scope, 500, duration, exc)
            raise

        duration = time.perf_counter() - start_time
        self._log_request(context, scope, captured["status"] or 0, duration, None)

    def _log_request(
        self,
        context: Carrier,
        scope: Scope,
        status_code: int,
        duration: float,
        exc: Exception | None,
    ) -> None:
        if not self.log_requests or self._path_excluded(scope["path"]):
            return
        message = f"{scope['method']} {scope['path']}"
        args: list[Any] = ["status", status_code, "duration_ms", duration * 1000]
        if exc is not None:
            self.logger.error(context, message, exc, *args)
            return
        self.logger.log(context, _get_log_level_for_status(status_code), message, *args)
