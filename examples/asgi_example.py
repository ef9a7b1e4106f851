"""Example ASGI application with per-request logging context.

Run with:
    uvicorn examples.asgi_example:app --reload

Try:
    curl localhost:8000/orders/7
    curl -H "X-Request-ID: abc-123" localhost:8000/orders/7
    curl -H "X-Log-Level: DEBUG" localhost:8000/orders/7

Every line written while serving a request carries its request_id. The
X-Log-Level header turns on debug output for that one request only.
"""

import json
import sys

from logctx import Carrier, JSONSink, Logger, add_attributes, wrap_sink
from logctx.adapters.frameworks.asgi import (
    Receive,
    RequestContextMiddleware,
    Scope,
    Send,
    context_from_scope,
)

logger = Logger(wrap_sink(JSONSink(sys.stdout)))


async def load_order(ctx: Carrier, order_id: str) -> dict[str, str]:
    logger.debug(ctx, "loading order from cache")
    return {"id": order_id, "status": "shipped"}


async def orders_app(scope: Scope, receive: Receive, send: Send) -> None:
    ctx = context_from_scope(scope)
    order_id = scope["path"].rsplit("/", 1)[-1]
    ctx = add_attributes(ctx, "order_id", order_id)

    order = await load_order(ctx, order_id)
    logger.info(ctx, "order served", "status", order["status"])

    body = json.dumps(order).encode()
    await send(
        {
            "type": "http.response.start",
            "status": 200,
            "headers": [(b"content-type", b"application/json")],
        }
    )
    await send({"type": "http.response.body", "body": body})


app = RequestContextMiddleware(orders_app, logger, exclude_paths=["/health"])
