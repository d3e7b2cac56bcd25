"""Request ID and access logging middleware.

Forwards a safe client X-Request-ID (or generates one), exposes it as
scope["state"]["request_id"], echoes it on the response and logs one line
per request: method, path, status and duration in milliseconds.
Raw ASGI (no BaseHTTPMiddleware).
"""

import logging
import re
import time
import uuid
from typing import Callable

from app.middleware._asgi import get_header

logger = logging.getLogger("app.access")

REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_ALLOWED_PATTERN = re.compile(
    r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$"
)


def resolve_request_id(raw: str | None) -> str:
    """Keep a well-formed client id; anything else (log injection, oversize) gets a new UUID."""
    if raw and REQUEST_ID_ALLOWED_PATTERN.match(raw.strip()):
        return raw.strip()
    return uuid.uuid4().hex


def RequestLoggingMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Tag each request with an id and log its outcome. Raw ASGI."""
    header_b = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(get_header(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id
        started = time.perf_counter()
        status_holder = {"status": 500}

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
                headers = [h for h in message.get("headers", []) if h[0].lower() != header_b]
                headers.append((header_name.encode(), request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                "%s %s %s %.1fms request_id=%s",
                scope.get("method", ""),
                scope.get("path", ""),
                status_holder["status"],
                elapsed_ms,
                request_id,
            )

    return asgi_app
