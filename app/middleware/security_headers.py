"""Security headers middleware.

Adds the response headers a JSON API should always send. Headers already set
by a route win. Raw ASGI.
"""

from typing import Callable

API_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Cache-Control": "no-store",
}


def SecurityHeadersMiddleware(app: Callable, headers: dict[str, str] | None = None) -> Callable:
    """Append missing security headers to every HTTP response. Raw ASGI."""
    extra = [
        (name.lower().encode(), value.encode())
        for name, value in (headers or API_SECURITY_HEADERS).items()
    ]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                current.extend(h for h in extra if h[0] not in present)
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
