"""Request body size limit middleware.

Rejects bodies larger than MAX_REQUEST_SIZE with 413, checking Content-Length
up front and counting bytes as they stream in (chunked uploads). Raw ASGI.
"""

from typing import Callable

from app.middleware._asgi import get_header, send_json_error


async def _reject(send: Callable, max_bytes: int, actual: int) -> None:
    await send_json_error(
        send,
        413,
        f"El cuerpo de la solicitud no puede superar {max_bytes} bytes",
        {"max_bytes": max_bytes, "received_bytes": actual},
    )


def RequestSizeLimitMiddleware(app: Callable, max_bytes: int) -> Callable:
    """Reject requests whose body exceeds max_bytes. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        declared = get_header(scope, "content-length")
        if declared is not None and declared.isdigit() and int(declared) > max_bytes:
            await _reject(send, max_bytes, int(declared))
            return

        received = 0
        rejected = False

        async def counting_receive() -> dict:
            nonlocal received, rejected
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_bytes and not rejected:
                    rejected = True
                    await _reject(send, max_bytes, received)
                    return {"type": "http.disconnect"}
            return message

        async def guarded_send(message: dict) -> None:
            if not rejected:
                await send(message)

        await app(scope, counting_receive, guarded_send)

    return asgi_app
