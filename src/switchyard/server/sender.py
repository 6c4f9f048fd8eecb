"""ASGI response sending — translates a Response into ASGI messages."""

from switchyard._internal.asgi import Send
from switchyard.http.response import Response


def _body_allowed(status: int, method: str) -> bool:
    """Whether the response may carry a body."""
    # RFC: 1xx, 204, and 304 responses and HEAD requests have no message body.
    if method == "HEAD":
        return False
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Translate a Response into ASGI ``send()`` calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    body = response.body_bytes
    has_length = False
    for name, value in response.headers:
        lowered = name.lower()
        has_length = has_length or lowered == "content-length"
        raw_headers.append((lowered.encode("latin-1"), value.encode("latin-1")))
    if not has_length:
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body if _body_allowed(response.status, method) else b"",
        }
    )
