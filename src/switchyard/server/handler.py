"""ASGI handler — translates ASGI scope/messages to switchyard types.

The only component that touches raw ASGI directly. Builds a Request and
a fresh RoutingContext from the scope, dispatches through the root
router, and sends the Response back through ASGI ``send()``.
"""

from collections.abc import Callable
from typing import Any

from kida import Environment

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard.errors import HTTPError
from switchyard.http.request import Request
from switchyard.routing.context import RoutingContext
from switchyard.routing.router import Router
from switchyard.server.errors import handle_http_error, handle_internal_error
from switchyard.server.negotiation import negotiate
from switchyard.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    error_handlers: dict[int | type, Callable[..., Any]],
    kida_env: Environment | None = None,
    debug: bool,
) -> None:
    """Process a single HTTP request through routing and negotiation."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)
    # Owned by this request alone; never stored anywhere shared
    context = RoutingContext.from_path(request.path)

    try:
        result = await router.dispatch(request, context)
        response = negotiate(result, kida_env=kida_env)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, kida_env, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, kida_env, debug)

    await send_response(response, send, method=request.method)
