"""Switchyard application class.

Holds the root Router during setup. Frozen at runtime when the ASGI
server first calls the app (lifespan startup or first request); from
then on the whole router tree is immutable.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from kida import Environment

from switchyard._internal.asgi import Receive, Scope, Send
from switchyard._internal.types import ErrorHandler
from switchyard.config import AppConfig
from switchyard.routing.router import Router
from switchyard.server.handler import handle_request
from switchyard.templating.integration import create_environment

logger = logging.getLogger("switchyard.server")


class App:
    """An ASGI application serving one root router.

    Mutable during setup (entries, error handlers, hooks). Frozen at
    runtime when ``__call__()`` is first invoked.

    Usage::

        app = App()
        api = Router("api")
        api.method("GET").handle(list_things)
        app.router.path("api").subrouter(api)
        app.router.fallback().serve_files("./public")

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check so exactly one thread freezes the router tree,
        even when several workers receive their first request at once.
    """

    __slots__ = (
        "_custom_kida_env",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
        "router",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        router: Router | None = None,
        kida_env: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router: Router = router if router is not None else Router("root")
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env
        self._kida_env: Environment | None = None

    # -- Setup --

    def error(self, code_or_exception: int | type) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler for a status code or exception type.

        The handler may accept ``()``, ``(request)`` or ``(request, exc)``
        and returns any negotiable value::

            @app.error(404)
            def missing(request):
                return Template("404.html", path=request.path)
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run at ASGI lifespan startup (sync or async)."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run at ASGI lifespan shutdown (sync or async)."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def kida_env(self) -> Environment | None:
        """The kida environment used for ``Template`` return values."""
        self._ensure_frozen()
        return self._kida_env

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            error_handlers=self._error_handlers,
            kida_env=self._kida_env,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), then
        runs registered hooks and signals completion back to the server.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self.startup()
                except Exception as exc:
                    logger.exception("Lifespan startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Freeze the router tree and build the kida environment.

        MUST only be called while holding _freeze_lock.
        """
        self.router.freeze()
        self._kida_env = self._custom_kida_env or create_environment(self.config)
        self._frozen = True
        logger.debug("%r frozen with %d root entries", self.router, len(self.router))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register entries, error handlers, and hooks first."
            )
            raise RuntimeError(msg)
