"""Switchyard — multi-facet request routing for ASGI.

Routes each request to exactly one action by evaluating protocol,
method, port, domain, host, exact path, path segment, pattern, and
predicate facets in a fixed order. Routers nest, consuming one path
segment per level.

Basic usage::

    from switchyard import App, Router

    app = App()
    users = Router()
    users.pattern(r"^\\d+$").handle(lambda context: f"user {context.captured[-1]}")
    app.router.path("users").subrouter(users)
    app.router.fallback().serve_files("./public", ["php"])
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "HTTPError",
    "NotFound",
    "Request",
    "Response",
    "Router",
    "RoutingContext",
    "RoutingEntry",
    "SwitchyardError",
    "Template",
    "load_templates",
    "template_handler",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import switchyard`` fast while providing a clean top-level API.
    """
    if name == "App":
        from switchyard.app import App

        return App

    if name == "AppConfig":
        from switchyard.config import AppConfig

        return AppConfig

    if name == "Request":
        from switchyard.http.request import Request

        return Request

    if name == "Response":
        from switchyard.http.response import Response

        return Response

    if name in ("Router", "RoutingContext", "RoutingEntry"):
        from switchyard import routing as _routing

        return getattr(_routing, name)

    if name == "Template":
        from switchyard.templating.returns import Template

        return Template

    if name in ("load_templates", "template_handler"):
        from switchyard.serving import templates as _templates

        return getattr(_templates, name)

    if name in ("ConfigurationError", "HTTPError", "NotFound", "SwitchyardError"):
        from switchyard import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
