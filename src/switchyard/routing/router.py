"""Multi-facet router with hierarchical delegation.

Entries are registered during setup under one of several facets. Once
``freeze()`` is called the tree is immutable and safe to read from any
number of concurrent requests without locks.

Facets are evaluated in a fixed order and the first match wins:

1. protocol      (``http`` / ``https``)
2. method        (uppercased)
3. port          (from the ``Host`` authority, ``"80"`` by default)
4. domain        (hostname after the first dot)
5. host          (hostname before the first dot)
6. exact path    (full request path)
7. path segment  (next unconsumed segment; consumed on match)
8. pattern       (regex against the current segment, registration order)
9. predicate     (``func(request, segment)``, registration order)
10. fallback

Nothing matching raises ``NotFound``. There is no backtracking: once an
entry is chosen its outcome is the outcome of the request.
"""

import inspect
import logging
import re
from collections.abc import Iterator
from typing import Any

from switchyard._internal.types import Predicate
from switchyard.errors import ConfigurationError, NotFound
from switchyard.http.request import Request
from switchyard.routing.context import RoutingContext
from switchyard.routing.entry import RoutingEntry

logger = logging.getLogger("switchyard.routing")


def _never(request: Request, segment: str) -> bool:
    return False


def pattern_predicate(pattern: str) -> Predicate:
    """Build a segment predicate from a regular expression.

    The expression is searched for anywhere in the segment (anchor it with
    ``^``/``$`` for a full match). A malformed expression is logged and
    yields a predicate that never matches.
    """
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        logger.warning("Invalid routing pattern %r (%s); entry will never match", pattern, exc)
        return _never

    def predicate(request: Request, segment: str) -> bool:
        return regex.search(segment) is not None

    return predicate


class Router:
    """A set of routing entries indexed by facet.

    Usage::

        users = Router()
        users.pattern(r"^\\d+$").handle(show_user)
        users.fallback().handle(list_users)

        root = Router()
        root.path("users").subrouter(users)
        root.path("static").serve_files("./public")
        root.freeze()

        result = await root.dispatch(request)
    """

    __slots__ = (
        "_by_domain",
        "_by_exact_path",
        "_by_host",
        "_by_method",
        "_by_path_segment",
        "_by_port",
        "_by_protocol",
        "_fallback",
        "_frozen",
        "_pattern_entries",
        "_predicate_entries",
        "name",
    )

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._by_protocol: dict[str, RoutingEntry] = {}
        self._by_method: dict[str, RoutingEntry] = {}
        self._by_port: dict[str, RoutingEntry] = {}
        self._by_domain: dict[str, RoutingEntry] = {}
        self._by_host: dict[str, RoutingEntry] = {}
        self._by_exact_path: dict[str, RoutingEntry] = {}
        self._by_path_segment: dict[str, RoutingEntry] = {}
        self._pattern_entries: list[RoutingEntry] = []
        self._predicate_entries: list[RoutingEntry] = []
        self._fallback: RoutingEntry | None = None
        self._frozen = False

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<Router{label} entries={len(self)} frozen={self._frozen}>"

    def __len__(self) -> int:
        return sum(1 for _ in self.entries())

    # -- Registration --

    def _register(self, facet: str, table: dict[str, RoutingEntry], key: str) -> RoutingEntry:
        self._check_not_frozen()
        if key in table:
            # Last registration wins
            logger.warning("%r: %s entry %r registered twice; replacing", self, facet, key)
        entry = RoutingEntry(self)
        table[key] = entry
        return entry

    def protocol(self, name: str) -> RoutingEntry:
        """Match ``"http"`` or ``"https"``."""
        return self._register("protocol", self._by_protocol, name.lower())

    def method(self, name: str) -> RoutingEntry:
        """Match an HTTP method, case-insensitively."""
        return self._register("method", self._by_method, name.upper())

    def port(self, port: int | str) -> RoutingEntry:
        """Match the port the client addressed (``"80"`` when none given)."""
        return self._register("port", self._by_port, str(port))

    def domain(self, name: str) -> RoutingEntry:
        """Match the part of the hostname after the first dot."""
        return self._register("domain", self._by_domain, name.lower())

    def host(self, name: str) -> RoutingEntry:
        """Match the part of the hostname before the first dot."""
        return self._register("host", self._by_host, name.lower())

    def exact_path(self, path: str) -> RoutingEntry:
        """Match the full request path verbatim."""
        return self._register("exact path", self._by_exact_path, path)

    def path(self, segment: str) -> RoutingEntry:
        """Match the next path segment and consume it."""
        return self._register("path segment", self._by_path_segment, segment)

    def pattern(self, pattern: str) -> RoutingEntry:
        """Match the current path segment against a regular expression.

        A matching non-empty segment is consumed into ``context.captured``.
        """
        self._check_not_frozen()
        entry = RoutingEntry(self, predicate=pattern_predicate(pattern), pattern=pattern)
        self._pattern_entries.append(entry)
        return entry

    def predicate(self, func: Predicate) -> RoutingEntry:
        """Match when ``func(request, current_segment)`` returns true.

        Predicates are synchronous and never consume a segment.
        """
        self._check_not_frozen()
        if inspect.iscoroutinefunction(func):
            msg = f"Predicate {func!r} is async; routing predicates must be synchronous"
            raise ConfigurationError(msg)
        entry = RoutingEntry(self, predicate=func)
        self._predicate_entries.append(entry)
        return entry

    def fallback(self) -> RoutingEntry:
        """Catch-all entry used when nothing else in this router matches."""
        self._check_not_frozen()
        if self._fallback is not None:
            logger.warning("%r: fallback registered twice; replacing", self)
        self._fallback = RoutingEntry(self)
        return self._fallback

    # -- Lifecycle --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """End the build phase for this router and every router below it.

        Idempotent. After freezing, registration and action attachment
        raise ``RuntimeError``; before it, ``resolve`` and ``dispatch`` do.
        """
        if self._frozen:
            return
        self._frozen = True
        for entry in self.entries():
            if entry.action is not None:
                for child in entry.action.routers():
                    child.freeze()

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify a router after it has been frozen. "
                "Register entries and attach actions before serving requests."
            )
            raise RuntimeError(msg)

    def entries(self) -> Iterator[RoutingEntry]:
        """Yield every entry in evaluation order."""
        yield from self._by_protocol.values()
        yield from self._by_method.values()
        yield from self._by_port.values()
        yield from self._by_domain.values()
        yield from self._by_host.values()
        yield from self._by_exact_path.values()
        yield from self._by_path_segment.values()
        yield from self._pattern_entries
        yield from self._predicate_entries
        if self._fallback is not None:
            yield self._fallback

    # -- Dispatch --

    def resolve(self, request: Request, context: RoutingContext) -> RoutingEntry:
        """Return the entry that handles *request* at this level.

        Advances *context* when a path-segment or pattern entry matches.
        Raises ``NotFound`` if no entry matches.
        """
        if not self._frozen:
            msg = f"{self!r} must be frozen before it can dispatch requests."
            raise RuntimeError(msg)

        if self._by_protocol:
            entry = self._by_protocol.get(request.protocol)
            if entry is not None:
                return entry

        if self._by_method:
            entry = self._by_method.get(request.method.upper())
            if entry is not None:
                return entry

        if self._by_port or self._by_domain or self._by_host:
            host, domain, port = request.host_parts()

            if self._by_port:
                entry = self._by_port.get(port)
                if entry is not None:
                    return entry

            if self._by_domain:
                entry = self._by_domain.get(domain)
                if entry is not None:
                    return entry

            if self._by_host:
                entry = self._by_host.get(host)
                if entry is not None:
                    return entry

        if self._by_exact_path:
            entry = self._by_exact_path.get(request.path)
            if entry is not None:
                return entry

        segment = context.current

        if self._by_path_segment:
            entry = self._by_path_segment.get(segment)
            if entry is not None:
                if context.remaining:
                    context.consume()
                return entry

        for entry in self._pattern_entries:
            if entry.matches(request, segment):
                if context.remaining:
                    context.capture()
                return entry

        for entry in self._predicate_entries:
            if entry.matches(request, segment):
                return entry

        if self._fallback is not None:
            return self._fallback

        logger.debug(
            "%r: no entry for %s %s (segment %r)", self, request.method, request.path, segment
        )
        raise NotFound(f"No route matches {request.method} {request.path!r}")

    async def dispatch(self, request: Request, context: RoutingContext | None = None) -> Any:
        """Resolve *request* and run the chosen entry's action.

        A fresh context is derived from ``request.path`` when none is
        given. Returns the terminal handler's value; the ASGI handler
        turns it into a ``Response``.
        """
        if context is None:
            context = RoutingContext.from_path(request.path)
        entry = self.resolve(request, context)
        return await entry.invoke(request, context)
