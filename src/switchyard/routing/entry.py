"""RoutingEntry — one matchable slot in a Router.

Created by a Router registration call, given its action exactly once,
then read-only for the life of the process.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from switchyard._internal.types import Handler, Predicate
from switchyard.errors import ConfigurationError, NotFound
from switchyard.http.request import Request
from switchyard.routing.actions import Action, Delegate, Handle, Select, Split, as_action
from switchyard.routing.context import RoutingContext

if TYPE_CHECKING:
    from kida import Environment

    from switchyard.routing.router import Router


class RoutingEntry:
    """A matchable slot holding at most one action.

    Facet-map entries match by key lookup in their router and carry no
    predicate. Pattern and predicate entries carry one, evaluated against
    ``(request, current_segment)``.

    Usage::

        router.path("users").subrouter(users)
        router.method("delete").handle(forbidden)
        router.pattern(r"^\\d+$").handle(show_item)
    """

    __slots__ = ("_action", "_owner", "pattern", "predicate")

    def __init__(
        self,
        owner: Router,
        *,
        predicate: Predicate | None = None,
        pattern: str | None = None,
    ) -> None:
        self._owner = owner
        self._action: Action | None = None
        self.predicate = predicate
        self.pattern = pattern

    def __repr__(self) -> str:
        if self.pattern is not None:
            return f"RoutingEntry(pattern={self.pattern!r}, action={self._action!r})"
        return f"RoutingEntry(action={self._action!r})"

    @property
    def action(self) -> Action | None:
        return self._action

    # -- Matching --

    def matches(self, request: Request, segment: str) -> bool:
        """Evaluate this entry's predicate; entries without one never match."""
        if self.predicate is None:
            return False
        return bool(self.predicate(request, segment))

    async def invoke(self, request: Request, context: RoutingContext) -> Any:
        """Run the attached action, or raise ``NotFound`` if none was attached."""
        if self._action is None:
            raise NotFound("Matched entry has no action")
        return await self._action.invoke(request, context)

    # -- Action attachment --

    def attach(self, action: Action) -> RoutingEntry:
        """Attach *action* to this entry.

        Raises ``RuntimeError`` once the owning router is frozen and
        ``ConfigurationError`` if an action is already attached.
        """
        self._owner._check_not_frozen()
        if self._action is not None:
            msg = f"{self!r} already has an action; an entry takes exactly one."
            raise ConfigurationError(msg)
        self._action = action
        return self

    def handle(self, handler: Handler) -> RoutingEntry:
        """Attach a terminal handler (``def`` or ``async def``).

        The handler receives ``request`` and/or ``context`` by parameter
        name or annotation and returns any negotiable value.
        """
        return self.attach(Handle(handler))

    def subrouter(self, router: Router) -> RoutingEntry:
        """Continue matching in *router* with the next path segment."""
        return self.attach(Delegate(router))

    def split(
        self,
        decide: Callable[[Request], Any],
        then: Any,
        otherwise: Any,
    ) -> RoutingEntry:
        """Run *then* if ``decide(request)`` is truthy, else *otherwise*.

        Both targets may be routers, actions, or plain handler callables.
        """
        return self.attach(Split(decide, as_action(then), as_action(otherwise)))

    def select(self, decide: Callable[[Request], Any], *actions: Any) -> RoutingEntry:
        """Run ``actions[decide(request)]``; a bad index responds 404."""
        return self.attach(Select(decide, tuple(as_action(a) for a in actions)))

    def serve_files(
        self,
        directory: str | Path,
        index_extensions: Iterable[str] = (),
        *,
        cache_control: str = "public, max-age=3600",
    ) -> RoutingEntry:
        """Serve files under *directory* from the remaining path segments."""
        from switchyard.serving.files import ServeFiles

        return self.attach(
            ServeFiles(directory, tuple(index_extensions), cache_control=cache_control)
        )

    def serve_template(
        self,
        func: Callable[[Request], tuple[str, Any]],
        env: Environment,
    ) -> RoutingEntry:
        """Render the ``(name, data)`` pair returned by *func* from *env*."""
        from switchyard.serving.templates import ServeTemplate

        return self.attach(ServeTemplate(func, env))
