"""Routing actions — what a matched entry does with the request.

Each action is a small frozen dataclass with a single ``invoke()``
operation. A RoutingEntry holds exactly one of them:

- ``Handle``   — call a terminal handler
- ``Split``    — two-way decision between actions
- ``Select``   — n-way decision by index
- ``Delegate`` — continue matching in a child router

The serving adapters in :mod:`switchyard.serving` implement the same
protocol.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from switchyard._internal.invoke import invoke
from switchyard._internal.types import Handler
from switchyard.errors import ConfigurationError, NotFound
from switchyard.http.request import Request
from switchyard.routing.context import RoutingContext

if TYPE_CHECKING:
    from switchyard.routing.router import Router

logger = logging.getLogger("switchyard.routing")


@runtime_checkable
class Action(Protocol):
    """Protocol for everything a RoutingEntry can hold.

    ``invoke`` returns the terminal handler's return value; the ASGI
    handler negotiates it into a ``Response``. ``routers`` yields any
    child routers so freezing can walk the whole tree.
    """

    async def invoke(self, request: Request, context: RoutingContext) -> Any: ...

    def routers(self) -> Iterator[Router]: ...


def as_action(target: Any) -> Action:
    """Coerce a router, action, or plain callable into an Action."""
    from switchyard.routing.router import Router

    if isinstance(target, Router):
        return Delegate(target)
    if isinstance(target, Action):
        return target
    if callable(target):
        return Handle(target)
    msg = f"Cannot use {target!r} as a routing action; expected a Router, action, or callable."
    raise ConfigurationError(msg)


# -- Terminal handler --


def _injection_plan(handler: Handler) -> tuple[tuple[str, str], ...]:
    """Decide which handler parameters receive the request and the context.

    Parameters are matched by name (``request``, ``context``) or by
    annotation. Remaining positional parameters without defaults are
    filled in order, so ``lambda r: ...`` and ``def h(req, ctx)`` work too.
    """
    try:
        sig = inspect.signature(handler, eval_str=True)
    except (TypeError, ValueError, NameError):
        # Builtins and unresolvable annotations: fall back to the raw signature
        sig = inspect.signature(handler)

    plan: list[tuple[str, str]] = []
    taken: set[str] = set()
    unmatched: list[str] = []
    for name, param in sig.parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if name == "request" or param.annotation is Request:
            plan.append((name, "request"))
            taken.add("request")
        elif name == "context" or param.annotation is RoutingContext:
            plan.append((name, "context"))
            taken.add("context")
        elif param.default is param.empty and param.kind != param.KEYWORD_ONLY:
            unmatched.append(name)

    free = [source for source in ("request", "context") if source not in taken]
    plan.extend(zip(unmatched, free, strict=False))
    return tuple(plan)


@dataclass(frozen=True, slots=True)
class Handle:
    """Invoke a terminal handler (``def`` or ``async def``)."""

    handler: Handler
    _plan: tuple[tuple[str, str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_plan", _injection_plan(self.handler))

    async def invoke(self, request: Request, context: RoutingContext) -> Any:
        sources = {"request": request, "context": context}
        kwargs = {name: sources[source] for name, source in self._plan}
        return await invoke(self.handler, **kwargs)

    def routers(self) -> Iterator[Router]:
        return iter(())


# -- Decision combinators --


@dataclass(frozen=True, slots=True)
class Split:
    """Two-way decision: ``then`` when ``decide(request)`` is truthy, else ``otherwise``."""

    decide: Callable[[Request], Any]
    then: Action
    otherwise: Action

    async def invoke(self, request: Request, context: RoutingContext) -> Any:
        if await invoke(self.decide, request):
            return await self.then.invoke(request, context)
        return await self.otherwise.invoke(request, context)

    def routers(self) -> Iterator[Router]:
        yield from self.then.routers()
        yield from self.otherwise.routers()


@dataclass(frozen=True, slots=True)
class Select:
    """N-way decision: run ``actions[decide(request)]``.

    An index outside ``range(len(actions))`` raises ``NotFound`` instead
    of failing, including when ``actions`` is empty.
    """

    decide: Callable[[Request], Any]
    actions: tuple[Action, ...]

    async def invoke(self, request: Request, context: RoutingContext) -> Any:
        index = await invoke(self.decide, request)
        valid = isinstance(index, int) and not isinstance(index, bool)
        if not valid or not 0 <= index < len(self.actions):
            logger.debug(
                "select index %r out of range for %d action(s): %s %s",
                index,
                len(self.actions),
                request.method,
                request.path,
            )
            raise NotFound(f"No action at index {index!r}")
        return await self.actions[index].invoke(request, context)

    def routers(self) -> Iterator[Router]:
        for action in self.actions:
            yield from action.routers()


# -- Child router --


@dataclass(frozen=True, slots=True)
class Delegate:
    """Continue matching in a child router with the same routing context."""

    router: Router

    async def invoke(self, request: Request, context: RoutingContext) -> Any:
        return await self.router.dispatch(request, context)

    def routers(self) -> Iterator[Router]:
        yield self.router
