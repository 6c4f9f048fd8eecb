"""Tests for switchyard.routing.actions and RoutingEntry action attachment."""

import pytest

from switchyard.errors import ConfigurationError, NotFound
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams
from switchyard.http.request import Request
from switchyard.routing.actions import Delegate, Handle, Select, Split, as_action
from switchyard.routing.context import RoutingContext
from switchyard.routing.router import Router


def _request(path: str = "/", query: bytes = b"") -> Request:
    return Request(
        method="GET",
        path=path,
        headers=Headers.from_dict({"host": "example.com"}),
        query=QueryParams(query),
    )


async def _run(action: object, request: Request | None = None) -> object:
    request = request or _request()
    return await action.invoke(request, RoutingContext.from_path(request.path))


class TestHandleInjection:
    async def test_no_parameters(self) -> None:
        assert await _run(Handle(lambda: "ok")) == "ok"

    async def test_request_by_name(self) -> None:
        def handler(request):
            return request.path

        assert await _run(Handle(handler), _request("/x")) == "/x"

    async def test_context_by_annotation(self) -> None:
        def handler(ctx: RoutingContext) -> list[str]:
            return ctx.remaining

        assert await _run(Handle(handler), _request("/a/b")) == ["a", "b"]

    async def test_positional_fill(self) -> None:
        def handler(req, ctx):
            return (req.path, ctx.current)

        assert await _run(Handle(handler), _request("/a")) == ("/a", "a")

    async def test_async_handler(self) -> None:
        async def handler(request: Request) -> str:
            return f"async {request.path}"

        assert await _run(Handle(handler), _request("/y")) == "async /y"

    async def test_defaults_are_left_alone(self) -> None:
        def handler(request, greeting="hi"):
            return greeting

        assert await _run(Handle(handler)) == "hi"


class TestSplit:
    async def test_then_branch(self) -> None:
        split = Split(lambda r: "beta" in r.query, Handle(lambda: "new"), Handle(lambda: "old"))
        assert await _run(split, _request(query=b"beta=1")) == "new"

    async def test_else_branch(self) -> None:
        split = Split(lambda r: "beta" in r.query, Handle(lambda: "new"), Handle(lambda: "old"))
        assert await _run(split) == "old"

    async def test_async_decision(self) -> None:
        async def decide(request: Request) -> bool:
            return True

        split = Split(decide, Handle(lambda: "yes"), Handle(lambda: "no"))
        assert await _run(split) == "yes"

    async def test_only_one_branch_runs(self) -> None:
        calls: list[str] = []
        split = Split(
            lambda r: False,
            Handle(lambda: calls.append("then")),
            Handle(lambda: calls.append("else")),
        )
        await _run(split)
        assert calls == ["else"]


class TestSelect:
    def _select(self, index: object, count: int = 2) -> Select:
        actions = tuple(Handle(lambda i=i: f"action {i}") for i in range(count))
        return Select(lambda r: index, actions)

    async def test_selects_by_index(self) -> None:
        assert await _run(self._select(0)) == "action 0"
        assert await _run(self._select(1)) == "action 1"

    async def test_index_equal_to_length_is_not_found(self) -> None:
        with pytest.raises(NotFound):
            await _run(self._select(2, count=2))

    async def test_negative_index_is_not_found(self) -> None:
        with pytest.raises(NotFound):
            await _run(self._select(-1))

    async def test_empty_actions_is_not_found(self) -> None:
        with pytest.raises(NotFound):
            await _run(self._select(0, count=0))

    async def test_non_int_is_not_found(self) -> None:
        with pytest.raises(NotFound):
            await _run(self._select("1"))

    async def test_bool_is_not_an_index(self) -> None:
        with pytest.raises(NotFound):
            await _run(self._select(True))

    async def test_index_from_query(self) -> None:
        select = Select(
            lambda r: r.query.get_int("v", -1),
            (Handle(lambda: "v0"), Handle(lambda: "v1")),
        )
        assert await _run(select, _request(query=b"v=1")) == "v1"
        with pytest.raises(NotFound):
            await _run(select)


class TestDelegate:
    async def test_delegates_with_same_context(self) -> None:
        child = Router()
        child.path("b").handle(lambda context: context.matched)
        child.freeze()
        request = _request("/b")
        assert await _run(Delegate(child), request) == ["b"]

    def test_routers(self) -> None:
        child = Router()
        assert list(Delegate(child).routers()) == [child]


class TestAsAction:
    def test_router_becomes_delegate(self) -> None:
        router = Router()
        action = as_action(router)
        assert isinstance(action, Delegate)
        assert action.router is router

    def test_action_passes_through(self) -> None:
        handle = Handle(lambda: "x")
        assert as_action(handle) is handle

    def test_callable_becomes_handle(self) -> None:
        assert isinstance(as_action(lambda: "x"), Handle)

    def test_rejects_other_values(self) -> None:
        with pytest.raises(ConfigurationError):
            as_action("not an action")


class TestEntryAttachment:
    def test_second_action_rejected(self) -> None:
        r = Router()
        entry = r.path("x")
        entry.handle(lambda: "first")
        with pytest.raises(ConfigurationError, match="exactly one"):
            entry.handle(lambda: "second")

    def test_attach_returns_entry(self) -> None:
        r = Router()
        entry = r.path("x")
        assert entry.subrouter(Router()) is entry

    async def test_split_accepts_routers_and_callables(self) -> None:
        beta = Router()
        beta.fallback().handle(lambda: "beta site")
        r = Router()
        r.path("home").split(lambda req: "beta" in req.query, beta, lambda: "stable site")
        r.freeze()
        assert await r.dispatch(_request("/home", b"beta")) == "beta site"
        assert await r.dispatch(_request("/home")) == "stable site"

    async def test_select_through_entry(self) -> None:
        r = Router()
        r.path("pick").select(lambda req: 2, lambda: "a", lambda: "b")
        r.freeze()
        with pytest.raises(NotFound):
            await r.dispatch(_request("/pick"))
