"""Tests for switchyard.routing.context — per-request path consumption."""

from switchyard.routing.context import RoutingContext, split_path


class TestSplitPath:
    def test_root(self) -> None:
        assert split_path("/") == []

    def test_segments(self) -> None:
        assert split_path("/users/42") == ["users", "42"]

    def test_drops_empty_segments(self) -> None:
        assert split_path("//blog//post/") == ["blog", "post"]


class TestRoutingContext:
    def test_from_path(self) -> None:
        context = RoutingContext.from_path("/a/b")
        assert context.remaining == ["a", "b"]
        assert context.matched == []
        assert context.captured == []

    def test_current(self) -> None:
        assert RoutingContext.from_path("/a/b").current == "a"
        assert RoutingContext.from_path("/").current == ""

    def test_consume_moves_to_matched(self) -> None:
        context = RoutingContext.from_path("/a/b")
        assert context.consume() == "a"
        assert context.matched == ["a"]
        assert context.remaining == ["b"]
        assert context.current == "b"

    def test_capture_moves_to_captured(self) -> None:
        context = RoutingContext.from_path("/42/edit")
        assert context.capture() == "42"
        assert context.captured == ["42"]
        assert context.matched == []
        assert context.remaining_path == "edit"

    def test_fresh_contexts_share_nothing(self) -> None:
        first = RoutingContext.from_path("/a")
        second = RoutingContext.from_path("/a")
        first.consume()
        assert second.remaining == ["a"]
        assert second.matched == []
