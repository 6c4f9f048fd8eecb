"""Per-request path-consumption state.

A fresh :class:`RoutingContext` is derived from each request's path and
threaded by parameter through every router level. It is owned by the
task serving that request and is never shared, cached, or stored on a
router.
"""

from dataclasses import dataclass, field


def split_path(path: str) -> list[str]:
    """Split a request path into its non-empty segments.

    Examples::

        "/"            -> []
        "/users/42"    -> ["users", "42"]
        "/blog//post/" -> ["blog", "post"]
    """
    return [part for part in path.strip("/").split("/") if part]


@dataclass(slots=True)
class RoutingContext:
    """Segments still to be matched and those already consumed.

    ``matched`` holds segments consumed by path-segment entries (the
    static prefix routed so far); ``captured`` holds segments consumed by
    pattern entries, in the order they were matched.
    """

    remaining: list[str]
    matched: list[str] = field(default_factory=list)
    captured: list[str] = field(default_factory=list)

    @classmethod
    def from_path(cls, path: str) -> "RoutingContext":
        return cls(remaining=split_path(path))

    @property
    def current(self) -> str:
        """The next unconsumed segment, or ``""`` when none remain."""
        return self.remaining[0] if self.remaining else ""

    @property
    def remaining_path(self) -> str:
        """Unconsumed segments joined with ``/``."""
        return "/".join(self.remaining)

    def consume(self) -> str:
        """Move the current segment into ``matched`` and return it."""
        segment = self.remaining.pop(0)
        self.matched.append(segment)
        return segment

    def capture(self) -> str:
        """Move the current segment into ``captured`` and return it."""
        segment = self.remaining.pop(0)
        self.captured.append(segment)
        return segment
