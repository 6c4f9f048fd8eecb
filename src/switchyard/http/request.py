"""Immutable HTTP request.

Frozen metadata plus the handful of derived facts routing needs:
protocol, hostname, domain and port. The request carries no routing
state of its own; path consumption lives in a separate
:class:`~switchyard.routing.context.RoutingContext`.
"""

from dataclasses import dataclass

from switchyard._internal.asgi import Scope
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams

DEFAULT_PORT = "80"


def host_parts(authority: str) -> tuple[str, str, str]:
    """Split a ``host[:port]`` authority into ``(host, domain, port)``.

    The host is the label before the first dot and the domain is
    everything after it, both lowercased. The port defaults to ``"80"``
    when the authority carries none.

    Examples::

        host_parts("www.example.com:8080") -> ("www", "example.com", "8080")
        host_parts("Example.COM")          -> ("example", "com", "80")
        host_parts("localhost")            -> ("localhost", "", "80")
        host_parts("[::1]:8000")           -> ("[::1]", "", "8000")
    """
    host = authority
    port = DEFAULT_PORT

    # IPv6 literals carry colons inside the brackets and have no domain
    if host.startswith("["):
        end = host.find("]")
        if end > 0:
            rest = host[end + 1 :]
            host = host[: end + 1]
            if rest.startswith(":"):
                port = rest[1:]
        return host.lower(), "", port

    pos = host.find(":")
    if pos > 0:
        host, port = host[:pos], host[pos + 1 :]

    domain = ""
    pos = host.find(".")
    if pos > 0:
        host, domain = host[:pos], host[pos + 1 :]

    return host.lower(), domain.lower(), port


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation. Routing
    never looks at the body, so the request does not carry it.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    http_version: str = "1.1"
    scheme: str = "http"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # -- Routing facts --

    @property
    def is_secure(self) -> bool:
        """True if the transport reported a TLS session."""
        return self.scheme in ("https", "wss")

    @property
    def protocol(self) -> str:
        """``"https"`` for secure requests, ``"http"`` otherwise."""
        return "https" if self.is_secure else "http"

    @property
    def authority(self) -> str:
        """The ``host[:port]`` the client asked for.

        Taken from the ``Host`` header, falling back to the server
        address when the header is absent.
        """
        host = self.headers.get("host")
        if host:
            return host
        if self.server is not None:
            name, port = self.server
            return f"{name}:{port}"
        return ""

    def host_parts(self) -> tuple[str, str, str]:
        """The authority split into ``(host, domain, port)``."""
        return host_parts(self.authority)

    @property
    def hostname(self) -> str:
        """The host label before the first dot, lowercased."""
        return host_parts(self.authority)[0]

    @property
    def domain(self) -> str:
        """Everything after the first dot of the hostname, lowercased."""
        return host_parts(self.authority)[1]

    @property
    def port(self) -> str:
        """The port from the authority, ``"80"`` when none is given."""
        return host_parts(self.authority)[2]

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope) -> "Request":
        """Create a Request from an ASGI scope."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            scheme=scope.get("scheme", "http"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
