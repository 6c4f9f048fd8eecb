"""Virtual hosts — one app, several sites picked by host and path.

Demonstrates host and domain facets, nested routers consuming one path
segment each, regex and predicate entries, split/select decisions, file
serving with index fallbacks, and template serving.

Run with any ASGI server:
    uvicorn app:app
"""

from pathlib import Path

from switchyard import App, Request, Response, Router, RoutingContext, load_templates

HERE = Path(__file__).parent
templates = load_templates(HERE / "templates")

app = App()


# -- docs.<anything>: static documentation site --

docs = Router("docs")
docs.fallback().serve_files(HERE / "public", ["php"])


# -- api: /api/v1/users/<id>, /api/v2/... picked by query --

users = Router("users")


def show_user(context: RoutingContext) -> dict[str, str]:
    return {"id": context.captured[-1], "via": "/".join(context.matched)}


def list_users() -> list[str]:
    return ["ada", "grace"]


users.pattern(r"^\d+$").handle(show_user)
users.exact_path("/api/v1/users").handle(list_users)
users.fallback().handle(lambda: ("Unknown user", 404))

v1 = Router("v1")
v1.path("users").subrouter(users)

api = Router("api")
api.method("DELETE").handle(lambda: ("Read-only API", 405))
api.path("v1").subrouter(v1)
api.path("latest").select(lambda r: r.query.get_int("v", 0), v1, lambda: "v2 preview")


# -- www: templates and a mobile split --


def wants_mobile(request: Request) -> bool:
    return "mobile" in request.headers.get("user-agent", "").lower()


site = Router("site")
site.path("").serve_template(lambda r: ("home.html", {"host": r.hostname}), templates)
site.path("about").split(
    wants_mobile,
    lambda: Response("about (mobile)").with_header("Vary", "User-Agent"),
    lambda: Response("about").with_header("Vary", "User-Agent"),
)
site.predicate(lambda request, segment: segment.endswith(".txt")).handle(
    lambda request: Response("plain", content_type="text/plain")
)


app.router.host("docs").subrouter(docs)
app.router.path("api").subrouter(api)
app.router.fallback().subrouter(site)


@app.error(404)
def not_found(request: Request) -> str:
    return f"Nothing at {request.path}"
