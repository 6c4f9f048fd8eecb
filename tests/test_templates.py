"""Tests for switchyard.serving.templates — kida-backed template serving."""

import logging

import pytest
from kida import DictLoader, Environment

from switchyard.app import App
from switchyard.config import AppConfig
from switchyard.errors import ConfigurationError, NotFound
from switchyard.http.headers import Headers
from switchyard.http.query import QueryParams
from switchyard.http.request import Request
from switchyard.routing.context import RoutingContext
from switchyard.serving.templates import ServeTemplate, load_templates, render, template_handler
from switchyard.templating.returns import Template
from switchyard.testing import TestClient


@pytest.fixture
def template_dir(tmp_path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "page.html").write_text("<h1>{{ title }}</h1>")
    (templates / "value.html").write_text("<p>{{ data }}</p>")
    partials = templates / "partials"
    partials.mkdir()
    (partials / "nav.html").write_text("<nav>{{ section }}</nav>")
    (templates / "notes.txt").write_text("{{ ignored }}")
    return templates


@pytest.fixture
def env() -> Environment:
    return Environment(
        loader=DictLoader(
            {
                "page.html": "<h1>{{ title }}</h1>",
                "value.html": "<p>{{ data }}</p>",
            }
        )
    )


def _request(path: str = "/") -> Request:
    return Request(
        method="GET",
        path=path,
        headers=Headers.from_dict({"host": "example.com"}),
        query=QueryParams(),
    )


class TestRender:
    def test_mapping_is_context(self, env: Environment) -> None:
        assert render(env, "page.html", {"title": "Home"}) == "<h1>Home</h1>"

    def test_other_values_are_exposed_as_data(self, env: Environment) -> None:
        assert render(env, "value.html", 42) == "<p>42</p>"

    def test_missing_template_is_not_found(self, env: Environment) -> None:
        with pytest.raises(NotFound):
            render(env, "missing.html", {})


class TestServeTemplate:
    async def test_renders_chosen_template(self, env: Environment) -> None:
        action = ServeTemplate(lambda r: ("page.html", {"title": r.path}), env)
        request = _request("/about")
        response = await action.invoke(request, RoutingContext.from_path(request.path))
        assert response.status == 200
        assert response.text == "<h1>/about</h1>"

    async def test_async_chooser(self, env: Environment) -> None:
        async def choose(request: Request) -> tuple[str, object]:
            return "value.html", "async"

        action = ServeTemplate(choose, env)
        response = await action.invoke(_request(), RoutingContext.from_path("/"))
        assert response.text == "<p>async</p>"

    async def test_template_handler(self, env: Environment) -> None:
        handler = template_handler(lambda r: ("page.html", {"title": "Plain"}), env)
        response = await handler(_request())
        assert response.text == "<h1>Plain</h1>"

    async def test_through_router(self, env: Environment) -> None:
        app = App()
        app.router.path("about").serve_template(lambda r: ("page.html", {"title": "About"}), env)
        app.router.path("gone").serve_template(lambda r: ("missing.html", {}), env)
        async with TestClient(app) as client:
            ok = await client.get("/about")
            missing = await client.get("/gone")
        assert ok.text == "<h1>About</h1>"
        assert "text/html" in ok.content_type
        assert missing.status == 404


class TestLoadTemplates:
    def test_loads_nested_templates(self, template_dir) -> None:
        env = load_templates(template_dir)
        nav = env.get_template("partials/nav.html")
        assert nav.render({"section": "docs"}) == "<nav>docs</nav>"

    def test_extension_without_dot(self, template_dir) -> None:
        env = load_templates(template_dir, "html")
        assert render(env, "page.html", {"title": "x"}) == "<h1>x</h1>"

    def test_autoescape(self, template_dir) -> None:
        env = load_templates(template_dir)
        assert "&lt;b&gt;" in render(env, "page.html", {"title": "<b>"})

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(ConfigurationError):
            load_templates(tmp_path / "nope")

    def test_undecodable_template_is_logged_not_raised(
        self, template_dir, caplog: pytest.LogCaptureFixture
    ) -> None:
        (template_dir / "broken.html").write_bytes(b"\xff\xfe\x00bad")
        with caplog.at_level(logging.ERROR, logger="switchyard.serving"):
            env = load_templates(template_dir)
        assert "broken.html" in caplog.text
        assert render(env, "page.html", {"title": "ok"}) == "<h1>ok</h1>"


class TestTemplateReturnType:
    async def test_app_renders_template_returns(self, template_dir) -> None:
        app = App(AppConfig(template_dir=template_dir))
        app.router.path("home").handle(lambda: Template("page.html", title="Home"))
        async with TestClient(app) as client:
            response = await client.get("/home")
        assert response.status == 200
        assert response.text == "<h1>Home</h1>"

    async def test_template_without_environment_is_500(self) -> None:
        app = App()
        app.router.path("home").handle(lambda: Template("page.html", title="Home"))
        async with TestClient(app) as client:
            response = await client.get("/home")
        assert response.status == 500
