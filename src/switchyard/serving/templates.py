"""Template serving action.

A handler-supplied function picks the template name and data for each
request; the template is rendered from a kida environment loaded once
at startup.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kida import (
    Environment,
    FileSystemLoader,
    TemplateError,
    TemplateNotFoundError,
)

from switchyard._internal.invoke import invoke
from switchyard.errors import ConfigurationError, NotFound
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.routing.context import RoutingContext

logger = logging.getLogger("switchyard.serving")

type TemplateChooser = Callable[[Request], tuple[str, Any]]


def render(env: Environment, name: str, data: Any) -> str:
    """Render template *name* with *data*.

    A mapping becomes the template context; any other value is exposed
    to the template as ``data``. A missing template raises ``NotFound``.
    """
    try:
        template = env.get_template(name)
    except TemplateNotFoundError as exc:
        logger.debug("Template %r not found", name)
        raise NotFound(f"Template {name!r} not found") from exc
    context = dict(data) if isinstance(data, Mapping) else {"data": data}
    return template.render(context)


@dataclass(frozen=True, slots=True)
class ServeTemplate:
    """Routing action rendering ``func(request) -> (name, data)`` from *env*."""

    func: TemplateChooser
    env: Environment

    async def invoke(self, request: Request, context: RoutingContext) -> Response:
        name, data = await invoke(self.func, request)
        return Response(body=render(self.env, name, data))

    def routers(self) -> Iterator[object]:
        return iter(())


def template_handler(
    func: TemplateChooser,
    env: Environment,
) -> Callable[[Request], Awaitable[Response]]:
    """Wrap template selection as a plain handler, usable with ``handle()``.

    Usage::

        page = template_handler(lambda r: ("page.html", {"path": r.path}), env)
        root.exact_path("/").handle(page)
        root.path("about").split(is_mobile, page, desktop_page)
    """

    async def handler(request: Request) -> Response:
        name, data = await invoke(func, request)
        return Response(body=render(env, name, data))

    return handler


def load_templates(
    directory: str | Path,
    extension: str = ".html",
    *,
    autoescape: bool = True,
    trim_blocks: bool = True,
    lstrip_blocks: bool = True,
) -> Environment:
    """Create a kida environment over *directory* and precompile its templates.

    Every file below *directory* ending in *extension* is compiled once up
    front so syntax errors surface at startup. Templates that fail to
    compile are logged and skipped; the rest stay usable.
    """
    root = Path(directory)
    if not root.is_dir():
        msg = f"Template directory {str(root)!r} does not exist."
        raise ConfigurationError(msg)

    if not extension.startswith("."):
        extension = "." + extension

    env = Environment(
        loader=FileSystemLoader(str(root)),
        autoescape=autoescape,
        trim_blocks=trim_blocks,
        lstrip_blocks=lstrip_blocks,
    )

    loaded = 0
    for path in sorted(root.rglob(f"*{extension}")):
        if not path.is_file():
            continue
        name = path.relative_to(root).as_posix()
        try:
            env.get_template(name)
        except (TemplateError, OSError, UnicodeDecodeError):
            logger.exception("Error loading template %s", name)
        else:
            loaded += 1

    logger.debug("Loaded %d template(s) from %s", loaded, root)
    return env
