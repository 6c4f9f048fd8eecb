"""Static file serving action.

Serves the request's remaining (unconsumed) path segments as a file
under a base directory. Directories resolve to an index file; no
directory listings are ever produced.
"""

import logging
import mimetypes
from collections.abc import Iterator, Sequence
from pathlib import Path

from switchyard.errors import NotFound
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.routing.context import RoutingContext

logger = logging.getLogger("switchyard.serving")


class ServeFiles:
    """Serve files from *directory*, addressed by the remaining path.

    For a directory, ``index.html`` is tried first, then
    ``index.<ext>`` for each of *index_extensions* in order. Anything
    that cannot be resolved to a regular file inside *directory*
    responds 404.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.

    Usage::

        root.path("static").serve_files("./public")
        root.fallback().serve_files("/srv", ["php"])
    """

    __slots__ = ("_cache_control", "_directory", "_index_names")

    def __init__(
        self,
        directory: str | Path,
        index_extensions: Sequence[str] = (),
        *,
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        extra = (f"index.{ext.lstrip('.')}" for ext in index_extensions)
        self._index_names = ("index.html", *extra)
        self._cache_control = cache_control

    def __repr__(self) -> str:
        return f"ServeFiles({str(self._directory)!r}, index={self._index_names!r})"

    @property
    def directory(self) -> Path:
        return self._directory

    async def invoke(self, request: Request, context: RoutingContext) -> Response:
        return self._serve_file(self.resolve(context.remaining))

    def routers(self) -> Iterator[object]:
        return iter(())

    def resolve(self, segments: Sequence[str]) -> Path:
        """Map path *segments* to a servable file, or raise ``NotFound``."""
        try:
            file_path = self._directory.joinpath(*segments).resolve()
            if not file_path.is_relative_to(self._directory):
                logger.debug("Refusing path outside %s: %s", self._directory, file_path)
                raise NotFound

            if file_path.is_dir():
                for name in self._index_names:
                    index_path = file_path / name
                    if index_path.is_file():
                        return index_path
                raise NotFound

            if not file_path.is_file():
                raise NotFound
        except (OSError, ValueError) as exc:
            logger.debug("Cannot resolve %r under %s: %s", segments, self._directory, exc)
            raise NotFound from exc
        return file_path

    def _serve_file(self, file_path: Path) -> Response:
        """Read a file and build a response."""
        content_type, _ = mimetypes.guess_type(file_path.name)
        if content_type is None:
            content_type = "application/octet-stream"

        try:
            body = file_path.read_bytes()
        except OSError as exc:
            logger.debug("Cannot read %s: %s", file_path, exc)
            raise NotFound from exc

        return (
            Response(body=body, content_type=content_type)
            .with_header("Content-Length", str(len(body)))
            .with_header("Cache-Control", self._cache_control)
        )
