"""Application configuration.

AppConfig is a frozen dataclass read once when the app freezes.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, template_dir="templates")
    """

    debug: bool = False

    # Templates (kida environment is only created when template_dir is set)
    template_dir: str | Path | None = None
    template_extension: str = ".html"
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True
