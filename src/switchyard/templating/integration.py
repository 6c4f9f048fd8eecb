"""Kida environment setup from AppConfig.

The environment is created once when the app freezes and shared,
read-only, by every request.
"""

from kida import Environment

from switchyard.config import AppConfig
from switchyard.serving.templates import load_templates


def create_environment(config: AppConfig) -> Environment | None:
    """Create the app's kida environment, or ``None`` without a template dir."""
    if config.template_dir is None:
        return None
    return load_templates(
        config.template_dir,
        config.template_extension,
        autoescape=config.autoescape,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )
