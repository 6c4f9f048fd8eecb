"""Terminal serving actions: static files and kida templates."""

from switchyard.serving.files import ServeFiles
from switchyard.serving.templates import ServeTemplate, load_templates, template_handler

__all__ = ["ServeFiles", "ServeTemplate", "load_templates", "template_handler"]
