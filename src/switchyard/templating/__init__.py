"""kida integration: environment setup and the ``Template`` return type."""

from switchyard.templating.integration import create_environment
from switchyard.templating.returns import Template

__all__ = ["Template", "create_environment"]
