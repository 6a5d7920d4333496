"""Click commands for the portal.

``valportal`` (see ``pyproject.toml``) runs :func:`cli`.
"""

from .__main__ import cli
from .config_cmd import config
from .docs import docs
from .resources import resources
from .serve import serve

__all__ = [
    "cli",
    "config",
    "docs",
    "resources",
    "serve",
]
