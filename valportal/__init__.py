"""
VAL portal package initializer.

This package serves per-organization resource portals: a tab/section sitemap
of dashboards, workflows, tables and queries, gated by an access-code login
and embeddable in the tenant's own site.

The package exposes a ``__version__`` attribute indicating the installed
version. The version is read from pyproject.toml via importlib.metadata – this
is the single source of truth.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("val-portal")
except PackageNotFoundError:
    # Package is not installed (running from source without pip install -e .)
    __version__ = "0.0.0.dev"

__all__: list[str] = ["__version__"]
