"""Domain model package for the portal."""

from .resource import (DocItem, DocType, ResourceType, SitemapResource,
                       build_resource_url)
from .tenant import DEFAULT_DOMAIN_NAMES, DomainInfo, get_domain_info

__all__ = [
    "DEFAULT_DOMAIN_NAMES",
    "DocItem",
    "DocType",
    "DomainInfo",
    "ResourceType",
    "SitemapResource",
    "build_resource_url",
    "get_domain_info",
]
