from .docs import DocRepository
from .portal_config import PortalConfigRepository
from .resources import ResourceRepository

__all__ = [
    "DocRepository",
    "PortalConfigRepository",
    "ResourceRepository",
]
