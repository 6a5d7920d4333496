"""Service layer: portal data glue, access-code login and resource search."""

from .auth import (AuthError, AuthNotConfiguredError, AuthService,
                   InvalidAccessCodeError)
from .portal import NavItem, PortalPage, PortalService
from .search import ResourceSearch

__all__ = [
    "AuthError",
    "AuthNotConfiguredError",
    "AuthService",
    "InvalidAccessCodeError",
    "NavItem",
    "PortalPage",
    "PortalService",
    "ResourceSearch",
]
