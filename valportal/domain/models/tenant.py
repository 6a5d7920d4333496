"""Tenant (organization domain) display information."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

DEFAULT_DOMAIN_NAMES: dict[str, str] = {
    "lag": "Les Amis Group",
    "koi": "Koi",
    "suntec": "Suntec",
    "jfh": "JFH Group",
    "grain": "Grain",
    "fk": "FK Group",
    "saladstop": "SaladStop!",
    "dapaolo": "Da Paolo",
    "ssg": "Select Group",
    "seg": "SEG Group",
}


@dataclass(frozen=True)
class DomainInfo:
    """Display name and platform base URL for a tenant."""

    domain: str
    name: str
    base_url: str

    @property
    def initials(self) -> str:
        return self.name[:2].upper()


def get_domain_info(
    domain: str,
    *,
    host_template: str = "https://{domain}.thinkval.io",
    overrides: Mapping[str, str] | None = None,
) -> DomainInfo:
    """Resolve the display information for ``domain``.

    Unknown domains are displayed as their upper-cased identifier.
    """
    names = {**DEFAULT_DOMAIN_NAMES, **(overrides or {})}
    return DomainInfo(
        domain=domain,
        name=names.get(domain) or domain.upper(),
        base_url=host_template.format(domain=domain),
    )
