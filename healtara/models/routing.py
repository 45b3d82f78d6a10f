"""
Routing values for healtara

A HostClassification labels an inbound hostname; a ResolvedRoute is where the
request gets rewritten to. Both are computed per request and never stored.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Literal, Union

HOSPITAL_SITE_PREFIX = "/hospital-site"
DOCTOR_SITE_PREFIX = "/site"


@dataclass(frozen=True)
class Primary:
    """The platform's own site (or routing is switched off)."""


@dataclass(frozen=True)
class LocalDev:
    """localhost / 127.0.0.1; no tenant routing."""


@dataclass(frozen=True)
class PlatformSubdomain:
    """{label}.{primary domain}"""
    label: str


@dataclass(frozen=True)
class CustomDomain:
    """A tenant-owned hostname pointed at the platform."""
    host: str


HostClassification = Union[Primary, LocalDev, PlatformSubdomain, CustomDomain]


@dataclass(frozen=True)
class ResolvedRoute:
    """Internal microsite path a tenant request is served from."""
    target_path: str
    tenant_kind: Literal["hospital", "doctor"]
    tenant_ref: str
    tier: str  # Which resolution tier produced it

    @classmethod
    def hospital(cls, ref, tier: str) -> ResolvedRoute:
        return cls(f"{HOSPITAL_SITE_PREFIX}/{ref}", "hospital", str(ref), tier)

    @classmethod
    def doctor(cls, slug: str, tier: str) -> ResolvedRoute:
        return cls(f"{DOCTOR_SITE_PREFIX}/{slug}", "doctor", slug, tier)

    def rewrite(self, path: str) -> str:
        """Prefix the requested path with the microsite path."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.target_path}{path}"
