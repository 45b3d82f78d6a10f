"""
Domain Classifier for healtara

Labels an inbound hostname as the primary site, a platform subdomain, a
tenant's custom domain or local development.
"""
import logging

from healtara.config import Settings
from healtara.models.routing import (
    HostClassification,
    Primary,
    LocalDev,
    PlatformSubdomain,
    CustomDomain,
)

logger = logging.getLogger(__name__)

LOCAL_HOSTS = frozenset(["localhost", "127.0.0.1"])


def strip_port(host: str) -> str:
    """Return the lowercased hostname without port or trailing dot."""
    host = (host or "").strip().lower()
    if host.startswith("["):
        # IPv6 literal, e.g. [::1]:8000
        return host.split("]")[0] + "]"
    return host.split(":")[0].rstrip(".")


def classify(hostname: str, settings: Settings) -> HostClassification:
    """Classify a hostname. Rules are applied in order; the first match wins."""
    host = strip_port(hostname)

    if not settings.enable_subdomain_routing:
        return Primary()

    if host in LOCAL_HOSTS:
        return LocalDev()
    if host.endswith(".localhost"):
        if settings.allow_localhost_subdomains:
            return PlatformSubdomain(host.split(".")[0])
        return LocalDev()

    if any(host == s or host.endswith("." + s) for s in settings.platform_host_suffixes):
        return Primary()

    labels = host.split(".")
    if host.startswith("[") or all(part.isdigit() for part in labels):
        # Bare IP, e.g. a load balancer health check
        return Primary()

    primary = strip_port(settings.primary_domain)
    if primary:
        if host == primary:
            return Primary()
        if host.endswith("." + primary):
            if labels[0] in settings.passthrough_labels:
                return Primary()
            return PlatformSubdomain(labels[0])
        if host:
            # Anything outside *.{primary} belongs to a tenant, www.* included
            return CustomDomain(host)
        return Primary()

    # No primary domain configured: a.b.c is taken to be a platform
    # subdomain and nothing can be called a custom domain
    if len(labels) > 2:
        if labels[0] in settings.passthrough_labels:
            return Primary()
        return PlatformSubdomain(labels[0])
    logger.debug(f"PRIMARY_DOMAIN not set, treating {host!r} as primary")
    return Primary()
