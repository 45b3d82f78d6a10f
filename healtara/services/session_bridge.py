"""
Cross-Origin Session Bridge for healtara

Builds "visit site" URLs for tenant microsites and carries the visitor's
session token across the origin change.

The token travels as a URL fragment (#authToken=...), never as a query
parameter, so it stays out of server and proxy logs. The destination origin
reads the fragment on load (read_handoff_fragment) and re-establishes the
session. Subdomains of the primary domain could also share a cookie scoped
to the parent domain (session_cookie_domain), but custom domains are
separate origins and only the fragment survives navigation to them.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote, unquote, urlsplit

from healtara.config import Settings
from healtara.models.routing import LocalDev, DOCTOR_SITE_PREFIX, HOSPITAL_SITE_PREFIX
from healtara.models.tenant import Hospital, Doctor
from healtara.services.classifier import classify, strip_port, LOCAL_HOSTS
from healtara.utils.slug import normalize, is_subdomain_label, is_valid_subdomain

HANDOFF_KEY = "authToken"

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class NavigationContext:
    """Where the visitor is now, and the token they hold (if any)."""
    hostname: str
    protocol: str = "https"
    port: Optional[int] = None
    auth_token: Optional[str] = None

    @property
    def port_suffix(self) -> str:
        if not self.port or DEFAULT_PORTS.get(self.protocol) == self.port:
            return ""
        return f":{self.port}"


TenantRef = Union[Hospital, Doctor]


def should_use_cross_domain_nav(settings: Settings, context: NavigationContext) -> bool:
    """Whether "visit site" should leave for the tenant's own (sub)domain."""
    if not settings.enable_subdomain_routing:
        return False
    if isinstance(classify(context.hostname, settings), LocalDev):
        # Browser extensions and local tooling reject synthetic local subdomains
        return settings.allow_localhost_subdomains
    return True


def root_domain(settings: Settings, context: NavigationContext) -> str:
    """The configured primary domain, or one derived from the current host."""
    configured = strip_port(settings.primary_domain)
    if configured:
        return configured

    host = strip_port(context.hostname)
    if host.endswith(".localhost"):
        return "localhost"
    if host in LOCAL_HOSTS:
        return "localhost"
    parts = host.split(".")
    if len(parts) >= 3:
        return ".".join(parts[1:])
    return host


def tenant_host(tenant: TenantRef, settings: Settings, context: NavigationContext) -> str:
    """Pick the hostname a tenant's microsite lives on.

    Preference: custom domain, explicit subdomain, normalized name (doctor
    slug for doctors), then the reserved hospital-{id} label.
    """
    root = root_domain(settings, context)

    custom = (getattr(tenant, "custom_domain", None) or "").strip().lower()
    if custom and is_valid_subdomain(custom) and "." in custom:
        return custom

    subdomain = (getattr(tenant, "subdomain", None) or "").strip().lower()
    if is_subdomain_label(subdomain):
        return f"{subdomain}.{root}"

    if isinstance(tenant, Doctor):
        label = normalize(tenant.slug)
    else:
        label = normalize(tenant.name)
        if not label or label.startswith("hospital-"):
            # Unrepresentable as a bare name; hospital-{name} would be read as an ID/slug
            label = f"hospital-{tenant.id}"
    return f"{label}.{root}"


def build_tenant_url(tenant: TenantRef, settings: Settings, context: NavigationContext) -> str:
    """Full microsite URL, with #authToken=... appended when a token is held."""
    host = tenant_host(tenant, settings, context)
    url = f"{context.protocol}://{host}{context.port_suffix}/"
    if context.auth_token:
        return f"{url}#{HANDOFF_KEY}={quote(context.auth_token, safe='')}"
    return url


def microsite_path(tenant: TenantRef) -> str:
    """On-domain microsite path, for when cross-domain nav is off."""
    if isinstance(tenant, Doctor):
        return f"{DOCTOR_SITE_PREFIX}/{tenant.slug}"
    return f"{HOSPITAL_SITE_PREFIX}/{tenant.id}"


def read_handoff_fragment(url_or_fragment: str) -> Optional[str]:
    """Recover the token from a URL (or bare fragment) built by build_tenant_url."""
    if not url_or_fragment:
        return None
    if "#" in url_or_fragment:
        fragment = urlsplit(url_or_fragment).fragment
    else:
        fragment = url_or_fragment
    for pair in fragment.split("&"):
        key, _, value = pair.partition("=")
        if key == HANDOFF_KEY and value:
            return unquote(value)
    return None


def session_cookie_domain(hostname: str, settings: Settings) -> Optional[str]:
    """Domain attribute for the session cookie on this host.

    The primary domain and its subdomains share a parent-domain cookie;
    custom domains (and anything else) get a host-only cookie (None).
    """
    host = strip_port(hostname)
    primary = strip_port(settings.primary_domain)
    if not primary or host in LOCAL_HOSTS:
        return None
    if host == primary or host.endswith("." + primary):
        return "." + primary
    return None