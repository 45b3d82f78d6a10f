"""
Microsite Routing Middleware for healtara

Maps the Host header (platform subdomain or custom domain) to a tenant
microsite and rewrites the request path to it. The visitor's URL does not
change; only the path served internally does.
"""
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from healtara.config import Settings, get_settings
from healtara.models.routing import Primary, LocalDev, PlatformSubdomain, ResolvedRoute
from healtara.services.classifier import classify, strip_port
from healtara.services.resolver import DirectoryResolver, doctor_slug_tier
from healtara.utils.slug import normalize

logger = logging.getLogger(__name__)


def path_under(path: str, prefix: str) -> bool:
    """True for the prefix itself or anything below it; /apiary is not under /api."""
    prefix = prefix.rstrip("/")
    if not prefix:
        return False
    return path == prefix or path.startswith(prefix + "/")


class MicrositeMiddleware(BaseHTTPMiddleware):
    """Middleware that routes tenant hostnames to their microsite."""

    def __init__(self, app, resolver: DirectoryResolver, settings: Settings = None):
        super().__init__(app)
        self.resolver = resolver
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        hostname = self.get_hostname(request)

        request.state.original_path = path
        request.state.host_classification = None
        request.state.resolved_route = None

        # API, static bundles and the admin area are never rewritten
        if self.is_passthrough_path(path):
            return await call_next(request)
        if self.is_admin_path(path):
            # Authorization happens in the page layer; the login page must stay
            # reachable here so it cannot loop back to itself
            request.state.is_admin_login = path.rstrip("/") == self.settings.admin_login_path
            return await call_next(request)

        classification = classify(hostname, self.settings)
        request.state.host_classification = classification

        if isinstance(classification, (Primary, LocalDev)):
            logger.debug(f"Pass-through {hostname}{path} ({type(classification).__name__})")
            return await call_next(request)

        route = await self.resolver.resolve(classification)
        if route is None:
            route = self.best_effort_route(classification, hostname)
        if route is None:
            return await call_next(request)

        target = route.rewrite(path)
        logger.info(f"Rewriting {hostname}{path} -> {target} ({route.tier})")
        request.state.resolved_route = route
        request.scope["path"] = target
        request.scope["raw_path"] = target.encode("utf-8")

        response = await call_next(request)
        response.headers["x-forwarded-host"] = hostname
        return response

    def get_hostname(self, request: Request) -> str:
        """Hostname without port. X-Forwarded-Host wins when trusted."""
        host = request.headers.get("host", "")
        if self.settings.trust_forwarded_host:
            forwarded = request.headers.get("x-forwarded-host", "")
            # Proxies may append; the first entry is the client-facing host
            host = forwarded.split(",")[0].strip() or host
        return strip_port(host)

    def is_passthrough_path(self, path: str) -> bool:
        return any(path_under(path, prefix) for prefix in self.settings.passthrough_path_prefixes)

    def is_admin_path(self, path: str) -> bool:
        prefix = self.settings.admin_path_prefix
        return bool(prefix) and path_under(path, prefix)

    @staticmethod
    def best_effort_route(classification, hostname: str) -> Optional[ResolvedRoute]:
        """Doctor-slug rewrite for a tenant host nothing matched."""
        if isinstance(classification, PlatformSubdomain):
            return doctor_slug_tier(normalize(classification.label))
        return doctor_slug_tier(normalize(hostname.split(".")[0]))
