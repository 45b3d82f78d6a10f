"""
Directory Resolver for healtara

Turns a HostClassification into the internal microsite route to serve.

Each fallback tier is its own function. DirectoryResolver.resolve runs them
in a fixed order:

    platform subdomain:  reserved hospital-{ref} -> explicit subdomain
                         -> hospital name -> doctor slug
    custom domain:       custom domain field -> hospital name -> doctor slug
    primary / local dev: nothing

Any lookup that fails or times out skips the remaining directory tiers and
goes straight to the doctor-slug tier. resolve() never raises.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from healtara.models.routing import (
    HostClassification,
    PlatformSubdomain,
    CustomDomain,
    ResolvedRoute,
)
from healtara.models.tenant import Hospital
from healtara.services.directory import Directory
from healtara.utils.slug import normalize, is_subdomain_label, reserved_hospital_ref

logger = logging.getLogger(__name__)


# =============================================================================
# Tiers
# =============================================================================

def reserved_prefix_tier(label: str) -> Optional[ResolvedRoute]:
    """hospital-{id or slug} routes directly, without a directory query."""
    ref = reserved_hospital_ref(label)
    if ref is None:
        return None
    return ResolvedRoute.hospital(ref, tier="reserved_prefix")


async def explicit_subdomain_tier(directory: Directory, label: str) -> Optional[ResolvedRoute]:
    """Hospital whose admin assigned this exact subdomain."""
    hospital = await directory.find_hospital_by_subdomain(label)
    if hospital is None:
        return None
    stored = (hospital.subdomain or "").strip().lower()
    if not is_subdomain_label(stored) or stored != label:
        logger.debug(f"Ignoring malformed stored subdomain {hospital.subdomain!r} on hospital {hospital.id}")
        return None
    return ResolvedRoute.hospital(hospital.id, tier="explicit_subdomain")


async def custom_domain_tier(directory: Directory, host: str) -> Optional[ResolvedRoute]:
    """Hospital whose custom domain equals the host (case-insensitive)."""
    hospital = await directory.find_hospital_by_custom_domain(host)
    if hospital is None:
        return None
    if (hospital.custom_domain or "").strip().lower() != host.lower():
        logger.debug(f"Ignoring mismatched custom domain {hospital.custom_domain!r} on hospital {hospital.id}")
        return None
    return ResolvedRoute.hospital(hospital.id, tier="custom_domain")


async def name_match_tier(directory: Directory, candidate: str) -> Optional[ResolvedRoute]:
    """Hospital whose normalized name equals the candidate label."""
    if not candidate:
        return None
    hospital: Optional[Hospital] = await directory.find_hospital_by_name(candidate)
    if hospital is None or normalize(hospital.name) != candidate:
        return None
    return ResolvedRoute.hospital(hospital.id, tier="name_match")


def doctor_slug_tier(slug: str) -> Optional[ResolvedRoute]:
    """Anything left over is taken to be a doctor slug. The doctor page
    reports its own not-found state if there is no such doctor."""
    if not slug:
        return None
    return ResolvedRoute.doctor(slug, tier="doctor_slug")


def custom_domain_candidates(host: str) -> List[str]:
    """Label forms of a custom domain to match against hospital names:
    the whole host ("apollo-care-com") then its first label ("apollo-care")."""
    candidates = []
    for candidate in (normalize(host.replace(".", "-")), normalize(host.split(".")[0])):
        if candidate and candidate not in candidates:
            candidates.append(candidate)
    return candidates


# =============================================================================
# Resolver
# =============================================================================

class DirectoryResolver:
    """Runs the tiers for a classification against a directory."""

    def __init__(self, directory: Directory, timeout_seconds: float = 2.0):
        self.directory = directory
        self.timeout_seconds = timeout_seconds

    async def resolve(self, classification: HostClassification) -> Optional[ResolvedRoute]:
        """Resolve a classification to a route. None means NotFound."""
        if isinstance(classification, PlatformSubdomain):
            return await self._resolve_subdomain(classification.label)
        if isinstance(classification, CustomDomain):
            return await self._resolve_custom_domain(classification.host)
        # Primary, LocalDev
        return None

    async def _resolve_subdomain(self, label: str) -> Optional[ResolvedRoute]:
        label = label.lower()

        route = reserved_prefix_tier(label)
        if route:
            return route

        lookups = [
            ("explicit_subdomain", lambda: explicit_subdomain_tier(self.directory, label)),
            ("name_match", lambda: name_match_tier(self.directory, normalize(label))),
        ]
        route = await self._run_lookups(label, lookups)
        return route or doctor_slug_tier(normalize(label))

    async def _resolve_custom_domain(self, host: str) -> Optional[ResolvedRoute]:
        host = host.lower()

        lookups = [("custom_domain", lambda: custom_domain_tier(self.directory, host))]
        for candidate in custom_domain_candidates(host):
            lookups.append(
                ("name_match", lambda candidate=candidate: name_match_tier(self.directory, candidate))
            )
        route = await self._run_lookups(host, lookups)
        return route or doctor_slug_tier(normalize(host.split(".")[0]))

    async def _run_lookups(
        self,
        candidate: str,
        lookups: List[tuple[str, Callable[[], Awaitable[Optional[ResolvedRoute]]]]],
    ) -> Optional[ResolvedRoute]:
        """Run directory tiers in order until one matches.

        All tiers share one deadline of timeout_seconds. A failed or
        timed-out lookup abandons the remaining tiers."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_seconds
        for tier, lookup in lookups:
            try:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise asyncio.TimeoutError()
                route = await asyncio.wait_for(lookup(), timeout=remaining)
            except asyncio.TimeoutError:
                logger.warning(
                    f"Directory lookup timed out after {self.timeout_seconds}s "
                    f"(tier={tier}, candidate={candidate!r}), falling back to doctor slug"
                )
                return None
            except Exception as e:
                logger.warning(
                    f"Directory lookup failed (tier={tier}, candidate={candidate!r}): {e}, "
                    f"falling back to doctor slug"
                )
                return None
            if route:
                return route
        return None
