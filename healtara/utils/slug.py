"""
Slug helpers for healtara

The same normalizer runs when microsite links are generated from a tenant's
display name and when an inbound hostname label is matched against stored
names, so both sides always agree.
"""
import re

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

SUBDOMAIN_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

# Labels that can never be claimed as a hospital subdomain
RESERVED_SUBDOMAINS = frozenset([
    "www",
    "api",
    "admin",
    "doctor",
    "doctors",
    "hospital",
    "hospitals",
])

# hospital-{id or slug} always routes straight to the hospital microsite
RESERVED_HOSPITAL_PREFIX = "hospital-"


def normalize(text: str) -> str:
    """Convert free text into a canonical URL-safe identifier.

    >>> normalize("  City General Hospital ")
    'city-general-hospital'
    """
    s = (text or "").lower()
    s = _DISALLOWED.sub("", s)
    s = _WHITESPACE.sub("-", s)
    s = _HYPHENS.sub("-", s)
    return s.strip("-")


def is_subdomain_label(value: str) -> bool:
    """True if value is a well-formed single subdomain label."""
    return bool(value) and SUBDOMAIN_PATTERN.match(value) is not None


def is_valid_subdomain(value: str) -> bool:
    """Check a subdomain (or custom domain) an administrator wants to claim."""
    v = (value or "").strip().lower()
    if not v or v in RESERVED_SUBDOMAINS:
        return False
    if len(v) < 2 or len(v) > 63:
        return False
    if not re.fullmatch(r"[a-z0-9.-]+", v):
        return False
    if v[0] in ".-" or v[-1] in ".-":
        return False
    return True


def reserved_hospital_ref(label: str):
    """Return the {suffix} of a hospital-{suffix} label, or None."""
    if label.startswith(RESERVED_HOSPITAL_PREFIX):
        suffix = label[len(RESERVED_HOSPITAL_PREFIX):]
        if suffix:
            return suffix
    return None
