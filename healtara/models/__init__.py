"""Backend models."""
from healtara.models.tenant import Hospital, Doctor
from healtara.models.routing import (
    Primary,
    LocalDev,
    PlatformSubdomain,
    CustomDomain,
    HostClassification,
    ResolvedRoute,
)
from healtara.models.request import EstablishSessionRequest
from healtara.models.response import MicrositeLink, HospitalPage, DoctorPage

__all__ = [
    "Hospital",
    "Doctor",
    "Primary",
    "LocalDev",
    "PlatformSubdomain",
    "CustomDomain",
    "HostClassification",
    "ResolvedRoute",
    "EstablishSessionRequest",
    "MicrositeLink",
    "HospitalPage",
    "DoctorPage",
]
