"""
Response models for healtara
"""
from __future__ import annotations
from typing import Optional, Any, Literal, List, Dict
from pydantic import BaseModel, Field

from healtara.models.tenant import Hospital, Doctor


class SubdomainAvailability(BaseModel):
    """Whether a subdomain can still be claimed."""

    available: bool = Field(..., description="True if no hospital holds this subdomain")


class HospitalSubdomainList(BaseModel):
    """Hospitals that have an explicit subdomain."""

    data: List[Hospital] = Field(default_factory=list)
    count: int = Field(0, description="Number of hospitals returned")


class MicrositeLink(BaseModel):
    """
    Where a "visit site" click should navigate.
    """

    url: str = Field(..., description="Destination URL, possibly carrying #authToken=")
    cross_domain: bool = Field(
        ...,
        description="False when subdomain navigation is disabled and url is an on-domain path"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "url": "https://apollo-care.example.com/#authToken=eyJhbGciOi...",
                "cross_domain": True
            }
        }


class MicrositePage(BaseModel):
    """
    Content a microsite path serves. Stands in for the page renderer.
    """

    path: str = Field("/", description="Sub-path requested within the microsite")
    host: Optional[str] = Field(None, description="Hostname the visitor used")
    meta: Optional[Dict[str, Any]] = Field(
        default_factory=dict,
        description="Routing metadata (classification, resolution tier)"
    )


class HospitalPage(MicrositePage):
    tenant_kind: Literal["hospital"] = "hospital"
    tenant: Hospital = Field(..., description="Hospital record")


class DoctorPage(MicrositePage):
    tenant_kind: Literal["doctor"] = "doctor"
    tenant: Doctor = Field(..., description="Doctor record")


class SessionEstablished(BaseModel):
    """Result of re-establishing a session on a tenant origin."""

    established: bool = True
    cookie_domain: Optional[str] = Field(None, description="Cookie Domain attribute (None = host-only)")


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str = Field(..., description="Error message")
