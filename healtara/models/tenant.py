"""
Tenant models for healtara

Hospitals and doctors are the tenants that own a microsite. Records are owned
by the directory; the routing core only reads them.
"""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


class Hospital(BaseModel):
    """A hospital listed in the directory."""

    id: int = Field(..., description="Numeric hospital ID")
    name: str = Field(..., description="Display name")
    slug: Optional[str] = Field(None, description="URL slug, if one was assigned")
    subdomain: Optional[str] = Field(None, description="Explicit subdomain label set by the hospital admin")
    custom_domain: Optional[str] = Field(None, description="Hospital-owned domain delegated to the platform")
    city: Optional[str] = None
    state: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": 7,
                "name": "Apollo Care",
                "slug": "apollo-care",
                "subdomain": None,
                "custom_domain": "apollocare.health",
                "city": "Chennai",
                "state": "Tamil Nadu"
            }
        }


class Doctor(BaseModel):
    """A doctor listed in the directory. Doctors are addressed by slug."""

    id: int = Field(..., description="Numeric doctor ID")
    slug: str = Field(..., description="Microsite slug")
    name: Optional[str] = Field(None, description="Display name")
    specialization: Optional[str] = None
    hospital_id: Optional[int] = Field(None, description="Affiliated hospital, if any")
