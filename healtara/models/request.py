"""
Request models for healtara
"""
from __future__ import annotations
from pydantic import BaseModel, Field


class EstablishSessionRequest(BaseModel):
    """Token handed over in a #authToken= fragment, posted back by the
    receiving origin so it can set its own session cookie."""

    token: str = Field(..., min_length=1, description="Opaque session token to relay")
