"""
API Routes for healtara

Directory lookups used by the microsite router (when it runs out of process),
subdomain availability checks, "visit site" link building and session
re-establishment on tenant origins.
"""
from fastapi import APIRouter, Request, HTTPException
from fastapi.responses import JSONResponse
from typing import Optional

from healtara.config import Settings
from healtara.models.request import EstablishSessionRequest
from healtara.models.response import (
    SubdomainAvailability,
    HospitalSubdomainList,
    MicrositeLink,
    SessionEstablished,
    ErrorResponse,
)
from healtara.models.tenant import Hospital, Doctor
from healtara.services.directory import YamlDirectory
from healtara.services.classifier import strip_port
from healtara.services.session_bridge import (
    NavigationContext,
    TenantRef,
    should_use_cross_domain_nav,
    build_tenant_url,
    microsite_path,
    session_cookie_domain,
)
from healtara.utils.slug import is_valid_subdomain

router = APIRouter(prefix="/api")

NOT_FOUND = {404: {"model": ErrorResponse}}


def get_store(request: Request) -> YamlDirectory:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_auth_token(request: Request) -> Optional[str]:
    """Session token from the auth cookie, else from a Bearer header."""
    settings = get_app_settings(request)
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


def navigation_context(request: Request) -> NavigationContext:
    """Describe the origin the visitor is navigating from."""
    return NavigationContext(
        hostname=strip_port(request.headers.get("host", request.url.hostname or "")),
        protocol=request.url.scheme,
        port=request.url.port,
        auth_token=get_auth_token(request),
    )


def build_link(request: Request, tenant: TenantRef) -> MicrositeLink:
    settings = get_app_settings(request)
    context = navigation_context(request)
    if not should_use_cross_domain_nav(settings, context):
        return MicrositeLink(url=microsite_path(tenant), cross_domain=False)
    return MicrositeLink(url=build_tenant_url(tenant, settings, context), cross_domain=True)


# =============================================================================
# Directory lookups
# =============================================================================

@router.get("/hospitals/subdomain-available/{name}", response_model=SubdomainAvailability)
async def subdomain_available(request: Request, name: str):
    """Check whether a subdomain can still be claimed."""
    raw = name.strip().lower()
    if not is_valid_subdomain(raw):
        raise HTTPException(status_code=400, detail="Invalid subdomain format")
    existing = await get_store(request).find_hospital_by_subdomain(raw)
    return SubdomainAvailability(available=existing is None)


@router.get("/hospitals/subdomain/{name}", response_model=Hospital, responses=NOT_FOUND)
async def hospital_by_subdomain(request: Request, name: str):
    """Resolve a hospital by its explicit subdomain."""
    hospital = await get_store(request).find_hospital_by_subdomain(name.lower())
    if not hospital:
        raise HTTPException(status_code=404, detail="Hospital not found")
    return hospital


@router.get("/hospitals/custom-domain/{host}", response_model=Hospital, responses=NOT_FOUND)
async def hospital_by_custom_domain(request: Request, host: str):
    """Resolve a hospital by its custom domain."""
    hospital = await get_store(request).find_hospital_by_custom_domain(strip_port(host))
    if not hospital:
        raise HTTPException(status_code=404, detail="Hospital not found")
    return hospital


@router.get("/hospitals/by-name/{normalized_name}", response_model=Hospital, responses=NOT_FOUND)
async def hospital_by_name(request: Request, normalized_name: str):
    """Resolve a hospital whose normalized name matches."""
    hospital = await get_store(request).find_hospital_by_name(normalized_name.lower())
    if not hospital:
        raise HTTPException(status_code=404, detail="Hospital not found")
    return hospital


@router.get("/hospitals/{id_or_slug}", response_model=Hospital, responses=NOT_FOUND)
async def hospital_by_id_or_slug(request: Request, id_or_slug: str):
    hospital = await get_store(request).get_hospital(id_or_slug)
    if not hospital:
        raise HTTPException(status_code=404, detail="Hospital not found")
    return hospital


@router.get("/doctors/slug/{slug}", response_model=Doctor, responses=NOT_FOUND)
async def doctor_by_slug(request: Request, slug: str):
    doctor = await get_store(request).get_doctor(slug)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return doctor


@router.get("/hospital-subdomains", response_model=HospitalSubdomainList)
async def list_hospital_subdomains(request: Request):
    """List hospitals that have an explicit subdomain."""
    hospitals = [h for h in get_store(request).list_hospitals() if h.subdomain]
    return HospitalSubdomainList(data=hospitals, count=len(hospitals))


# =============================================================================
# Microsite navigation
# =============================================================================

@router.get("/microsites/hospitals/{hospital_id}/link", response_model=MicrositeLink, responses=NOT_FOUND)
async def hospital_link(request: Request, hospital_id: str):
    """Where "visit site" for a hospital should go."""
    if not hospital_id.isdigit():
        raise HTTPException(status_code=400, detail="Invalid hospital id")
    hospital = await get_store(request).get_hospital(hospital_id)
    if not hospital:
        raise HTTPException(status_code=404, detail="Hospital not found")
    return build_link(request, hospital)


@router.get("/microsites/doctors/{slug}/link", response_model=MicrositeLink, responses=NOT_FOUND)
async def doctor_link(request: Request, slug: str):
    """Where "visit site" for a doctor should go."""
    doctor = await get_store(request).get_doctor(slug)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return build_link(request, doctor)


@router.post("/session/establish", response_model=SessionEstablished)
async def establish_session(request: Request, body: EstablishSessionRequest):
    """Set the session cookie on this origin from a handed-over token.

    The token is relayed as-is; it is never issued or inspected here.
    """
    settings = get_app_settings(request)
    hostname = strip_port(request.headers.get("host", ""))
    cookie_domain = session_cookie_domain(hostname, settings)

    response = JSONResponse(
        content=SessionEstablished(established=True, cookie_domain=cookie_domain).model_dump()
    )
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=body.token,
        max_age=settings.auth_cookie_max_age,
        domain=cookie_domain,
        secure=request.url.scheme == "https",
        httponly=False,  # the client bootstrap reads it back
        samesite="lax",
    )
    return response


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint."""
    settings = get_app_settings(request)
    store = get_store(request)
    return {
        "status": "healthy",
        "subdomain_routing": settings.enable_subdomain_routing,
        "directory_backend": settings.directory_backend,
        "hospitals": len(store.list_hospitals()),
        "doctors": len(store.list_doctors()),
    }
