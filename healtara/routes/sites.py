"""
Microsite pages for healtara

Serves the internal microsite paths the router rewrites to:
/hospital-site/{id or slug} and /site/{doctor slug}. Tenant content is
returned as JSON for the frontend to render.
"""
from fastapi import APIRouter, Request, HTTPException

from healtara.models.response import HospitalPage, DoctorPage, ErrorResponse
from healtara.models.routing import HOSPITAL_SITE_PREFIX, DOCTOR_SITE_PREFIX
from healtara.routes.api import get_store

router = APIRouter()


def page_meta(request: Request) -> dict:
    """Routing details the middleware left on the request."""
    classification = getattr(request.state, "host_classification", None)
    route = getattr(request.state, "resolved_route", None)
    return {
        "classification": type(classification).__name__ if classification else None,
        "tier": route.tier if route else None,
        "original_path": getattr(request.state, "original_path", request.url.path),
    }


@router.get(HOSPITAL_SITE_PREFIX + "/{ref}", response_model=HospitalPage, responses={404: {"model": ErrorResponse}})
@router.get(HOSPITAL_SITE_PREFIX + "/{ref}/{path:path}", response_model=HospitalPage, responses={404: {"model": ErrorResponse}})
async def hospital_site(request: Request, ref: str, path: str = ""):
    """Hospital microsite. ref is tried as a numeric ID, then as a slug."""
    hospital = await get_store(request).get_hospital(ref)
    if not hospital:
        raise HTTPException(status_code=404, detail="Hospital not found")
    return HospitalPage(
        tenant=hospital,
        path="/" + path,
        host=request.headers.get("host"),
        meta=page_meta(request),
    )


@router.get(DOCTOR_SITE_PREFIX + "/{slug}", response_model=DoctorPage, responses={404: {"model": ErrorResponse}})
@router.get(DOCTOR_SITE_PREFIX + "/{slug}/{path:path}", response_model=DoctorPage, responses={404: {"model": ErrorResponse}})
async def doctor_site(request: Request, slug: str, path: str = ""):
    """Doctor microsite."""
    doctor = await get_store(request).get_doctor(slug)
    if not doctor:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return DoctorPage(
        tenant=doctor,
        path="/" + path,
        host=request.headers.get("host"),
        meta=page_meta(request),
    )


@router.get("/")
async def home(request: Request):
    """Primary-domain homepage."""
    settings = request.app.state.settings
    return {"app": settings.app_name, "hospitals": len(get_store(request).list_hospitals())}
