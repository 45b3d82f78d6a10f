"""
healtara - Main Application

Healthcare directory with per-tenant microsites. Hospitals and doctors are
served on their own subdomain ({name}.{PRIMARY_DOMAIN}) or on a custom
domain they point at the platform.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from healtara.config import Settings, get_settings
from healtara.routes import api_router, sites_router
from healtara.middleware import MicrositeMiddleware
from healtara.services.cache import TTLCache, CachedDirectory
from healtara.services.directory import Directory, YamlDirectory, HttpDirectory
from healtara.services.resolver import DirectoryResolver

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s %(asctime)s %(name)s %(message)s",
    )


def build_directory(settings: Settings, store: YamlDirectory) -> Directory:
    """Directory the router queries: the in-process store or the HTTP API,
    behind a TTL cache unless the TTL is 0."""
    directory: Directory = store
    if settings.directory_backend == "api":
        if settings.api_base_url:
            directory = HttpDirectory(
                settings.api_base_url,
                timeout=settings.directory_timeout_seconds,
            )
        else:
            logger.warning("DIRECTORY_BACKEND=api but API_BASE_URL is not set, using the local directory")

    if settings.directory_cache_ttl_seconds > 0:
        directory = CachedDirectory(directory, TTLCache(settings.directory_cache_ttl_seconds))
    return directory


def create_app(
    settings: Settings = None,
    store: YamlDirectory = None,
    directory: Directory = None,
) -> FastAPI:
    """Build the application. Arguments override the configured defaults."""
    settings = settings or get_settings()
    store = store or YamlDirectory(settings.directory_path)
    directory = directory or build_directory(settings, store)
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Healthcare directory with tenant microsites on subdomains and custom domains",
        version="0.1.0",
        debug=settings.debug
    )
    app.state.settings = settings
    app.state.store = store
    app.state.directory = directory

    # Middleware stack (order matters - last added runs first)
    app.add_middleware(
        MicrositeMiddleware,
        resolver=DirectoryResolver(directory, timeout_seconds=settings.directory_timeout_seconds),
        settings=settings,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.include_router(sites_router)

    @app.on_event("startup")
    async def startup_event():
        """Report the configured tenants on startup."""
        hospitals = store.list_hospitals()
        print("healtara starting...")
        print(f"Primary domain: {settings.primary_domain or '(derived from host)'}")
        print(f"Subdomain routing: {'on' if settings.enable_subdomain_routing else 'off'}"
              f" / directory: {settings.directory_backend}")
        print(f"Hospitals: {len(hospitals)}, doctors: {len(store.list_doctors())}")
        for hospital in hospitals:
            domains = [d for d in (hospital.subdomain, hospital.custom_domain) if d]
            print(f"   • {hospital.name}{' (' + ', '.join(domains) + ')' if domains else ''}")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        await directory.aclose()
        print("healtara shutting down...")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "healtara.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
