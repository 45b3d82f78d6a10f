"""
healtara Configuration
"""
from __future__ import annotations
from typing import List, Literal
from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache


DEFAULT_DIRECTORY_PATH = Path(__file__).parent.parent / "data" / "directory.yaml"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Microsite Routing
    # PRIMARY_DOMAIN is the platform's registrable domain (e.g. "example.com").
    # Left empty, custom domains are never recognised and the session bridge
    # derives the root domain from the current hostname.
    primary_domain: str = ""
    enable_subdomain_routing: bool = True  # Kill-switch
    # Re-enables tenant routing under *.localhost (and cross-domain nav from
    # localhost) for local testing. Off by default.
    allow_localhost_subdomains: bool = False
    # Hostnames ending with these belong to the hosting provider, never a tenant
    platform_host_suffixes: List[str] = ["vercel.app", "vercel.dev"]
    # First labels that always mean the primary site
    passthrough_labels: List[str] = ["www"]
    # Paths that are never classified or rewritten
    passthrough_path_prefixes: List[str] = ["/api", "/static", "/_next", "/favicon.ico"]
    trust_forwarded_host: bool = False

    # Admin area
    admin_path_prefix: str = "/admin-secure-panel"

    # Directory Lookups
    # "yaml": in-process directory file, "api": query API_BASE_URL over HTTP
    directory_backend: Literal["yaml", "api"] = "yaml"
    directory_path: Path = DEFAULT_DIRECTORY_PATH
    api_base_url: str = ""
    directory_timeout_seconds: float = 2.0
    directory_cache_ttl_seconds: int = 30  # 0 disables the lookup cache

    # Session Handoff
    auth_cookie_name: str = "authToken"
    auth_cookie_max_age: int = 7 * 24 * 3600

    # Application Configuration
    app_name: str = "healtara"
    debug: bool = False
    log_level: str = "INFO"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Configuration
    cors_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def admin_login_path(self) -> str:
        return self.admin_path_prefix.rstrip("/") + "/login"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
