"""
Shared pytest fixtures.

Provides settings, an in-memory directory, failing/slow directory doubles and
a TestClient wired to all of them.
"""
import asyncio
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from healtara.config import Settings
from healtara.main import create_app
from healtara.models.tenant import Hospital, Doctor
from healtara.services.directory import Directory, DirectoryLookupError, YamlDirectory


DIRECTORY_DATA = {
    "hospitals": [
        {"id": 1, "name": "City General Hospital", "slug": "city-general-hospital"},
        {"id": 7, "name": "Apollo Care", "slug": "apollo-care"},
        {"id": 12, "name": "Lifeline Care Hospital", "subdomain": "lifeline"},
        {"id": 20, "name": "MyCare Clinic", "custom_domain": "MyCare.Health"},
        {"id": 21, "name": "Hospital 42"},
        {"id": 30, "name": "Broken Subdomain Hospital", "subdomain": "Not Valid!"},
    ],
    "doctors": [
        {"id": 101, "slug": "dr-jane", "name": "Dr. Jane Mathew", "hospital_id": 1},
        {"id": 102, "slug": "dr-arjun-rao", "name": "Dr. Arjun Rao"},
    ],
}


class FailingDirectory(Directory):
    """Every lookup fails as if the directory were unreachable."""

    def __init__(self):
        self.calls = 0

    async def _fail(self, *args):
        self.calls += 1
        raise DirectoryLookupError("directory unreachable")

    find_hospital_by_name = _fail
    find_hospital_by_custom_domain = _fail
    find_hospital_by_subdomain = _fail
    get_hospital = _fail
    get_doctor = _fail


class SlowDirectory(Directory):
    """Every lookup hangs for longer than any test timeout."""

    async def _hang(self, *args) -> Optional[Hospital]:
        await asyncio.sleep(5)
        return None

    find_hospital_by_name = _hang
    find_hospital_by_custom_domain = _hang
    find_hospital_by_subdomain = _hang
    get_hospital = _hang

    async def get_doctor(self, slug: str) -> Optional[Doctor]:
        await asyncio.sleep(5)
        return None


# ============================================================================
# SETTINGS
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        primary_domain="example.com",
        enable_subdomain_routing=True,
        directory_cache_ttl_seconds=0,
        directory_timeout_seconds=0.5,
    )


@pytest.fixture
def disabled_settings(settings) -> Settings:
    return settings.model_copy(update={"enable_subdomain_routing": False})


# ============================================================================
# DIRECTORY
# ============================================================================


@pytest.fixture
def store() -> YamlDirectory:
    return YamlDirectory.from_mapping(DIRECTORY_DATA)


@pytest.fixture
def failing_directory() -> FailingDirectory:
    return FailingDirectory()


@pytest.fixture
def slow_directory() -> SlowDirectory:
    return SlowDirectory()


# ============================================================================
# APPLICATION
# ============================================================================


@pytest.fixture
def client(settings, store) -> TestClient:
    return TestClient(create_app(settings=settings, store=store))
