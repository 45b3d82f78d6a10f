"""
Directory lookups for healtara

The directory answers "which hospital or doctor is this?" for the routing
core. Two backends are provided: YamlDirectory reads the directory file
in-process, HttpDirectory queries the directory API over HTTP when the
middleware cannot share the in-process store.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx
import yaml

from healtara.models.tenant import Hospital, Doctor
from healtara.utils.slug import normalize

logger = logging.getLogger(__name__)


class DirectoryLookupError(Exception):
    """The directory could not be queried (unreachable, bad response)."""


class Directory:
    """Read-only lookups the routing core needs. All methods return None
    when nothing matches and raise DirectoryLookupError when the lookup
    itself fails."""

    async def find_hospital_by_name(self, normalized_name: str) -> Optional[Hospital]:
        raise NotImplementedError

    async def find_hospital_by_custom_domain(self, host: str) -> Optional[Hospital]:
        raise NotImplementedError

    async def find_hospital_by_subdomain(self, label: str) -> Optional[Hospital]:
        raise NotImplementedError

    async def get_hospital(self, id_or_slug: str) -> Optional[Hospital]:
        raise NotImplementedError

    async def get_doctor(self, slug: str) -> Optional[Doctor]:
        raise NotImplementedError

    async def aclose(self):
        """Release any connections held by the backend."""


class YamlDirectory(Directory):
    """Loads hospitals and doctors from a YAML file and indexes them."""

    def __init__(self, directory_path: Path = None):
        self.directory_path = directory_path
        self._hospitals: dict[int, Hospital] = {}
        self._doctors: dict[str, Doctor] = {}
        if directory_path is not None:
            self._load_file()

    @classmethod
    def from_mapping(cls, data: dict) -> YamlDirectory:
        """Build a directory from an already-parsed mapping."""
        directory = cls()
        directory._load(data)
        return directory

    def _load_file(self):
        """Load the directory file; a missing file yields an empty directory."""
        if not self.directory_path.exists():
            logger.warning(f"Directory file {self.directory_path} not found, directory is empty")
            return

        with open(self.directory_path) as f:
            data = yaml.safe_load(f) or {}

        self._load(data)

    def _load(self, data: dict):
        for entry in data.get("hospitals", None) or []:
            hospital = Hospital(**entry)
            self._hospitals[hospital.id] = hospital

        for entry in data.get("doctors", None) or []:
            doctor = Doctor(**entry)
            self._doctors[doctor.slug.lower()] = doctor

    async def find_hospital_by_name(self, normalized_name: str) -> Optional[Hospital]:
        for hospital in self._hospitals.values():
            if normalize(hospital.name) == normalized_name:
                return hospital
        return None

    async def find_hospital_by_custom_domain(self, host: str) -> Optional[Hospital]:
        host = host.lower()
        for hospital in self._hospitals.values():
            if hospital.custom_domain and hospital.custom_domain.strip().lower() == host:
                return hospital
        return None

    async def find_hospital_by_subdomain(self, label: str) -> Optional[Hospital]:
        label = label.lower()
        for hospital in self._hospitals.values():
            if hospital.subdomain and hospital.subdomain.strip().lower() == label:
                return hospital
        return None

    async def get_hospital(self, id_or_slug: str) -> Optional[Hospital]:
        """Find a hospital by numeric ID first, then by slug."""
        ref = str(id_or_slug).lower()
        if ref.isdigit():
            hospital = self._hospitals.get(int(ref))
            if hospital:
                return hospital
        for hospital in self._hospitals.values():
            if (hospital.slug or normalize(hospital.name)) == ref:
                return hospital
        return None

    async def get_doctor(self, slug: str) -> Optional[Doctor]:
        return self._doctors.get(slug.lower())

    def list_hospitals(self) -> list[Hospital]:
        """List all hospitals, ordered by name."""
        return sorted(self._hospitals.values(), key=lambda h: h.name.lower())

    def list_doctors(self) -> list[Doctor]:
        return list(self._doctors.values())


class HttpDirectory(Directory):
    """Queries the directory API at API_BASE_URL."""

    def __init__(self, base_url: str, timeout: float = 2.0, client: httpx.AsyncClient = None):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def _get(self, path: str) -> Optional[dict]:
        try:
            response = await self._client.get(path, headers={"Cache-Control": "no-store"})
        except httpx.HTTPError as e:
            raise DirectoryLookupError(f"GET {path} failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise DirectoryLookupError(f"GET {path} returned {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise DirectoryLookupError(f"GET {path} returned invalid JSON") from e

    async def _get_hospital(self, path: str) -> Optional[Hospital]:
        data = await self._get(path)
        return Hospital(**data) if data else None

    async def find_hospital_by_name(self, normalized_name: str) -> Optional[Hospital]:
        return await self._get_hospital(f"/api/hospitals/by-name/{quote(normalized_name, safe='')}")

    async def find_hospital_by_custom_domain(self, host: str) -> Optional[Hospital]:
        return await self._get_hospital(f"/api/hospitals/custom-domain/{quote(host.lower(), safe='')}")

    async def find_hospital_by_subdomain(self, label: str) -> Optional[Hospital]:
        return await self._get_hospital(f"/api/hospitals/subdomain/{quote(label.lower(), safe='')}")

    async def get_hospital(self, id_or_slug: str) -> Optional[Hospital]:
        return await self._get_hospital(f"/api/hospitals/{quote(str(id_or_slug), safe='')}")

    async def get_doctor(self, slug: str) -> Optional[Doctor]:
        data = await self._get(f"/api/doctors/slug/{quote(slug.lower(), safe='')}")
        return Doctor(**data) if data else None

    async def aclose(self):
        await self._client.aclose()
