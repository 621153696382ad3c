# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test Fixtures and Utilities

Provides an in-memory NuGet v3 registry (httpx.MockTransport), isolated
home/workspace directories and NuGet.Config writers.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from nuget_gallery.core.config import Config


# ============================================================================
# Fake NuGet registry
# ============================================================================

class FakeRegistry:
    """
    Serves canned JSON documents by URL (query string ignored).

    Unknown URLs answer 404. Every request is recorded so tests can count
    network round-trips.
    """

    def __init__(self):
        self.routes: Dict[str, Tuple[Any, int]] = {}
        self.redirects: Dict[str, str] = {}
        self.requests: List[httpx.Request] = []

    def add(self, url: str, payload: Any = None, status_code: int = 200) -> None:
        self.routes[url] = (payload, status_code)

    def add_redirect(self, url: str, location: str) -> None:
        self.redirects[url] = location

    def add_index(
        self,
        url: str,
        search_url: Optional[str] = "https://x/search",
        registration_url: Optional[str] = "https://x/reg"
    ) -> None:
        """Register a service index declaring the given resources"""
        resources = []
        if search_url:
            resources.append({"@id": search_url, "@type": "SearchQueryService/3.5.0"})
        if registration_url:
            resources.append({"@id": registration_url, "@type": "RegistrationsBaseUrl/3.6.0"})
        self.add(url, {"version": "3.0.0", "resources": resources})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?", 1)[0]
        if url in self.redirects:
            return httpx.Response(302, headers={"Location": self.redirects[url]})
        if url not in self.routes:
            return httpx.Response(404, json={"error": "not found"})
        payload, status_code = self.routes[url]
        if isinstance(payload, (bytes, str)):
            return httpx.Response(status_code, content=payload)
        return httpx.Response(status_code, json=payload)

    def count(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url).split("?", 1)[0] == url)

    def last_request(self, url: str) -> httpx.Request:
        matching = [r for r in self.requests if str(r.url).split("?", 1)[0] == url]
        assert matching, f"no request made to {url}"
        return matching[-1]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def registry():
    """Empty fake registry"""
    return FakeRegistry()


@pytest.fixture
def config():
    """Config with defaults and no host-settings sources"""
    return Config(sources=[], log_format="text")


# ============================================================================
# Filesystem fixtures
# ============================================================================

@pytest.fixture
def home_dir(tmp_path):
    """Isolated user home directory"""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def workspace_dir(tmp_path):
    """Isolated workspace folder"""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def write_nuget_config() -> Callable[..., Path]:
    """Write a NuGet.Config document into a directory"""

    def _write(directory: Path, body: str, filename: str = "NuGet.Config") -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(
            '<?xml version="1.0" encoding="utf-8"?>\n<configuration>\n' + body + "\n</configuration>\n",
            encoding="utf-8"
        )
        return path

    return _write


def registration_item(package_id: str, version: str, **catalog_fields: Any) -> Dict[str, Any]:
    """Registration leaf item with an inline catalog entry"""
    return {
        "@id": f"https://x/reg/{package_id.lower()}/{version}.json",
        "catalogEntry": {"id": package_id, "version": version, **catalog_fields},
    }


@pytest.fixture
def make_registration_item():
    return registration_item
