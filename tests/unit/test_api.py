# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the package API routes

Runs the FastAPI app with a CatalogService backed by the FakeRegistry.
"""

import pytest
from fastapi.testclient import TestClient

from nuget_gallery.main import create_app
from nuget_gallery.services.catalog import CatalogService
from nuget_gallery.services.credentials import CredentialsCache, PasswordScriptExecutor
from nuget_gallery.services.sources import SourceResolver

INDEX_URL = "https://x/index.json"


@pytest.fixture
def service(registry, config, home_dir, make_registration_item):
    registry.add_index(INDEX_URL)
    registry.add("https://x/search/", {"data": [
        {"@id": "https://x/reg/foo/index.json", "id": "Foo", "version": "2.0.0"},
    ]})
    registry.add("https://x/reg/foo/index.json", {"items": [{"items": [
        make_registration_item("Foo", "1.0.0"),
        make_registration_item("Foo", "2.0.0"),
    ]}]})
    registry.add("https://x/reg/foo/2.0.0.json", {"catalogEntry": {"dependencyGroups": [
        {"targetFramework": "net8.0", "dependencies": [{"id": "Bar", "range": "[1.0.0, )"}]},
    ]}})

    executor = PasswordScriptExecutor()
    credentials_cache = CredentialsCache()
    resolver = SourceResolver(
        executor,
        credentials_cache,
        settings_sources=[{"name": "x", "url": INDEX_URL}],
        home_dir=home_dir,
        platform="linux",
        environ={}
    )
    return CatalogService(
        config=config,
        executor=executor,
        credentials_cache=credentials_cache,
        resolver=resolver,
        transport=registry.transport
    )


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestPackagesRoutes:
    """Test search and package lookup endpoints"""

    def test_search(self, client):
        response = client.get("/packages", params={"filter": "foo"})

        assert response.status_code == 200
        body = response.json()
        assert [p["name"] for p in body] == ["Foo"]
        assert body[0]["version"] == "2.0.0"

    def test_search_rejects_negative_skip(self, client):
        response = client.get("/packages", params={"skip": -1})
        assert response.status_code == 422

    def test_get_package(self, client):
        response = client.get("/packages/FOO", params={"url": INDEX_URL})

        assert response.status_code == 200
        body = response.json()
        assert body["version"] == "2.0.0"
        assert [v["version"] for v in body["versions"]] == ["1.0.0", "2.0.0"]

    def test_unknown_package_is_404(self, client):
        response = client.get("/packages/Ghost", params={"url": INDEX_URL})

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "PackageNotFoundError"
        assert body["status_code"] == 404
        assert "https://x/reg/ghost/index.json" in body["message"]

    def test_unreachable_source_is_502(self, client):
        response = client.get("/packages", params={"filter": "foo", "url": "https://down/index.json"})

        assert response.status_code == 502
        assert response.json()["error"] == "SourceUnreachableError"

    def test_package_details(self, client):
        response = client.get("/package-details", params={
            "source_url": INDEX_URL,
            "package_version_url": "https://x/reg/foo/2.0.0.json",
        })

        assert response.status_code == 200
        frameworks = response.json()["dependencies"]["frameworks"]
        assert frameworks == {"net8.0": [{"package": "Bar", "version_range": "[1.0.0, )"}]}

    def test_package_details_requires_urls(self, client):
        response = client.get("/package-details", params={"source_url": INDEX_URL})

        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"


class TestSourceRoutes:
    """Test source listing and cache control"""

    def test_list_sources(self, client):
        response = client.get("/sources")

        assert response.status_code == 200
        assert response.json() == [{"name": "x", "url": INDEX_URL, "password_script_path": None}]

    def test_clear_cache(self, client, service):
        client.get("/packages", params={"filter": "foo"})
        assert len(service.factory) == 1

        response = client.post("/cache/clear")

        assert response.status_code == 200
        assert response.json() == {"status": "cleared"}
        assert len(service.factory) == 0
