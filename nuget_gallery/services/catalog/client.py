# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
NuGet v3 Catalog Client

Talks to one package source: resolves its service index, searches it,
reads registration indexes and fetches per-version details.
Package lookups are cached per lowercase id with a TTL and concurrent
lookups of the same id share one request.
"""

import asyncio
import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from nuget_gallery.core.config import Config, get_config
from nuget_gallery.core.errors import (
    EndpointNotFoundError,
    PackageNotFoundError,
    SourceUnreachableError,
)
from nuget_gallery.core.logging import get_service_logger
from nuget_gallery.models.catalog_models import (
    CacheEntry,
    CatalogEndpoints,
    Package,
    PackageDetails,
)

from .documents import (
    as_dict,
    as_list,
    as_str,
    find_resource,
    map_package_details,
    map_registration_items,
    map_search_result,
)
from .http import build_async_client, resolve_proxy

logger = get_service_logger("catalog")

SEARCH_RESOURCE = "SearchQueryService"
REGISTRATION_RESOURCE = "RegistrationsBaseUrl/3.6.0"
SEMVER_LEVEL = "2.0.0"


def _with_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


class CatalogClient:
    """Client for a single NuGet v3 package source"""

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        config: Optional[Config] = None,
        proxy: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        """
        Initialize catalog client.

        Args:
            url: Service index URL of the source
            username: Feed username
            password: Feed password (already decoded)
            config: Application configuration (default: global config)
            proxy: Proxy URL (default: resolved from config/environment)
            transport: Custom httpx transport (tests)
            clock: Monotonic clock used for cache expiry
        """
        self.url = url
        self.username = username
        self.config = config or get_config()
        self.package_cache_ttl = self.config.package_cache_ttl
        self.proxy = proxy if proxy is not None else resolve_proxy(self.config.http_proxy)
        self._clock = clock or time.monotonic

        self.http = build_async_client(
            self.config,
            username=username,
            password=password,
            proxy=self.proxy,
            transport=transport
        )

        self._endpoints: Optional[CatalogEndpoints] = None
        self._endpoint_lock = asyncio.Lock()
        self._package_cache: Dict[str, CacheEntry[Package]] = {}
        self._pending_package_requests: Dict[str, asyncio.Task] = {}

        logger.debug(f"CatalogClient initialized for {url} (auth: {bool(username and password)})")

    @property
    def endpoints(self) -> Optional[CatalogEndpoints]:
        return self._endpoints

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a JSON document.

        Raises:
            SourceUnreachableError: On network failure, non-2xx status or bad JSON
        """
        try:
            response = await self.http.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise SourceUnreachableError(url, f"HTTP {status}", status_code=status)
        except httpx.HTTPError as e:
            raise SourceUnreachableError(url, str(e) or e.__class__.__name__)

        try:
            return as_dict(response.json())
        except ValueError as e:
            raise SourceUnreachableError(url, f"Invalid JSON ({e})")

    async def ensure_endpoints(self) -> CatalogEndpoints:
        """
        Resolve search and registration endpoints from the service index.

        The index is fetched at most once per client, even under concurrent
        callers.

        Raises:
            SourceUnreachableError: If the index cannot be fetched
            EndpointNotFoundError: If a required resource is not declared
        """
        if self._endpoints is not None:
            return self._endpoints

        async with self._endpoint_lock:
            if self._endpoints is not None:
                return self._endpoints

            logger.debug(f"Fetching service index: {self.url}")
            index = await self._get_json(self.url)

            search_url = find_resource(index, SEARCH_RESOURCE)
            if not search_url:
                raise EndpointNotFoundError(SEARCH_RESOURCE, self.url)

            registration_url = find_resource(index, REGISTRATION_RESOURCE)
            if not registration_url:
                raise EndpointNotFoundError(REGISTRATION_RESOURCE, self.url)

            self._endpoints = CatalogEndpoints(
                search_url=_with_trailing_slash(search_url),
                registration_base_url=_with_trailing_slash(registration_url)
            )
            logger.info(f"Resolved endpoints for {self.url}")

        return self._endpoints

    async def search(
        self,
        query: str = "",
        prerelease: bool = False,
        skip: int = 0,
        take: int = 50
    ) -> List[Package]:
        """
        Search the source.

        Args:
            query: Free-text filter
            prerelease: Include prerelease versions
            skip: Results to skip
            take: Maximum results

        Returns:
            Packages in the order the source returned them
        """
        endpoints = await self.ensure_endpoints()
        params = {
            "q": query,
            "skip": skip,
            "take": take,
            "prerelease": "true" if prerelease else "false",
            "semVerLevel": SEMVER_LEVEL,
        }
        logger.debug(f"Searching {endpoints.search_url} with {params}")
        data = await self._get_json(endpoints.search_url, params=params)

        packages = [map_search_result(item) for item in map(as_dict, as_list(data.get("data")))]
        logger.info(f"Found {len(packages)} packages on {self.url} matching '{query}'")
        return packages

    async def get_package(self, package_id: str) -> Package:
        """
        Get package metadata from the registration index.

        Args:
            package_id: Package id (case-insensitive)

        Raises:
            PackageNotFoundError: If the registration has no items
            SourceUnreachableError: If endpoints cannot be resolved
        """
        cache_key = package_id.lower()

        cached = self._package_cache.get(cache_key)
        if cached is not None and cached.is_valid(self._clock(), self.package_cache_ttl):
            logger.debug(f"Using cached package info for {package_id}")
            return cached.value

        # Concurrent lookups of the same id share one request; a cancelled
        # caller must not cancel it for the others
        pending_task = self._pending_package_requests.get(cache_key)
        if pending_task is not None and not pending_task.done():
            logger.debug(f"Package request for {package_id} already in flight, waiting for it to complete")
            return await asyncio.shield(pending_task)

        async def fetch_and_cache() -> Package:
            try:
                package = await self._fetch_package(package_id)
                self._package_cache[cache_key] = CacheEntry(value=package, timestamp=self._clock())
                return package
            finally:
                self._pending_package_requests.pop(cache_key, None)

        task = asyncio.create_task(fetch_and_cache())
        self._pending_package_requests[cache_key] = task
        return await asyncio.shield(task)

    async def _fetch_package(self, package_id: str) -> Package:
        endpoints = await self.ensure_endpoints()
        url = f"{endpoints.registration_base_url}{package_id.lower()}/index.json"

        try:
            index = await self._get_json(url)
        except SourceUnreachableError as e:
            logger.error(f"Failed to fetch registration index {url}: {e.message}")
            raise PackageNotFoundError(url, details={"reason": e.message})

        items: List[Dict[str, Any]] = []
        for page in map(as_dict, as_list(index.get("items"))):
            inline_items = page.get("items")
            if isinstance(inline_items, list):
                items.extend(map(as_dict, inline_items))
                continue

            page_url = as_str(page.get("@id"))
            if not page_url:
                logger.warning(f"Registration page without items or @id in {url}")
                continue
            try:
                page_data = await self._get_json(page_url)
            except SourceUnreachableError as e:
                logger.error(f"Failed to fetch registration page {page_url}: {e.message}")
                continue
            items.extend(map(as_dict, as_list(page_data.get("items"))))

        if not items:
            raise PackageNotFoundError(url)

        package = map_registration_items(items)
        logger.info(f"Retrieved {package.name or package_id} with {len(package.versions)} versions")
        return package

    async def get_package_details(self, package_version_url: str) -> PackageDetails:
        """
        Get dependency groups for one package version.

        Args:
            package_version_url: Registration leaf URL of the version

        Raises:
            SourceUnreachableError: If the leaf or its catalog entry can't be fetched
        """
        await self.ensure_endpoints()

        try:
            leaf = await self._get_json(package_version_url)
            catalog_ref = leaf.get("catalogEntry")

            if isinstance(catalog_ref, dict) and "dependencyGroups" in catalog_ref:
                catalog_entry = catalog_ref
            else:
                if isinstance(catalog_ref, dict):
                    catalog_url = as_str(catalog_ref.get("@id"))
                else:
                    catalog_url = as_str(catalog_ref)
                if not catalog_url:
                    return PackageDetails()
                catalog_entry = await self._get_json(catalog_url)
        except SourceUnreachableError as e:
            logger.error(f"Failed to get package details from {package_version_url}: {e.message}")
            raise

        return map_package_details(catalog_entry)

    def clear_package_cache(self, package_id: Optional[str] = None) -> None:
        """Drop cached package info (one id, or everything)"""
        if package_id is None:
            self._package_cache.clear()
        else:
            self._package_cache.pop(package_id.lower(), None)

    async def close(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
