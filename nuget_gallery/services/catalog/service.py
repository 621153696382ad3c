# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Catalog Service

Main orchestration service for package browsing.
Composes the password script executor, credentials cache, source resolver
and client factory, and answers the queries of the gallery UI.
"""

import asyncio
from typing import List, Optional

import httpx

from nuget_gallery.core.config import Config, get_config
from nuget_gallery.core.errors import (
    GalleryError,
    PackageNotFoundError,
    ValidationError,
    sanitize_error_for_user,
)
from nuget_gallery.core.logging import get_service_logger, log_event
from nuget_gallery.models.catalog_models import Package, PackageDetails
from nuget_gallery.models.source_models import SourceDeclaration, SourceSummary
from nuget_gallery.services.credentials import CredentialsCache, PasswordScriptExecutor
from nuget_gallery.services.sources import SourceResolver

from .factory import CatalogClientFactory

logger = get_service_logger("catalog_service")


class CatalogService:
    """
    Package catalog service.

    Owns one instance of each cache so their lifetime is the lifetime of the
    service (usually the application).
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        workspace_root: Optional[str] = None,
        executor: Optional[PasswordScriptExecutor] = None,
        credentials_cache: Optional[CredentialsCache] = None,
        resolver: Optional[SourceResolver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize catalog service.

        Args:
            config: Application configuration (default: global config)
            workspace_root: Workspace folder searched for nuget.config
            executor: Password script executor (default: built from config)
            credentials_cache: Credentials cache (default: new, empty)
            resolver: Source resolver (default: host settings from config)
            transport: Custom httpx transport for catalog clients (tests)
        """
        self.config = config or get_config()
        self.workspace_root = workspace_root or self.config.workspace_root

        self.executor = executor or PasswordScriptExecutor(
            cache_ttl=self.config.password_script_cache_ttl
        )
        self.credentials_cache = credentials_cache or CredentialsCache()
        self.resolver = resolver or SourceResolver(
            self.executor,
            self.credentials_cache,
            settings_sources=lambda: self.config.sources
        )
        self.factory = CatalogClientFactory(
            self.resolver,
            self.executor,
            self.credentials_cache,
            config=self.config,
            workspace_root=self.workspace_root,
            transport=transport
        )

        logger.info(f"CatalogService initialized (workspace_root: {self.workspace_root})")

    async def search_packages(
        self,
        filter: str = "",
        prerelease: bool = False,
        skip: int = 0,
        take: Optional[int] = None,
        url: str = "",
        force_reload: bool = False
    ) -> List[Package]:
        """
        Search one source, or all sources when no URL is given.

        Args:
            filter: Free-text query
            prerelease: Include prerelease versions
            skip: Results to skip per source
            take: Maximum results per source (default: config)
            url: Source URL to search; empty searches configured sources
            force_reload: Clear every cache before searching

        Returns:
            Matching packages, unique by id, in source order
        """
        if take is None:
            take = self.config.default_take

        if force_reload:
            await self.clear_cache()

        if url:
            client = await self.factory.get_client(url)
            return await client.search(filter, prerelease, skip, take)

        sources = await self.resolver.resolve_sources(self.workspace_root)
        if not sources:
            logger.info("No package sources configured")
            return []

        if not filter:
            # Browsing without a query only lists the primary source
            client = await self.factory.get_client(sources[0].url)
            return await client.search(filter, prerelease, skip, take)

        results = await asyncio.gather(*[
            self._search_source(source, filter, prerelease, skip, take)
            for source in sources
        ])

        packages: List[Package] = []
        seen_ids = set()
        for source_packages in results:
            for package in source_packages:
                if package.id in seen_ids:
                    continue
                seen_ids.add(package.id)
                packages.append(package)

        log_event(
            logger,
            "packages_searched",
            query=filter,
            sources=len(sources),
            results=len(packages)
        )
        return packages

    async def _search_source(
        self,
        source: SourceDeclaration,
        query: str,
        prerelease: bool,
        skip: int,
        take: int
    ) -> List[Package]:
        try:
            client = await self.factory.get_client(source.url)
            return await client.search(query, prerelease, skip, take)
        except Exception as e:
            logger.error(
                f"Failed to fetch packages from {source.name} ({source.url}): "
                f"{sanitize_error_for_user(e, include_type=False)}"
            )
            return []

    async def get_package(self, package_id: str, url: str = "") -> Package:
        """
        Get package metadata.

        Args:
            package_id: Package id (case-insensitive)
            url: Source URL; empty tries configured sources in order

        Raises:
            ValidationError: If package_id is empty
            PackageNotFoundError: If no source knows the package
        """
        if not package_id:
            raise ValidationError("Package id is required", field="package_id")

        if url:
            client = await self.factory.get_client(url)
            return await client.get_package(package_id)

        sources = await self.resolver.resolve_sources(self.workspace_root)
        last_error: Optional[GalleryError] = None
        for source in sources:
            try:
                client = await self.factory.get_client(source.url)
                return await client.get_package(package_id)
            except GalleryError as e:
                logger.warning(f"Source {source.name} failed for {package_id}: {e.message}")
                last_error = e

        details = {"sources_tried": len(sources)}
        if last_error is not None:
            details["last_error"] = last_error.message
        raise PackageNotFoundError(package_id, details=details)

    async def get_package_details(self, source_url: str, package_version_url: str) -> PackageDetails:
        """Get dependency groups of one package version"""
        if not source_url:
            raise ValidationError("Source URL is required", field="source_url")
        if not package_version_url:
            raise ValidationError("Package version URL is required", field="package_version_url")

        client = await self.factory.get_client(source_url)
        return await client.get_package_details(package_version_url)

    async def list_sources(self, workspace_root: Optional[str] = None) -> List[SourceSummary]:
        return await self.resolver.list_sources(workspace_root or self.workspace_root)

    async def clear_cache(self) -> None:
        await self.factory.clear_all_cache()

    async def close(self) -> None:
        await self.factory.close()

    async def __aenter__(self) -> "CatalogService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
