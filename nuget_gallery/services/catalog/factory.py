# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Catalog Client Factory

Single responsibility: hand out one CatalogClient per source URL, built
with the credentials the resolver finds for that URL.
"""

import logging
from typing import Dict, List, Optional

import httpx

from nuget_gallery.core.config import Config, get_config
from nuget_gallery.services.credentials import CredentialsCache, PasswordScriptExecutor
from nuget_gallery.services.sources import SourceResolver

from .client import CatalogClient

logger = logging.getLogger(__name__)


class CatalogClientFactory:
    """Per-URL registry of catalog clients"""

    def __init__(
        self,
        resolver: SourceResolver,
        executor: PasswordScriptExecutor,
        credentials_cache: CredentialsCache,
        config: Optional[Config] = None,
        workspace_root: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.resolver = resolver
        self.executor = executor
        self.credentials_cache = credentials_cache
        self.config = config or get_config()
        self.workspace_root = workspace_root
        self.transport = transport
        self._clients: Dict[str, CatalogClient] = {}

    @property
    def urls(self) -> List[str]:
        return list(self._clients)

    def __len__(self) -> int:
        return len(self._clients)

    async def get_client(self, url: str) -> CatalogClient:
        """
        Get (or create) the client for a source URL.

        A URL that matches no resolved source gets an anonymous client.
        """
        client = self._clients.get(url)
        if client is not None:
            return client

        sources = await self.resolver.resolve_sources(self.workspace_root)
        source = next((s for s in sources if s.url == url), None)

        username = source.username if source else None
        password = source.password if source else None
        if source is None:
            logger.debug(f"No configured source for {url}, using anonymous access")

        client = CatalogClient(
            url,
            username=username,
            password=password,
            config=self.config,
            transport=self.transport
        )

        # Another caller may have registered a client while we were resolving
        existing = self._clients.get(url)
        if existing is not None:
            await client.close()
            return existing

        self._clients[url] = client
        logger.info(f"Created catalog client for {url}")
        return client

    async def clear_all_cache(self) -> None:
        """Close every client and drop all package, password and credential caches"""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            client.clear_package_cache()
            await client.close()

        self.executor.clear_cache()
        self.credentials_cache.clear()
        logger.info(f"Cleared caches ({len(clients)} clients closed)")

    async def close(self) -> None:
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.close()
