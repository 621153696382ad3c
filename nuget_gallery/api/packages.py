# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package API Routes

Handles package browsing:
- Search across one or all configured sources
- Package metadata and per-version dependency details
- Source listing and cache control
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from nuget_gallery.core.dependencies import get_catalog_service
from nuget_gallery.models.catalog_models import Package, PackageDetails
from nuget_gallery.models.source_models import SourceSummary
from nuget_gallery.services.catalog import CatalogService

router = APIRouter(tags=["packages"])


@router.get("/packages")
async def search_packages(
    url: str = "",
    filter: str = "",
    prerelease: bool = False,
    skip: int = Query(0, ge=0),
    take: Optional[int] = Query(None, ge=1, le=1000),
    force_reload: bool = False,
    service: CatalogService = Depends(get_catalog_service)
) -> List[Package]:
    """Search packages; without url, configured sources are searched"""
    return await service.search_packages(
        filter=filter,
        prerelease=prerelease,
        skip=skip,
        take=take,
        url=url,
        force_reload=force_reload
    )


@router.get("/packages/{package_id}")
async def get_package(
    package_id: str,
    url: str = "",
    service: CatalogService = Depends(get_catalog_service)
) -> Package:
    """Get package metadata with all versions"""
    return await service.get_package(package_id, url=url)


@router.get("/package-details")
async def get_package_details(
    source_url: str = "",
    package_version_url: str = "",
    service: CatalogService = Depends(get_catalog_service)
) -> PackageDetails:
    """Get dependency groups for one package version"""
    return await service.get_package_details(source_url, package_version_url)


@router.get("/sources")
async def list_sources(
    service: CatalogService = Depends(get_catalog_service)
) -> List[SourceSummary]:
    """List configured package sources (credentials omitted)"""
    return await service.list_sources()


@router.post("/cache/clear")
async def clear_cache(
    service: CatalogService = Depends(get_catalog_service)
) -> Dict[str, Any]:
    """Drop package, password and credential caches"""
    await service.clear_cache()
    return {"status": "cleared"}
