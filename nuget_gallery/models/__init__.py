# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Data models for package sources and catalog documents.
"""

from .source_models import (
    ResolvedCredential,
    SourceDeclaration,
    SourceSetting,
    SourceSummary,
    ParsedConfigFile,
)
from .catalog_models import (
    CacheEntry,
    CatalogEndpoints,
    Package,
    PackageDependency,
    PackageDependencyGroup,
    PackageDetails,
    PackageVersion,
    Vulnerability,
)

__all__ = [
    "ResolvedCredential",
    "SourceDeclaration",
    "SourceSetting",
    "SourceSummary",
    "ParsedConfigFile",
    "CacheEntry",
    "CatalogEndpoints",
    "Package",
    "PackageDependency",
    "PackageDependencyGroup",
    "PackageDetails",
    "PackageVersion",
    "Vulnerability",
]
