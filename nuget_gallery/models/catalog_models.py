# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Catalog Data Models

Normalised views of NuGet v3 service-index, search and registration
documents. Every remote field is optional on the wire; defaults are
filled in when documents are mapped into these models.
"""

from dataclasses import dataclass
from typing import Dict, Generic, List, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class CatalogEndpoints(BaseModel):
    """Service endpoints resolved from a registry root index"""
    search_url: str
    registration_base_url: str

    model_config = ConfigDict(frozen=True)


class Vulnerability(BaseModel):
    """Advisory attached to a package version"""
    severity: int = Field(default=0, ge=0, le=3)  # 0=Low, 1=Moderate, 2=High, 3=Critical
    advisory_url: str = ""


class PackageVersion(BaseModel):
    """One published version and its registration leaf URL"""
    version: str = ""
    id: str = ""


class Package(BaseModel):
    """Package metadata as shown in search results and package pages"""
    id: str = ""
    name: str = ""
    authors: List[str] = Field(default_factory=list)
    description: str = ""
    icon_url: str = ""
    license_url: str = ""
    project_url: str = ""
    registration: str = ""
    total_downloads: int = 0
    verified: bool = False
    version: str = ""
    installed_version: str = ""
    versions: List[PackageVersion] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    vulnerabilities: List[Vulnerability] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "https://api.nuget.org/v3/registration5-gz-semver2/newtonsoft.json/index.json",
                "name": "Newtonsoft.Json",
                "version": "13.0.3",
                "versions": [{"version": "13.0.3", "id": "https://.../13.0.3.json"}],
            }
        }
    )


class PackageDependency(BaseModel):
    """Dependency declared by a package version"""
    package: str = ""
    version_range: str = ""


class PackageDependencyGroup(BaseModel):
    """Dependencies keyed by target framework; empty groups are omitted"""
    frameworks: Dict[str, List[PackageDependency]] = Field(default_factory=dict)


class PackageDetails(BaseModel):
    """Per-version details fetched from a catalog entry"""
    dependencies: PackageDependencyGroup = Field(default_factory=PackageDependencyGroup)


@dataclass
class CacheEntry(Generic[T]):
    """Cached value stamped with the clock reading at insert time"""
    value: T
    timestamp: float

    def is_valid(self, now: float, ttl: float) -> bool:
        return now - self.timestamp < ttl
