# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package Source Data Models

Defines the shapes produced while resolving package sources from
NuGet.Config files and host settings.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ResolvedCredential(BaseModel):
    """Username/password pair for a source; password may still be encoded"""
    username: Optional[str] = None
    password: Optional[str] = None


class SourceDeclaration(BaseModel):
    """
    A named package source.

    Identity is `name` (case-sensitive). `url` is not guaranteed unique
    but is the lookup key used when building catalog clients.
    """
    name: str
    url: str
    username: Optional[str] = None
    password: Optional[str] = None
    password_script_path: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "nuget.org",
                "url": "https://api.nuget.org/v3/index.json",
            }
        }
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.username or self.password)


class SourceSetting(BaseModel):
    """One host-settings source entry: {name, url?, passwordScriptPath?}"""
    name: Optional[str] = None
    url: Optional[str] = None
    password_script_path: Optional[str] = Field(default=None, alias="passwordScriptPath")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SourceSummary(BaseModel):
    """Source view without credentials (safe to hand to a UI)"""
    name: str
    url: str
    password_script_path: Optional[str] = None


class ParsedConfigFile(BaseModel):
    """Contribution of a single NuGet.Config file"""
    path: str
    sources: List[SourceDeclaration] = Field(default_factory=list)
    credentials: Dict[str, ResolvedCredential] = Field(default_factory=dict)
    disabled_sources: List[str] = Field(default_factory=list)
    clear: bool = False
