# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Catalog Document Mapping

Single responsibility: turn raw NuGet v3 JSON documents into models.
Remote fields are never trusted to exist; every value is default-filled
here (strings -> "", numbers -> 0, booleans -> False, arrays -> []).
"""

from typing import Any, Dict, List, Optional

from nuget_gallery.models.catalog_models import (
    Package,
    PackageDependency,
    PackageDetails,
    PackageVersion,
    Vulnerability,
)


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def as_str(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def as_str_list(value: Any) -> List[str]:
    """Authors/tags come as either a string or an array of strings"""
    if isinstance(value, str):
        return [value] if value else []
    return [as_str(v) for v in as_list(value) if v is not None]


def find_resource(index: Dict[str, Any], resource_type: str) -> str:
    """
    Find a service-index resource whose @type contains `resource_type`.

    Returns:
        The resource @id, or "" when not declared
    """
    for resource in as_list(index.get("resources")):
        resource = as_dict(resource)
        types = resource.get("@type")
        if isinstance(types, str):
            types = [types]
        if any(isinstance(t, str) and resource_type in t for t in as_list(types)):
            return as_str(resource.get("@id"))
    return ""


def parse_severity(value: Any) -> int:
    """Map an advisory severity ("0".."3") onto 0=Low .. 3=Critical"""
    try:
        severity = int(str(value).strip())
    except (TypeError, ValueError):
        return 0
    return max(0, min(3, severity))


def parse_vulnerabilities(value: Any) -> List[Vulnerability]:
    return [
        Vulnerability(
            severity=parse_severity(v.get("severity")),
            advisory_url=as_str(v.get("advisoryUrl"))
        )
        for v in map(as_dict, as_list(value))
    ]


def map_search_result(item: Dict[str, Any]) -> Package:
    """Map one `data[]` entry of a search response"""
    return Package(
        id=as_str(item.get("@id")),
        name=as_str(item.get("id")),
        authors=as_str_list(item.get("authors")),
        description=as_str(item.get("description")),
        icon_url=as_str(item.get("iconUrl")),
        license_url=as_str(item.get("licenseUrl")),
        project_url=as_str(item.get("projectUrl")),
        registration=as_str(item.get("registration")),
        total_downloads=as_int(item.get("totalDownloads")),
        verified=as_bool(item.get("verified")),
        version=as_str(item.get("version")),
        versions=[
            PackageVersion(version=as_str(v.get("version")), id=as_str(v.get("@id")))
            for v in map(as_dict, as_list(item.get("versions")))
        ],
        tags=as_str_list(item.get("tags")),
        vulnerabilities=parse_vulnerabilities(item.get("vulnerabilities")),
    )


def catalog_entry_of(item: Dict[str, Any]) -> Dict[str, Any]:
    return as_dict(item.get("catalogEntry"))


def select_latest_entry(items: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Pick the registration item describing the current version.

    Registration pages are ordered by ascending version, so this is the last
    item. Swap this out for semantic-version ordering if a feed breaks that.
    """
    return items[-1] if items else None


def map_registration_items(items: List[Dict[str, Any]]) -> Package:
    """
    Build a Package from the concatenated items of every registration page.

    Args:
        items: Registration leaf items in document order (non-empty)
    """
    latest = select_latest_entry(items) or {}
    entry = catalog_entry_of(latest)

    return Package(
        id=as_str(latest.get("@id")),
        name=as_str(entry.get("id")),
        authors=as_str_list(entry.get("authors")),
        description=as_str(entry.get("description")),
        icon_url=as_str(entry.get("iconUrl")),
        license_url=as_str(entry.get("licenseUrl")),
        project_url=as_str(entry.get("projectUrl")),
        registration=as_str(entry.get("registration") or latest.get("registration")),
        total_downloads=as_int(entry.get("totalDownloads")),
        verified=as_bool(entry.get("verified")),
        version=as_str(entry.get("version")),
        versions=[
            PackageVersion(version=as_str(catalog_entry_of(i).get("version")), id=as_str(i.get("@id")))
            for i in items
        ],
        tags=as_str_list(entry.get("tags")),
        vulnerabilities=parse_vulnerabilities(entry.get("vulnerabilities")),
    )


def map_package_details(catalog_entry: Dict[str, Any]) -> PackageDetails:
    """
    Build the framework -> dependencies map of a catalog entry.

    A framework whose dependency list is empty is left out. Groups without a
    targetFramework are keyed by "".
    """
    details = PackageDetails()
    frameworks = details.dependencies.frameworks

    for group in map(as_dict, as_list(catalog_entry.get("dependencyGroups"))):
        target_framework = as_str(group.get("targetFramework"))
        dependencies = [
            PackageDependency(package=as_str(d.get("id")), version_range=as_str(d.get("range")))
            for d in map(as_dict, as_list(group.get("dependencies")))
        ]
        if dependencies:
            frameworks[target_framework] = dependencies
        else:
            frameworks.pop(target_framework, None)

    return details
