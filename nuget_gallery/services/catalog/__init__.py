# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package catalog access over the NuGet v3 protocol.
"""

from .client import CatalogClient
from .factory import CatalogClientFactory
from .http import build_async_client, resolve_proxy
from .service import CatalogService

__all__ = [
    "CatalogClient",
    "CatalogClientFactory",
    "CatalogService",
    "build_async_client",
    "resolve_proxy",
]
