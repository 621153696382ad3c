# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Dependency injection for the gallery API.

Provides FastAPI dependencies for services and utilities.
"""

from fastapi import Request


def get_catalog_service(request: Request):
    """Get the CatalogService created at startup (app.state)."""
    return request.app.state.catalog_service
