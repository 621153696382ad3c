# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
FastAPI application for the NuGet gallery engine.

Serves package search, package metadata and source listing backed by a
single CatalogService stored on app.state.
"""

import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nuget_gallery import __version__
from nuget_gallery.api import packages
from nuget_gallery.core.config import get_config
from nuget_gallery.core.errors import GalleryError
from nuget_gallery.core.logging import get_api_logger
from nuget_gallery.services.catalog import CatalogService

logger = get_api_logger()


def create_app(service: Optional[CatalogService] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        service: Catalog service to serve (default: built from config)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "catalog_service", None) is None:
            app.state.catalog_service = CatalogService(config=get_config())
        logger.info("NuGet gallery API started")
        yield
        await app.state.catalog_service.close()
        logger.info("NuGet gallery API stopped")

    app = FastAPI(
        title="NuGet Gallery",
        description="Package source resolution and catalog browsing",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.catalog_service = service

    @app.exception_handler(GalleryError)
    async def gallery_error_handler(request: Request, exc: GalleryError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": __version__}

    app.include_router(packages.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "nuget_gallery.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
