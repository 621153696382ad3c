# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for the gallery engine.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from nuget_gallery.core.config import get_config, Config
from nuget_gallery.core.errors import GalleryError, NotFoundError, ValidationError
from nuget_gallery.core.logging import get_logger

__all__ = [
    "get_config",
    "Config",
    "GalleryError",
    "NotFoundError",
    "ValidationError",
    "get_logger",
]
