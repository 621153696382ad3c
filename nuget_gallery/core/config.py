# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Gallery Configuration - Single source of truth.
YAML is king. Env vars only for log level, proxies and the config path.

Host-editor settings (extra package sources, password scripts, proxy)
live in the same YAML file so everything is inspectable via `cat`.
"""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional


DEFAULT_CONFIG_PATH = "configs/gallery.yaml"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable application configuration.
    All values from YAML. No hidden state.
    """

    # -- Workspace --
    workspace_root: Optional[str] = None

    # -- Sources (host settings: JSON strings or mappings with name/url/passwordScriptPath) --
    sources: List[Any] = field(default_factory=list)

    # -- HTTP --
    http_proxy: Optional[str] = None
    http_timeout: float = 30.0
    user_agent: str = "nuget-gallery-core/1.0"

    # -- Caching --
    package_cache_ttl: float = 300.0
    password_script_cache_ttl: float = 300.0

    # -- Catalog --
    default_take: int = 50

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.
    """
    if not Path(path).exists():
        return Config(log_level=os.getenv("LOG_LEVEL", "INFO"))

    with open(path) as f:
        y = yaml.safe_load(f) or {}

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return default if d is None or d == {} else d

    return Config(
        # Workspace
        workspace_root=get(y, "workspace", "root"),

        # Sources
        sources=list(get(y, "sources") or []),

        # HTTP
        http_proxy=get(y, "http", "proxy") or None,
        http_timeout=get(y, "http", "timeouts", "default", default=30.0),
        user_agent=get(y, "http", "user_agent") or "nuget-gallery-core/1.0",

        # Caching (0 disables)
        package_cache_ttl=get(y, "cache", "package_ttl_seconds", default=300.0),
        password_script_cache_ttl=get(y, "cache", "password_script_ttl_seconds", default=300.0),

        # Catalog
        default_take=get(y, "catalog", "default_take", default=50),

        # Logging
        log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or "INFO",
        log_format=get(y, "logging", "format") or "json",
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("NUGET_GALLERY_CONFIG_PATH", DEFAULT_CONFIG_PATH)
        _config = load_config(config_path)
    return _config


def reload_config() -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
