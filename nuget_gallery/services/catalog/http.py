# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
HTTP client setup for package sources.

Standardises timeouts, headers, Basic auth and proxy selection so every
catalog client talks to its feed the same way.
"""

import logging
import os
from typing import Mapping, Optional

import httpx

from nuget_gallery.core.config import Config

logger = logging.getLogger(__name__)

PROXY_ENV_VARS = ("HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy")


def resolve_proxy(
    configured_proxy: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Optional[str]:
    """
    Pick the proxy for outgoing requests.

    Order: editor-level `http.proxy` setting, then HTTPS_PROXY, https_proxy,
    HTTP_PROXY, http_proxy. None when nothing is set.
    """
    if configured_proxy:
        return configured_proxy

    environ = os.environ if environ is None else environ
    for name in PROXY_ENV_VARS:
        value = environ.get(name)
        if value:
            return value
    return None


def build_async_client(
    config: Config,
    username: Optional[str] = None,
    password: Optional[str] = None,
    proxy: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """
    Create the `httpx.AsyncClient` used by one catalog client.

    Args:
        config: Application configuration (timeouts, user agent)
        username: Feed username; auth is only attached when both parts are set
        password: Feed password (already decoded)
        proxy: Proxy URL, if any
        transport: Custom transport (used by tests); disables the proxy

    Returns:
        Configured async HTTP client
    """
    kwargs = {
        "timeout": httpx.Timeout(config.http_timeout),
        "follow_redirects": True,
        "headers": {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        },
        "trust_env": False,
    }

    # httpx drops BasicAuth on cross-origin redirects
    if username and password:
        kwargs["auth"] = httpx.BasicAuth(username, password)

    if transport is not None:
        kwargs["transport"] = transport
    elif proxy:
        logger.info(f"Using proxy: {proxy}")
        kwargs["proxy"] = proxy

    return httpx.AsyncClient(**kwargs)
