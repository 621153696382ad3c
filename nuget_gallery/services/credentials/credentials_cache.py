# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Credentials Cache

Single responsibility: hold resolved credentials per source name for the
life of the process. Entries are only removed by an explicit clear().
"""

import logging
from typing import Dict, Optional

from nuget_gallery.models.source_models import ResolvedCredential

logger = logging.getLogger(__name__)


class CredentialsCache:
    """Shared by the source resolver and the client factory"""

    def __init__(self):
        self._entries: Dict[str, ResolvedCredential] = {}

    def set(self, source_name: str, username: Optional[str] = None, password: Optional[str] = None) -> None:
        """Store credentials for a source by name"""
        self._entries[source_name] = ResolvedCredential(username=username, password=password)
        logger.debug(f"Cached credentials for source: {source_name}")

    def get(self, source_name: str) -> Optional[ResolvedCredential]:
        """Retrieve credentials by source name"""
        return self._entries.get(source_name)

    def has(self, source_name: str) -> bool:
        return source_name in self._entries

    def clear(self) -> None:
        """Clear all cached credentials"""
        self._entries.clear()
        logger.debug("Credentials cache cleared")

    def __len__(self) -> int:
        return len(self._entries)
