# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package Source Resolver

Single responsibility: merge NuGet.Config files and host settings into the
list of package sources, decoding passwords through decrypt scripts.

Files are processed in discovery order and `add` entries overwrite by name,
so a later (user/machine) file wins over an earlier workspace file with the
same source name. That ordering is relied upon and must stay as is.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Union

from pydantic import ValidationError as PydanticValidationError

from nuget_gallery.core.errors import ConfigParseError, PasswordScriptError
from nuget_gallery.models.source_models import (
    ResolvedCredential,
    SourceDeclaration,
    SourceSetting,
    SourceSummary,
)
from nuget_gallery.services.credentials import CredentialsCache, PasswordScriptExecutor

from .discovery import find_all_config_files
from .parser import parse_config_file

logger = logging.getLogger(__name__)

SettingsProvider = Union[Sequence[Any], Callable[[], Sequence[Any]]]


def parse_source_setting(raw: Any) -> Optional[SourceSetting]:
    """
    Parse one host-settings source entry.

    Args:
        raw: JSON string or mapping with name/url/passwordScriptPath

    Returns:
        Parsed setting, or None if the entry is unusable
    """
    try:
        if isinstance(raw, str):
            raw = json.loads(raw)
        if not isinstance(raw, Mapping):
            raise ValueError("source setting must be an object")
        return SourceSetting.model_validate(dict(raw))
    except (ValueError, PydanticValidationError) as e:
        logger.warning(f"Ignoring malformed source setting {raw!r}: {e}")
        return None


class SourceResolver:
    """
    Resolves package sources for a workspace.

    Composes:
    - find_all_config_files: which NuGet.Config files apply
    - parse_config_file: what each file contributes
    - PasswordScriptExecutor: decoding of script-protected passwords
    - CredentialsCache: where resolved credentials are published
    """

    def __init__(
        self,
        executor: PasswordScriptExecutor,
        credentials_cache: CredentialsCache,
        settings_sources: Optional[SettingsProvider] = None,
        home_dir: Optional[Path] = None,
        platform: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize source resolver.

        Args:
            executor: Decrypt script executor
            credentials_cache: Shared credentials cache
            settings_sources: Host settings entries, or a callable returning them
            home_dir: Override for the user home directory
            platform: Override for sys.platform
            environ: Override for os.environ
        """
        self.executor = executor
        self.credentials_cache = credentials_cache
        self._settings_sources = settings_sources or []
        self.home_dir = home_dir
        self.platform = platform
        self.environ = environ

    def find_config_files(self, workspace_root: Optional[str] = None) -> List[Path]:
        return find_all_config_files(
            workspace_root,
            home_dir=self.home_dir,
            platform=self.platform,
            environ=self.environ
        )

    def settings(self) -> List[SourceSetting]:
        """Host settings entries that parsed successfully"""
        raw_entries = self._settings_sources
        if callable(raw_entries):
            raw_entries = raw_entries()
        parsed = [parse_source_setting(raw) for raw in raw_entries or []]
        return [s for s in parsed if s is not None]

    def resolve_sources_with_credentials(self, workspace_root: Optional[str] = None) -> List[SourceDeclaration]:
        """
        Merge sources and credentials from NuGet.Config files only.

        No host settings, no decoding, no cache writes.

        Args:
            workspace_root: Workspace folder, if any

        Returns:
            Enabled sources with raw credentials attached
        """
        logger.debug(f"Resolving sources from config files (workspace_root: {workspace_root})")
        sources: Dict[str, SourceDeclaration] = {}
        disabled: Set[str] = set()
        credentials: Dict[str, ResolvedCredential] = {}

        config_paths = self.find_config_files(workspace_root)
        logger.debug(f"Found config files: {', '.join(str(p) for p in config_paths)}")

        for config_path in config_paths:
            try:
                result = parse_config_file(config_path)
            except ConfigParseError as e:
                logger.error(f"Failed to parse {config_path}, skipping: {e.message}")
                continue

            if result.clear:
                logger.debug(f"'clear' found in {config_path}, clearing sources")
                sources.clear()
                disabled.clear()

            for source in result.sources:
                sources[source.name] = source

            credentials.update(result.credentials)
            disabled.update(result.disabled_sources)

        for source_name, credential in credentials.items():
            source = sources.get(source_name)
            if source is not None:
                sources[source_name] = source.model_copy(update={
                    "username": credential.username,
                    "password": credential.password,
                })

        return [s for s in sources.values() if s.name not in disabled]

    async def resolve_sources(self, workspace_root: Optional[str] = None) -> List[SourceDeclaration]:
        """
        Resolve all sources: config files, host settings, decoded passwords.

        Decoding failures are logged and the raw password is kept; they never
        fail the resolution.

        Args:
            workspace_root: Workspace folder, if any

        Returns:
            Sources with resolved credentials
        """
        sources: Dict[str, SourceDeclaration] = {
            s.name: s for s in self.resolve_sources_with_credentials(workspace_root)
        }

        for setting in self.settings():
            if not setting.name:
                continue
            existing = sources.get(setting.name)
            if existing is not None:
                if setting.password_script_path:
                    sources[setting.name] = existing.model_copy(
                        update={"password_script_path": setting.password_script_path}
                    )
            elif setting.url:
                logger.debug(f"Adding source from settings: {setting.name}")
                sources[setting.name] = SourceDeclaration(
                    name=setting.name,
                    url=setting.url,
                    password_script_path=setting.password_script_path
                )

        resolved: List[SourceDeclaration] = []
        for source in sources.values():
            resolved.append(await self._apply_credentials(source))

        logger.info(f"Resolved {len(resolved)} package sources")
        return resolved

    async def _apply_credentials(self, source: SourceDeclaration) -> SourceDeclaration:
        if source.password_script_path and source.password:
            try:
                logger.debug(f"Decoding password for {source.name}")
                decoded = await self.executor.execute_script(source.password_script_path, source.password)
            except PasswordScriptError as e:
                logger.error(f"Failed to decode password for {source.name}: {e.message}")
                self.credentials_cache.set(source.name, source.username, source.password)
                return source
            self.credentials_cache.set(source.name, source.username, decoded)
            return source.model_copy(update={"password": decoded})

        if source.has_credentials:
            logger.debug(f"Caching credentials for {source.name}")
            self.credentials_cache.set(source.name, source.username, source.password)
        return source

    async def list_sources(self, workspace_root: Optional[str] = None) -> List[SourceSummary]:
        """Resolved sources without credentials"""
        return [
            SourceSummary(name=s.name, url=s.url, password_script_path=s.password_script_path)
            for s in await self.resolve_sources(workspace_root)
        ]
