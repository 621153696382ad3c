# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
NuGet.Config Discovery

Single responsibility: locate the NuGet.Config files that apply to a
workspace, in the order they are merged.
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Mapping, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("nuget.config", "NuGet.Config", "NuGet.config")
USER_CONFIG_NAME = "NuGet.Config"
MACHINE_CONFIG_NAME = "Microsoft.VisualStudio.Offline.config"


def is_windows_platform(platform: str) -> bool:
    return platform.startswith("win")


def find_config_in_directory(directory: Path) -> Optional[Path]:
    """
    Find the NuGet.Config file in a directory.

    Known spellings are tried first, then any case-insensitive match.

    Args:
        directory: Directory to look in

    Returns:
        Path of the first match, or None
    """
    if not directory.is_dir():
        return None

    for filename in CONFIG_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return candidate

    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.warning(f"Cannot list {directory}: {e}")
        return None

    for entry in entries:
        if entry.name.lower() == "nuget.config" and entry.is_file():
            return entry
    return None


def find_all_config_files(
    workspace_root: Optional[str] = None,
    home_dir: Optional[Path] = None,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> List[Path]:
    """
    Collect config files in merge order: workspace, user, machine.

    Args:
        workspace_root: Workspace folder, if any
        home_dir: User home directory (defaults to Path.home())
        platform: Platform string as in sys.platform
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Existing config file paths in processing order
    """
    home_dir = home_dir or Path.home()
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ
    windows = is_windows_platform(platform)

    config_paths: List[Path] = []

    # 1. Workspace configs
    if workspace_root:
        root = Path(workspace_root)
        for directory in (root, root / ".nuget"):
            found = find_config_in_directory(directory)
            if found:
                config_paths.append(found)

    # 2. User config
    appdata = environ.get("APPDATA")
    if windows and appdata:
        appdata_config = Path(appdata) / "NuGet" / USER_CONFIG_NAME
        if appdata_config.is_file():
            config_paths.append(appdata_config)

    user_config = home_dir / ".nuget" / "NuGet" / USER_CONFIG_NAME
    if user_config.is_file():
        config_paths.append(user_config)

    if not windows:
        xdg_config = home_dir / ".config" / "NuGet" / USER_CONFIG_NAME
        if xdg_config.is_file():
            config_paths.append(xdg_config)

    # 3. Machine config (Windows only)
    if windows:
        program_files = environ.get("ProgramFiles(x86)") or environ.get("ProgramFiles")
        if program_files:
            machine_config = Path(program_files) / "NuGet" / "Config" / MACHINE_CONFIG_NAME
            if machine_config.is_file():
                config_paths.append(machine_config)

    return config_paths
