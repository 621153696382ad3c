# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Package source resolution from NuGet.Config files and host settings.
"""

from .discovery import find_all_config_files, find_config_in_directory
from .parser import decode_xml_name, parse_config_file, parse_config_text
from .resolver import SourceResolver, parse_source_setting

__all__ = [
    "find_all_config_files",
    "find_config_in_directory",
    "decode_xml_name",
    "parse_config_file",
    "parse_config_text",
    "SourceResolver",
    "parse_source_setting",
]
