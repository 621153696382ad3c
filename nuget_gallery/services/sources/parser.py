# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
NuGet.Config Parser

Single responsibility: read one NuGet.Config file into its sources,
credentials, disabled names and clear flag.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, List, Optional

from nuget_gallery.core.errors import ConfigParseError
from nuget_gallery.models.source_models import (
    ParsedConfigFile,
    ResolvedCredential,
    SourceDeclaration,
)

_XML_NAME_ESCAPE = re.compile(r"_x([0-9A-Fa-f]{4})_")


def decode_xml_name(name: str) -> str:
    """Undo XmlConvert name encoding, e.g. `My_x0020_Feed` -> `My Feed`"""
    return _XML_NAME_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), name)


def _add_value(parent: ET.Element, key: str) -> Optional[str]:
    for node in parent.findall("add"):
        if node.get("key") == key:
            return node.get("value") or None
    return None


def parse_config_text(text: str, path: str = "<memory>") -> ParsedConfigFile:
    """
    Parse NuGet.Config XML content.

    Args:
        text: XML document
        path: Origin used in results and errors

    Returns:
        Parsed contribution of the document

    Raises:
        ConfigParseError: If the XML is malformed
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ConfigParseError(f"Malformed XML in {path}: {e}", config_file=path)

    sources: List[SourceDeclaration] = []
    credentials: Dict[str, ResolvedCredential] = {}
    disabled: List[str] = []
    clear = False

    for section in root.iter("packageSources"):
        if section.find("clear") is not None:
            clear = True
        for node in section.findall("add"):
            name = node.get("key")
            url = node.get("value")
            if name and url:
                sources.append(SourceDeclaration(name=name, url=url))

    for section in root.iter("disabledPackageSources"):
        for node in section.findall("add"):
            name = node.get("key")
            if name and node.get("value") == "true":
                disabled.append(name)

    for section in root.iter("packageSourceCredentials"):
        for source_node in section:
            if not isinstance(source_node.tag, str):
                continue
            username = _add_value(source_node, "Username")
            password = _add_value(source_node, "Password")
            if username or password:
                credentials[decode_xml_name(source_node.tag)] = ResolvedCredential(
                    username=username,
                    password=password
                )

    return ParsedConfigFile(
        path=path,
        sources=sources,
        credentials=credentials,
        disabled_sources=disabled,
        clear=clear
    )


def parse_config_file(config_path: Path) -> ParsedConfigFile:
    """
    Parse a NuGet.Config file from disk.

    Raises:
        ConfigParseError: If the file cannot be read or is malformed
    """
    try:
        text = Path(config_path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"Cannot read {config_path}: {e}", config_file=str(config_path))
    return parse_config_text(text, str(config_path))
