# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for NuGet.Config discovery and parsing
"""

import pytest

from nuget_gallery.core.errors import ConfigParseError
from nuget_gallery.services.sources import (
    decode_xml_name,
    find_all_config_files,
    find_config_in_directory,
    parse_config_file,
    parse_config_text,
)


SAMPLE_CONFIG = """<?xml version="1.0" encoding="utf-8"?>
<configuration>
  <packageSources>
    <add key="nuget.org" value="https://api.nuget.org/v3/index.json" />
    <add key="My Feed" value="https://feed.example.com/v3/index.json" />
    <add key="NoUrl" />
  </packageSources>
  <disabledPackageSources>
    <add key="Legacy" value="true" />
    <add key="StillOn" value="false" />
  </disabledPackageSources>
  <packageSourceCredentials>
    <My_x0020_Feed>
      <add key="Username" value="user" />
      <add key="ClearTextPassword" value="ignored" />
      <add key="Password" value="cGFzcw==" />
    </My_x0020_Feed>
    <Empty>
      <add key="Other" value="x" />
    </Empty>
  </packageSourceCredentials>
</configuration>
"""


class TestDecodeXmlName:
    """Test XmlConvert name decoding"""

    def test_space_escape(self):
        assert decode_xml_name("My_x0020_Feed") == "My Feed"

    def test_multiple_escapes(self):
        assert decode_xml_name("a_x002E_b_x002D_c") == "a.b-c"

    def test_plain_name_unchanged(self):
        assert decode_xml_name("nuget_org") == "nuget_org"


class TestParseConfigText:
    """Test parsing of a single document"""

    def test_sources_in_document_order(self):
        result = parse_config_text(SAMPLE_CONFIG, "/cfg/NuGet.Config")

        assert [(s.name, s.url) for s in result.sources] == [
            ("nuget.org", "https://api.nuget.org/v3/index.json"),
            ("My Feed", "https://feed.example.com/v3/index.json"),
        ]
        assert result.path == "/cfg/NuGet.Config"

    def test_disabled_only_when_value_is_true(self):
        result = parse_config_text(SAMPLE_CONFIG)
        assert result.disabled_sources == ["Legacy"]

    @pytest.mark.parametrize("value", ["True", "TRUE", " true", "1"])
    def test_disabled_value_must_be_exactly_true(self, value):
        result = parse_config_text(
            "<configuration><disabledPackageSources>"
            f'<add key="Feed" value="{value}" />'
            "</disabledPackageSources></configuration>"
        )
        assert result.disabled_sources == []

    def test_credentials_keyed_by_decoded_name(self):
        result = parse_config_text(SAMPLE_CONFIG)

        assert set(result.credentials) == {"My Feed"}
        credential = result.credentials["My Feed"]
        assert credential.username == "user"
        assert credential.password == "cGFzcw=="

    def test_clear_flag(self):
        text = """<configuration><packageSources><clear />
            <add key="Only" value="https://only/index.json" /></packageSources></configuration>"""

        result = parse_config_text(text)

        assert result.clear is True
        assert [s.name for s in result.sources] == ["Only"]

    def test_no_clear_by_default(self):
        assert parse_config_text(SAMPLE_CONFIG).clear is False

    def test_document_without_sections(self):
        result = parse_config_text("<configuration />")

        assert result.sources == []
        assert result.credentials == {}
        assert result.disabled_sources == []

    def test_malformed_xml_raises(self):
        with pytest.raises(ConfigParseError) as exc_info:
            parse_config_text("<configuration><packageSources>", "/bad/NuGet.Config")
        assert exc_info.value.config_file == "/bad/NuGet.Config"


class TestParseConfigFile:
    """Test reading documents from disk"""

    def test_reads_file_with_bom(self, tmp_path):
        path = tmp_path / "NuGet.Config"
        path.write_bytes(b"\xef\xbb\xbf" + SAMPLE_CONFIG.encode("utf-8"))

        result = parse_config_file(path)

        assert len(result.sources) == 2
        assert result.path == str(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigParseError):
            parse_config_file(tmp_path / "missing.config")


class TestFindConfigInDirectory:
    """Test lookup of the config file inside one directory"""

    def test_missing_directory(self, tmp_path):
        assert find_config_in_directory(tmp_path / "nope") is None

    def test_known_spelling(self, tmp_path):
        (tmp_path / "nuget.config").write_text("<configuration />")
        assert find_config_in_directory(tmp_path) == tmp_path / "nuget.config"

    def test_case_insensitive_match(self, tmp_path):
        (tmp_path / "NUGET.CONFIG").write_text("<configuration />")
        found = find_config_in_directory(tmp_path)
        assert found is not None
        assert found.name.lower() == "nuget.config"

    def test_unrelated_files_ignored(self, tmp_path):
        (tmp_path / "packages.config").write_text("<packages />")
        assert find_config_in_directory(tmp_path) is None


class TestFindAllConfigFiles:
    """Test discovery order across workspace, user and machine locations"""

    def test_workspace_then_dot_nuget_then_user(self, workspace_dir, home_dir, write_nuget_config):
        root_config = write_nuget_config(workspace_dir, "", filename="nuget.config")
        nested_config = write_nuget_config(workspace_dir / ".nuget", "", filename="NuGet.Config")
        user_config = write_nuget_config(home_dir / ".nuget" / "NuGet", "")
        xdg_config = write_nuget_config(home_dir / ".config" / "NuGet", "")

        paths = find_all_config_files(str(workspace_dir), home_dir=home_dir, platform="linux", environ={})

        assert paths == [root_config, nested_config, user_config, xdg_config]

    def test_without_workspace(self, home_dir, write_nuget_config):
        user_config = write_nuget_config(home_dir / ".nuget" / "NuGet", "")

        paths = find_all_config_files(None, home_dir=home_dir, platform="linux", environ={})

        assert paths == [user_config]

    def test_nothing_found(self, home_dir):
        assert find_all_config_files(None, home_dir=home_dir, platform="linux", environ={}) == []

    def test_windows_locations(self, tmp_path, home_dir, write_nuget_config):
        appdata = tmp_path / "AppData" / "Roaming"
        program_files = tmp_path / "Program Files (x86)"
        appdata_config = write_nuget_config(appdata / "NuGet", "")
        user_config = write_nuget_config(home_dir / ".nuget" / "NuGet", "")
        write_nuget_config(home_dir / ".config" / "NuGet", "")
        machine_config = write_nuget_config(
            program_files / "NuGet" / "Config", "",
            filename="Microsoft.VisualStudio.Offline.config"
        )

        paths = find_all_config_files(
            None,
            home_dir=home_dir,
            platform="win32",
            environ={"APPDATA": str(appdata), "ProgramFiles(x86)": str(program_files)}
        )

        # XDG location is not consulted on Windows
        assert paths == [appdata_config, user_config, machine_config]

    def test_machine_config_ignored_off_windows(self, tmp_path, home_dir, write_nuget_config):
        program_files = tmp_path / "pf"
        write_nuget_config(program_files / "NuGet" / "Config", "", filename="Microsoft.VisualStudio.Offline.config")

        paths = find_all_config_files(
            None, home_dir=home_dir, platform="linux", environ={"ProgramFiles": str(program_files)}
        )

        assert paths == []
