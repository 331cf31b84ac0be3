"""
Tests for chocobuild.build.scripts module.

Tests Chocolatey script generation including:
- PowerShell value formatting
- Install location expressions (literal and well-known folders)
- Post-install actions and appended user scripts
- Uninstall file lists
- Which files end up in tools/
"""

from __future__ import annotations

import pytest

from chocobuild.build.scripts import (
    BEFORE_MODIFY_SCRIPT,
    INSTALL_SCRIPT,
    UNINSTALL_SCRIPT,
    _format_powershell_value,
    check_postinstall_action,
    generate_before_modify_script,
    generate_install_script,
    generate_uninstall_script,
    write_scripts,
)
from chocobuild.config import BuildInfo
from chocobuild.exceptions import ConfigError
from chocobuild.locations import InstallLocation

pytestmark = pytest.mark.unit


@pytest.fixture
def info(sample_build_info) -> BuildInfo:
    return BuildInfo.from_config(sample_build_info)


@pytest.fixture
def literal_location() -> InstallLocation:
    return InstallLocation(path="C:\\Tools\\TestApp\\")


@pytest.fixture
def desktop_location() -> InstallLocation:
    return InstallLocation(
        path="C:\\Users\\tester\\Desktop\\", folder_id="DesktopFolder"
    )


class TestFormatPowershellValue:
    """Tests for PowerShell literal formatting."""

    def test_string_quotes_escaped(self):
        """Test single quotes are doubled."""
        assert _format_powershell_value("it's") == "'it''s'"

    def test_bool(self):
        """Test booleans map to $true/$false."""
        assert _format_powershell_value(True) == "$true"
        assert _format_powershell_value(False) == "$false"

    def test_list(self):
        """Test lists become array literals."""
        assert _format_powershell_value(["a", 1]) == "@('a', 1)"

    def test_none(self):
        """Test None is an empty string."""
        assert _format_powershell_value(None) == "''"


class TestCheckPostinstallAction:
    """Tests for post-install action checking."""

    def test_normalizes_case_and_whitespace(self):
        """Test supported actions are returned lower-cased."""
        assert check_postinstall_action(" Logout ") == "logout"

    def test_empty_is_allowed(self):
        """Test no action is not an error."""
        assert check_postinstall_action("") == ""

    def test_unsupported_lists_choices(self):
        """Test the error names the action and the supported ones."""
        with pytest.raises(ConfigError) as exc_info:
            check_postinstall_action("reboot")

        assert "reboot" in str(exc_info.value)
        assert "logout, restart, none" in str(exc_info.value)


class TestGenerateInstallScript:
    """Tests for chocolateyInstall.ps1 generation."""

    def test_literal_location(self, info, literal_location):
        """Test a literal install root is emitted as a quoted string."""
        text = generate_install_script(info, literal_location, True, [])

        assert "$installLocation = 'C:\\Tools\\TestApp\\'" in text
        assert "Copy-Item" in text

    def test_well_known_folder_uses_getfolderpath(self, info, desktop_location):
        """Test a well-known folder is resolved on the installing machine."""
        text = generate_install_script(info, desktop_location, True, [])

        assert (
            "$installLocation = [Environment]::GetFolderPath('DesktopDirectory') + '\\'"
            in text
        )
        assert "C:\\Users\\tester" not in text

    def test_script_only(self, info):
        """Test a script-only package skips the payload copy."""
        text = generate_install_script(info, None, False, [])

        assert "$installLocation = ''" in text
        assert "Script-only install" in text
        assert "Copy-Item" not in text

    @pytest.mark.parametrize(
        "action, expected",
        [
            ("logout", "shutdown /l"),
            ("restart", "shutdown /r /t 0"),
            ("none", "No post-install action required."),
            ("Restart", "shutdown /r /t 0"),
        ],
    )
    def test_postinstall_actions(self, sample_build_info, action, expected):
        """Test each supported post-install action."""
        info = BuildInfo.from_config({**sample_build_info, "postinstall_action": action})

        text = generate_install_script(info, None, False, [])

        assert "# Executing post-install action" in text
        assert expected in text

    def test_empty_action_emits_nothing(self, sample_build_info):
        """Test no action block without a configured action."""
        info = BuildInfo.from_config({**sample_build_info, "postinstall_action": ""})

        text = generate_install_script(info, None, False, [])

        assert "post-install action" not in text

    def test_unsupported_action_raises(self, sample_build_info):
        """Test unknown actions are configuration errors."""
        info = BuildInfo.from_config({**sample_build_info, "postinstall_action": "reboot"})

        with pytest.raises(ConfigError, match="reboot"):
            generate_install_script(info, None, False, [])

    def test_postinstall_scripts_appended_in_order(self, info, tmp_path):
        """Test user scripts are appended after the action with headers."""
        first = tmp_path / "postinstall-a.ps1"
        second = tmp_path / "postinstall-b.ps1"
        first.write_text("Write-Host 'first'")
        second.write_text("Write-Host 'second'")

        text = generate_install_script(info, None, False, [first, second])

        assert "# Post-install script: postinstall-a.ps1" in text
        assert text.index("'first'") < text.index("'second'")
        assert text.index("No post-install action required.") < text.index("'first'")


class TestGenerateBeforeModifyScript:
    """Tests for chocolateyBeforeModify.ps1 generation."""

    def test_concatenates_with_headers(self, tmp_path):
        """Test each preinstall script is preceded by its name."""
        a = tmp_path / "preinstall-a.ps1"
        b = tmp_path / "preinstall-b.ps1"
        a.write_text("Stop-Service foo")
        b.write_text("Stop-Process bar")

        text = generate_before_modify_script([a, b])

        assert text == (
            "# Contents of preinstall-a.ps1\nStop-Service foo\n"
            "# Contents of preinstall-b.ps1\nStop-Process bar\n"
        )

    def test_bom_is_dropped(self, tmp_path):
        """Test a UTF-8 BOM in a user script is not copied mid-file."""
        script = tmp_path / "preinstall.ps1"
        script.write_bytes(b"\xef\xbb\xbfWrite-Host 'x'")

        text = generate_before_modify_script([script])

        assert "\ufeff" not in text


class TestGenerateUninstallScript:
    """Tests for chocolateyUninstall.ps1 generation."""

    def test_literal_paths_joined(self, literal_location):
        """Test literal roots list full paths with single separators."""
        text = generate_uninstall_script(literal_location, ["bin/app.exe", "readme.txt"])

        assert "'C:\\Tools\\TestApp\\bin\\app.exe'" in text
        assert "'C:\\Tools\\TestApp\\readme.txt'" in text
        assert "\\\\" not in text
        assert "Remove-Item -LiteralPath $file" in text

    def test_well_known_folder_paths_are_relative(self, desktop_location):
        """Test well-known roots are joined at uninstall time."""
        text = generate_uninstall_script(desktop_location, ["bin/app.exe"])

        assert "GetFolderPath('DesktopDirectory')" in text
        assert "($installLocation + 'bin\\app.exe')" in text


class TestWriteScripts:
    """Tests for writing tools/."""

    def test_payload_package(self, make_project, info, literal_location):
        """Test install and uninstall scripts for a payload package."""
        project = make_project(payload={"bin/app.exe": "x"})

        written = write_scripts(project, info, literal_location, has_payload=True)

        assert written == [f"tools/{INSTALL_SCRIPT}", f"tools/{UNINSTALL_SCRIPT}"]
        for rel in written:
            assert (project / rel).is_file()

    def test_preinstall_adds_before_modify(self, make_project, info):
        """Test preinstall scripts produce chocolateyBeforeModify.ps1."""
        project = make_project(
            scripts={"preinstall.ps1": "Write-Host pre", "postinstall.ps1": "Write-Host post"}
        )

        written = write_scripts(project, info, None, has_payload=False)

        assert written == [f"tools/{INSTALL_SCRIPT}", f"tools/{BEFORE_MODIFY_SCRIPT}"]
        install = (project / "tools" / INSTALL_SCRIPT).read_text()
        assert "Write-Host post" in install
        assert "Write-Host pre" not in install

    def test_script_only_has_no_uninstall(self, make_project, info):
        """Test no uninstall script without payload."""
        project = make_project(scripts={"postinstall.ps1": ""})

        written = write_scripts(project, info, None, has_payload=False)

        assert f"tools/{UNINSTALL_SCRIPT}" not in written
        assert not (project / "tools" / UNINSTALL_SCRIPT).exists()
