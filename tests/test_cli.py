"""
Tests for chocobuild.cli module.

Tests the command-line interface including:
- Argument parsing
- init/validate/build handlers and exit codes
- Error output
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from chocobuild.cli import build_parser, main
from chocobuild.exceptions import PackagingError
from chocobuild.results import BuildResult

pytestmark = pytest.mark.unit


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


class TestParser:
    """Tests for argument parsing."""

    def test_build_defaults(self):
        """Test build options default to off."""
        args = build_parser().parse_args(["build", "projects/app"])

        assert args.project_dir == "projects/app"
        assert args.cache_dir is None
        assert not args.keep_tools
        assert not args.verbose
        assert not args.debug

    def test_init_requires_identifier(self):
        """Test init fails without --identifier."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["init", "projects/app"])

    def test_command_required(self):
        """Test a subcommand is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestInitCommand:
    """Tests for 'chocobuild init'."""

    def test_creates_project(self, tmp_path, capsys):
        """Test init scaffolds the project and succeeds."""
        project = tmp_path / "app"

        code = _run(["init", str(project), "--identifier", "app", "--name", "App"])

        assert code == 0
        assert (project / "build-info.yaml").is_file()
        assert "[SUCCESS]" in capsys.readouterr().out

    def test_existing_project_fails(self, make_project, capsys):
        """Test init on an existing project fails with exit code 1."""
        project = make_project()

        code = _run(["init", str(project), "--identifier", "app"])

        assert code == 1
        assert "already exists" in capsys.readouterr().out


class TestValidateCommand:
    """Tests for 'chocobuild validate'."""

    def test_valid(self, make_project, capsys):
        """Test a valid project exits 0."""
        project = make_project(payload={"a.txt": "a"})

        code = _run(["validate", str(project)])

        out = capsys.readouterr().out
        assert code == 0
        assert "VALIDATION RESULTS" in out
        assert "[WARNING]" in out

    def test_invalid(self, make_project, capsys):
        """Test an invalid project exits 1 and lists errors."""
        project = make_project()

        code = _run(["validate", str(project)])

        out = capsys.readouterr().out
        assert code == 1
        assert "[X]" in out
        assert "[FAILED]" in out


class TestBuildCommand:
    """Tests for 'chocobuild build'."""

    @patch("chocobuild.cli.build_package")
    def test_success(self, mock_build, tmp_path, capsys):
        """Test a successful build prints the results block."""
        mock_build.return_value = BuildResult(
            project_dir=tmp_path,
            package_path=tmp_path / "build" / "App-1.2.3.nupkg",
            identifier="app",
            name="App",
            version="1.2.3",
            install_location="DesktopFolder",
            signed=True,
            status="success",
        )

        code = _run(["build", str(tmp_path), "--keep-tools", "--cache-dir", "c/tools"])

        out = capsys.readouterr().out
        assert code == 0
        assert "BUILD RESULTS" in out
        assert "DesktopFolder" in out
        assert "Signed:           yes" in out
        kwargs = mock_build.call_args.kwargs
        assert kwargs["keep_tools"] is True
        assert kwargs["cache_dir"] == Path("c/tools")

    @patch("chocobuild.cli.build_package")
    def test_failure(self, mock_build, tmp_path, capsys):
        """Test build errors print a message and exit 1."""
        mock_build.side_effect = PackagingError("nuget failed")

        code = _run(["build", str(tmp_path)])

        assert code == 1
        assert "Error: nuget failed" in capsys.readouterr().out

    @patch("chocobuild.cli.build_package")
    def test_script_only_location(self, mock_build, tmp_path, capsys):
        """Test a script-only result is labelled as such."""
        mock_build.return_value = BuildResult(
            project_dir=tmp_path,
            package_path=tmp_path / "build" / "App-1.2.3.nupkg",
            identifier="app",
            name="App",
            version="1.2.3",
            install_location=None,
            signed=False,
            status="success",
        )

        _run(["build", str(tmp_path)])

        assert "(script-only)" in capsys.readouterr().out
