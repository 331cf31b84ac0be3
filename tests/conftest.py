"""
Pytest configuration and shared fixtures for chocobuild tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from chocobuild.logging import SilentLogger, set_global_logger


@pytest.fixture(autouse=True)
def silent_logger():
    """Reset the global logger so tests never depend on CLI configuration."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def home_dir() -> str:
    """A Windows-style home directory for well-known folder tables."""
    return r"C:\Users\tester"


@pytest.fixture
def sample_build_info() -> dict[str, Any]:
    """
    Provide sample build-info.yaml data.

    Returns a complete configuration for a payload package.
    """
    return {
        "product": {
            "identifier": "test-app",
            "version": "1.2.3",
            "name": "TestApp",
            "developer": "Contoso",
        },
        "install_location": "C:/Tools/TestApp",
        "postinstall_action": "none",
    }


@pytest.fixture
def make_project(tmp_path: Path, sample_build_info: dict[str, Any]):
    """
    Factory fixture for creating project directories.

    Usage:
        project = make_project(payload={"bin/app.exe": "x"},
                               scripts={"postinstall.ps1": "Write-Host hi"})
    """

    def _create(
        build_info: dict[str, Any] | None = None,
        payload: dict[str, str] | None = None,
        scripts: dict[str, str] | None = None,
        name: str = "project",
    ) -> Path:
        project = tmp_path / name
        project.mkdir(parents=True, exist_ok=True)

        data = sample_build_info if build_info is None else build_info
        with (project / "build-info.yaml").open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f)

        if payload is not None:
            payload_dir = project / "payload"
            payload_dir.mkdir(exist_ok=True)
            for rel, content in payload.items():
                target = payload_dir / rel
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")

        if scripts is not None:
            scripts_dir = project / "scripts"
            scripts_dir.mkdir(exist_ok=True)
            for script_name, content in scripts.items():
                (scripts_dir / script_name).write_text(content, encoding="utf-8")

        return project

    return _create
