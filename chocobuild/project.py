# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Project directory layout for chocobuild.

A project directory looks like this:

    <project>/
        build-info.yaml     package metadata (required)
        payload/            files copied to install_location
        scripts/            preinstall*.ps1 and postinstall*.ps1
        build/              .nupkg output (created by the build)
        tools/              generated Chocolatey scripts (temporary)

At least one of payload/ or scripts/ must exist.

Example:
    ```python
    from pathlib import Path
    from chocobuild.project import init_project, verify_project_structure

    init_project(Path("projects/7zip"), identifier="7zip")
    verify_project_structure(Path("projects/7zip"))
    ```
"""

from __future__ import annotations

from pathlib import Path, PureWindowsPath

import yaml

from chocobuild.config import BUILD_INFO_FILENAME
from chocobuild.exceptions import ConfigError
from chocobuild.logging import get_global_logger

PAYLOAD_DIR = "payload"
SCRIPTS_DIR = "scripts"
BUILD_DIR = "build"
TOOLS_DIR = "tools"

PROJECT_SUBDIRS = (PAYLOAD_DIR, SCRIPTS_DIR, BUILD_DIR, TOOLS_DIR)

PREINSTALL_PREFIX = "preinstall"
POSTINSTALL_PREFIX = "postinstall"


def normalize_path(raw: str) -> Path:
    """Turn a user-supplied path with either separator into a Path.

    Example:
        >>> normalize_path("projects\\\\7zip").parts
        ('projects', '7zip')
    """
    return Path(PureWindowsPath(raw).as_posix())


def verify_project_structure(project_dir: Path) -> None:
    """Check the project directory has the layout the build expects.

    Raises:
        ConfigError: If neither payload/ nor scripts/ exists, or if
            build-info.yaml is missing.
    """
    if not project_dir.is_dir():
        raise ConfigError(f"Project directory not found: {project_dir}")

    if (
        not (project_dir / PAYLOAD_DIR).is_dir()
        and not (project_dir / SCRIPTS_DIR).is_dir()
    ):
        raise ConfigError(
            f"either '{PAYLOAD_DIR}' or '{SCRIPTS_DIR}' directory must exist "
            f"in the project directory: {project_dir}"
        )

    if not (project_dir / BUILD_INFO_FILENAME).is_file():
        raise ConfigError(
            f"'{BUILD_INFO_FILENAME}' file is missing in the project directory: "
            f"{project_dir}"
        )


def create_project_directories(project_dir: Path) -> None:
    """Create payload/, scripts/, build/ and tools/ if they don't exist."""
    logger = get_global_logger()
    for name in PROJECT_SUBDIRS:
        (project_dir / name).mkdir(parents=True, exist_ok=True)
    logger.verbose("PROJECT", f"Directories ready under {project_dir}")


def init_project(
    project_dir: Path,
    identifier: str,
    name: str | None = None,
    developer: str = "",
    version: str = "1.0.0",
) -> Path:
    """Scaffold a new project directory with a starter build-info.yaml.

    Args:
        project_dir: Directory to create.
        identifier: NuGet package id.
        name: Display name. Default: identifier.
        developer: Author/publisher name.
        version: Initial product version.

    Returns:
        Path to the written build-info.yaml.

    Raises:
        ConfigError: If build-info.yaml already exists.
    """
    build_info_path = project_dir / BUILD_INFO_FILENAME
    if build_info_path.exists():
        raise ConfigError(f"{BUILD_INFO_FILENAME} already exists: {build_info_path}")

    create_project_directories(project_dir)

    data = {
        "product": {
            "identifier": identifier,
            "version": version,
            "name": name or identifier,
            "developer": developer,
            "description": "",
        },
        "install_location": "",
        "postinstall_action": "none",
        "signing_certificate": "",
    }
    with build_info_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    return build_info_path


def payload_has_files(payload_dir: Path) -> bool:
    """Return True if at least one regular file exists under payload_dir."""
    if not payload_dir.is_dir():
        return False
    return any(p.is_file() for p in payload_dir.rglob("*"))


def payload_files(project_dir: Path) -> list[str]:
    """List payload files relative to payload/, in POSIX form, sorted."""
    payload_dir = project_dir / PAYLOAD_DIR
    if not payload_dir.is_dir():
        return []
    return sorted(
        p.relative_to(payload_dir).as_posix()
        for p in payload_dir.rglob("*")
        if p.is_file()
    )


def find_scripts(project_dir: Path, prefix: str) -> list[Path]:
    """Find scripts/<prefix>*.ps1 files (case-insensitive), sorted by name.

    Args:
        project_dir: Project directory.
        prefix: "preinstall" or "postinstall".
    """
    scripts_dir = project_dir / SCRIPTS_DIR
    if not scripts_dir.is_dir():
        return []
    matches = [
        p
        for p in scripts_dir.iterdir()
        if p.is_file()
        and p.name.lower().startswith(prefix)
        and p.name.lower().endswith(".ps1")
    ]
    return sorted(matches, key=lambda p: p.name)
