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

"""Build manager for Chocolatey package creation.

This module orchestrates the complete build process for turning a project
directory into a .nupkg.

Private Helpers:
    - _check_build_info: Reject settings before anything is written
    - _resolve_version: Apply the configured version policy
    - _resolve_location: Resolve install_location (payload builds only)
    - _find_built_package: Locate and rename the package nuget produced
    - _cleanup: Remove generated tools/ and the nuspec

Design Principles:
    - Nothing is written before configuration and version are validated
    - Scripts and nuspec are regenerated on every build
    - The nuspec is always removed, even when packing fails
    - Output is named build/<name>-<version>.nupkg

Example:
    from pathlib import Path
    from chocobuild.build import build_package

    result = build_package(Path("projects/7zip"))

    print(f"Built: {result.package_path}")
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
import shutil

from chocobuild.config import BuildInfo, load_build_info
from chocobuild.exceptions import ConfigError, PackagingError
from chocobuild.locations import InstallLocation, build_well_known_dirs, locate
from chocobuild.logging import get_global_logger
from chocobuild.project import (
    BUILD_DIR,
    PAYLOAD_DIR,
    TOOLS_DIR,
    create_project_directories,
    payload_has_files,
    verify_project_structure,
)
from chocobuild.results import BuildResult
from chocobuild.versioning import apply_version_policy

from .nuspec import write_nuspec
from .scripts import check_postinstall_action, write_scripts
from .tools import get_nuget, nuget_pack, sign_package

DEFAULT_TOOL_CACHE = Path("cache/tools")

_TOTAL_STEPS = 9


def _check_build_info(info: BuildInfo, has_payload: bool) -> None:
    """Reject settings that would only fail once files have been written.

    Raises:
        ConfigError: If the payload is non-empty and no install_location
            is configured, or if postinstall_action is unsupported.
    """
    if has_payload and not info.install_location:
        raise ConfigError(
            "'install_location' must be specified in build-info.yaml because "
            "your payload folder is not empty."
        )
    check_postinstall_action(info.postinstall_action)


def _resolve_version(info: BuildInfo) -> str:
    """Apply the version policy to product.version.

    Raises:
        VersionError: If the version is rejected.
        ConfigError: If the policy is unknown.
    """
    logger = get_global_logger()
    version = apply_version_policy(info.version, info.version_policy)
    if version != info.version:
        logger.verbose(
            "BUILD",
            f"Version {info.version} normalized to {version} "
            f"(policy: {info.version_policy})",
        )
    return version


def _resolve_location(
    info: BuildInfo,
    has_payload: bool,
    well_known_dirs: Mapping[str, str] | None,
) -> InstallLocation | None:
    """Resolve install_location, or return None for script-only builds."""
    logger = get_global_logger()

    if not has_payload:
        if info.install_location:
            logger.warning("BUILD", "Payload is empty, ignoring install_location")
        return None

    if well_known_dirs is None:
        well_known_dirs = build_well_known_dirs()

    location = locate(info.install_location, well_known_dirs)
    if location.folder_id:
        logger.verbose(
            "BUILD", f"Install location {location.path} -> {location.folder_id}"
        )
    else:
        logger.verbose("BUILD", f"Install location: {location.path}")
    return location


def _find_built_package(
    build_dir: Path, info: BuildInfo, version: str
) -> Path:
    """Rename the package produced by nuget to <name>-<version>.nupkg.

    nuget names its output <id>.<version>.nupkg. If that exact file is not
    present, the most recent <id>*.nupkg is used.

    Raises:
        PackagingError: If no package produced by nuget can be found.
    """
    logger = get_global_logger()
    final_path = build_dir / f"{info.name}-{version}.nupkg"

    expected = build_dir / f"{info.identifier}.{version}.nupkg"
    if expected.exists():
        built = expected
    else:
        candidates = [
            p for p in build_dir.glob(f"{info.identifier}*.nupkg") if p != final_path
        ]
        if not candidates:
            raise PackagingError(
                f"nuget pack completed but no {info.identifier}*.nupkg "
                f"found in {build_dir}"
            )
        built = max(candidates, key=lambda p: p.stat().st_mtime)

    if built != final_path:
        logger.verbose("BUILD", f"Renaming package: {built.name} -> {final_path.name}")
        built.replace(final_path)

    return final_path


def _cleanup(project_dir: Path, keep_tools: bool) -> None:
    logger = get_global_logger()
    if keep_tools:
        logger.verbose("BUILD", f"Keeping {TOOLS_DIR}/ directory")
        return
    try:
        shutil.rmtree(project_dir / TOOLS_DIR)
    except FileNotFoundError:
        pass
    except OSError as err:
        logger.warning("BUILD", f"Failed to remove tools directory: {err}")
    else:
        logger.verbose("BUILD", "Tools directory removed successfully.")


def build_package(
    project_dir: Path,
    cache_dir: Path | None = None,
    keep_tools: bool = False,
    well_known_dirs: Mapping[str, str] | None = None,
) -> BuildResult:
    """Build a Chocolatey package from a project directory.

    This is the main entry point for the build process. It:

    1. Verifies the project structure
    2. Loads build-info.yaml (with org defaults)
    3. Checks install_location against the payload and the post-install
       action
    4. Applies the version policy
    5. Resolves the install location
    6. Writes the Chocolatey scripts and the nuspec
    7. Runs nuget pack and renames the output
    8. Signs the package if a certificate is configured
    9. Removes generated files

    Args:
        project_dir: Project directory containing build-info.yaml.
        cache_dir: Where nuget.exe is cached if it is not on PATH.
            Default: Path("cache/tools")
        keep_tools: Keep the generated tools/ directory. Default is False.
        well_known_dirs: Well-known directory table. Default: built from
            the current user's home directory.

    Returns:
        BuildResult describing the built package.

    Raises:
        ConfigError: If the project or its configuration is invalid.
        NetworkError: If nuget.exe has to be downloaded and cannot be.
        PackagingError: If nuget or signtool fail.

    Example:
        Basic build:

            result = build_package(Path("projects/7zip"))
            print(result.package_path)  # projects/7zip/build/7-Zip-24.10.11.nupkg
    """
    logger = get_global_logger()
    project_dir = project_dir.resolve()
    if cache_dir is None:
        cache_dir = DEFAULT_TOOL_CACHE

    logger.step(1, _TOTAL_STEPS, "Verifying project structure...")
    verify_project_structure(project_dir)

    logger.step(2, _TOTAL_STEPS, "Loading build-info.yaml...")
    info = load_build_info(project_dir)
    logger.verbose("BUILD", f"Building {info.name} ({info.identifier})")

    logger.step(3, _TOTAL_STEPS, "Checking payload and settings...")
    has_payload = payload_has_files(project_dir / PAYLOAD_DIR)
    logger.verbose("BUILD", f"Payload has files: {has_payload}")
    _check_build_info(info, has_payload)

    logger.step(4, _TOTAL_STEPS, "Resolving version...")
    version = _resolve_version(info)

    logger.step(5, _TOTAL_STEPS, "Resolving install location...")
    location = _resolve_location(info, has_payload, well_known_dirs)

    logger.step(6, _TOTAL_STEPS, "Generating scripts and nuspec...")
    create_project_directories(project_dir)
    tool_files = write_scripts(project_dir, info, location, has_payload)
    nuspec_path = write_nuspec(project_dir, info, version, tool_files)
    logger.verbose("BUILD", f".nuspec generated at: {nuspec_path}")

    build_dir = project_dir / BUILD_DIR
    try:
        logger.step(7, _TOTAL_STEPS, "Packing with nuget...")
        nuget = get_nuget(cache_dir)
        nuget_pack(nuget, nuspec_path, build_dir)
        package_path = _find_built_package(build_dir, info, version)
    finally:
        nuspec_path.unlink(missing_ok=True)

    signed = False
    if info.signing_certificate:
        logger.step(8, _TOTAL_STEPS, "Signing package...")
        sign_package(package_path, info.signing_certificate, info.timestamp_url)
        signed = True
    else:
        logger.step(8, _TOTAL_STEPS, "No signing certificate provided. Skipping signing.")

    logger.step(9, _TOTAL_STEPS, "Cleaning up...")
    _cleanup(project_dir, keep_tools)

    logger.verbose("BUILD", f"[OK] Package created successfully: {package_path}")

    return BuildResult(
        project_dir=project_dir,
        package_path=package_path,
        identifier=info.identifier,
        name=info.name,
        version=version,
        install_location=location.target if location else None,
        signed=signed,
        status="success",
    )
