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

"""Project validation module.

This module checks a project directory without running nuget or signtool
and without writing any file. This is useful for quick feedback while
editing build-info.yaml and as a CI pre-check.

Validation Checks:

- Project layout (payload/ or scripts/, build-info.yaml)
- YAML syntax is valid (including org defaults)
- Required product fields are present
- Version is accepted by the configured version policy
- install_location is present when the payload is non-empty
- postinstall_action is supported

Example:
    Validate a project and handle results:
        ```python
        from pathlib import Path
        from chocobuild.validation import validate_project

        result = validate_project(Path("projects/7zip"))
        if result.status == "valid":
            print("Project is valid")
        else:
            for error in result.errors:
                print(f"Error: {error}")
        ```

"""

from __future__ import annotations

from pathlib import Path

from chocobuild.build.scripts import check_postinstall_action
from chocobuild.config import BuildInfo, load_effective_config
from chocobuild.exceptions import ConfigError
from chocobuild.logging import get_global_logger
from chocobuild.project import (
    PAYLOAD_DIR,
    POSTINSTALL_PREFIX,
    PREINSTALL_PREFIX,
    find_scripts,
    payload_has_files,
    verify_project_structure,
)
from chocobuild.results import ValidationResult
from chocobuild.versioning import apply_version_policy

__all__ = ["validate_project"]


def _result(project_dir: Path, errors: list[str], warnings: list[str]) -> ValidationResult:
    return ValidationResult(
        status="valid" if not errors else "invalid",
        errors=errors,
        warnings=warnings,
        project_dir=str(project_dir),
    )


def validate_project(project_dir: Path) -> ValidationResult:
    """Validate a project directory without building anything.

    Does NOT:

    - Run nuget or signtool
    - Download nuget.exe
    - Write scripts, nuspec or packages

    Args:
        project_dir: Project directory containing build-info.yaml.

    Returns:
        ValidationResult with status "valid" or "invalid", the list of
        errors (empty if valid) and warnings.
    """
    logger = get_global_logger()
    errors: list[str] = []
    warnings: list[str] = []

    try:
        verify_project_structure(project_dir)
    except ConfigError as err:
        errors.append(str(err))
        return _result(project_dir, errors, warnings)
    logger.verbose("VALIDATE", "[OK] Project layout")

    try:
        cfg = load_effective_config(project_dir)
    except ConfigError as err:
        errors.append(str(err))
        return _result(project_dir, errors, warnings)
    logger.verbose("VALIDATE", "[OK] YAML syntax is valid")

    try:
        info = BuildInfo.from_config(cfg)
    except ConfigError as err:
        errors.append(str(err))
        return _result(project_dir, errors, warnings)
    logger.verbose("VALIDATE", f"[OK] Product: {info.name} ({info.identifier})")

    try:
        version = apply_version_policy(info.version, info.version_policy)
    except ConfigError as err:
        errors.append(str(err))
    else:
        if version != info.version:
            warnings.append(
                f"product.version {info.version} will be packaged as {version}"
            )
        logger.verbose("VALIDATE", f"[OK] Version: {version}")

    has_payload = payload_has_files(project_dir / PAYLOAD_DIR)
    if has_payload and not info.install_location:
        errors.append(
            "'install_location' must be specified because the payload folder "
            "is not empty"
        )
    elif not has_payload:
        if info.install_location:
            warnings.append("install_location is set but the payload is empty")
        if not (
            find_scripts(project_dir, PREINSTALL_PREFIX)
            or find_scripts(project_dir, POSTINSTALL_PREFIX)
        ):
            warnings.append(
                "payload is empty and no preinstall/postinstall scripts were "
                "found; the package will not do anything"
            )

    try:
        check_postinstall_action(info.postinstall_action)
    except ConfigError as err:
        errors.append(str(err))

    if not info.signing_certificate:
        warnings.append("no signing_certificate configured; package will be unsigned")

    result = _result(project_dir, errors, warnings)
    if result.status == "valid":
        logger.verbose("VALIDATE", "[OK] Project is valid!")
    else:
        logger.verbose("VALIDATE", f"[ERROR] Project has {len(errors)} error(s)")
    return result
