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

"""Public API return types for chocobuild.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from pathlib import Path
        from chocobuild.build import build_package

        result = build_package(Path("projects/7zip"))
        print(result.package_path)  # Attribute access, not dict access
        ```

Note:
    Only public API return types belong in this module. Domain types
    (like BuildInfo or InstallLocation) stay next to their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class BuildResult:
    """Result from building a package.

    Attributes:
        project_dir: Project directory the package was built from.
        package_path: Path to the final .nupkg file.
        identifier: NuGet package id.
        name: Product display name.
        version: Package version after the version policy was applied.
        install_location: Resolved install root or symbolic folder
            identifier. None for script-only packages.
        signed: True if signtool signed the package.
        status: Build status (typically "success").
    """

    project_dir: Path
    package_path: Path
    identifier: str
    name: str
    version: str
    install_location: str | None
    signed: bool
    status: str


@dataclass(frozen=True)
class ValidationResult:
    """Result from validating a project directory.

    Attributes:
        status: Validation status ("valid" or "invalid").
        errors: List of error messages (empty if valid).
        warnings: List of warning messages.
        project_dir: String path to the validated project directory.
    """

    status: str
    errors: list[str]
    warnings: list[str]
    project_dir: str
