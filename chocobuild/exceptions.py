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

"""Exception hierarchy for chocobuild.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Configuration-related errors (YAML parse, missing fields,
    invalid project layout, invalid versions)
- NetworkError: Download errors for the NuGet command-line tool
- PackagingError: Packaging/build-related errors (nuget/signtool failures,
    missing tools)

All exceptions inherit from ChocoBuildError, allowing users to catch all
chocobuild errors with a single except clause if needed.

Example:
    Catching specific error types:
        ```python
        from chocobuild.build import build_package
        from chocobuild.exceptions import ConfigError, PackagingError

        try:
            result = build_package(Path("projects/7zip"))
        except ConfigError as e:
            print(f"Configuration error: {e}")
        except PackagingError as e:
            print(f"Packaging error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "ChocoBuildError",
    "ConfigError",
    "VersionError",
    "InvalidVersionFormat",
    "InvalidVersionPart",
    "NetworkError",
    "PackagingError",
]


class ChocoBuildError(Exception):
    """Base exception for all chocobuild errors.

    All chocobuild-specific exceptions inherit from this class, allowing
    users to catch all chocobuild errors with a single except clause.
    """

    pass


class ConfigError(ChocoBuildError):
    """Raised for configuration-related errors.

    This exception is raised when there are problems with:

    - YAML parsing (syntax errors, invalid structure)
    - Missing or invalid build-info.yaml fields
    - Unsupported post-install actions or version policies
    - Missing project directories (payload/scripts) or build-info.yaml
    """

    pass


class VersionError(ConfigError):
    """Raised when product.version cannot be turned into a package version."""

    def __init__(self, message: str, version: str) -> None:
        super().__init__(message)
        self.version = version


class InvalidVersionFormat(VersionError):
    """Raised when a version does not have 3 or 4 dot-separated parts.

    Example:
        ```python
        from chocobuild.versioning import normalize_version

        normalize_version("1.2")  # raises InvalidVersionFormat
        ```
    """

    def __init__(self, version: str) -> None:
        super().__init__(
            f'invalid version format: "{version}" '
            '(expected MAJOR.MINOR.PATCH[.REV] or YYYY.MM.DD)',
            version,
        )


class InvalidVersionPart(VersionError):
    """Raised when a dot-separated version segment is not a number.

    Attributes:
        version: The full version string that was rejected.
        part: The offending segment, verbatim.
    """

    def __init__(self, version: str, part: str) -> None:
        super().__init__(
            f'invalid version part: "{part}" is not a number (in "{version}")',
            version,
        )
        self.part = part


class NetworkError(ChocoBuildError):
    """Raised for network/download-related errors.

    Currently only raised when nuget.exe is not installed and cannot be
    downloaded into the tool cache.
    """

    pass


class PackagingError(ChocoBuildError):
    """Raised for packaging/build-related errors.

    This exception is raised when there are problems with:

    - Missing build tools (nuget, signtool)
    - nuget pack or signtool failures and timeouts
    - File operations while laying out the package

    Example:
        Catching packaging errors:
            ```python
            from chocobuild.exceptions import PackagingError

            try:
                build_package(Path("projects/7zip"))
            except PackagingError as e:
                print(f"Packaging error: {e}")
            ```
    """

    pass
