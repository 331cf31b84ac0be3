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

"""Package version policies for chocobuild.

This module is format-agnostic: it does NOT read files. It only turns the
raw ``product.version`` string from build-info.yaml into the version that
is written to the .nuspec and used in the .nupkg file name.

Two policies exist, and a build uses exactly one of them:

- ``normalize`` (default): accepts MAJOR.MINOR.PATCH, MAJOR.MINOR.PATCH.REV
  and YYYY.MM.DD and reduces the result to three components that fit the
  Windows installer field widths (minor < 256, patch < 65536). Values that
  exceed the ceilings wrap silently.
- ``passthrough``: only checks that every dot-separated part is numeric and
  returns the string unchanged.

Example:
    ```python
    from chocobuild.versioning import normalize_version, apply_version_policy

    normalize_version("2024.10.11")        # "24.10.11"
    normalize_version("1.2.3.456")         # "1.2.3456"
    normalize_version("1.300.70000")       # "1.44.4464"
    apply_version_policy("1.2.3.4", "passthrough")  # "1.2.3.4"
    ```
"""

from __future__ import annotations

import re
from typing import Literal

from chocobuild.exceptions import (
    ConfigError,
    InvalidVersionFormat,
    InvalidVersionPart,
)

VersionPolicy = Literal["normalize", "passthrough"]

VERSION_POLICIES: tuple[str, ...] = ("normalize", "passthrough")
DEFAULT_VERSION_POLICY: VersionPolicy = "normalize"

MINOR_CEILING = 256
PATCH_CEILING = 65536
# A 4-part version folds REV into PATCH as PATCH * 1000 + REV.
REVISION_FACTOR = 1000
# Matches the default sys.get_int_max_str_digits() on current CPython
MAX_PART_DIGITS = 4300

_NUMERIC_PART = re.compile(r"[0-9]+")


def _parse_part(version: str, part: str) -> int:
    if len(part) > MAX_PART_DIGITS or not _NUMERIC_PART.fullmatch(part):
        raise InvalidVersionPart(version, part)
    try:
        return int(part)
    except ValueError as err:
        # Interpreter configured with a lower digit limit
        raise InvalidVersionPart(version, part) from err


def normalize_version(raw: str) -> str:
    """Normalize a version string into MAJOR.MINOR.PATCH.

    Args:
        raw: Version string from build-info.yaml.

    Returns:
        Three numeric components joined by ".".

    Raises:
        InvalidVersionFormat: If the version does not have 3 or 4 parts.
        InvalidVersionPart: If a part is not a non-negative integer.

    Example:
        >>> normalize_version("2024.10.11")
        '24.10.11'
        >>> normalize_version("1.2.3.456")
        '1.2.3456'
    """
    parts = raw.split(".")

    if len(parts) == 3:
        first, minor_str, patch_str = parts
        major = _parse_part(raw, first)
        # YYYY.MM.DD: keep the two-digit year as the major component
        if len(first) == 4:
            major = int(first[-2:])
        minor = _parse_part(raw, minor_str)
        patch = _parse_part(raw, patch_str)
    elif len(parts) == 4:
        major, minor, patch, extra = (_parse_part(raw, p) for p in parts)
        patch = patch * REVISION_FACTOR + extra
    else:
        raise InvalidVersionFormat(raw)

    minor %= MINOR_CEILING
    patch %= PATCH_CEILING

    return f"{major}.{minor}.{patch}"


def validate_version(raw: str) -> str:
    """Check that every dot-separated part is numeric and return ``raw``.

    Raises:
        InvalidVersionPart: If a part is not a non-negative integer.
    """
    for part in raw.split("."):
        _parse_part(raw, part)
    return raw


def apply_version_policy(raw: str, policy: str = DEFAULT_VERSION_POLICY) -> str:
    """Apply the named version policy to a raw version string.

    Args:
        raw: Version string from build-info.yaml.
        policy: "normalize" or "passthrough".

    Returns:
        The package version.

    Raises:
        ConfigError: If the policy name is unknown.
        VersionError: If the version is rejected by the policy.
    """
    if policy == "normalize":
        return normalize_version(raw)
    if policy == "passthrough":
        return validate_version(raw)
    raise ConfigError(
        f"Unsupported version_policy: {policy!r}. "
        f"Supported: {', '.join(VERSION_POLICIES)}"
    )
