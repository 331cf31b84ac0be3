"""Version handling for chocobuild.

Turns the raw product.version from build-info.yaml into the package
version, using one of two policies ("normalize" or "passthrough").

Public API:

- normalize_version: Reduce a version to MAJOR.MINOR.PATCH with field ceilings
- validate_version: Check a version is purely numeric, return it unchanged
- apply_version_policy: Dispatch on the configured policy name
"""

from .normalize import (
    DEFAULT_VERSION_POLICY,
    VERSION_POLICIES,
    VersionPolicy,
    apply_version_policy,
    normalize_version,
    validate_version,
)

__all__ = [
    "DEFAULT_VERSION_POLICY",
    "VERSION_POLICIES",
    "VersionPolicy",
    "apply_version_policy",
    "normalize_version",
    "validate_version",
]
