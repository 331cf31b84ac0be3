"""
Configuration loading and merging for chocobuild.

A project is described by ``build-info.yaml`` in the project directory.
Settings shared by every project of an organization (developer name,
signing certificate, timestamp server, tags) can live in a
``defaults/org.yaml`` file in any parent directory.

Configuration Layers
--------------------
1. **Organization defaults** (defaults/org.yaml)
   - Optional; found by walking upward from the project directory
2. **Project configuration** (<project>/build-info.yaml)
   - Always required; overrides organization defaults

Merge Behavior
--------------
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Functions
---------
load_effective_config : function
    Load and merge the raw configuration dict for a project.
load_build_info : function
    Load, merge and convert the configuration into a BuildInfo.

Error Handling
--------------
- ConfigError: build-info.yaml missing, YAML parse errors, empty files,
  non-mapping documents, missing required fields
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from pathlib import Path
    >>> from chocobuild.config import load_build_info
    >>> info = load_build_info(Path("projects/7zip"))
    >>> info.identifier
    '7zip'
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from chocobuild.exceptions import ConfigError
from chocobuild.logging import get_global_logger
from chocobuild.versioning import DEFAULT_VERSION_POLICY

BUILD_INFO_FILENAME = "build-info.yaml"
DEFAULT_TIMESTAMP_URL = "http://timestamp.digicert.com"
DEFAULT_TAGS = "admin"

REQUIRED_PRODUCT_FIELDS = ("identifier", "version", "name", "developer")

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class BuildInfo:
    """
    Package build information read from build-info.yaml.

    ``version`` is the raw product.version; the version policy is applied
    by the build driver.
    """

    identifier: str
    version: str
    name: str
    developer: str
    description: str = ""
    install_location: str = ""
    postinstall_action: str = ""
    signing_certificate: str = ""
    timestamp_url: str = DEFAULT_TIMESTAMP_URL
    version_policy: str = DEFAULT_VERSION_POLICY
    tags: str = DEFAULT_TAGS

    def effective_description(self, version: str | None = None) -> str:
        """Description for the nuspec, generated when none is configured.

        Args:
            version: Package version after the version policy. Default:
                the raw product.version.
        """
        if self.description:
            return self.description
        return (
            f"{self.name} version {version or self.version} for "
            f"{self.identifier} by {self.developer}"
        )

    @classmethod
    def from_config(cls, cfg: dict[str, Any]) -> BuildInfo:
        """
        Build a BuildInfo from a merged configuration dict.

        Raises:
          ConfigError - when product fields are missing or not scalars
        """
        product = cfg.get("product")
        if not isinstance(product, dict):
            raise ConfigError(f"{BUILD_INFO_FILENAME}: missing 'product' section")

        missing = [f for f in REQUIRED_PRODUCT_FIELDS if not product.get(f)]
        if missing:
            raise ConfigError(
                f"{BUILD_INFO_FILENAME}: missing required field(s): "
                + ", ".join(f"product.{f}" for f in missing)
            )

        return cls(
            identifier=_as_text(product["identifier"], "product.identifier"),
            version=_as_text(product["version"], "product.version"),
            name=_as_text(product["name"], "product.name"),
            developer=_as_text(product["developer"], "product.developer"),
            description=_as_text(product.get("description"), "product.description"),
            install_location=_as_text(cfg.get("install_location"), "install_location"),
            postinstall_action=_as_text(
                cfg.get("postinstall_action"), "postinstall_action"
            ),
            signing_certificate=_as_text(
                cfg.get("signing_certificate"), "signing_certificate"
            ),
            timestamp_url=_as_text(cfg.get("timestamp_url"), "timestamp_url")
            or DEFAULT_TIMESTAMP_URL,
            version_policy=_as_text(cfg.get("version_policy"), "version_policy")
            or DEFAULT_VERSION_POLICY,
            tags=_format_tags(cfg.get("tags")),
        )


def _as_text(value: Any, field: str) -> str:
    """
    Convert a scalar YAML value to a string.

    YAML turns unquoted values such as ``1.2`` or ``2024`` into numbers;
    those are accepted and converted back. Mappings and lists are rejected.
    """
    if value is None:
        return ""
    if isinstance(value, bool) or isinstance(value, (dict, list)):
        raise ConfigError(f"{BUILD_INFO_FILENAME}: field '{field}' must be a string")
    return str(value)


def _format_tags(value: Any) -> str:
    if value is None or value == "":
        return DEFAULT_TAGS
    if isinstance(value, list):
        return " ".join(str(tag) for tag in value)
    return _as_text(value, "tags")


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """
    Load a YAML file and return the parsed Python object.

    Raises:
      ConfigError - when the file is missing, empty or not valid YAML
    """
    if not p.exists():
        raise ConfigError(f"file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    if data is None:
        raise ConfigError(f"YAML file is empty: {p}")
    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {p}")
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def _find_org_defaults(start_dir: Path) -> Path | None:
    """
    Walk upward from 'start_dir' looking for 'defaults/org.yaml'.
    Returns the path to org.yaml or None if not found.
    """
    for parent in [start_dir] + list(start_dir.parents):
        candidate = parent / "defaults" / "org.yaml"
        if candidate.is_file():
            return candidate
    return None


def _dump_yaml(data: dict[str, Any]) -> list[str]:
    text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return [line for line in text.split("\n") if line.strip()]


# -------------------------------
# Public API
# -------------------------------


def load_effective_config(project_dir: Path) -> dict[str, Any]:
    """
    Load and merge the configuration dict for a project.

    Steps
      1) Read <project_dir>/build-info.yaml.
      2) Find defaults/org.yaml by scanning upwards from the project.
      3) Merge: org -> project (dicts deep-merge, lists replace).

    Raises
      ConfigError if build-info.yaml is missing or any file is invalid.
    """
    logger = get_global_logger()

    project_dir = project_dir.resolve()
    build_info_path = project_dir / BUILD_INFO_FILENAME

    logger.verbose("CONFIG", f"Loading: {build_info_path}")
    project_cfg = _load_yaml_file(build_info_path)

    merged: dict[str, Any] = {}
    org_path = _find_org_defaults(project_dir)
    if org_path is not None:
        logger.verbose("CONFIG", f"Loading org defaults: {org_path}")
        org_cfg = _load_yaml_file(org_path)
        for line in _dump_yaml(org_cfg):
            logger.debug("CONFIG", f"  {line}")
        merged = _deep_merge_dicts(merged, org_cfg)

    merged = _deep_merge_dicts(merged, project_cfg)

    logger.debug("CONFIG", "--- Final Merged Configuration ---")
    for line in _dump_yaml(merged):
        logger.debug("CONFIG", f"  {line}")

    return merged


def load_build_info(project_dir: Path) -> BuildInfo:
    """
    Load the effective configuration for a project as a BuildInfo.

    Raises
      ConfigError on missing/invalid files or missing required fields.
    """
    return BuildInfo.from_config(load_effective_config(project_dir))
