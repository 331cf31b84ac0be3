"""
chocobuild - Chocolatey package builder

A Python-based CLI tool that turns a directory of payload files and
PowerShell scripts plus a YAML manifest into a signed Chocolatey package
(.nupkg).

chocobuild provides:
  - Declarative build-info.yaml configuration with organization defaults
  - Version normalization for Windows installer field widths
  - Install location resolution, including well-known Windows folders
  - Generated chocolateyInstall/BeforeModify/Uninstall scripts
  - nuspec generation, nuget pack and signtool signing

Quick Start
-----------
Create a project:

    $ chocobuild init projects/7zip --identifier 7zip

Validate it:

    $ chocobuild validate projects/7zip

Build it:

    $ chocobuild build projects/7zip

Package Structure
-----------------
cli : module
    Command-line interface with argparse.
config : package
    build-info.yaml loading and merging.
versioning : package
    Package version policies.
locations : module
    Install location normalization and well-known folder lookup.
project : module
    Project directory layout helpers.
build : package
    Script and nuspec generation, nuget and signtool.
validation : module
    Project validation without building.

Public API
----------
    from chocobuild.build import build_package
    from chocobuild.validation import validate_project
    from chocobuild.config import load_build_info
    from chocobuild.versioning import normalize_version
    from chocobuild.locations import build_well_known_dirs, resolve_install_location

Project Information
-------------------
Author: Roger Cibrian
License: Apache-2.0
"""

__version__ = "0.1.0"
__author__ = "Roger Cibrian"
__license__ = "Apache-2.0"
__description__ = "chocobuild - signed Chocolatey packages from a project directory"

# Re-export commonly used functions for convenience
from chocobuild.build import build_package
from chocobuild.config import BuildInfo, load_build_info
from chocobuild.exceptions import (
    ChocoBuildError,
    ConfigError,
    InvalidVersionFormat,
    InvalidVersionPart,
    NetworkError,
    PackagingError,
)
from chocobuild.locations import (
    InstallLocation,
    build_well_known_dirs,
    resolve_install_location,
)
from chocobuild.results import BuildResult, ValidationResult
from chocobuild.validation import validate_project
from chocobuild.versioning import normalize_version

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "__description__",
    "BuildInfo",
    "BuildResult",
    "ValidationResult",
    "InstallLocation",
    "build_package",
    "validate_project",
    "load_build_info",
    "normalize_version",
    "build_well_known_dirs",
    "resolve_install_location",
    "ChocoBuildError",
    "ConfigError",
    "InvalidVersionFormat",
    "InvalidVersionPart",
    "NetworkError",
    "PackagingError",
]
