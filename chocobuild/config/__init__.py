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

"""Configuration loading for chocobuild.

Loads a project's build-info.yaml, layered on top of optional
organization defaults (defaults/org.yaml in a parent directory). Dicts are
merged recursively and lists/scalars are replaced (last wins).

Public API:

- load_effective_config: Load and merge the raw configuration dict
- load_build_info: Load the configuration as a BuildInfo dataclass
- BuildInfo: Typed view of build-info.yaml

Example:
    Basic usage:

        from pathlib import Path
        from chocobuild.config import load_build_info

        info = load_build_info(Path("projects/7zip"))
        print(info.identifier, info.version)

"""

from .loader import (
    BUILD_INFO_FILENAME,
    DEFAULT_TIMESTAMP_URL,
    BuildInfo,
    load_build_info,
    load_effective_config,
)

__all__ = [
    "BUILD_INFO_FILENAME",
    "DEFAULT_TIMESTAMP_URL",
    "BuildInfo",
    "load_build_info",
    "load_effective_config",
]
