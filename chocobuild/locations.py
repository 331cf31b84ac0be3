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

"""Install location resolution for chocobuild.

The ``install_location`` from build-info.yaml is normalized to a Windows
path with backslash separators and exactly one trailing separator. If the
normalized path is one of a fixed set of well-known Windows directories it
is replaced by a symbolic folder identifier (e.g. "DesktopFolder"), which
the generated scripts resolve on the installing machine instead of
hard-coding the build machine's path.

The trailing separator is part of the contract: every consumer joins child
paths onto the root by plain concatenation, so the root must always end
with exactly one "\\".

Example:
    ```python
    from chocobuild.locations import build_well_known_dirs, resolve_install_location

    dirs = build_well_known_dirs(r"C:\\Users\\alex")
    resolve_install_location("C:/Tools/Foo", dirs)       # "C:\\Tools\\Foo\\"
    resolve_install_location(r"C:\\Users\\alex\\Desktop", dirs)  # "DesktopFolder"
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from chocobuild.exceptions import ConfigError

SEPARATOR = "\\"

# (path, folder id, System.Environment+SpecialFolder name)
SYSTEM_FOLDERS: tuple[tuple[str, str, str], ...] = (
    (r"C:\Program Files", "ProgramFiles64Folder", "ProgramFiles"),
    (r"C:\Program Files (x86)", "ProgramFilesFolder", "ProgramFilesX86"),
    (r"C:\ProgramData", "CommonAppDataFolder", "CommonApplicationData"),
    (r"C:\Windows", "WindowsFolder", "Windows"),
    (r"C:\Windows\System32", "System64Folder", "System"),
)

# Relative to the invoking user's home directory.
_START_MENU = r"AppData\Roaming\Microsoft\Windows\Start Menu"
USER_FOLDERS: tuple[tuple[str, str, str], ...] = (
    ("Desktop", "DesktopFolder", "DesktopDirectory"),
    ("Documents", "PersonalFolder", "MyDocuments"),
    (r"AppData\Local", "LocalAppDataFolder", "LocalApplicationData"),
    (r"AppData\Roaming", "AppDataFolder", "ApplicationData"),
    (_START_MENU, "StartMenuFolder", "StartMenu"),
    (_START_MENU + r"\Programs", "ProgramMenuFolder", "Programs"),
    (_START_MENU + r"\Programs\Startup", "StartupFolder", "Startup"),
)

SPECIAL_FOLDERS: Mapping[str, str] = MappingProxyType(
    {folder_id: special for _, folder_id, special in SYSTEM_FOLDERS + USER_FOLDERS}
)


@dataclass(frozen=True)
class InstallLocation:
    """Resolved install root for a package.

    Attributes:
        path: Normalized literal path, ending with exactly one backslash.
        folder_id: Symbolic folder identifier when ``path`` is a well-known
            directory, otherwise None.
    """

    path: str
    folder_id: str | None = None

    @property
    def target(self) -> str:
        """The symbolic identifier if there is one, else the literal path."""
        return self.folder_id or self.path

    def join(self, relative: str) -> str:
        """Join a payload-relative path onto the literal install root.

        Example:
            >>> InstallLocation("C:\\\\Foo\\\\").join("bin/app.exe")
            'C:\\\\Foo\\\\bin\\\\app.exe'
        """
        child = relative.replace("/", SEPARATOR).lstrip(SEPARATOR)
        return self.path + child


def normalize_install_path(raw: str) -> str:
    """Use backslash separators and end with exactly one separator.

    An empty string is returned unchanged.
    """
    if not raw:
        return raw
    path = raw.replace("/", SEPARATOR)
    return path.rstrip(SEPARATOR) + SEPARATOR


def _home_directory() -> str:
    try:
        return str(Path.home())
    except (KeyError, RuntimeError) as err:
        raise ConfigError(
            f"Could not determine the current user's home directory: {err}"
        ) from err


def build_well_known_dirs(home: str | Path | None = None) -> Mapping[str, str]:
    """Build the table of well-known directories and their identifiers.

    Args:
        home: Home directory of the invoking user. Default: ``Path.home()``.

    Returns:
        Read-only mapping of normalized path to symbolic folder identifier.

    Raises:
        ConfigError: If the home directory cannot be determined.
    """
    if home is None:
        home = _home_directory()
    home_root = normalize_install_path(str(home))

    table: dict[str, str] = {}
    for path, folder_id, _ in SYSTEM_FOLDERS:
        table[normalize_install_path(path)] = folder_id
    for suffix, folder_id, _ in USER_FOLDERS:
        table[normalize_install_path(home_root + suffix)] = folder_id

    return MappingProxyType(table)


def _lookup(path: str, well_known_dirs: Mapping[str, str]) -> str | None:
    # Windows paths compare case-insensitively; only whole paths match.
    wanted = path.casefold()
    for known, folder_id in well_known_dirs.items():
        if normalize_install_path(known).casefold() == wanted:
            return folder_id
    return None


def resolve_install_location(raw: str, well_known_dirs: Mapping[str, str]) -> str:
    """Resolve a raw install_location to a path or folder identifier.

    Args:
        raw: install_location from build-info.yaml.
        well_known_dirs: Table from build_well_known_dirs().

    Returns:
        The symbolic identifier for a well-known directory, otherwise the
        normalized path (backslashes, one trailing separator).
    """
    return locate(raw, well_known_dirs).target


def locate(raw: str, well_known_dirs: Mapping[str, str]) -> InstallLocation:
    """Like resolve_install_location(), but keep the literal path too."""
    path = normalize_install_path(raw)
    return InstallLocation(path=path, folder_id=_lookup(path, well_known_dirs))
