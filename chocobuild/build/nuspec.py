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

""".nuspec manifest generation for chocobuild.

The nuspec is the package description consumed by ``nuget pack``. It lists
the package metadata and every file that goes into the .nupkg:

- payload/<file> for each payload file (same path inside the package)
- tools/chocolatey*.ps1 scripts written by chocobuild.build.scripts

Example:
    ```python
    from chocobuild.build.nuspec import write_nuspec

    nuspec_path = write_nuspec(
        project_dir, info, "24.10.11", ["tools/chocolateyInstall.ps1"]
    )
    ```
"""

from __future__ import annotations

from pathlib import Path
import xml.etree.ElementTree as ET

from chocobuild.config import BuildInfo
from chocobuild.exceptions import PackagingError
from chocobuild.project import PAYLOAD_DIR, payload_files


def build_nuspec(
    info: BuildInfo, version: str, files: list[str]
) -> ET.Element:
    """Build the <package> element.

    Args:
        info: Build information for the metadata block.
        version: Package version (after the version policy).
        files: Project-relative file paths to include (POSIX form).

    Returns:
        The root <package> element.
    """
    package = ET.Element("package")
    metadata = ET.SubElement(package, "metadata")
    ET.SubElement(metadata, "id").text = info.identifier
    ET.SubElement(metadata, "version").text = version
    ET.SubElement(metadata, "authors").text = info.developer
    ET.SubElement(metadata, "description").text = info.effective_description(version)
    if info.tags:
        ET.SubElement(metadata, "tags").text = info.tags

    if files:
        files_el = ET.SubElement(package, "files")
        for rel in files:
            ET.SubElement(files_el, "file", attrib={"src": rel, "target": rel})

    return package


def nuspec_files(project_dir: Path, tool_files: list[str]) -> list[str]:
    """Payload files followed by the generated tool scripts."""
    payload = [f"{PAYLOAD_DIR}/{rel}" for rel in payload_files(project_dir)]
    return payload + list(tool_files)


def write_nuspec(
    project_dir: Path, info: BuildInfo, version: str, tool_files: list[str]
) -> Path:
    """Write <project_dir>/<name>.nuspec.

    Returns:
        Path to the written nuspec.

    Raises:
        PackagingError: If the file cannot be written.
    """
    nuspec_path = project_dir / f"{info.name}.nuspec"
    package = build_nuspec(info, version, nuspec_files(project_dir, tool_files))

    tree = ET.ElementTree(package)
    ET.indent(tree, space="  ")
    try:
        tree.write(nuspec_path, encoding="utf-8", xml_declaration=True)
    except OSError as err:
        raise PackagingError(f"failed to create .nuspec file: {err}") from err

    return nuspec_path
