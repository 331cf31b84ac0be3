"""Chocolatey PowerShell script generation for chocobuild.

This module writes the scripts Chocolatey runs when the package is
installed, upgraded or uninstalled:

- tools/chocolateyBeforeModify.ps1: every scripts/preinstall*.ps1,
  concatenated in name order (only when at least one exists)
- tools/chocolateyInstall.ps1: creates the install location, copies the
  payload, runs the post-install action and appends every
  scripts/postinstall*.ps1
- tools/chocolateyUninstall.ps1: removes the installed payload files
  (only when the payload is non-empty)

Private Helpers:
    - _format_powershell_value: Format Python values as PowerShell literals
    - _install_location_expression: $installLocation right-hand side
    - _concatenate_scripts: Join user scripts with header comments

Design Principles:
    - User scripts are copied verbatim, never rewritten
    - Well-known folders are resolved on the installing machine through
      [Environment]::GetFolderPath, not hard-coded
    - The install root always ends with a single "\\", so child paths are
      appended by plain concatenation

Example:
    from pathlib import Path
    from chocobuild.build.scripts import write_scripts

    tool_files = write_scripts(project_dir, info, location, has_payload=True)
    # ["tools/chocolateyInstall.ps1", "tools/chocolateyUninstall.ps1"]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from chocobuild.config import BuildInfo
from chocobuild.exceptions import ConfigError
from chocobuild.locations import SPECIAL_FOLDERS, InstallLocation
from chocobuild.logging import get_global_logger
from chocobuild.project import (
    POSTINSTALL_PREFIX,
    PREINSTALL_PREFIX,
    TOOLS_DIR,
    find_scripts,
    payload_files,
)

INSTALL_SCRIPT = "chocolateyInstall.ps1"
BEFORE_MODIFY_SCRIPT = "chocolateyBeforeModify.ps1"
UNINSTALL_SCRIPT = "chocolateyUninstall.ps1"

POSTINSTALL_ACTIONS: dict[str, str] = {
    "logout": "Write-Host 'Logging out...'\nshutdown /l\n",
    "restart": "Write-Host 'Restarting system...'\nshutdown /r /t 0\n",
    "none": "Write-Host 'No post-install action required.'\n",
}

_PAYLOAD_COPY_BLOCK = r"""if ($installLocation -and $installLocation -ne '') {
    try {
        New-Item -ItemType Directory -Force -Path $installLocation | Out-Null
        Write-Host "Created or verified install location: $installLocation"
    } catch {
        Write-Error "Failed to create or access: $installLocation"
        exit 1
    }
} else {
    Write-Host "No install location specified, skipping creation of directories."
}

$payloadPath = "$PSScriptRoot\..\payload"
$payloadPath = [System.IO.Path]::GetFullPath($payloadPath)
$payloadPath = $payloadPath.TrimEnd('\', '/')

Write-Host "Payload path: $payloadPath"
Get-ChildItem -Path $payloadPath -Recurse | ForEach-Object {
    $fullName = $_.FullName
    $relativePath = $fullName.Substring($payloadPath.Length)
    $relativePath = $relativePath.TrimStart('\', '/')
    $destinationPath = $installLocation + $relativePath

    if ($_.PSIsContainer) {
        New-Item -ItemType Directory -Force -Path $destinationPath | Out-Null
        Write-Host "Created directory: $destinationPath"
    } else {
        Copy-Item -Path $fullName -Destination $destinationPath -Force
        Write-Host "Copied: $($fullName) -> $destinationPath"

        if (-not (Test-Path -Path $destinationPath)) {
            Write-Error "Failed to copy: $($fullName)"
            exit 1
        }
    }
}
"""

_SCRIPT_ONLY_NOTICE = (
    'Write-Host "No payload files found. Script-only install - '
    'skipping directory creation and file copy."\n'
)

_REMOVE_FILES_BLOCK = r"""foreach ($file in $installedFiles) {
    if (Test-Path -LiteralPath $file) {
        Remove-Item -LiteralPath $file -Force
        Write-Host "Removed: $file"
    }
}
"""


def _format_powershell_value(value: Any) -> str:
    """Format a Python value as a PowerShell literal.

    Example:
        >>> _format_powershell_value("it's")
        "'it''s'"
        >>> _format_powershell_value(["a", "b"])
        "@('a', 'b')"
    """
    if isinstance(value, bool):
        return "$true" if value else "$false"
    elif isinstance(value, str):
        escaped = value.replace("'", "''")
        return f"'{escaped}'"
    elif isinstance(value, (int, float)):
        return str(value)
    elif isinstance(value, list):
        items = [_format_powershell_value(item) for item in value]
        return f"@({', '.join(items)})"
    elif value is None:
        return "''"
    else:
        return _format_powershell_value(str(value))


def _install_location_expression(location: InstallLocation | None) -> str:
    if location is None:
        return "''"
    if location.folder_id:
        special = SPECIAL_FOLDERS[location.folder_id]
        return f"[Environment]::GetFolderPath('{special}') + '\\'"
    return _format_powershell_value(location.path)


def _concatenate_scripts(scripts: list[Path], header: str) -> str:
    """Join script contents, each preceded by a header comment line.

    Raises:
        ConfigError: If a script cannot be read.
    """
    chunks = []
    for script in scripts:
        try:
            content = script.read_text(encoding="utf-8-sig")
        except OSError as err:
            raise ConfigError(f"failed to read {script.name}: {err}") from err
        chunks.append(header.format(name=script.name) + content + "\n")
    return "".join(chunks)


def generate_before_modify_script(preinstall_scripts: list[Path]) -> str:
    """Concatenate preinstall scripts into chocolateyBeforeModify.ps1 text."""
    return _concatenate_scripts(preinstall_scripts, "# Contents of {name}\n")


def check_postinstall_action(action: str) -> str:
    """Return the lower-cased post-install action, "" when none is set.

    Raises:
        ConfigError: If the action is not logout, restart or none.
    """
    action = action.strip().lower()
    if action and action not in POSTINSTALL_ACTIONS:
        raise ConfigError(
            f"unsupported post-install action: {action} "
            f"(supported: {', '.join(POSTINSTALL_ACTIONS)})"
        )
    return action


def generate_install_script(
    info: BuildInfo,
    location: InstallLocation | None,
    has_payload: bool,
    postinstall_scripts: list[Path],
) -> str:
    """Generate chocolateyInstall.ps1 text.

    Args:
        info: Build information (post-install action).
        location: Resolved install location, None for script-only packages.
        has_payload: Whether payload/ contains any file.
        postinstall_scripts: scripts/postinstall*.ps1, in append order.

    Returns:
        PowerShell script text.

    Raises:
        ConfigError: If postinstall_action is not logout, restart or none.
    """
    lines = [
        "$ErrorActionPreference = 'Stop'\n\n",
        f"$installLocation = {_install_location_expression(location)}\n\n",
    ]

    if has_payload:
        lines.append(_PAYLOAD_COPY_BLOCK)
    else:
        lines.append(_SCRIPT_ONLY_NOTICE)

    action = check_postinstall_action(info.postinstall_action)
    if action:
        lines.append("\n# Executing post-install action\n")
        lines.append(POSTINSTALL_ACTIONS[action])

    if postinstall_scripts:
        lines.append(
            _concatenate_scripts(
                postinstall_scripts, "\n# Post-install script: {name}\n"
            )
        )

    return "".join(lines)


def generate_uninstall_script(location: InstallLocation, files: list[str]) -> str:
    """Generate chocolateyUninstall.ps1 text removing the installed files.

    Args:
        location: Resolved install location.
        files: Payload files relative to payload/ (POSIX form).
    """
    if location.folder_id:
        relative = [f.replace("/", "\\") for f in files]
        entries = [
            f"    ($installLocation + {_format_powershell_value(r)})" for r in relative
        ]
    else:
        entries = [f"    {_format_powershell_value(location.join(f))}" for f in files]

    return (
        "$ErrorActionPreference = 'Stop'\n\n"
        f"$installLocation = {_install_location_expression(location)}\n\n"
        "$installedFiles = @(\n" + ",\n".join(entries) + "\n)\n\n" + _REMOVE_FILES_BLOCK
    )


def write_scripts(
    project_dir: Path,
    info: BuildInfo,
    location: InstallLocation | None,
    has_payload: bool,
) -> list[str]:
    """Write the Chocolatey scripts into <project_dir>/tools/.

    Returns:
        Written files relative to the project directory (POSIX form), in
        the order they should be listed in the nuspec.

    Raises:
        ConfigError: If a user script cannot be read or the post-install
            action is unsupported.
    """
    logger = get_global_logger()
    tools_dir = project_dir / TOOLS_DIR
    tools_dir.mkdir(parents=True, exist_ok=True)

    written: list[str] = []

    preinstall = find_scripts(project_dir, PREINSTALL_PREFIX)
    postinstall = find_scripts(project_dir, POSTINSTALL_PREFIX)

    install_text = generate_install_script(info, location, has_payload, postinstall)
    (tools_dir / INSTALL_SCRIPT).write_text(install_text, encoding="utf-8")
    written.append(f"{TOOLS_DIR}/{INSTALL_SCRIPT}")
    logger.verbose("BUILD", f"[OK] Generated {INSTALL_SCRIPT}")
    for script in postinstall:
        logger.verbose("BUILD", f"  Appended {script.name}")

    if preinstall:
        before_text = generate_before_modify_script(preinstall)
        (tools_dir / BEFORE_MODIFY_SCRIPT).write_text(before_text, encoding="utf-8")
        written.append(f"{TOOLS_DIR}/{BEFORE_MODIFY_SCRIPT}")
        logger.verbose(
            "BUILD",
            f"[OK] Generated {BEFORE_MODIFY_SCRIPT} from {len(preinstall)} script(s)",
        )

    if has_payload and location is not None:
        uninstall_text = generate_uninstall_script(location, payload_files(project_dir))
        (tools_dir / UNINSTALL_SCRIPT).write_text(uninstall_text, encoding="utf-8")
        written.append(f"{TOOLS_DIR}/{UNINSTALL_SCRIPT}")
        logger.verbose("BUILD", f"[OK] Generated {UNINSTALL_SCRIPT}")

    return written
