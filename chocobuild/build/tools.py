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

"""External tool handling for chocobuild (nuget and signtool).

Design Principles:
    - nuget on PATH wins; otherwise nuget.exe is cached globally (not
      per-build) and downloaded from dist.nuget.org on first use
    - signtool is never downloaded; it ships with the Windows SDK
    - Tool output is captured and shown in verbose mode

Example:
    Pack and sign:
        ```python
        from pathlib import Path
        from chocobuild.build.tools import get_nuget, nuget_pack, sign_package

        nuget = get_nuget(Path("cache/tools"))
        nuget_pack(nuget, Path("projects/7zip/7-Zip.nuspec"), Path("projects/7zip/build"))
        sign_package(Path("projects/7zip/build/7-Zip-24.10.11.nupkg"), "Contoso Ltd")
        ```
"""

from __future__ import annotations

from pathlib import Path
import shutil
import subprocess

import requests

from chocobuild.config import DEFAULT_TIMESTAMP_URL
from chocobuild.exceptions import NetworkError, PackagingError
from chocobuild.logging import get_global_logger

NUGET_DOWNLOAD_URL = "https://dist.nuget.org/win-x86-commandline/latest/nuget.exe"
NUGET_TIMEOUT = 300
SIGNTOOL_TIMEOUT = 120


def run_tool(cmd: list[str], timeout: int = NUGET_TIMEOUT, prefix: str = "TOOL") -> str:
    """Run an external tool and return its stdout.

    Args:
        cmd: Command and arguments.
        timeout: Seconds before the tool is killed.
        prefix: Log prefix (e.g., "NUGET", "SIGN").

    Raises:
        PackagingError: If the tool is missing, exits non-zero or times out.
    """
    logger = get_global_logger()
    logger.verbose(prefix, f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            timeout=timeout,
        )
    except FileNotFoundError as err:
        raise PackagingError(f"{cmd[0]} is not installed or not in PATH") from err
    except subprocess.CalledProcessError as err:
        error_msg = f"{Path(cmd[0]).name} failed (exit code {err.returncode})"
        if err.stderr:
            error_msg += f"\n{err.stderr}"
        raise PackagingError(error_msg) from err
    except subprocess.TimeoutExpired as err:
        raise PackagingError(
            f"{Path(cmd[0]).name} timed out after {err.timeout}s"
        ) from err

    if result.stdout:
        for line in result.stdout.strip().split("\n"):
            logger.debug(prefix, f"  {line}")

    return result.stdout


def get_nuget(cache_dir: Path) -> str:
    """Locate the NuGet command-line tool, downloading it if needed.

    Args:
        cache_dir: Directory where nuget.exe is cached.

    Returns:
        Command to invoke nuget (a PATH name or an absolute path).

    Raises:
        NetworkError: If nuget.exe has to be downloaded and the download fails.
    """
    logger = get_global_logger()

    on_path = shutil.which("nuget")
    if on_path:
        logger.verbose("NUGET", f"Using nuget from PATH: {on_path}")
        return on_path

    tool_path = cache_dir / "nuget.exe"
    if tool_path.exists():
        logger.verbose("NUGET", f"Using cached nuget.exe: {tool_path}")
        return str(tool_path)

    logger.verbose("NUGET", f"Downloading nuget.exe from {NUGET_DOWNLOAD_URL}")
    try:
        response = requests.get(NUGET_DOWNLOAD_URL, timeout=60)
        response.raise_for_status()
    except requests.RequestException as err:
        raise NetworkError(
            f"NuGet is not installed and nuget.exe could not be downloaded: {err}\n"
            "You can install it via Chocolatey:\n"
            "  choco install nuget.commandline"
        ) from err

    cache_dir.mkdir(parents=True, exist_ok=True)
    tool_path.write_bytes(response.content)
    logger.verbose("NUGET", f"[OK] nuget.exe cached: {tool_path}")

    return str(tool_path)


def nuget_pack(nuget: str, nuspec_path: Path, output_dir: Path) -> None:
    """Run ``nuget pack`` for a nuspec into output_dir.

    Raises:
        PackagingError: If nuget fails.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    run_tool(
        [
            nuget,
            "pack",
            str(nuspec_path),
            "-OutputDirectory",
            str(output_dir),
            "-NoPackageAnalysis",
        ],
        timeout=NUGET_TIMEOUT,
        prefix="NUGET",
    )


def get_signtool() -> str:
    """Locate signtool on PATH.

    Raises:
        PackagingError: If signtool is not available.
    """
    signtool = shutil.which("signtool")
    if not signtool:
        raise PackagingError(
            "SignTool is not installed or not available in PATH "
            "(it ships with the Windows SDK)"
        )
    return signtool


def sign_package(
    package_path: Path,
    certificate: str,
    timestamp_url: str = DEFAULT_TIMESTAMP_URL,
) -> None:
    """Sign a package with signtool using a certificate subject name.

    Args:
        package_path: .nupkg file to sign.
        certificate: Certificate subject name (signtool /n).
        timestamp_url: RFC 3161 timestamp server.

    Raises:
        PackagingError: If signtool is missing or signing fails.
    """
    logger = get_global_logger()
    signtool = get_signtool()
    logger.verbose("SIGN", f"Signing {package_path.name} with certificate: {certificate}")
    run_tool(
        [
            signtool,
            "sign",
            "/n",
            certificate,
            "/fd",
            "SHA256",
            "/tr",
            timestamp_url,
            "/td",
            "SHA256",
            str(package_path),
        ],
        timeout=SIGNTOOL_TIMEOUT,
        prefix="SIGN",
    )
