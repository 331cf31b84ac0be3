"""
Chocolatey package building for chocobuild.

This module turns a project directory into a .nupkg: it generates the
Chocolatey PowerShell scripts and the nuspec, runs nuget pack and
optionally signs the result with signtool.

Public API:

build_package : function
    Build a complete package from a project directory.

Example:
    from pathlib import Path
    from chocobuild.build import build_package

    result = build_package(Path("projects/7zip"))

    print(f"Package: {result.package_path}")
"""

from .manager import build_package

__all__ = ["build_package"]
