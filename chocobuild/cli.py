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

"""Command-line interface for chocobuild.

Commands:

    init: Scaffold a new project directory
    validate: Validate a project without building
    build: Build (and sign) a .nupkg from a project directory

Example:
    Scaffold a project:
        ```bash
        $ chocobuild init projects/7zip --identifier 7zip --developer "Igor Pavlov"
        ```

    Validate it:
        ```bash
        $ chocobuild validate projects/7zip
        ```

    Build it with verbose output:
        ```bash
        $ chocobuild build projects/7zip --verbose
        ```

Exit Codes:

- 0: Success
- 1: Error (configuration, download, packaging or validation failure)

Note:
    Project paths accept either "/" or "\\" separators. Verbose mode shows
    full tracebacks on errors. Debug mode implies verbose mode and shows
    the merged configuration and tool output.
"""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version
import sys
import traceback

from chocobuild.build import build_package
from chocobuild.exceptions import ChocoBuildError
from chocobuild.logging import get_logger, set_global_logger
from chocobuild.project import init_project, normalize_path
from chocobuild.validation import validate_project


def _print_error(err: Exception, args: argparse.Namespace) -> None:
    print(f"Error: {err}")
    if getattr(args, "verbose", False) or getattr(args, "debug", False):
        traceback.print_exc()


def cmd_init(args: argparse.Namespace) -> int:
    """Handler for 'chocobuild init' command.

    Creates payload/, scripts/, build/ and tools/ and writes a starter
    build-info.yaml. An existing build-info.yaml is never overwritten.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    set_global_logger(get_logger(verbose=args.verbose))

    project_dir = normalize_path(args.project_dir)

    try:
        build_info_path = init_project(
            project_dir,
            identifier=args.identifier,
            name=args.name,
            developer=args.developer,
            version=args.product_version,
        )
    except ChocoBuildError as err:
        _print_error(err, args)
        return 1

    print(f"[SUCCESS] Project created: {project_dir}")
    print(f"Edit {build_info_path} and add files to payload/ or scripts/.")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handler for 'chocobuild validate' command.

    Validates the project layout and build-info.yaml without running nuget
    or signtool.

    Returns:
        Exit code (0 for valid project, 1 for invalid).
    """
    set_global_logger(get_logger(verbose=args.verbose))

    project_dir = normalize_path(args.project_dir).resolve()

    print(f"Validating project: {project_dir}")
    print()

    result = validate_project(project_dir)

    print("=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"Project:     {result.project_dir}")
    print(f"Status:      {result.status.upper()}")
    print()

    if result.warnings:
        print(f"Warnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  [WARNING] {warning}")
        print()

    if result.errors:
        print(f"Errors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  [X] {error}")
        print()

    print("=" * 70)

    if result.status == "valid":
        print()
        print("[SUCCESS] Project is valid!")
        return 0

    print()
    print(f"[FAILED] Project validation failed with {len(result.errors)} error(s).")
    return 1


def cmd_build(args: argparse.Namespace) -> int:
    """Handler for 'chocobuild build' command.

    Generates the Chocolatey scripts and nuspec, runs nuget pack, renames
    the package to <name>-<version>.nupkg and signs it when a certificate
    is configured.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    set_global_logger(get_logger(verbose=args.verbose, debug=args.debug))

    project_dir = normalize_path(args.project_dir).resolve()
    cache_dir = normalize_path(args.cache_dir) if args.cache_dir else None

    print(f"Using project directory: {project_dir}")
    print()

    try:
        result = build_package(
            project_dir,
            cache_dir=cache_dir,
            keep_tools=args.keep_tools,
        )
    except ChocoBuildError as err:
        _print_error(err, args)
        return 1

    print("=" * 70)
    print("BUILD RESULTS")
    print("=" * 70)
    print(f"Name:             {result.name}")
    print(f"Identifier:       {result.identifier}")
    print(f"Version:          {result.version}")
    print(f"Install Location: {result.install_location or '(script-only)'}")
    print(f"Signed:           {'yes' if result.signed else 'no'}")
    print(f"Package Path:     {result.package_path}")
    print(f"Status:           {result.status}")
    print("=" * 70)
    print()
    print("[SUCCESS] Package created successfully!")

    return 0


def _installed_version() -> str:
    try:
        return version("chocobuild")
    except PackageNotFoundError:
        from chocobuild import __version__

        return __version__


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands registered."""
    parser = argparse.ArgumentParser(
        prog="chocobuild",
        description="chocobuild - build signed Chocolatey packages from a project directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"chocobuild {_installed_version()}",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # 'init' command
    parser_init = subparsers.add_parser(
        "init",
        help="Create a new project directory",
        description="Create payload/, scripts/, build/ and tools/ and a starter build-info.yaml.",
    )
    parser_init.add_argument("project_dir", help="Path to the project directory")
    parser_init.add_argument(
        "--identifier", required=True, help="NuGet package id (product.identifier)"
    )
    parser_init.add_argument(
        "--name", default=None, help="Product display name (default: identifier)"
    )
    parser_init.add_argument(
        "--developer", default="", help="Author/publisher (product.developer)"
    )
    parser_init.add_argument(
        "--product-version",
        default="1.0.0",
        help="Initial product version (default: 1.0.0)",
    )
    parser_init.add_argument(
        "-v", "--verbose", action="store_true", help="Show created directories"
    )
    parser_init.set_defaults(func=cmd_init)

    # 'validate' command
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate a project (no nuget/signtool calls)",
        description="Check build-info.yaml and the project layout without building.",
    )
    parser_validate.add_argument("project_dir", help="Path to the project directory")
    parser_validate.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show validation progress and details",
    )
    parser_validate.set_defaults(func=cmd_validate)

    # 'build' command
    parser_build = subparsers.add_parser(
        "build",
        help="Build a .nupkg from a project directory",
        description="Generate Chocolatey scripts and nuspec, pack with nuget and sign with signtool.",
    )
    parser_build.add_argument("project_dir", help="Path to the project directory")
    parser_build.add_argument(
        "--cache-dir",
        default=None,
        help="Directory for the cached nuget.exe (default: cache/tools)",
    )
    parser_build.add_argument(
        "--keep-tools",
        action="store_true",
        help="Keep the generated tools/ directory after packing",
    )
    parser_build.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress and high-level status updates",
    )
    parser_build.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Show detailed debugging output (implies --verbose)",
    )
    parser_build.set_defaults(func=cmd_build)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the chocobuild CLI.

    This function is registered as the 'chocobuild' console script in
    pyproject.toml.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
