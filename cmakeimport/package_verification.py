#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************

"""Runtime dependency checks for cmake-import.

The importer itself needs only the standard library; colorama drives the
terminal report and networkx the virtual tree export. Minimum versions track
Ubuntu 24.04 LTS.

Usage:
    python3 cmakeimport/package_verification.py --check-all
"""

import sys
import logging
import argparse
from importlib.metadata import version, PackageNotFoundError
from typing import Dict, List, Optional, Tuple

from packaging.version import parse

from cmakeimport.color_utils import print_error, print_success, print_warning
from cmakeimport.constants import EXIT_RUNTIME_ERROR

logger = logging.getLogger(__name__)

# Distribution name -> minimum version
PACKAGE_REQUIREMENTS: Dict[str, str] = {
    "colorama": "0.4.6",  # colored report output
    "networkx": "2.8.8",  # --export-tree
    "packaging": "24.0",  # version comparison in this module
}

VersionStatus = Tuple[bool, bool, Optional[str]]


def install_hint(package_name: str, min_version: str, upgrade: bool = False) -> str:
    """Return the pip command that satisfies a requirement."""
    flag = "--upgrade " if upgrade else ""
    return f"pip install {flag}'{package_name}>={min_version}'"


def check_package_version(package_name: str, min_version: Optional[str] = None, raise_on_error: bool = True) -> VersionStatus:
    """Look up the installed version of a distribution and compare it to a minimum.

    Args:
        package_name: Distribution name on the package index
        min_version: Required minimum; taken from PACKAGE_REQUIREMENTS when None
        raise_on_error: Raise instead of reporting a missing or outdated package

    Returns:
        Tuple of (is_installed, meets_version, installed_version or None)

    Raises:
        ImportError: If raise_on_error is set and the package is missing or too old
        ValueError: If min_version is None and the package has no registered requirement
    """
    if min_version is None:
        if package_name not in PACKAGE_REQUIREMENTS:
            raise ValueError(f"No version requirement specified for {package_name}")
        min_version = PACKAGE_REQUIREMENTS[package_name]

    try:
        installed_version = version(package_name)
    except PackageNotFoundError as exc:
        if not raise_on_error:
            return False, False, None
        raise ImportError(f"{package_name} is not installed. Install with: {install_hint(package_name, min_version)}") from exc

    meets_version = parse(installed_version) >= parse(min_version)
    logger.debug("%s %s (need >=%s): %s", package_name, installed_version, min_version, "ok" if meets_version else "too old")

    if raise_on_error and not meets_version:
        raise ImportError(
            f"{package_name} {installed_version} is too old. Version >={min_version} is required. "
            f"Upgrade with: {install_hint(package_name, min_version, upgrade=True)}"
        )

    return True, meets_version, installed_version


def require_package(package_name: str, context: str = "this tool") -> None:
    """Exit the process with EXIT_RUNTIME_ERROR unless a registered package is usable.

    Args:
        package_name: Distribution name, must be listed in PACKAGE_REQUIREMENTS
        context: Feature needing the package, used in the message (e.g. "virtual tree export")
    """
    min_version = PACKAGE_REQUIREMENTS.get(package_name)
    if min_version is None:
        print_error(f"Unknown package '{package_name}' - no version requirement defined")
        sys.exit(EXIT_RUNTIME_ERROR)

    is_installed, meets_version, installed_version = check_package_version(package_name, min_version, raise_on_error=False)
    if is_installed and meets_version:
        return

    if not is_installed:
        print_error(f"{package_name} is required for {context}.")
        print(f"Install with: {install_hint(package_name, min_version)}", file=sys.stderr)
    else:
        print_error(f"{package_name} {installed_version} is too old for {context}.")
        print(f"Version >={min_version} is required.", file=sys.stderr)
        print(f"Upgrade with: {install_hint(package_name, min_version, upgrade=True)}", file=sys.stderr)
    sys.exit(EXIT_RUNTIME_ERROR)


def check_all_packages() -> bool:
    """Print one status line per registered package.

    Returns:
        True when every package is installed in a recent enough version
    """
    rule = "=" * 40
    print("cmake-import Package Verification")
    print(rule)

    problems: List[str] = []
    for package_name, min_version in PACKAGE_REQUIREMENTS.items():
        is_installed, meets_version, installed_version = check_package_version(package_name, min_version, raise_on_error=False)
        if not is_installed:
            print_error(f"{package_name} not installed", prefix=False)
            problems.append(package_name)
        elif not meets_version:
            print_warning(f"{package_name} {installed_version} (need >={min_version})", prefix=False)
            problems.append(package_name)
        else:
            print_success(f"{package_name} {installed_version}")

    print(rule)
    if not problems:
        print_success("All required packages are available")
        return True

    print_error("Some required packages are missing or too old", prefix=False)
    print("Install missing packages with:")
    print("  " + " ".join(install_hint(name, PACKAGE_REQUIREMENTS[name]) for name in problems))
    return False


def main() -> int:
    """Command line entry point.

    Returns:
        0 when all packages are fine or only help was shown, 1 otherwise
    """
    parser = argparse.ArgumentParser(description="Verify cmake-import package dependencies")
    parser.add_argument("--check-all", action="store_true", help="Check every package in PACKAGE_REQUIREMENTS")
    args = parser.parse_args()

    if not args.check_all:
        parser.print_help()
        return 0
    return 0 if check_all_packages() else 1


if __name__ == "__main__":
    sys.exit(main())
