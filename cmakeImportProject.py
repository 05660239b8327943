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

"""Import a CMake firmware project from its compile_commands.json.

This script reads the compilation database written by CMake
(CMAKE_EXPORT_COMPILE_COMMANDS=ON) and reconstructs a normalized project
description: source files, include paths, macros, library paths and libraries,
the toolchain family and the linker script.

Requirements:
    - Python 3.8+
    - colorama, networkx, packaging

Usage:
    cmakeImportProject.py <compile_commands.json|build_directory> [--detailed] [--format=text|json]

Exit Codes:
    0: Success
    1: Invalid arguments, missing or malformed compile_commands.json
    2: Unexpected error
"""

import os
import sys
import argparse
import logging
import signal
from typing import Any

__version__ = "1.0.0"

from cmakeimport.color_utils import Colors, print_error, print_section, print_success, print_warning, should_use_color
from cmakeimport.compile_db import resolve_compile_commands_path
from cmakeimport.constants import (
    EXIT_SUCCESS,
    EXIT_RUNTIME_ERROR,
    EXIT_KEYBOARD_INTERRUPT,
    CmakeImportError,
)
from cmakeimport.diagnostics import LoggingSink
from cmakeimport.export_utils import export_project_json, format_json_output
from cmakeimport.package_verification import require_package
from cmakeimport.project_parser import ProjectDescription, parse_cmake_project
from cmakeimport.source_tree import VirtualFolder

__all__ = ["EXIT_SUCCESS", "main", "format_text_report"]


def signal_handler(signum: int, frame: Any) -> None:
    """Handle interrupt signals gracefully."""
    print_warning("\nInterrupted by user. Exiting...", prefix=False)
    sys.exit(EXIT_KEYBOARD_INTERRUPT)


def format_tree(folder: VirtualFolder, indent: int = 0) -> str:
    """Render the virtual tree as an indented listing."""
    pad = "  " * indent
    lines = [f"{pad}{Colors.BRIGHT}{folder.name}/{Colors.RESET}"]
    for file in folder.files:
        lines.append(f"{pad}  {os.path.basename(file.path)}")
    for child in folder.folders:
        lines.append(format_tree(child, indent + 1))
    return "\n".join(lines)


def format_text_report(project: ProjectDescription, detailed: bool = False) -> str:
    """Format a human readable summary of the project.

    Args:
        project: Parsed project description
        detailed: Include the full lists and the virtual tree

    Returns:
        Multi-line report
    """
    lines = [
        f"Project:       {Colors.BRIGHT}{project.name}{Colors.RESET}",
        f"Root:          {project.root_dir}",
        f"Type:          {Colors.CYAN}{project.project_type.value}{Colors.RESET}",
        f"Compiler:      {project.compiler_path or '-'}",
        f"Linker script: {project.linker_script or Colors.YELLOW + 'not found' + Colors.RESET}",
        f"Sources: {len(project.source_files)}, Includes: {len(project.include_paths)}, Defines: {len(project.defines)}, "
        f"LibPaths: {len(project.lib_paths)}, Libs: {len(project.libs)}",
    ]

    if detailed:
        sections = [
            ("Include Paths", project.include_paths),
            ("Defines", project.defines),
            ("Library Paths", project.lib_paths),
            ("Libraries", project.libs),
        ]
        for title, items in sections:
            if items:
                lines.append(f"\n{Colors.BRIGHT}{title}:{Colors.RESET}")
                lines.extend(f"  {item}" for item in items)
        lines.append(f"\n{Colors.BRIGHT}Sources:{Colors.RESET}")
        lines.append(format_tree(project.virtual_tree, 1))

    return "\n".join(lines)


def main() -> int:
    """Main entry point for the script.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    parser = argparse.ArgumentParser(
        description="Reconstruct a firmware project description from CMake's compile_commands.json.",
        epilog=f"Version {__version__}\n\nExamples:\n"
        f"  %(prog)s build/compile_commands.json\n"
        f"  %(prog)s build/ --detailed\n"
        f"  %(prog)s build/ --format json --output project.json\n"
        f"  %(prog)s build/ --export-tree sources.graphml\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("compile_commands", metavar="COMPILE_COMMANDS", help="Path to compile_commands.json or the build directory containing it")

    parser.add_argument("--detailed", action="store_true", help="Show all extracted paths, macros and the source tree")

    parser.add_argument("--format", choices=["text", "json"], default="text", help="Output format (default: text)")

    parser.add_argument("--output", "-o", metavar="FILE", help="Save JSON output to file and print summary to stdout")

    parser.add_argument("--export-tree", metavar="FILE", help="Export the virtual source tree (.graphml, .gexf or .json)")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args()

    if not should_use_color(no_color=args.no_color):
        Colors.disable()

    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    compile_commands = resolve_compile_commands_path(args.compile_commands)

    # Progress is logged at INFO and only shown with --verbose; problems at WARNING
    sink = LoggingSink(logging.getLogger("cmakeimport"))

    try:
        project = parse_cmake_project(compile_commands, sink)
    except CmakeImportError as e:
        print_error(str(e))
        return e.exit_code

    if args.format == "json" and not args.output:
        print(format_json_output(project))
    else:
        if args.output:
            export_project_json(project, args.output)
            if args.verbose:
                print(f"JSON output saved to: {args.output}", file=sys.stderr)

        try:
            print_section("CMake Project")
            print(format_text_report(project, detailed=args.detailed))
        except BrokenPipeError:
            # Handle broken pipe gracefully (e.g., when piping to head)
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())
            return EXIT_SUCCESS

    if args.export_tree:
        # networkx is only loaded once it is known to be usable
        require_package("networkx", "virtual tree export")
        from cmakeimport.graph_export import export_virtual_tree

        export_virtual_tree(project.virtual_tree, args.export_tree)
        print_success(f"Exported virtual tree to {args.export_tree}", file=sys.stderr)

    return EXIT_SUCCESS


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print_warning("Interrupted.", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except CmakeImportError as e:
        print_error(str(e))
        sys.exit(e.exit_code)
    except Exception as e:  # pylint: disable=broad-exception-caught
        print(f"Fatal error: {e}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)
