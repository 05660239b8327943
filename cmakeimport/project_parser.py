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

"""Reconstruct a firmware project description from compile_commands.json.

parse_cmake_project() is the entry point. It reads the compile database, turns
every entry into an EntryContribution (pure function of the entry), merges the
contributions with order-preserving deduplication, builds the virtual tree and
resolves the linker script.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from cmakeimport.argument_extractor import extract_defines, extract_includes, extract_libs
from cmakeimport.compile_db import CompileCommandEntry, find_project_root, load_compile_commands
from cmakeimport.diagnostics import DiagnosticSink, LoggingSink, emit
from cmakeimport.linker_script import resolve_linker_script
from cmakeimport.path_utils import normalize_path
from cmakeimport.source_tree import VirtualFolder, build_virtual_tree, is_compilable_source
from cmakeimport.toolchain import DEFAULT_PROJECT_TYPE, ProjectType, detect_project_type

logger = logging.getLogger(__name__)

__all__ = ["ProjectDescription", "EntryContribution", "parse_cmake_project", "process_entry", "dedupe"]

T = TypeVar("T")


def dedupe(items: Iterable[T]) -> List[T]:
    """Remove duplicates while keeping the order of first appearance.

    Example:
        >>> dedupe(["A", "B", "A"])
        ['A', 'B']
    """
    return list(dict.fromkeys(items))


@dataclass
class EntryContribution:
    """Everything one compile command contributes to the project.

    Attributes:
        compiler: First argument of the command (None if it had no arguments)
        includes: Normalized include paths
        defines: Macro definitions
        lib_paths: Normalized library search paths
        libs: Library names
        source_file: Normalized source file, or None if not compilable
    """

    compiler: Optional[str] = None
    includes: List[str] = field(default_factory=list)
    defines: List[str] = field(default_factory=list)
    lib_paths: List[str] = field(default_factory=list)
    libs: List[str] = field(default_factory=list)
    source_file: Optional[str] = None


@dataclass(frozen=True)
class ProjectDescription:
    """Normalized description of an embedded firmware project.

    Attributes:
        name: Project name (name of the root directory)
        root_dir: Absolute project root directory
        source_files: Compilable sources, project relative where possible
        include_paths: Include search paths
        defines: Preprocessor macros
        lib_paths: Library search paths
        libs: Library names
        linker_script: Linker script path, if one was found
        compiler_path: Compiler of the first compile command
        project_type: Toolchain family detected from compiler_path
        virtual_tree: Source files grouped by directory
    """

    name: str
    root_dir: str
    source_files: List[str]
    include_paths: List[str]
    defines: List[str]
    lib_paths: List[str]
    libs: List[str]
    linker_script: Optional[str]
    compiler_path: Optional[str]
    project_type: ProjectType
    virtual_tree: VirtualFolder

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "rootDir": self.root_dir,
            "sourceFiles": list(self.source_files),
            "includePaths": list(self.include_paths),
            "defines": list(self.defines),
            "libPaths": list(self.lib_paths),
            "libs": list(self.libs),
            "linkerScript": self.linker_script,
            "compilerPath": self.compiler_path,
            "projectType": self.project_type.value,
            "virtualTree": self.virtual_tree.to_dict(),
        }


def process_entry(entry: CompileCommandEntry, project_root: str, sink: Optional[DiagnosticSink] = None) -> EntryContribution:
    """Extract the contribution of a single compile command.

    An entry without usable arguments contributes nothing (not even its source
    file).

    Args:
        entry: Compile database entry
        project_root: Absolute project root directory
        sink: Diagnostic sink for progress and failures

    Returns:
        EntryContribution for this entry
    """
    args = entry.get_arguments(sink)
    if not args:
        logger.debug("Skipping entry without arguments: %s", entry.file)
        return EntryContribution()

    libraries = extract_libs(args, entry.directory, project_root)
    contribution = EntryContribution(
        compiler=args[0],
        includes=extract_includes(args, entry.directory, project_root),
        defines=extract_defines(args),
        lib_paths=libraries.lib_paths,
        libs=libraries.libs,
    )

    if entry.file:
        source_file = normalize_path(entry.file, entry.directory, project_root)
        if is_compilable_source(source_file):
            contribution.source_file = source_file

    return contribution


def merge_contributions(contributions: Sequence[EntryContribution]) -> EntryContribution:
    """Merge per-entry contributions in order and deduplicate the collections.

    Only the collections are merged; compiler and source_file stay unset.
    """
    return EntryContribution(
        includes=dedupe(path for c in contributions for path in c.includes),
        defines=dedupe(define for c in contributions for define in c.defines),
        lib_paths=dedupe(path for c in contributions for path in c.lib_paths),
        libs=dedupe(lib for c in contributions for lib in c.libs),
    )


def parse_cmake_project(compile_commands_path: str, sink: Optional[DiagnosticSink] = None) -> ProjectDescription:
    """Parse compile_commands.json and extract the project description.

    Args:
        compile_commands_path: Path to compile_commands.json
        sink: Diagnostic sink; defaults to a LoggingSink

    Returns:
        ProjectDescription built from the database

    Raises:
        CompileDatabaseNotFoundError: If the database file does not exist
        CompileDatabaseFormatError: If it is not a non-empty array of entries
    """
    if sink is None:
        sink = LoggingSink()

    entries = load_compile_commands(compile_commands_path)
    build_dir = os.path.dirname(os.path.abspath(compile_commands_path))
    project_root = find_project_root(compile_commands_path)

    emit(sink, f"Found {len(entries)} compile commands")

    contributions: List[EntryContribution] = []
    compiler_path: Optional[str] = None
    project_type = DEFAULT_PROJECT_TYPE

    for entry in entries:
        contribution = process_entry(entry, project_root, sink)
        if contribution.compiler is None:
            continue

        # First compiler wins; later entries are never reclassified
        if compiler_path is None:
            compiler_path = contribution.compiler
            project_type = detect_project_type(compiler_path)
            emit(sink, f"Detected Compiler: {compiler_path}, Type: {project_type.value}")

        if contribution.includes or contribution.defines:
            emit(sink, f"Extracted {len(contribution.includes)} includes, {len(contribution.defines)} defines from {entry.file}")
        contributions.append(contribution)

    merged = merge_contributions(contributions)
    source_files = dedupe(c.source_file for c in contributions if c.source_file)

    emit(
        sink,
        f"Summary: Includes: {len(merged.includes)}, Defines: {len(merged.defines)}, "
        f"LibPaths: {len(merged.lib_paths)}, Libs: {len(merged.libs)}, Sources: {len(source_files)}",
    )

    virtual_tree = build_virtual_tree(source_files)

    linker_script = resolve_linker_script(build_dir, project_root, sink)
    if linker_script:
        emit(sink, f"Extracted linker script: {linker_script}")
    else:
        emit(sink, "No linker script found")

    return ProjectDescription(
        name=os.path.basename(project_root),
        root_dir=project_root,
        source_files=source_files,
        include_paths=merged.includes,
        defines=merged.defines,
        lib_paths=merged.lib_paths,
        libs=merged.libs,
        linker_script=linker_script,
        compiler_path=compiler_path,
        project_type=project_type,
        virtual_tree=virtual_tree,
    )
