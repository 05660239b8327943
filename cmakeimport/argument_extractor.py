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

"""Extraction of include paths, macros and libraries from compiler arguments.

Each extractor is a single left-to-right pass over the argument list. Flags that
accept their value as a separate argument (e.g. '-I path') consume the next
argument. The functions are pure: they return fresh lists and never touch any
state outside their arguments.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from cmakeimport.path_utils import normalize_path

logger = logging.getLogger(__name__)

INCLUDE_FLAG = "-I"
ISYSTEM_FLAG = "-isystem"
INCLUDE_DIRECTORY_PREFIX = "--include-directory="
DEFINE_FLAG = "-D"
DEFINE_PREFIX = "--define="
LIB_PATH_FLAG = "-L"
LIB_FLAG = "-l"
LINKER_SCRIPT_FLAG = "-T"


@dataclass
class LibraryArguments:
    """Libraries referenced by one compile command.

    Attributes:
        lib_paths: Normalized library search paths (-L)
        libs: Library names (-l), verbatim
    """

    lib_paths: List[str] = field(default_factory=list)
    libs: List[str] = field(default_factory=list)


def take_flag_value(args: Sequence[str], index: int, flag: str) -> Tuple[Optional[str], int]:
    """Read the value of a flag written as '<flag><value>' or '<flag> <value>'.

    Args:
        args: Argument list
        index: Position of an argument that starts with flag
        flag: The flag, e.g. "-I"

    Returns:
        Tuple of (value or None, index of the last argument consumed)
    """
    arg = args[index]
    if len(arg) > len(flag):
        return arg[len(flag):], index
    if index + 1 < len(args):
        return args[index + 1], index + 1
    return None, index


def extract_includes(args: Sequence[str], build_dir: str, project_root: str) -> List[str]:
    """Extract include paths from compiler arguments.

    Handles -I<path>, -I <path>, -isystem <path> and --include-directory=<path>.

    Args:
        args: Compiler arguments
        build_dir: Working directory of the command, used for relative paths
        project_root: Project root the paths are made relative to

    Returns:
        Normalized include paths in argument order
    """
    includes: List[str] = []

    i = 0
    while i < len(args):
        arg = args[i]
        include_path: Optional[str] = None

        if arg.startswith(INCLUDE_FLAG):
            include_path, i = take_flag_value(args, i, INCLUDE_FLAG)
        elif arg == ISYSTEM_FLAG and i + 1 < len(args):
            i += 1
            include_path = args[i]
        elif arg.startswith(INCLUDE_DIRECTORY_PREFIX):
            include_path = arg[len(INCLUDE_DIRECTORY_PREFIX):]

        if include_path:
            includes.append(normalize_path(include_path, build_dir, project_root))
        i += 1

    return includes


def extract_defines(args: Sequence[str]) -> List[str]:
    """Extract macro definitions from compiler arguments.

    Handles -D<macro>, -D <macro> and --define=<macro>. The macro text is kept
    as written ('NAME=value' stays one entry).

    Args:
        args: Compiler arguments

    Returns:
        Macro definitions in argument order
    """
    defines: List[str] = []

    i = 0
    while i < len(args):
        arg = args[i]
        define: Optional[str] = None

        if arg.startswith(DEFINE_FLAG):
            define, i = take_flag_value(args, i, DEFINE_FLAG)
        elif arg.startswith(DEFINE_PREFIX):
            define = arg[len(DEFINE_PREFIX):]

        if define:
            defines.append(define)
        i += 1

    return defines


def extract_libs(args: Sequence[str], build_dir: str, project_root: str) -> LibraryArguments:
    """Extract library search paths and library names from compiler arguments.

    -L accepts both the attached and the separate form; -l only the attached one.

    Args:
        args: Compiler arguments
        build_dir: Working directory of the command, used for relative paths
        project_root: Project root the paths are made relative to

    Returns:
        LibraryArguments with normalized paths and verbatim names
    """
    result = LibraryArguments()

    i = 0
    while i < len(args):
        arg = args[i]

        if arg.startswith(LIB_PATH_FLAG):
            lib_path, i = take_flag_value(args, i, LIB_PATH_FLAG)
            if lib_path:
                result.lib_paths.append(normalize_path(lib_path, build_dir, project_root))
        elif arg.startswith(LIB_FLAG) and len(arg) > len(LIB_FLAG):
            result.libs.append(arg[len(LIB_FLAG):])
        i += 1

    return result


def find_linker_script_arguments(args: Sequence[str]) -> List[str]:
    """Return the values of all -T<script> / -T <script> arguments, in order."""
    scripts: List[str] = []

    i = 0
    while i < len(args):
        if args[i].startswith(LINKER_SCRIPT_FLAG):
            script, i = take_flag_value(args, i, LINKER_SCRIPT_FLAG)
            if script:
                scripts.append(script)
        i += 1

    return scripts
