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

"""Linker script discovery for CMake firmware projects.

Three independent strategies are tried in order and the first one that yields a
script wins:

1. link_transcript_strategy: '-T' flags in CMakeFiles/<target>.dir/link.txt
   (only present after the first build)
2. root_scripts_strategy: *.ld / *.lds files directly in the project root
   (typical STM32CubeMX layout)
3. cmake_lists_strategy: a '-T' reference in the top-level CMakeLists.txt

Each strategy takes a LinkerScriptContext and returns the script path or None.
I/O problems inside a strategy are reported to the diagnostic sink and count as
"no result"; they never escape resolve_linker_script().
"""

import os
import re
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from cmakeimport.argument_extractor import find_linker_script_arguments
from cmakeimport.command_utils import split_command
from cmakeimport.constants import (
    CMAKE_FILES_DIR,
    CMAKE_LISTS_TXT,
    FLASH_SCRIPT_MARKER,
    LINK_TXT,
    LINKER_SCRIPT_EXTENSIONS,
    SOURCE_DIR_VARIABLES,
    TARGET_DIR_SUFFIX,
)
from cmakeimport.diagnostics import DiagnosticSink, emit, emit_error
from cmakeimport.path_utils import relative_to_root, to_unix_path

logger = logging.getLogger(__name__)

# -T "${CMAKE_SOURCE_DIR}/STM32F407VGTx_FLASH.ld" (stops at a closing parenthesis)
_SOURCE_DIR_T_FLAG = re.compile(
    r"-T[\s,]*[\"']?\$\{(?:" + "|".join(SOURCE_DIR_VARIABLES) + r")\}/([^\"'\s),]+)[\"']?",
    re.IGNORECASE,
)
# -T STM32F407VGTx_FLASH.ld or -Wl,-T,STM32F407VGTx_FLASH.ld
_LITERAL_T_FLAG = re.compile(r"-T[\s,]*[\"']?([^\"'\s,]+\.lds?)[\"']?", re.IGNORECASE)


@dataclass
class LinkerScriptContext:
    """Inputs shared by all linker script strategies.

    Attributes:
        build_dir: Directory containing compile_commands.json
        project_root: Absolute project root directory
        sink: Diagnostic sink for progress and failures
    """

    build_dir: str
    project_root: str
    sink: Optional[DiagnosticSink] = None


LinkerScriptStrategy = Callable[[LinkerScriptContext], Optional[str]]


def is_linker_script(file_name: str) -> bool:
    """Check if a file name has a linker script extension (.ld / .lds)."""
    return file_name.endswith(LINKER_SCRIPT_EXTENSIONS)


def find_target_link_transcripts(build_dir: str) -> List[str]:
    """Find CMakeFiles/<target>.dir/link.txt files in lexical target order.

    Lexical order makes the result independent of directory enumeration order
    when several targets link with different scripts.

    Raises:
        OSError: If the CMakeFiles directory exists but cannot be listed
    """
    cmake_files_dir = os.path.join(build_dir, CMAKE_FILES_DIR)
    if not os.path.isdir(cmake_files_dir):
        return []

    transcripts = []
    for entry in sorted(os.listdir(cmake_files_dir)):
        if not entry.endswith(TARGET_DIR_SUFFIX):
            continue
        link_txt = os.path.join(cmake_files_dir, entry, LINK_TXT)
        if os.path.isfile(link_txt):
            transcripts.append(link_txt)
    return transcripts


def link_transcript_strategy(context: LinkerScriptContext) -> Optional[str]:
    """Take the first existing '-T' script referenced by a target's link.txt."""
    try:
        for link_txt in find_target_link_transcripts(context.build_dir):
            with open(link_txt, "r", encoding="utf-8") as f:
                args = split_command(f.read())

            for script_path in find_linker_script_arguments(args):
                full_path = script_path if os.path.isabs(script_path) else os.path.join(context.build_dir, script_path)
                full_path = os.path.normpath(full_path)
                if not os.path.isfile(full_path):
                    logger.debug("Linker script %s from %s does not exist", full_path, link_txt)
                    continue

                result = relative_to_root(full_path, context.project_root) or to_unix_path(full_path)
                emit(context.sink, f"Found linker script from {LINK_TXT}: {result}")
                return result
    except (OSError, UnicodeDecodeError) as e:
        emit_error(context.sink, f"Error reading link transcripts: {e}")

    return None


# Ordered, first match wins. Used only when the root holds several scripts.
ROOT_SCRIPT_PREFERENCES: List[Tuple[Callable[[str], bool], str]] = [
    (lambda name: FLASH_SCRIPT_MARKER in name.upper(), "FLASH linker script"),
]


def select_root_script(candidates: Sequence[str], sink: Optional[DiagnosticSink] = None) -> Optional[str]:
    """Pick one linker script out of the candidates found in the project root.

    A single candidate is always selected. With several, the first candidate
    (lexical order) accepted by a ROOT_SCRIPT_PREFERENCES rule wins; if no rule
    accepts any candidate the choice is ambiguous and nothing is selected.

    Args:
        candidates: Linker script file names
        sink: Diagnostic sink for progress and the ambiguity notice

    Returns:
        Selected file name or None
    """
    if not candidates:
        return None

    ordered = sorted(candidates)
    if len(ordered) == 1:
        emit(sink, f"Found linker script in project root: {ordered[0]}")
        return ordered[0]

    for predicate, description in ROOT_SCRIPT_PREFERENCES:
        for name in ordered:
            if predicate(name):
                emit(sink, f"Found {description}: {name}")
                return name

    emit(sink, f"Multiple linker scripts found ({', '.join(ordered)}), cannot auto-select")
    return None


def root_scripts_strategy(context: LinkerScriptContext) -> Optional[str]:
    """Select a *.ld / *.lds file located directly in the project root."""
    try:
        candidates = [
            name
            for name in os.listdir(context.project_root)
            if is_linker_script(name) and os.path.isfile(os.path.join(context.project_root, name))
        ]
    except OSError as e:
        emit_error(context.sink, f"Error listing project root for linker scripts: {e}")
        return None

    return select_root_script(candidates, context.sink)


def match_cmake_lists_linker_script(content: str) -> Optional[str]:
    """Find the linker script name referenced by a '-T' flag in CMakeLists.txt text.

    A path behind a source directory variable takes precedence over a plain
    file name.

    Returns:
        Script path relative to the source directory, or None
    """
    match = _SOURCE_DIR_T_FLAG.search(content) or _LITERAL_T_FLAG.search(content)
    if match:
        return match.group(1)
    return None


def cmake_lists_strategy(context: LinkerScriptContext) -> Optional[str]:
    """Take the '-T' script named in the top-level CMakeLists.txt if it exists."""
    cmake_lists = os.path.join(context.project_root, CMAKE_LISTS_TXT)
    if not os.path.isfile(cmake_lists):
        return None

    try:
        with open(cmake_lists, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        emit_error(context.sink, f"Error reading {CMAKE_LISTS_TXT}: {e}")
        return None

    script_name = match_cmake_lists_linker_script(content)
    if not script_name:
        return None

    if not os.path.isfile(os.path.join(context.project_root, script_name)):
        logger.debug("Linker script %s named in %s does not exist", script_name, CMAKE_LISTS_TXT)
        return None

    emit(context.sink, f"Found linker script from {CMAKE_LISTS_TXT}: {script_name}")
    return script_name


LINKER_SCRIPT_STRATEGIES: List[LinkerScriptStrategy] = [
    link_transcript_strategy,
    root_scripts_strategy,
    cmake_lists_strategy,
]


def first_success(strategies: Sequence[LinkerScriptStrategy], context: LinkerScriptContext) -> Optional[str]:
    """Run strategies in order and return the first non-empty result."""
    for strategy in strategies:
        result = strategy(context)
        if result:
            return result
    return None


def resolve_linker_script(
    build_dir: str,
    project_root: str,
    sink: Optional[DiagnosticSink] = None,
    strategies: Optional[Sequence[LinkerScriptStrategy]] = None,
) -> Optional[str]:
    """Resolve the project's linker script.

    Args:
        build_dir: Directory containing compile_commands.json
        project_root: Absolute project root directory
        sink: Diagnostic sink for progress and failures
        strategies: Strategies to use instead of LINKER_SCRIPT_STRATEGIES

    Returns:
        Root-relative script path (normalized absolute if outside the root), or None
    """
    context = LinkerScriptContext(build_dir=build_dir, project_root=project_root, sink=sink)
    return first_success(strategies if strategies is not None else LINKER_SCRIPT_STRATEGIES, context)
