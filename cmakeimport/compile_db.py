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

"""Loading compile_commands.json and locating the project root."""

import os
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from cmakeimport.command_utils import expand_response_files, split_command
from cmakeimport.constants import (
    CMAKE_LISTS_TXT,
    COMPILE_COMMANDS_JSON,
    CompileDatabaseError,
    CompileDatabaseFormatError,
    CompileDatabaseNotFoundError,
)
from cmakeimport.diagnostics import DiagnosticSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileCommandEntry:
    """A single entry of compile_commands.json.

    Attributes:
        directory: Working directory of the compile step
        file: Main source file of the compile step
        command: Full command line as one string (alternative to arguments)
        arguments: Command line already split into arguments
    """

    directory: str
    file: str
    command: Optional[str] = None
    arguments: Optional[List[str]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], database_dir: str) -> "CompileCommandEntry":
        """Create an entry from a parsed JSON object.

        A missing or relative 'directory' is resolved against the directory that
        holds the database. Non-string 'command' values and non-list 'arguments'
        values are ignored.

        Raises:
            CompileDatabaseFormatError: If data is not a JSON object
        """
        if not isinstance(data, dict):
            raise CompileDatabaseFormatError(f"{COMPILE_COMMANDS_JSON} entry is not an object: {data!r:.80}")

        directory = str(data.get("directory") or "")
        directory = os.path.normpath(os.path.join(database_dir, directory))

        command = data.get("command")
        arguments = data.get("arguments")

        return cls(
            directory=directory,
            file=str(data.get("file") or ""),
            command=command if isinstance(command, str) else None,
            arguments=[str(arg) for arg in arguments] if isinstance(arguments, list) else None,
        )

    def get_arguments(self, sink: Optional[DiagnosticSink] = None) -> List[str]:
        """Return the effective argument list of this entry.

        'arguments' is used verbatim when present, otherwise 'command' is split.
        Response files (@file) are expanded relative to the entry's directory.
        """
        if self.arguments is not None:
            args = list(self.arguments)
        elif self.command:
            args = split_command(self.command)
        else:
            args = []

        return expand_response_files(args, self.directory, sink)


def resolve_compile_commands_path(path: str) -> str:
    """Accept either compile_commands.json itself or a build directory containing it."""
    if os.path.isdir(path):
        return os.path.join(path, COMPILE_COMMANDS_JSON)
    return path


def load_compile_commands(compile_commands_path: str) -> List[CompileCommandEntry]:
    """Read and validate compile_commands.json.

    Args:
        compile_commands_path: Path to compile_commands.json

    Returns:
        Entries in database order

    Raises:
        CompileDatabaseNotFoundError: If the file does not exist
        CompileDatabaseFormatError: If the content is not a non-empty JSON array of objects
    """
    if not os.path.isfile(compile_commands_path):
        raise CompileDatabaseNotFoundError(f"{COMPILE_COMMANDS_JSON} file not found: {compile_commands_path}")

    try:
        with open(compile_commands_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CompileDatabaseFormatError(f"{COMPILE_COMMANDS_JSON} is not valid JSON: {e}") from e
    except OSError as e:
        raise CompileDatabaseError(f"Cannot read {compile_commands_path}: {e}") from e

    if not isinstance(data, list) or not data:
        raise CompileDatabaseFormatError(f"{COMPILE_COMMANDS_JSON} is empty or invalid: {compile_commands_path}")

    database_dir = os.path.dirname(os.path.abspath(compile_commands_path))
    entries = [CompileCommandEntry.from_dict(item, database_dir) for item in data]

    logger.debug("Loaded %d entries from %s", len(entries), compile_commands_path)
    return entries


def find_project_root(compile_commands_path: str) -> str:
    """Determine the project root for a compile database.

    The parent of the database's directory is the root when it holds a
    CMakeLists.txt (the usual <root>/build/compile_commands.json layout);
    otherwise the database's own directory is used.

    Returns:
        Absolute project root directory
    """
    build_dir = os.path.dirname(os.path.abspath(compile_commands_path))
    parent_dir = os.path.dirname(build_dir)

    if os.path.isfile(os.path.join(parent_dir, CMAKE_LISTS_TXT)):
        return parent_dir
    return build_dir
