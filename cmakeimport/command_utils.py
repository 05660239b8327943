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

"""Splitting compile command strings and expanding response files."""

import os
import re
import logging
from typing import List, Optional, Sequence

from cmakeimport.diagnostics import DiagnosticSink, emit, emit_error

logger = logging.getLogger(__name__)

__all__ = ["split_command", "read_response_file", "expand_response_files"]

WHITESPACE_CHARS = (" ", "\t", "\r", "\n")
QUOTE_CHARS = ('"', "'")

_LINE_BREAKS = re.compile(r"[\r\n]+")


def split_command(command: str) -> List[str]:
    """Split a command line into arguments, honoring quotes and backslash escapes.

    Rules:
    - Unquoted whitespace separates arguments; runs of whitespace never produce
      empty arguments.
    - A single or double quote opens a quoted span which the same quote character
      closes. Inside it whitespace is literal. Quote characters are not emitted.
    - Outside quotes a backslash makes the next character literal.
    - Inside quotes a backslash only escapes the active quote character or another
      backslash; any other backslash is kept as is.
    - An unterminated quote runs to the end of the input.

    Unlike shlex.split() this never raises, which matters for hand-written
    response files and link transcripts.

    Args:
        command: Raw command line text

    Returns:
        List of non-empty arguments

    Examples:
        >>> split_command('a "b c" d')
        ['a', 'b c', 'd']
        >>> split_command(r'-DNAME=\\"x\\"')
        ['-DNAME="x"']
    """
    args: List[str] = []
    current: List[str] = []
    quote_char = ""
    escaped = False

    i = 0
    length = len(command)
    while i < length:
        char = command[i]

        if escaped:
            current.append(char)
            escaped = False
            i += 1
            continue

        if char == "\\":
            if quote_char:
                next_char = command[i + 1] if i + 1 < length else ""
                if next_char in (quote_char, "\\"):
                    escaped = True
                else:
                    current.append(char)
            else:
                escaped = True
            i += 1
            continue

        if quote_char:
            if char == quote_char:
                quote_char = ""
            else:
                current.append(char)
        elif char in QUOTE_CHARS:
            quote_char = char
        elif char in WHITESPACE_CHARS:
            if current:
                args.append("".join(current))
                current = []
        else:
            current.append(char)
        i += 1

    if current:
        args.append("".join(current))

    return args


def read_response_file(rsp_path: str, base_dir: str) -> Optional[List[str]]:
    """Read a response file and split its content into arguments.

    Args:
        rsp_path: Path from the @file argument (without the '@')
        base_dir: Directory used to resolve relative paths (the entry's directory)

    Returns:
        List of arguments, or None if the file could not be read
    """
    full_path = rsp_path if os.path.isabs(rsp_path) else os.path.join(base_dir, rsp_path)
    full_path = os.path.normpath(full_path)

    try:
        with open(full_path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read response file %s: %s", full_path, e)
        return None

    return split_command(_LINE_BREAKS.sub(" ", content))


def expand_response_files(args: Sequence[str], base_dir: str, sink: Optional[DiagnosticSink] = None) -> List[str]:
    """Replace every @file argument with the arguments stored in that file.

    Unreadable response files contribute no arguments; the failure goes to the
    sink and the remaining arguments are still processed. Arguments coming out of
    a response file are not expanded again.

    Args:
        args: Arguments of one compile command
        base_dir: Working directory of the compile command
        sink: Diagnostic sink for progress and failures

    Returns:
        New argument list with response files spliced in
    """
    expanded: List[str] = []

    for arg in args:
        if not arg.startswith("@"):
            expanded.append(arg)
            continue

        rsp_path = arg[1:]
        emit(sink, f"Parsing response file: {rsp_path}")
        rsp_args = read_response_file(rsp_path, base_dir)
        if rsp_args is None:
            emit_error(sink, f"Failed to read response file: {rsp_path}")
            continue
        expanded.extend(rsp_args)

    return expanded
