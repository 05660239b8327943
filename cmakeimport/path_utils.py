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

"""Path normalization relative to the project root."""

import os
import logging
from typing import Optional

logger = logging.getLogger(__name__)


def to_unix_path(path: str) -> str:
    """Convert path separators to forward slashes."""
    return path.replace("\\", "/")


def relative_to_root(abs_path: str, project_root: str) -> Optional[str]:
    """Express an absolute path relative to the project root.

    Only paths inside the project root have a relative form; anything that would
    need a leading '..' (or lives on another drive) returns None.

    Args:
        abs_path: Normalized absolute path
        project_root: Absolute project root directory

    Returns:
        Root-relative path with forward slashes ('.' for the root itself), or None
    """
    root = os.path.normpath(project_root)
    if abs_path != root and not abs_path.startswith(root.rstrip(os.sep) + os.sep):
        return None

    try:
        rel_path = os.path.relpath(abs_path, root)
    except ValueError:
        # Different drives on Windows
        return None

    return to_unix_path(rel_path)


def normalize_path(path: str, base_dir: str, project_root: str) -> str:
    """Resolve a path from a compile command and make it project relative.

    Relative paths are resolved against base_dir (the working directory of the
    compile command). The result is returned relative to project_root when it lies
    inside the root, otherwise as a normalized absolute path with forward slashes.

    Args:
        path: Path as written in the compile command
        base_dir: Working directory of the command
        project_root: Absolute project root directory

    Returns:
        Root-relative or absolute path using forward slashes

    Examples:
        >>> normalize_path("../src/main.c", "/work/proj/build", "/work/proj")
        'src/main.c'
        >>> normalize_path("/opt/gcc/include", "/work/proj/build", "/work/proj")
        '/opt/gcc/include'
    """
    abs_path = path if os.path.isabs(path) else os.path.join(base_dir, path)
    abs_path = os.path.normpath(abs_path)

    rel_path = relative_to_root(abs_path, project_root)
    if rel_path is not None:
        return rel_path

    return to_unix_path(abs_path)
