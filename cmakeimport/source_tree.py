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

"""Source file classification and the virtual folder tree.

The virtual tree groups source files by the directories in their (project
relative) paths. It is built from path strings only and never looks at the
file system.
"""

import os
import logging
import posixpath
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Sequence

from cmakeimport.constants import VIRTUAL_ROOT_NAME

logger = logging.getLogger(__name__)

# Matched exactly: '.s' is plain assembly, '.S' is preprocessed assembly
CASE_SENSITIVE_SOURCE_EXTENSIONS = (".s", ".S")
# Matched after lower-casing
SOURCE_EXTENSIONS = (".c", ".cc", ".cpp", ".cxx", ".c++", ".asm")
HEADER_EXTENSIONS = (".h", ".hh", ".hpp", ".hxx", ".inc")


def is_compilable_source(file_path: str) -> bool:
    """Check if a file is a compilable C/C++/assembly source file.

    Headers are never compilable, even when a compile database lists them as
    compiler input.

    Args:
        file_path: Path to the file

    Returns:
        True for .c/.cc/.cpp/.cxx/.c++/.asm (any case) and .s/.S files
    """
    ext = os.path.splitext(file_path)[1]
    if not ext:
        return False
    if ext in CASE_SENSITIVE_SOURCE_EXTENSIONS:
        return True
    if ext.lower() in HEADER_EXTENSIONS:
        return False
    return ext.lower() in SOURCE_EXTENSIONS


@dataclass
class VirtualFile:
    """Leaf of the virtual tree.

    Attributes:
        path: Project relative (or normalized absolute) path of the source file
    """

    path: str


@dataclass
class VirtualFolder:
    """Folder node of the virtual tree.

    Attributes:
        name: Single path segment (VIRTUAL_ROOT_NAME for the root)
        files: Files whose directory resolves exactly to this folder
        folders: Child folders in order of first appearance
    """

    name: str
    files: List[VirtualFile] = field(default_factory=list)
    folders: List["VirtualFolder"] = field(default_factory=list)

    def get_or_create_folder(self, name: str) -> "VirtualFolder":
        """Return the child folder with this exact name, creating it if absent."""
        for folder in self.folders:
            if folder.name == name:
                return folder
        folder = VirtualFolder(name=name)
        self.folders.append(folder)
        return folder

    def iter_files(self) -> Iterator[VirtualFile]:
        """Yield all files of this folder and its descendants, depth first."""
        yield from self.files
        for folder in self.folders:
            yield from folder.iter_files()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "name": self.name,
            "files": [{"path": f.path} for f in self.files],
            "folders": [folder.to_dict() for folder in self.folders],
        }


def group_by_directory(source_files: Sequence[str]) -> "OrderedDict[str, List[str]]":
    """Group file paths by their directory ('' for root level files).

    Returns:
        Ordered mapping of directory -> files, in order of first appearance
    """
    dir_map: "OrderedDict[str, List[str]]" = OrderedDict()

    for file_path in source_files:
        directory = posixpath.dirname(file_path.replace("\\", "/"))
        if directory == ".":
            directory = ""
        dir_map.setdefault(directory, []).append(file_path)

    return dir_map


def folder_segments(directory: str) -> List[str]:
    """Split a directory into virtual folder names.

    An absolute directory keeps '/' as its first segment so files outside the
    project root never share a folder with root-relative ones. Drive letters
    ('C:') are already a segment of their own.
    """
    parts = [p for p in directory.split("/") if p]
    if directory.startswith("/"):
        parts.insert(0, "/")
    return parts


def build_virtual_tree(source_files: Sequence[str], root_name: str = VIRTUAL_ROOT_NAME) -> VirtualFolder:
    """Build a virtual folder structure from source file paths.

    Args:
        source_files: Deduplicated source file paths
        root_name: Name of the synthetic root folder

    Returns:
        Root VirtualFolder containing every file exactly once

    Example:
        ["main.c", "src/a.c", "src/drv/b.c"] gives
        <virtual_root>: main.c
          src: src/a.c
            drv: src/drv/b.c
    """
    root = VirtualFolder(name=root_name)

    for directory, files in group_by_directory(source_files).items():
        folder = root
        for part in folder_segments(directory):
            folder = folder.get_or_create_folder(part)

        for file_path in files:
            folder.files.append(VirtualFile(path=file_path))

    logger.debug("Built virtual tree with %d files in %d top-level folders", len(source_files), len(root.folders))
    return root
