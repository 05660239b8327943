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

"""Shared constants for the cmake-import tools.

This module provides centralized constants and the exception hierarchy used across
the compile database importer and its command line front end.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Build System Constants
# =============================================================================

COMPILE_COMMANDS_JSON = "compile_commands.json"  # Standard compilation database filename
CMAKE_LISTS_TXT = "CMakeLists.txt"  # Top-level build descriptor
CMAKE_FILES_DIR = "CMakeFiles"  # Generator metadata directory inside the build directory
TARGET_DIR_SUFFIX = ".dir"  # Per-target metadata directories (CMakeFiles/<target>.dir)
LINK_TXT = "link.txt"  # Link transcript written per target

# =============================================================================
# Linker Script Constants
# =============================================================================

LINKER_SCRIPT_EXTENSIONS = (".ld", ".lds")
FLASH_SCRIPT_MARKER = "FLASH"  # Preferred when several root scripts exist (STM32CubeMX layout)

# Variables that expand to the project source directory in CMakeLists.txt
SOURCE_DIR_VARIABLES = ("CMAKE_SOURCE_DIR", "CMAKE_CURRENT_SOURCE_DIR", "PROJECT_SOURCE_DIR")

# =============================================================================
# Project Model Constants
# =============================================================================

VIRTUAL_ROOT_NAME = "<virtual_root>"  # Synthetic name of the virtual tree root

# =============================================================================
# Diagnostic Channels
# =============================================================================

CHANNEL_LOG = "log"
CHANNEL_ERROR = "error"

# =============================================================================
# Export Constants
# =============================================================================

SUPPORTED_GRAPH_FORMATS = [".graphml", ".gexf", ".json"]

# =============================================================================
# Exception Classes
# =============================================================================


class CmakeImportError(Exception):
    """Base exception for all cmake-import errors.

    All exceptions carry an exit_code attribute that indicates what exit code
    the program should use when this error is caught at the main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(CmakeImportError):
    """Raised when input validation fails (arguments, paths, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class CompileDatabaseError(ValidationError):
    """Raised when compile_commands.json cannot be used."""


class CompileDatabaseNotFoundError(CompileDatabaseError):
    """Raised when compile_commands.json does not exist."""


class CompileDatabaseFormatError(CompileDatabaseError):
    """Raised when compile_commands.json is not a non-empty array of entries."""


class ExportError(CmakeImportError):
    """Raised when writing an export file fails."""
