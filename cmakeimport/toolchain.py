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

"""Toolchain family detection from the compiler executable name."""

import enum
import logging
import ntpath
from typing import Callable, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class ProjectType(str, enum.Enum):
    """Toolchain family of a firmware project.

    String enum so values serialize directly to JSON. ANY_GCC is the fallback
    for compilers that match no specific family.
    """

    ARM = "ARM"
    RISC_V = "RISC-V"
    C51 = "C51"
    MIPS = "MIPS"
    ANY_GCC = "ANY-GCC"


DEFAULT_PROJECT_TYPE = ProjectType.ANY_GCC

CompilerRule = Tuple[Callable[[str], bool], ProjectType]


def _name_contains(*patterns: str) -> Callable[[str], bool]:
    """Build a predicate matching a lower-cased compiler name containing any pattern."""

    def predicate(compiler_name: str) -> bool:
        return any(pattern in compiler_name for pattern in patterns)

    return predicate


# Ordered, first match wins
COMPILER_RULES: List[CompilerRule] = [
    (_name_contains("arm-none-eabi", "arm-elf", "armcc", "armclang"), ProjectType.ARM),
    (_name_contains("riscv", "rv32", "rv64"), ProjectType.RISC_V),
    (_name_contains("sdcc", "c51", "stm8"), ProjectType.C51),
    (_name_contains("mips"), ProjectType.MIPS),
]


def compiler_basename(compiler_path: str) -> str:
    """Return the file name of a compiler path with either separator style.

    ntpath.basename splits on both '/' and '\\', so Windows paths recorded in a
    database produced on another machine are handled too.
    """
    return ntpath.basename(compiler_path)


def detect_project_type(compiler_path: str, rules: Optional[Sequence[CompilerRule]] = None) -> ProjectType:
    """Detect the project type based on the compiler executable name.

    Args:
        compiler_path: First argument of a compile command
        rules: Rule table to use instead of COMPILER_RULES

    Returns:
        ProjectType of the first matching rule, or ANY_GCC

    Examples:
        >>> detect_project_type("/opt/gcc/bin/arm-none-eabi-gcc")
        <ProjectType.ARM: 'ARM'>
        >>> detect_project_type("riscv64-unknown-elf-gcc").value
        'RISC-V'
    """
    compiler_name = compiler_basename(compiler_path).lower()

    for predicate, project_type in rules if rules is not None else COMPILER_RULES:
        if predicate(compiler_name):
            logger.debug("Compiler '%s' classified as %s", compiler_name, project_type.value)
            return project_type

    logger.debug("Compiler '%s' matched no rule, using %s", compiler_name, DEFAULT_PROJECT_TYPE.value)
    return DEFAULT_PROJECT_TYPE
