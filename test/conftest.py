#!/usr/bin/env python3
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

"""Shared pytest fixtures for cmake-import tests.

Project layout fixtures build a small firmware project on disk:

    <temp>/fw/
        CMakeLists.txt
        Core/Src/main.c, Core/Src/stm32f4xx_it.c
        Core/Inc/main.h
        startup_stm32f407xx.s
        build/compile_commands.json

Fixture Scopes:
- function: Default, recreated for each test
"""

import os
import sys
import json
import tempfile
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Generator, List

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from cmakeimport.diagnostics import CollectingSink


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="cmakeimport_test_")
    yield os.path.realpath(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def collecting_sink() -> CollectingSink:
    """Diagnostic sink that records every message."""
    return CollectingSink()


@pytest.fixture
def firmware_root(temp_dir: str) -> str:
    """Create a CMake firmware project tree with a build directory.

    Scope: function
    Dependencies: temp_dir
    """
    root = Path(temp_dir) / "fw"
    (root / "Core" / "Src").mkdir(parents=True)
    (root / "Core" / "Inc").mkdir(parents=True)
    (root / "build").mkdir()

    (root / "CMakeLists.txt").write_text("cmake_minimum_required(VERSION 3.22)\nproject(fw C ASM)\n")
    (root / "Core" / "Src" / "main.c").write_text("int main(void) { return 0; }\n")
    (root / "Core" / "Src" / "stm32f4xx_it.c").write_text("void SysTick_Handler(void) {}\n")
    (root / "Core" / "Inc" / "main.h").write_text("#pragma once\n")
    (root / "startup_stm32f407xx.s").write_text("  .syntax unified\n")

    return str(root)


@pytest.fixture
def write_compile_commands(firmware_root: str) -> Callable[[List[Dict[str, Any]]], str]:
    """Return a helper writing entries to <firmware_root>/build/compile_commands.json.

    Scope: function
    Dependencies: firmware_root
    """

    def _write(entries: List[Dict[str, Any]]) -> str:
        path = Path(firmware_root) / "build" / "compile_commands.json"
        path.write_text(json.dumps(entries, indent=2))
        return str(path)

    return _write


@pytest.fixture
def stm32_compile_commands(firmware_root: str, write_compile_commands: Callable[[List[Dict[str, Any]]], str]) -> str:
    """A realistic compile_commands.json for an STM32 project built with arm-none-eabi-gcc.

    Scope: function
    Dependencies: firmware_root, write_compile_commands
    """
    build_dir = os.path.join(firmware_root, "build")
    gcc = "/opt/gcc-arm/bin/arm-none-eabi-gcc"
    common = "-DUSE_HAL_DRIVER -DSTM32F407xx -I../Core/Inc -isystem /opt/gcc-arm/arm-none-eabi/include -mcpu=cortex-m4"

    entries = [
        {
            "directory": build_dir,
            "command": f"{gcc} {common} -O0 -o CMakeFiles/fw.dir/Core/Src/main.c.obj -c {firmware_root}/Core/Src/main.c",
            "file": f"{firmware_root}/Core/Src/main.c",
        },
        {
            "directory": build_dir,
            "command": f"{gcc} {common} -DDEBUG=1 -o CMakeFiles/fw.dir/Core/Src/stm32f4xx_it.c.obj -c {firmware_root}/Core/Src/stm32f4xx_it.c",
            "file": f"{firmware_root}/Core/Src/stm32f4xx_it.c",
        },
        {
            "directory": build_dir,
            "arguments": [gcc, "-x", "assembler-with-cpp", "-DUSE_HAL_DRIVER", "-o", "startup.s.obj", "-c", f"{firmware_root}/startup_stm32f407xx.s"],
            "file": f"{firmware_root}/startup_stm32f407xx.s",
        },
    ]
    return write_compile_commands(entries)
