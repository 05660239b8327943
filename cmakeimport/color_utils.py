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

"""Colored terminal output for cmake-import reports, built on colorama.

Message helpers are driven by MESSAGE_LEVELS so that every level has one place
defining its color, prefix and default stream. Colors.disable() blanks all codes
for --no-color, NO_COLOR and piped output.
"""

import os
import sys
from typing import Dict, Optional, TextIO, Tuple

from colorama import Fore, Style, init

# Keep escape codes even when stdout is piped; callers disable colors explicitly
init(autoreset=False, strip=False)


class Colors:
    """Color codes for terminal output."""

    RED = Fore.RED
    GREEN = Fore.GREEN
    YELLOW = Fore.YELLOW
    BLUE = Fore.BLUE
    MAGENTA = Fore.MAGENTA
    CYAN = Fore.CYAN
    WHITE = Fore.WHITE

    RESET = Style.RESET_ALL
    BRIGHT = Style.BRIGHT
    DIM = Style.DIM
    NORMAL = Style.NORMAL

    @staticmethod
    def disable() -> None:
        """Disable all color output."""
        for attr in dir(Colors):
            if not attr.startswith("_") and attr != "disable":
                setattr(Colors, attr, "")


# level -> (Colors attribute, prefix, default stream). Attributes are looked up at
# print time so Colors.disable() takes effect.
MESSAGE_LEVELS: Dict[str, Tuple[str, str, str]] = {
    "success": ("GREEN", "Success: ", "stdout"),
    "error": ("RED", "Error: ", "stderr"),
    "warning": ("YELLOW", "Warning: ", "stderr"),
    "info": ("CYAN", "", "stdout"),
}


def colored(text: str, color: str = "", style: str = "") -> str:
    """Wrap text in style and color codes; an empty color leaves it untouched."""
    return f"{style}{color}{text}{Colors.RESET}" if color else text


def print_colored(text: str, color: str = "", style: str = "", file: Optional[TextIO] = None) -> None:
    print(colored(text, color, style), file=file if file is not None else sys.stdout)


def print_message(level: str, text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print text with the color, prefix and stream registered for level.

    Args:
        level: Key of MESSAGE_LEVELS
        text: Message to print
        file: Target stream; defaults to the level's stream
        prefix: Prepend the level prefix (e.g. "Error: ")

    Raises:
        KeyError: If level is unknown
    """
    color_attr, label, stream = MESSAGE_LEVELS[level]
    message = f"{label}{text}" if prefix else text
    print_colored(message, getattr(Colors, color_attr), file=file if file is not None else getattr(sys, stream))


def print_success(text: str, file: Optional[TextIO] = None, prefix: bool = False) -> None:
    print_message("success", text, file, prefix)


def print_error(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print an error in red, to stderr unless file is given."""
    print_message("error", text, file, prefix)


def print_warning(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    print_message("warning", text, file, prefix)


def print_info(text: str, file: Optional[TextIO] = None) -> None:
    print_message("info", text, file, prefix=False)


def print_section(title: str, file: Optional[TextIO] = None) -> None:
    """Print a bright section banner such as '=== CMake Project ==='."""
    print_colored(f"\n=== {title} ===", Colors.CYAN, Colors.BRIGHT, file=file)


def should_use_color(force_color: bool = False, no_color: bool = False) -> bool:
    """Decide whether report output gets color codes.

    --no-color wins over force_color. Otherwise color needs a terminal on stdout
    and an unset NO_COLOR variable (see no-color.org).
    """
    if no_color:
        return False
    if force_color:
        return True
    return sys.stdout.isatty() and not os.environ.get("NO_COLOR")
