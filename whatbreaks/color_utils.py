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
"""Terminal color handling for the whatBreaks tools.

Colors are resolved through the ``Colors`` attributes at print time, so a
single configure_color() call at startup switches every report to plain text.
"""

import sys
import os
import logging
from typing import Optional, TextIO

from colorama import Fore, Style, init

logger = logging.getLogger(__name__)

# Keep escape codes when piped; configure_color() decides whether to emit them
init(autoreset=False, strip=False)


class Colors:
    """Escape codes used by the reports. Empty strings once disabled."""

    RED = Fore.RED
    GREEN = Fore.GREEN
    YELLOW = Fore.YELLOW
    MAGENTA = Fore.MAGENTA
    CYAN = Fore.CYAN

    RESET = Style.RESET_ALL
    BRIGHT = Style.BRIGHT
    DIM = Style.DIM
    NORMAL = Style.NORMAL

    @classmethod
    def disable(cls) -> None:
        for attr in ("RED", "GREEN", "YELLOW", "MAGENTA", "CYAN", "RESET", "BRIGHT", "DIM", "NORMAL"):
            setattr(cls, attr, "")


def colored(text: str, color: str = "", style: str = "") -> str:
    """Wrap text in a style and color, resetting afterwards.

    Args:
        text: Text to colorize
        color: Color code (e.g., Colors.RED)
        style: Style code (e.g., Colors.BRIGHT)

    Returns:
        The text unchanged when no code is given
    """
    if not color and not style:
        return text
    return f"{style}{color}{text}{Colors.RESET}"


def _print_message(text: str, label: str, color: str, file: TextIO, prefix: bool) -> None:
    message = f"{label}: {text}" if prefix else text
    print(colored(message, color), file=file)


def print_success(text: str, file: Optional[TextIO] = None, prefix: bool = False) -> None:
    """Print a green confirmation line to stdout."""
    _print_message(text, "Success", Colors.GREEN, file or sys.stdout, prefix)


def print_error(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print a red "Error:" line to stderr."""
    _print_message(text, "Error", Colors.RED, file or sys.stderr, prefix)


def print_warning(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Print a yellow "Warning:" line to stderr.

    Warnings go to stderr so that ``--json`` output on stdout stays parseable.
    """
    _print_message(text, "Warning", Colors.YELLOW, file or sys.stderr, prefix)


def should_use_color(force_color: bool = False, no_color: bool = False) -> bool:
    """Decide whether reports should be colored.

    ``no_color`` wins over ``force_color``. Otherwise color is used only on a
    TTY and only while the NO_COLOR environment variable is unset.

    Args:
        force_color: Force color output regardless of terminal
        no_color: Disable color output

    Returns:
        True if color should be used
    """
    if no_color:
        return False
    if force_color:
        return True
    return sys.stdout.isatty() and not os.environ.get("NO_COLOR")


def configure_color(force_color: bool = False, no_color: bool = False) -> None:
    """Disable colors globally unless the terminal and flags allow them."""
    if not should_use_color(force_color=force_color, no_color=no_color):
        logger.debug("Color output disabled")
        Colors.disable()
