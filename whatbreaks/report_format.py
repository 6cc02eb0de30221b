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
"""Shared building blocks for the text reports printed by the whatBreaks tools."""

from typing import Iterable, Optional, TextIO, Tuple

from .color_utils import Colors, colored
from .graph_types import RiskLevel

# Risk level -> (color attribute, style attribute) on Colors
_RISK_STYLES = {
    RiskLevel.HIGH: ("RED", "BRIGHT"),
    RiskLevel.MEDIUM: ("YELLOW", "NORMAL"),
    RiskLevel.LOW: ("GREEN", "NORMAL"),
}


def get_risk_color(level: RiskLevel) -> Tuple[str, str]:
    """Get color and style for a risk level.

    Looked up at call time so that disabled colors yield empty codes.

    Args:
        level: Risk level

    Returns:
        Tuple of (color, style)
    """
    color_attr, style_attr = _RISK_STYLES[level]
    return getattr(Colors, color_attr), getattr(Colors, style_attr)


def risk_badge(level: RiskLevel) -> str:
    """Format a risk level as a colored ``[LEVEL]`` badge."""
    color, style = get_risk_color(level)
    return colored(f"[{level.value.upper()}]", color, style)


def print_section(title: str, file: Optional[TextIO] = None) -> None:
    """Print a bright cyan section heading."""
    print(colored(f"\n  {title}\n", Colors.CYAN, Colors.BRIGHT), file=file)


def print_placeholder(text: str, file: Optional[TextIO] = None) -> None:
    """Print a dimmed ``(text)`` line for an empty section."""
    print(f"  {colored(f'({text})', Colors.DIM)}", file=file)


def format_path(node_ids: Iterable[str]) -> str:
    """Join node ids into an arrow-separated path such as a cycle."""
    return " → ".join(node_ids)
