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
"""Shared constants for whatBreaks tools.

This module provides centralized constants used across the graph engine and the
command-line tools to ensure consistency and make it easy to adjust thresholds
and defaults.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Graph Location
# =============================================================================

WHATBREAKS_DIR = ".whatbreaks"  # Directory holding the scanned graph
GRAPH_FILE_NAME = "graph.json"  # Graph snapshot written by the scanner
DEFAULT_GRAPH_PATH = f"{WHATBREAKS_DIR}/{GRAPH_FILE_NAME}"
GRAPH_JSON_INDENT = 2

# =============================================================================
# Visual Metrics Constants
# =============================================================================

VISUAL_LAYER_COUNT = 4  # Non-test nodes are bucketed into layers 0..3
TEST_LAYER_INDEX = -1  # layerIndex assigned to every test node
NODE_SIZE_BASE = 30  # Size of a node nobody imports
NODE_SIZE_SCALE = 12  # Growth per doubling of fan-in

# =============================================================================
# Risk Thresholds
# =============================================================================

# Refactor risk uses the transitive dependent count, hotspots use fan-in
HIGH_RISK_THRESHOLD = 20
MEDIUM_RISK_THRESHOLD = 5

# Fragile chain depth thresholds
HIGHLY_FRAGILE_DEPTH = 5
MODERATELY_FRAGILE_DEPTH = 3

# Overall health summary
MAX_HIGH_RISK_HOTSPOTS = 3  # More than this = overall high risk
MAX_CIRCULAR_DEPS = 2  # More than this = overall high risk

# =============================================================================
# File Clustering Constants
# =============================================================================

MIN_FILES_FOR_GROUPING = 8  # Below this number of non-test files, no grouping
MIN_GROUP_SIZE = 2  # Groups smaller than this are dropped
COUPLING_THRESHOLD = 0.4  # Minimum coupling score for a merge
FLAT_LAYOUT_RATIO = 0.5  # Share of files in one directory that counts as a flat layout
MIN_SUBGROUP_SIZE = 2  # Minimum members per directory for a subgroup
MIN_LABEL_LENGTH = 2

# Layer suffixes stripped from file names when naming a group
LAYER_SUFFIXES = [
    "Controller",
    "Service",
    "Model",
    "Repository",
    "Handler",
    "Ctrl",
    "Svc",
    "Repo",
    "Helper",
    "Utils",
    "Util",
    "Factory",
]

# Directories that never name a group
IGNORED_GROUP_DIRS = (".", "src")

# =============================================================================
# Test Runner Templates
# =============================================================================

E2E_MARKERS = ("e2e", "playwright")  # Substrings that select the e2e runner
E2E_TEST_RUNNER = "npx playwright test"
DEFAULT_TEST_RUNNER = "npx vitest"

# =============================================================================
# Display Limits
# =============================================================================

DEFAULT_TOP_N = 10  # Default number of hotspots / chains to show
REPORT_SEPARATOR_WIDTH = 84

# =============================================================================
# Exception Classes
# =============================================================================


class WhatBreaksError(Exception):
    """Base exception for all whatBreaks errors.

    All whatBreaks exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(WhatBreaksError):
    """Raised when input validation fails (arguments, paths, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class GraphLoadError(ValidationError):
    """Raised when the graph snapshot is missing or malformed."""


class ArgumentError(ValidationError):
    """Raised when command-line arguments are invalid."""


# Analysis/processing errors (EXIT_RUNTIME_ERROR)
class AnalysisError(WhatBreaksError):
    """Raised when analysis or processing operations fail."""


class UnknownAnalysisModeError(AnalysisError):
    """Raised when a result carries a mode no consumer knows how to handle."""
