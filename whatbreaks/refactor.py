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
"""Blast-radius analysis for refactoring a single file.

Algorithm:
    1. Start from the file being changed
    2. Walk importers transitively to find direct and transitive dependents
    3. Collect every test covering an affected file
    4. Build a suggested test command
    5. Bucket the number of affected files into a risk level
"""

import re
import logging
from typing import List, Tuple

from .constants import DEFAULT_TEST_RUNNER, E2E_MARKERS, E2E_TEST_RUNNER, HIGH_RISK_THRESHOLD, MEDIUM_RISK_THRESHOLD
from .graph_index import GraphIndex
from .graph_types import RefactorResult, RiskLevel
from .traversal import breadth_first

logger = logging.getLogger(__name__)

RE_TEST_SUFFIX = re.compile(r"\.(test|spec)\.(ts|js|tsx|jsx)$")
RE_EXTENSION = re.compile(r"\.(ts|js|tsx|jsx)$")


def base_test_name(test_id: str) -> str:
    """Strip the directory and any test suffix/extension from a test id.

    Args:
        test_id: Path-like test id (e.g. "tests/unit/todo.test.ts")

    Returns:
        Base name (e.g. "todo")
    """
    filename = test_id.split("/")[-1]
    return RE_EXTENSION.sub("", RE_TEST_SUFFIX.sub("", filename))


def build_test_command(test_ids: List[str]) -> str:
    """Build a suggested runner invocation for the given tests.

    The end-to-end runner is chosen when any test id contains an e2e marker,
    otherwise the default unit/integration runner.

    Args:
        test_ids: Tests to run

    Returns:
        Command string, or "" when there is nothing to run
    """
    if not test_ids:
        return ""

    base_names = [base_test_name(test_id) for test_id in test_ids]
    has_e2e = any(marker in test_id for test_id in test_ids for marker in E2E_MARKERS)
    runner = E2E_TEST_RUNNER if has_e2e else DEFAULT_TEST_RUNNER

    return f"{runner} {' '.join(base_names)}"


def compute_refactor_risk(affected_count: int, file_id: str) -> Tuple[RiskLevel, str]:
    """Bucket the number of transitively affected files into a risk level.

    Args:
        affected_count: Number of transitive dependents
        file_id: The changed file (named in the reason)

    Returns:
        Tuple of (risk level, reason)
    """
    if affected_count >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH, f"{file_id} has {affected_count} transitive dependents - changes here ripple widely"

    if affected_count >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM, f"{file_id} has {affected_count} transitive dependents across the codebase"

    return RiskLevel.LOW, f"{file_id} has limited impact with {affected_count} transitive dependents"


def analyze_refactor_impact(index: GraphIndex, file_id: str) -> RefactorResult:
    """Analyze the blast radius of refactoring a file.

    Depth-1 importers appear in both direct_importers and transitive_affected.

    Args:
        index: Graph index
        file_id: The file being changed

    Returns:
        RefactorResult; zeroed with a "not found" reason when the file is not in the graph
    """
    node = index.get_node(file_id)
    if node is None:
        logger.debug("Refactor target %s not in graph", file_id)
        return RefactorResult(file=file_id, risk_level=RiskLevel.LOW, risk_reason="File not found in graph")

    direct_importers: List[str] = []
    transitive_affected: List[str] = []
    tests_to_run = dict.fromkeys(index.get_tests_covering(file_id))

    if node.is_test:
        tests_to_run[file_id] = None

    for importer_id, depth in breadth_first(file_id, index.get_importers):
        if depth == 1:
            direct_importers.append(importer_id)
        transitive_affected.append(importer_id)

        if index.is_test(importer_id):
            tests_to_run[importer_id] = None
        tests_to_run.update(dict.fromkeys(index.get_tests_covering(importer_id)))

    tests = list(tests_to_run)
    risk_level, risk_reason = compute_refactor_risk(len(transitive_affected), file_id)

    logger.debug("Refactor %s: %s affected files, %s tests, risk %s", file_id, len(transitive_affected), len(tests), risk_level.value)

    return RefactorResult(
        file=file_id,
        affected_files=len(transitive_affected),
        affected_tests=len(tests),
        direct_importers=direct_importers,
        transitive_affected=transitive_affected,
        tests_to_run=tests,
        suggested_test_command=build_test_command(tests),
        risk_level=risk_level,
        risk_reason=risk_reason,
    )
