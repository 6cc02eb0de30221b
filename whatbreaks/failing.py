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
"""Root-cause ranking for a failing test.

Algorithm:
    1. Start from the failing test file
    2. Walk its imports transitively (breadth-first)
    3. Sort by depth, deepest first: the most transitively depended-upon file
       is the most likely shared root cause
    4. Find other tests sharing any of the same dependencies
"""

import logging
from typing import Dict, List, Set

from .graph_index import GraphIndex
from .graph_types import FailingResult, ImpactNode
from .traversal import breadth_first

logger = logging.getLogger(__name__)


def _find_other_tests_at_risk(index: GraphIndex, test_id: str, dependencies: List[str]) -> List[str]:
    """Collect tests other than ``test_id`` that share a dependency with it.

    Args:
        index: Graph index
        test_id: The failing test
        dependencies: Every node the failing test reaches (depth >= 1)

    Returns:
        Test ids, each listed once
    """
    dependency_set: Set[str] = set(dependencies)
    at_risk: Dict[str, None] = {}

    for dep_id in dependencies:
        for covering_test in index.get_tests_covering(dep_id):
            if covering_test != test_id:
                at_risk[covering_test] = None

        for importer_id in index.get_importers(dep_id):
            if importer_id != test_id and index.is_test(importer_id):
                at_risk[importer_id] = None

    # Tests whose direct imports touch the dependency set
    for other_test in index.get_all_test_nodes():
        if other_test.id == test_id or other_test.id in at_risk:
            continue
        if any(dep in dependency_set for dep in index.get_imports(other_test.id)):
            at_risk[other_test.id] = None

    return list(at_risk)


def analyze_failing_test(index: GraphIndex, test_id: str) -> FailingResult:
    """Analyze a failing test to determine the root-cause investigation order.

    Args:
        index: Graph index
        test_id: The failing test file

    Returns:
        FailingResult; all lists empty when the test is not in the graph
    """
    test_node = index.get_node(test_id)
    if test_node is None:
        logger.debug("Failing test %s not in graph", test_id)
        return FailingResult(test=test_id)

    chain = [ImpactNode(node_id=test_id, depth=0, layer=test_node.layer)]
    for node_id, depth in breadth_first(test_id, index.get_imports):
        node = index.get_node(node_id)
        chain.append(ImpactNode(node_id=node_id, depth=depth, layer=node.layer if node else None))

    directly_tests = [entry.node_id for entry in chain if entry.depth == 1]

    # Stable sort keeps BFS discovery order among equal depths
    dependencies = [entry for entry in chain if entry.depth >= 1]
    deep_dependencies = [entry.node_id for entry in sorted(dependencies, key=lambda entry: entry.depth, reverse=True)]

    other_tests = _find_other_tests_at_risk(index, test_id, [entry.node_id for entry in dependencies])

    logger.debug("Failing test %s: %s dependencies, %s other tests at risk", test_id, len(deep_dependencies), len(other_tests))

    return FailingResult(
        test=test_id,
        chain=chain,
        directly_tests=directly_tests,
        deep_dependencies=deep_dependencies,
        files_to_investigate=list(deep_dependencies),
        other_tests_at_risk=other_tests,
    )
