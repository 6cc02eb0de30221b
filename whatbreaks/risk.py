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
"""Codebase health analysis: hotspots, fragile chains and circular dependencies.

- Hotspots: source files with the highest fan-in (most importers)
- Fragile chains: tests with the deepest import chains
- Circular dependencies: detected with a three-color depth-first search
"""

import logging
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .constants import (
    HIGH_RISK_THRESHOLD,
    HIGHLY_FRAGILE_DEPTH,
    MAX_CIRCULAR_DEPS,
    MAX_HIGH_RISK_HOTSPOTS,
    MEDIUM_RISK_THRESHOLD,
    MODERATELY_FRAGILE_DEPTH,
)
from .graph_index import GraphIndex
from .graph_types import CircularDep, FragileChain, HealthReport, HealthSummary, HotspotFile, NodeType, RiskLevel
from .traversal import breadth_first

logger = logging.getLogger(__name__)

# DFS colors
WHITE = 0  # not yet visited
GRAY = 1  # on the current DFS path
BLACK = 2  # fully processed


def compute_hotspot_risk(fan_in: int, file_id: str) -> Tuple[RiskLevel, str]:
    """Bucket a file's fan-in into a risk level.

    Args:
        fan_in: Number of importers
        file_id: The file (named in the reason)

    Returns:
        Tuple of (risk level, reason)
    """
    if fan_in >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH, f"{file_id} is imported by {fan_in} files - extremely high blast radius"

    if fan_in >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM, f"{file_id} is imported by {fan_in} files - moderate blast radius"

    return RiskLevel.LOW, f"{file_id} is imported by {fan_in} files"


def find_hotspots(index: GraphIndex) -> List[HotspotFile]:
    """Find source files with at least one importer, highest fan-in first.

    Args:
        index: Graph index

    Returns:
        List of HotspotFile sorted by fan-in descending
    """
    hotspots: List[HotspotFile] = []

    for node in index.get_all_source_nodes():
        if node.type is not NodeType.SOURCE:
            continue

        fan_in = len(index.get_importers(node.id))
        if fan_in == 0:
            continue

        risk_level, reason = compute_hotspot_risk(fan_in, node.id)
        hotspots.append(
            HotspotFile(
                file=node.id,
                fan_in=fan_in,
                tests_at_risk=len(index.get_tests_covering(node.id)),
                risk_level=risk_level,
                reason=reason,
            )
        )

    hotspots.sort(key=lambda hotspot: hotspot.fan_in, reverse=True)
    return hotspots


def measure_chain_depth(index: GraphIndex, start_id: str) -> Tuple[int, str]:
    """Measure the deepest import chain starting at a node.

    Args:
        index: Graph index
        start_id: Node to start from

    Returns:
        Tuple of (max depth, first node found at that depth); (0, start_id) when nothing is imported
    """
    max_depth = 0
    deepest_node = start_id

    for node_id, depth in breadth_first(start_id, index.get_imports):
        if depth > max_depth:
            max_depth = depth
            deepest_node = node_id

    return max_depth, deepest_node


def describe_chain(test_id: str, depth: int) -> str:
    """Human-readable fragility text for a chain depth."""
    if depth >= HIGHLY_FRAGILE_DEPTH:
        return f"{test_id} has a {depth}-deep dependency chain - highly fragile"
    if depth >= MODERATELY_FRAGILE_DEPTH:
        return f"{test_id} has a {depth}-deep dependency chain - moderately fragile"
    return f"{test_id} has a {depth}-deep dependency chain"


def find_fragile_chains(index: GraphIndex) -> List[FragileChain]:
    """Find the deepest import chain of every test, deepest first.

    Args:
        index: Graph index

    Returns:
        List of FragileChain sorted by chain depth descending
    """
    chains: List[FragileChain] = []

    for test_node in index.get_all_test_nodes():
        max_depth, deepest_node = measure_chain_depth(index, test_node.id)
        if max_depth <= 0:
            continue

        chains.append(
            FragileChain(
                test=test_node.id,
                chain_depth=max_depth,
                deepest_dep=deepest_node,
                reason=describe_chain(test_node.id, max_depth),
            )
        )

    chains.sort(key=lambda chain: chain.chain_depth, reverse=True)
    return chains


def reconstruct_cycle(current: str, cycle_start: str, parent: Dict[str, Optional[str]]) -> List[str]:
    """Rebuild a cycle from DFS parent pointers.

    Walks back from ``current`` until ``cycle_start`` is reached.

    Args:
        current: Node whose import closed the cycle
        cycle_start: Gray node that was re-entered
        parent: DFS parent pointers

    Returns:
        cycle_start -> ... -> current -> cycle_start
    """
    path: List[str] = []
    node: Optional[str] = current
    while node is not None and node != cycle_start:
        path.append(node)
        node = parent.get(node)

    path.reverse()
    return [cycle_start] + path + [cycle_start]


def normalize_cycle_key(cycle: List[str]) -> str:
    """Rotation-independent key for a closed cycle.

    The repeated closing id is dropped and the cycle rotated so that its
    lexicographically smallest id comes first.

    Args:
        cycle: Closed cycle (first id repeated at the end)

    Returns:
        Dedup key, "" for an empty cycle
    """
    nodes = cycle[:-1]
    if not nodes:
        return ""

    min_idx = nodes.index(min(nodes))
    rotated = nodes[min_idx:] + nodes[:min_idx]
    return " -> ".join(rotated)


def _iter_cycles(index: GraphIndex) -> Iterator[List[str]]:
    """Yield every cycle closed by a gray-node hit during a three-color DFS.

    The DFS uses an explicit stack; neighbors are visited in adjacency order,
    exactly as the recursive formulation would.
    """
    color: Dict[str, int] = {node_id: WHITE for node_id in index.get_all_node_ids()}
    parent: Dict[str, Optional[str]] = {}

    for root_id in index.get_all_node_ids():
        if color[root_id] != WHITE:
            continue

        parent[root_id] = None
        color[root_id] = GRAY
        stack = [(root_id, iter(index.get_imports(root_id)))]

        while stack:
            node_id, deps = stack[-1]
            for dep_id in deps:
                dep_color = color.get(dep_id)
                if dep_color == GRAY:
                    yield reconstruct_cycle(node_id, dep_id, parent)
                elif dep_color == WHITE:
                    parent[dep_id] = node_id
                    color[dep_id] = GRAY
                    stack.append((dep_id, iter(index.get_imports(dep_id))))
                    break
            else:
                color[node_id] = BLACK
                stack.pop()


def detect_circular_deps(index: GraphIndex) -> List[CircularDep]:
    """Detect circular dependencies, reporting each cycle once.

    Cycles that are rotations of each other share a key and are reported once.

    Args:
        index: Graph index

    Returns:
        List of CircularDep in discovery order
    """
    found: Set[str] = set()
    cycles: List[CircularDep] = []

    for cycle in _iter_cycles(index):
        key = normalize_cycle_key(cycle)
        if key in found:
            continue
        found.add(key)
        cycles.append(CircularDep(cycle=cycle))

    if cycles:
        logger.debug("Detected %s circular dependencies", len(cycles))
    return cycles


def analyze_risk(index: GraphIndex) -> HealthReport:
    """Analyze the overall health of the dependency graph.

    Args:
        index: Graph index

    Returns:
        HealthReport with counts, hotspots, fragile chains and circular dependencies
    """
    return HealthReport(
        source_files=len(index.get_all_source_nodes()),
        test_files=len(index.get_all_test_nodes()),
        edges=len(index.graph.edges),
        hotspots=find_hotspots(index),
        fragile_chains=find_fragile_chains(index),
        circular_deps=detect_circular_deps(index),
    )


def summarize_health(report: HealthReport) -> HealthSummary:
    """Derive an overall verdict from a health report.

    High when there are more than MAX_HIGH_RISK_HOTSPOTS high-risk hotspots or
    more than MAX_CIRCULAR_DEPS cycles, medium when there is at least one of
    either, low otherwise.

    Args:
        report: Health report

    Returns:
        HealthSummary
    """
    high_risk = sum(1 for hotspot in report.hotspots if hotspot.risk_level is RiskLevel.HIGH)
    circular = len(report.circular_deps)

    if high_risk > MAX_HIGH_RISK_HOTSPOTS or circular > MAX_CIRCULAR_DEPS:
        overall = RiskLevel.HIGH
    elif high_risk > 0 or circular > 0:
        overall = RiskLevel.MEDIUM
    else:
        overall = RiskLevel.LOW

    ratio = round(100.0 * report.test_files / report.source_files, 1) if report.source_files > 0 else 0.0

    return HealthSummary(overall_risk=overall, high_risk_hotspots=high_risk, circular_count=circular, test_source_ratio=ratio)
