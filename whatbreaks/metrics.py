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
"""Structural and visual metrics for graph nodes using NetworkX.

compute_visual_metrics() annotates every node in place with:
    - fan_in: number of incoming import edges (tests count as importers)
    - depth: longest dependency path, computed on the SCC condensation of the
      non-test import graph so that cycles collapse to a single step
    - layer_index: depth bucketed into VISUAL_LAYER_COUNT layers, -1 for tests
    - size: visual weight, round(30 + log2(fan_in + 1) * 12)
"""

import math
import logging
from typing import Any, Dict, List

import networkx as nx

from .constants import NODE_SIZE_BASE, NODE_SIZE_SCALE, TEST_LAYER_INDEX, VISUAL_LAYER_COUNT
from .graph_types import EdgeType, Graph, NodeType

logger = logging.getLogger(__name__)


def build_import_graph(graph: Graph) -> "nx.DiGraph[Any]":
    """Build a NetworkX directed graph of imports between non-test nodes.

    Args:
        graph: Graph snapshot

    Returns:
        NetworkX DiGraph with an edge A -> B when A imports B
    """
    source_ids = [node.id for node in graph.nodes if node.type is not NodeType.TEST]
    source_set = set(source_ids)

    G: nx.DiGraph[str] = nx.DiGraph()
    G.add_nodes_from(source_ids)

    edges = [
        (edge.source, edge.target)
        for edge in graph.edges
        if edge.type is EdgeType.IMPORT and edge.source in source_set and edge.target in source_set
    ]
    G.add_edges_from(edges)

    logger.debug("Built import graph with %s nodes and %s edges", G.number_of_nodes(), G.number_of_edges())
    return G


def compute_fan_in(graph: Graph) -> Dict[str, int]:
    """Count incoming import edges per node.

    Args:
        graph: Graph snapshot

    Returns:
        Dictionary mapping node id -> fan-in
    """
    fan_in = {node.id: 0 for node in graph.nodes}
    for edge in graph.edges:
        if edge.type is EdgeType.IMPORT and edge.target in fan_in:
            fan_in[edge.target] += 1
    return fan_in


def compute_depths(graph: Graph) -> Dict[str, int]:
    """Compute the longest dependency path length for each node.

    Cycles are collapsed with strongly connected components; each component's
    depth is one more than the deepest component it imports, or 0 when it
    imports nothing. Tests always get depth 0.

    Args:
        graph: Graph snapshot

    Returns:
        Dictionary mapping node id -> depth
    """
    G = build_import_graph(graph)
    condensed = nx.condensation(G)
    mapping: Dict[str, int] = condensed.graph["mapping"]

    # Reverse topological order visits every child component before its parent
    scc_depth: Dict[int, int] = {}
    for scc in reversed(list(nx.topological_sort(condensed))):
        child_depths = [scc_depth.get(child, 0) for child in condensed.successors(scc)]
        scc_depth[scc] = max(child_depths) + 1 if child_depths else 0

    depths: Dict[str, int] = {}
    for node in graph.nodes:
        if node.type is NodeType.TEST:
            depths[node.id] = 0
        else:
            scc = mapping.get(node.id)
            depths[node.id] = scc_depth.get(scc, 0) if scc is not None else 0

    return depths


def compute_layer_bucket_size(max_depth: int) -> int:
    """Depth span covered by one visual layer (at least 1)."""
    return max(1, math.ceil(max_depth / VISUAL_LAYER_COUNT))


def compute_node_size(fan_in: int) -> int:
    """Visual size for a node; 30 for a node nobody imports."""
    return round(NODE_SIZE_BASE + math.log2(fan_in + 1) * NODE_SIZE_SCALE)


def compute_visual_metrics(graph: Graph) -> None:
    """Compute visual metrics for all nodes in the graph.

    Mutates nodes in place, setting depth, layer_index, fan_in and size. Any
    previous values are discarded.

    Args:
        graph: Graph snapshot
    """
    fan_in_map = compute_fan_in(graph)
    depth_map = compute_depths(graph)

    max_depth = max([0] + list(depth_map.values()))
    bucket_size = compute_layer_bucket_size(max_depth)

    for node in graph.nodes:
        fan_in = fan_in_map.get(node.id, 0)
        depth = depth_map.get(node.id, 0)

        node.fan_in = fan_in
        node.depth = depth
        if node.type is NodeType.TEST:
            node.layer_index = TEST_LAYER_INDEX
        else:
            node.layer_index = min(VISUAL_LAYER_COUNT - 1, depth // bucket_size)
        node.size = compute_node_size(fan_in)

    logger.debug("Computed visual metrics for %s nodes (max depth %s)", len(graph.nodes), max_depth)


def layer_histogram(graph: Graph) -> List[int]:
    """Count non-test nodes per visual layer.

    Args:
        graph: Graph snapshot with metrics computed

    Returns:
        List of VISUAL_LAYER_COUNT counts, index = layer
    """
    counts = [0] * VISUAL_LAYER_COUNT
    for node in graph.nodes:
        if node.type is not NodeType.TEST and 0 <= node.layer_index < VISUAL_LAYER_COUNT:
            counts[node.layer_index] += 1
    return counts
