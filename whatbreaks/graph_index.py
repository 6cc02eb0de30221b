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
"""Adjacency index over a Graph snapshot.

The index is a read-only view: it is built once per loaded graph and never
mutated afterwards, so a single instance can be shared by concurrent analyses.
Edges are trusted to reference existing node ids.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .graph_types import EdgeType, Graph, GraphNode, NodeType

logger = logging.getLogger(__name__)

_EMPTY: Tuple[str, ...] = ()


def _freeze(adjacency: Dict[str, List[str]]) -> Dict[str, Tuple[str, ...]]:
    return {node_id: tuple(neighbors) for node_id, neighbors in adjacency.items()}


class GraphIndex:
    """O(1) neighbor lookups over the import and test-covers edges.

    Four maps are built:
        imports: source -> targets it imports
        imported_by: target -> sources importing it
        test_covers: test -> files it covers
        covered_by: file -> tests covering it

    Every lookup returns an empty tuple for unknown ids.
    """

    def __init__(self, graph: Graph):
        self._graph = graph
        self._nodes: Dict[str, GraphNode] = {node.id: node for node in graph.nodes}

        imports: Dict[str, List[str]] = {}
        imported_by: Dict[str, List[str]] = {}
        test_covers: Dict[str, List[str]] = {}
        covered_by: Dict[str, List[str]] = {}

        for edge in graph.edges:
            if edge.type is EdgeType.IMPORT:
                imports.setdefault(edge.source, []).append(edge.target)
                imported_by.setdefault(edge.target, []).append(edge.source)
            elif edge.type is EdgeType.TEST_COVERS:
                test_covers.setdefault(edge.source, []).append(edge.target)
                covered_by.setdefault(edge.target, []).append(edge.source)

        self._imports = _freeze(imports)
        self._imported_by = _freeze(imported_by)
        self._test_covers = _freeze(test_covers)
        self._covered_by = _freeze(covered_by)

        logger.debug("Indexed graph with %s nodes and %s edges", len(self._nodes), len(graph.edges))

    @property
    def graph(self) -> Graph:
        return self._graph

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return self._nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def is_test(self, node_id: str) -> bool:
        node = self._nodes.get(node_id)
        return node is not None and node.type is NodeType.TEST

    def get_imports(self, node_id: str) -> Tuple[str, ...]:
        """Files ``node_id`` imports directly."""
        return self._imports.get(node_id, _EMPTY)

    def get_importers(self, node_id: str) -> Tuple[str, ...]:
        """Files importing ``node_id`` directly."""
        return self._imported_by.get(node_id, _EMPTY)

    def get_tests_covering(self, node_id: str) -> Tuple[str, ...]:
        """Tests with a test-covers edge to ``node_id``."""
        return self._covered_by.get(node_id, _EMPTY)

    def get_files_covered_by(self, test_id: str) -> Tuple[str, ...]:
        """Files ``test_id`` covers directly."""
        return self._test_covers.get(test_id, _EMPTY)

    def get_all_test_nodes(self) -> List[GraphNode]:
        return [node for node in self._graph.nodes if node.type is NodeType.TEST]

    def get_all_source_nodes(self) -> List[GraphNode]:
        return [node for node in self._graph.nodes if node.type is not NodeType.TEST]

    def get_all_node_ids(self) -> List[str]:
        return [node.id for node in self._graph.nodes]
