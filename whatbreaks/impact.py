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
"""Forward and backward impact analysis over a GraphIndex.

Both directions are breadth-first traversals in which every node is visited
once, at the depth it was first discovered, so cyclic import graphs terminate.
"""

import logging
from typing import Dict, List

from .graph_index import GraphIndex
from .graph_types import ImpactNode, ImpactResult
from .traversal import NeighborLookup, breadth_first

logger = logging.getLogger(__name__)


def _collect(index: GraphIndex, start_id: str, neighbors: NeighborLookup, affected: Dict[str, None]) -> List[ImpactNode]:
    """Walk from ``start_id`` and gather the tests touched along the way.

    Args:
        index: Graph index
        start_id: Node to start from (reported at depth 0)
        neighbors: Adjacency lookup defining the direction of the walk
        affected: Ordered set (dict keys) receiving every visited test and every test covering a visited node

    Returns:
        Visited nodes in discovery order, start node first
    """
    nodes = [ImpactNode(node_id=start_id, depth=0)]

    for node_id, depth in breadth_first(start_id, neighbors):
        nodes.append(ImpactNode(node_id=node_id, depth=depth))
        if index.is_test(node_id):
            affected[node_id] = None
        affected.update(dict.fromkeys(index.get_tests_covering(node_id)))

    return nodes


def compute_forward_impact(index: GraphIndex, file_id: str) -> ImpactResult:
    """Find every file that breaks when ``file_id`` changes.

    Walks importers transitively ("who imports me, and who imports them").

    Args:
        index: Graph index
        file_id: Changed file

    Returns:
        ImpactResult; empty when the file is not in the graph
    """
    if not index.has_node(file_id):
        logger.debug("Forward impact: %s not in graph", file_id)
        return ImpactResult()

    affected: Dict[str, None] = dict.fromkeys(index.get_tests_covering(file_id))
    nodes = _collect(index, file_id, index.get_importers, affected)

    logger.debug("Forward impact of %s: %s nodes, %s tests", file_id, len(nodes), len(affected))
    return ImpactResult(nodes=nodes, affected_tests=list(affected))


def compute_backward_impact(index: GraphIndex, file_id: str) -> ImpactResult:
    """Find everything ``file_id`` depends on.

    Walks imports transitively ("what do I import, and what do those import").

    Args:
        index: Graph index
        file_id: File or test to start from

    Returns:
        ImpactResult; empty when the file is not in the graph
    """
    if not index.has_node(file_id):
        logger.debug("Backward impact: %s not in graph", file_id)
        return ImpactResult()

    affected: Dict[str, None] = {}
    if index.is_test(file_id):
        affected[file_id] = None
    nodes = _collect(index, file_id, index.get_imports, affected)

    logger.debug("Backward impact of %s: %s nodes, %s tests", file_id, len(nodes), len(affected))
    return ImpactResult(nodes=nodes, affected_tests=list(affected))
