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
"""Traversal helpers shared by the analyzers.

All traversals keep their queue and visited set local to the call, so they can
run concurrently against the same GraphIndex.
"""

from collections import deque
from typing import Callable, Deque, Iterator, Tuple

NeighborLookup = Callable[[str], Tuple[str, ...]]


def breadth_first(start_id: str, neighbors: NeighborLookup) -> Iterator[Tuple[str, int]]:
    """Yield every node reachable from ``start_id`` with its BFS depth.

    The start node itself is not yielded. Each node is yielded once, at the
    depth it was first discovered, so cycles terminate.

    Args:
        start_id: Node to start from (depth 0)
        neighbors: Adjacency lookup defining the direction of the walk

    Yields:
        (node_id, depth) tuples in discovery order
    """
    visited = {start_id}
    queue: Deque[Tuple[str, int]] = deque([(start_id, 0)])

    while queue:
        current_id, depth = queue.popleft()
        for next_id in neighbors(current_id):
            if next_id in visited:
                continue
            visited.add(next_id)
            queue.append((next_id, depth + 1))
            yield next_id, depth + 1
