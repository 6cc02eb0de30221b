#!/usr/bin/env python3
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
"""Shared pytest configuration and fixtures for whatBreaks tests.

Graphs are built from import edge lists. Node ids are path-like; every id
listed in ``tests`` becomes a test node, every other id a source node. A
test-covers edge is derived for each import of a source file by a test,
mirroring what the scanner emits.

Graph Fixtures:
- linear_graph: tests/chain.test.ts -> A -> B -> C
- cycle_graph: A -> B -> C -> A, plus a test importing A
- diamond_graph: T -> A -> C and T -> B -> C, plus a second test importing B
- hub_graph: five files importing src/b.ts
- coupled_graph: two flat clusters of four densely importing files
- app_graph: small todo/user application saved by sample_graph_file

Fixture Scopes:
- function: Default; graphs are mutable (metrics are computed in place)
"""

import sys
import posixpath
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from whatbreaks.graph_io import save_graph
from whatbreaks.graph_types import CoverageLevel, EdgeType, Graph, GraphEdge, GraphNode, NodeLayer, NodeType

GraphFactory = Callable[..., Graph]

LINEAR_A = "src/a.ts"
LINEAR_B = "src/b.ts"
LINEAR_C = "src/c.ts"
LINEAR_TEST = "tests/chain.test.ts"


def build_graph(
    imports: Sequence[Tuple[str, str]],
    tests: Iterable[str] = (),
    extra_nodes: Iterable[str] = (),
    type_only: Iterable[str] = (),
) -> Graph:
    """Build a Graph from (importer, imported) pairs.

    Args:
        imports: Import edges in order
        tests: Ids of test nodes
        extra_nodes: Ids of nodes without any edge
        type_only: Ids of declaration-only nodes

    Returns:
        Graph with nodes in order of first appearance
    """
    test_ids = set(tests)
    type_only_ids = set(type_only)

    order: List[str] = []
    for source, target in imports:
        for node_id in (source, target):
            if node_id not in order:
                order.append(node_id)
    for node_id in extra_nodes:
        if node_id not in order:
            order.append(node_id)

    nodes = []
    for node_id in order:
        if node_id in test_ids:
            node_type, layer = NodeType.TEST, NodeLayer.TEST
        elif node_id in type_only_ids:
            node_type, layer = NodeType.TYPE_ONLY, NodeLayer.ENTITY
        else:
            node_type, layer = NodeType.SOURCE, NodeLayer.SHARED
        test_level: Optional[CoverageLevel] = None
        if node_type is NodeType.TEST:
            test_level = CoverageLevel.E2E if "e2e" in node_id else CoverageLevel.UNIT
        nodes.append(GraphNode(id=node_id, label=posixpath.basename(node_id), layer=layer, type=node_type, test_level=test_level))

    edges = [GraphEdge(source=source, target=target) for source, target in imports]
    edges += [
        GraphEdge(source=source, target=target, type=EdgeType.TEST_COVERS)
        for source, target in imports
        if source in test_ids and target not in test_ids
    ]
    return Graph(nodes=nodes, edges=edges)


@pytest.fixture
def make_graph() -> GraphFactory:
    """Factory fixture exposing build_graph()."""
    return build_graph


@pytest.fixture
def linear_graph() -> Graph:
    """Linear chain: the test imports A, A imports B, B imports C (leaf)."""
    return build_graph([(LINEAR_TEST, LINEAR_A), (LINEAR_A, LINEAR_B), (LINEAR_B, LINEAR_C)], tests=[LINEAR_TEST])


@pytest.fixture
def cycle_graph() -> Graph:
    """Three-file import cycle reached from a test."""
    return build_graph(
        [("tests/a.test.ts", "src/a.ts"), ("src/a.ts", "src/b.ts"), ("src/b.ts", "src/c.ts"), ("src/c.ts", "src/a.ts")],
        tests=["tests/a.test.ts"],
    )


@pytest.fixture
def diamond_graph() -> Graph:
    """Diamond: T imports A and B, both import C. A second test imports B."""
    return build_graph(
        [
            ("tests/t.test.ts", "src/a.ts"),
            ("tests/t.test.ts", "src/b.ts"),
            ("src/a.ts", "src/c.ts"),
            ("src/b.ts", "src/c.ts"),
            ("tests/other.test.ts", "src/b.ts"),
        ],
        tests=["tests/t.test.ts", "tests/other.test.ts"],
    )


@pytest.fixture
def hub_graph() -> Graph:
    """Five distinct files importing src/b.ts."""
    return build_graph([(f"src/f{i}.ts", "src/b.ts") for i in range(1, 6)])


ORDER_FILES = ["src/order.ts", "src/orderService.ts", "src/orderController.ts", "src/orderModel.ts"]
USER_FILES = ["src/user.ts", "src/userService.ts", "src/userRepo.ts", "src/userHelper.ts"]


def dense_imports(files: List[str]) -> List[Tuple[str, str]]:
    """Every file imports every other file of the list."""
    return [(source, target) for source in files for target in files if source != target]


@pytest.fixture
def coupled_graph() -> Graph:
    """Two tightly coupled clusters of four in one flat directory, no cross imports."""
    return build_graph(dense_imports(ORDER_FILES) + dense_imports(USER_FILES))


APP_IMPORTS = [
    ("src/services/todoService.ts", "src/models/todo.ts"),
    ("src/services/todoService.ts", "src/utils/validator.ts"),
    ("src/services/userService.ts", "src/models/user.ts"),
    ("src/services/userService.ts", "src/utils/validator.ts"),
    ("src/api/todoController.ts", "src/services/todoService.ts"),
    ("src/api/todoController.ts", "src/utils/formatter.ts"),
    ("src/api/userController.ts", "src/services/userService.ts"),
    ("src/api/userController.ts", "src/utils/formatter.ts"),
    ("tests/unit/todo.test.ts", "src/models/todo.ts"),
    ("tests/todoService.test.ts", "src/services/todoService.ts"),
    ("tests/e2e/app.e2e.spec.ts", "src/api/todoController.ts"),
    ("tests/e2e/app.e2e.spec.ts", "src/api/userController.ts"),
]
APP_TESTS = ["tests/unit/todo.test.ts", "tests/todoService.test.ts", "tests/e2e/app.e2e.spec.ts"]


@pytest.fixture
def app_graph() -> Graph:
    """Small todo/user application: models, services, api controllers, utils and three tests."""
    return build_graph(APP_IMPORTS, tests=APP_TESTS)


@pytest.fixture
def sample_graph_file(tmp_path: Path, app_graph: Graph) -> str:
    """Save app_graph to <tmp>/.whatbreaks/graph.json.

    Scope: function
    Dependencies: tmp_path, app_graph
    Use for: Command-line tool tests
    """
    path = tmp_path / ".whatbreaks" / "graph.json"
    save_graph(app_graph, str(path))
    return str(path)


@pytest.fixture
def coupled_graph_file(tmp_path: Path, coupled_graph: Graph) -> str:
    """Save coupled_graph to <tmp>/coupled.json."""
    path = tmp_path / "coupled.json"
    save_graph(coupled_graph, str(path))
    return str(path)
