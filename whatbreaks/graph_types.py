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
"""Type definitions for the dependency graph and its analysis results.

This module contains the enums and dataclasses shared by the graph engine, the
serialization layer and the command-line tools. Field names are snake_case;
the camelCase names used in the graph snapshot are mapped in graph_io.
"""

from typing import List, Optional, Union
from dataclasses import dataclass, field
from enum import Enum


class NodeType(Enum):
    """Kind of file a graph node represents."""

    SOURCE = "source"
    TEST = "test"
    TYPE_ONLY = "type-only"


class NodeLayer(Enum):
    """Architectural layer assigned by the scanner (informational only)."""

    UI = "ui"
    FEATURE = "feature"
    SHARED = "shared"
    ENTITY = "entity"
    PAGE = "page"
    TEST = "test"
    CONFIG = "config"


class EdgeType(Enum):
    """Kind of relationship an edge represents."""

    IMPORT = "import"
    TEST_COVERS = "test-covers"


class CoverageLevel(Enum):
    """Level of a test file (unit, integration or end-to-end)."""

    UNIT = "unit"
    INTEGRATION = "integration"
    E2E = "e2e"


class RiskLevel(Enum):
    """Risk level for refactors and hotspots."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AnalysisMode(Enum):
    """Discriminator for the failing/refactor result union."""

    FAILING = "failing"
    REFACTOR = "refactor"


@dataclass
class GraphNode:
    """A single file in the dependency graph.

    Attributes:
        id: Unique, stable path-like identifier
        label: Display name
        layer: Architectural layer
        type: Source, test or type-only file
        functions: Exported symbol names
        depth: Longest dependency path length (computed)
        layer_index: Visual layer bucket, -1 for tests (computed)
        fan_in: Number of incoming import edges (computed)
        size: Visual weight derived from fan_in (computed)
        test_level: Optional unit/integration/e2e classification for tests
    """

    id: str
    label: str
    layer: NodeLayer
    type: NodeType
    functions: List[str] = field(default_factory=list)
    depth: int = 0
    layer_index: int = 0
    fan_in: int = 0
    size: int = 30
    test_level: Optional[CoverageLevel] = None

    @property
    def is_test(self) -> bool:
        return self.type is NodeType.TEST


@dataclass
class GraphEdge:
    """Directed edge: ``source`` imports (or test-covers) ``target``."""

    source: str
    target: str
    type: EdgeType = EdgeType.IMPORT


@dataclass
class FileGroup:
    """A named cluster of coupled files.

    Attributes:
        id: ``group-<slug>`` identifier
        label: Human-readable name
        node_ids: Member node ids
        central_node_id: Member with the highest fan-in
        level: 0 for top-level groups, 1 for subgroups
        parent_group_id: Id of the enclosing group for subgroups
    """

    id: str
    label: str
    node_ids: List[str]
    central_node_id: str
    level: int = 0
    parent_group_id: Optional[str] = None


@dataclass
class Graph:
    """Complete graph snapshot produced by the scanner."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    groups: Optional[List[FileGroup]] = None


@dataclass
class ImpactNode:
    """A node reached by a traversal and the BFS depth it was first seen at."""

    node_id: str
    depth: int
    layer: Optional[NodeLayer] = None


@dataclass
class ImpactResult:
    """Forward or backward impact of a single file."""

    nodes: List[ImpactNode] = field(default_factory=list)
    affected_tests: List[str] = field(default_factory=list)


@dataclass
class FailingResult:
    """Root-cause ranking for one failing test.

    Attributes:
        test: The failing test id
        chain: Every node reached from the test, BFS order, test at depth 0
        directly_tests: Files the test imports directly (depth 1)
        deep_dependencies: All depth >= 1 nodes, deepest first
        files_to_investigate: Investigation order (deepest first)
        other_tests_at_risk: Other tests sharing a dependency with this test
    """

    test: str
    chain: List[ImpactNode] = field(default_factory=list)
    directly_tests: List[str] = field(default_factory=list)
    deep_dependencies: List[str] = field(default_factory=list)
    files_to_investigate: List[str] = field(default_factory=list)
    other_tests_at_risk: List[str] = field(default_factory=list)
    mode: AnalysisMode = field(default=AnalysisMode.FAILING, init=False)


@dataclass
class RefactorResult:
    """Blast radius of changing one file.

    Attributes:
        file: The changed file id
        affected_files: Number of transitively affected files
        affected_tests: Number of tests to run
        direct_importers: Files importing the changed file directly
        transitive_affected: Every affected file, direct importers included
        tests_to_run: Tests covering any affected file
        suggested_test_command: Runner invocation for tests_to_run
        risk_level: Risk bucket derived from affected_files
        risk_reason: Human-readable explanation of the risk level
    """

    file: str
    affected_files: int = 0
    affected_tests: int = 0
    direct_importers: List[str] = field(default_factory=list)
    transitive_affected: List[str] = field(default_factory=list)
    tests_to_run: List[str] = field(default_factory=list)
    suggested_test_command: str = ""
    risk_level: RiskLevel = RiskLevel.LOW
    risk_reason: str = ""
    mode: AnalysisMode = field(default=AnalysisMode.REFACTOR, init=False)


AnalysisResult = Union[FailingResult, RefactorResult]


@dataclass
class HotspotFile:
    """A source file with a high fan-in."""

    file: str
    fan_in: int
    tests_at_risk: int
    risk_level: RiskLevel
    reason: str


@dataclass
class FragileChain:
    """Deepest import chain reachable from a test."""

    test: str
    chain_depth: int
    deepest_dep: str
    reason: str


@dataclass
class CircularDep:
    """A cycle of imports; the first id is repeated at the end."""

    cycle: List[str]


@dataclass
class HealthReport:
    """Codebase health summary."""

    source_files: int
    test_files: int
    edges: int
    hotspots: List[HotspotFile] = field(default_factory=list)
    fragile_chains: List[FragileChain] = field(default_factory=list)
    circular_deps: List[CircularDep] = field(default_factory=list)


@dataclass
class HealthSummary:
    """Overall verdict derived from a HealthReport."""

    overall_risk: RiskLevel
    high_risk_hotspots: int
    circular_count: int
    test_source_ratio: float
