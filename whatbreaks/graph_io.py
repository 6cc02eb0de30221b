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
"""Serialization of the graph snapshot and of analysis results to/from JSON.

The graph file is the scanner's output, `{nodes, edges, groups?}`, with
camelCase keys. Saving writes keys in declaration order with a 2-space indent
and omits unset optional fields, so loading a saved graph and saving it again
is byte-for-byte identical.

The *_to_dict() helpers produce the JSON shapes printed by the tools' --json
option.
"""

import os
import json
import logging
from typing import Any, Dict, List, Tuple

from .constants import GRAPH_JSON_INDENT, GraphLoadError, UnknownAnalysisModeError
from .graph_index import GraphIndex
from .graph_types import (
    AnalysisMode,
    AnalysisResult,
    CircularDep,
    CoverageLevel,
    EdgeType,
    FailingResult,
    FileGroup,
    FragileChain,
    Graph,
    GraphEdge,
    GraphNode,
    HealthReport,
    HealthSummary,
    HotspotFile,
    ImpactNode,
    ImpactResult,
    NodeLayer,
    NodeType,
    RefactorResult,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Graph snapshot
# =============================================================================


def node_to_dict(node: GraphNode) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "layer": node.layer.value,
        "type": node.type.value,
    }
    if node.test_level is not None:
        data["testLevel"] = node.test_level.value
    data.update(
        {
            "functions": list(node.functions),
            "depth": node.depth,
            "layerIndex": node.layer_index,
            "fanIn": node.fan_in,
            "size": node.size,
        }
    )
    return data


def node_from_dict(data: Dict[str, Any]) -> GraphNode:
    test_level = data.get("testLevel")
    return GraphNode(
        id=data["id"],
        label=data["label"],
        layer=NodeLayer(data["layer"]),
        type=NodeType(data["type"]),
        functions=list(data.get("functions", [])),
        depth=data.get("depth", 0),
        layer_index=data.get("layerIndex", 0),
        fan_in=data.get("fanIn", 0),
        size=data.get("size", 30),
        test_level=CoverageLevel(test_level) if test_level is not None else None,
    )


def edge_to_dict(edge: GraphEdge) -> Dict[str, Any]:
    return {"source": edge.source, "target": edge.target, "type": edge.type.value}


def edge_from_dict(data: Dict[str, Any]) -> GraphEdge:
    return GraphEdge(source=data["source"], target=data["target"], type=EdgeType(data["type"]))


def group_to_dict(group: FileGroup) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": group.id,
        "label": group.label,
        "nodeIds": list(group.node_ids),
        "centralNodeId": group.central_node_id,
    }
    if group.parent_group_id is not None:
        data["parentGroupId"] = group.parent_group_id
    data["level"] = group.level
    return data


def group_from_dict(data: Dict[str, Any]) -> FileGroup:
    return FileGroup(
        id=data["id"],
        label=data["label"],
        node_ids=list(data["nodeIds"]),
        central_node_id=data["centralNodeId"],
        level=data.get("level", 0),
        parent_group_id=data.get("parentGroupId"),
    )


def graph_to_dict(graph: Graph) -> Dict[str, Any]:
    """Convert a Graph to its JSON-ready dictionary."""
    data: Dict[str, Any] = {
        "nodes": [node_to_dict(node) for node in graph.nodes],
        "edges": [edge_to_dict(edge) for edge in graph.edges],
    }
    if graph.groups is not None:
        data["groups"] = [group_to_dict(group) for group in graph.groups]
    return data


def graph_from_dict(data: Any, source: str = "<memory>") -> Graph:
    """Build a Graph from its JSON dictionary.

    Args:
        data: Parsed JSON
        source: Where the data came from (used in error messages)

    Returns:
        Graph

    Raises:
        GraphLoadError: If the structure is not {nodes: [], edges: []} or a record is malformed
    """
    if not isinstance(data, dict) or not isinstance(data.get("nodes"), list) or not isinstance(data.get("edges"), list):
        raise GraphLoadError(f"Invalid graph file: expected {{ nodes: [], edges: [] }} at {source}")

    try:
        nodes = [node_from_dict(node) for node in data["nodes"]]
        edges = [edge_from_dict(edge) for edge in data["edges"]]
        groups = [group_from_dict(group) for group in data["groups"]] if data.get("groups") is not None else None
    except (KeyError, TypeError, ValueError) as e:
        raise GraphLoadError(f"Invalid graph record in {source}: {e}") from e

    return Graph(nodes=nodes, edges=edges, groups=groups)


def dumps(data: Any) -> str:
    """Serialize to the JSON text format shared by graph files and --json output."""
    return json.dumps(data, indent=GRAPH_JSON_INDENT, ensure_ascii=False)


def load_graph(path: str) -> Graph:
    """Load a graph snapshot from a JSON file.

    Args:
        path: Path to the graph file

    Returns:
        Graph

    Raises:
        GraphLoadError: If the file is missing, unreadable or not a valid graph
    """
    logger.info("Loading graph from %s", path)

    if not os.path.isfile(path):
        raise GraphLoadError(f"Graph not found at {path}. Run the scanner first.")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise GraphLoadError(f"Failed to read graph from {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"Invalid JSON in {path}: {e}") from e

    graph = graph_from_dict(data, source=path)
    logger.debug("Loaded %s nodes and %s edges", len(graph.nodes), len(graph.edges))
    return graph


def save_graph(graph: Graph, path: str) -> None:
    """Save a graph snapshot to a JSON file.

    Args:
        graph: Graph to save
        path: Output path (parent directories are created)

    Raises:
        IOError: If the file cannot be written
    """
    logger.info("Saving graph to %s", path)

    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(dumps(graph_to_dict(graph)))
    except OSError as e:
        logger.error("Failed to save graph: %s", e)
        raise IOError(f"Failed to save graph to {path}: {e}") from e


def load_graph_index(path: str) -> Tuple[Graph, GraphIndex]:
    """Load a graph and build its index in one step."""
    graph = load_graph(path)
    return graph, GraphIndex(graph)


# =============================================================================
# Analysis results
# =============================================================================


def impact_node_to_dict(node: ImpactNode) -> Dict[str, Any]:
    data: Dict[str, Any] = {"nodeId": node.node_id, "depth": node.depth}
    if node.layer is not None:
        data["layer"] = node.layer.value
    return data


def impact_result_to_dict(result: ImpactResult) -> Dict[str, Any]:
    return {
        "nodes": [impact_node_to_dict(node) for node in result.nodes],
        "affectedTests": list(result.affected_tests),
    }


def _failing_result_to_dict(result: FailingResult) -> Dict[str, Any]:
    return {
        "test": result.test,
        "mode": result.mode.value,
        "chain": [impact_node_to_dict(node) for node in result.chain],
        "directlyTests": list(result.directly_tests),
        "deepDependencies": list(result.deep_dependencies),
        "filesToInvestigate": list(result.files_to_investigate),
        "otherTestsAtRisk": list(result.other_tests_at_risk),
    }


def _refactor_result_to_dict(result: RefactorResult) -> Dict[str, Any]:
    return {
        "file": result.file,
        "mode": result.mode.value,
        "affected_files": result.affected_files,
        "affected_tests": result.affected_tests,
        "direct_importers": list(result.direct_importers),
        "transitive_affected": list(result.transitive_affected),
        "tests_to_run": list(result.tests_to_run),
        "suggested_test_command": result.suggested_test_command,
        "risk_level": result.risk_level.value,
        "risk_reason": result.risk_reason,
    }


def result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """Serialize a failing or refactor result, dispatching on its mode.

    Raises:
        UnknownAnalysisModeError: If the result carries an unknown mode
    """
    if result.mode is AnalysisMode.FAILING and isinstance(result, FailingResult):
        return _failing_result_to_dict(result)
    if result.mode is AnalysisMode.REFACTOR and isinstance(result, RefactorResult):
        return _refactor_result_to_dict(result)
    raise UnknownAnalysisModeError(f"Unknown analysis mode: {result.mode!r}")


def hotspot_to_dict(hotspot: HotspotFile) -> Dict[str, Any]:
    return {
        "file": hotspot.file,
        "fanIn": hotspot.fan_in,
        "testsAtRisk": hotspot.tests_at_risk,
        "riskLevel": hotspot.risk_level.value,
        "reason": hotspot.reason,
    }


def fragile_chain_to_dict(chain: FragileChain) -> Dict[str, Any]:
    return {
        "test": chain.test,
        "chainDepth": chain.chain_depth,
        "deepestDep": chain.deepest_dep,
        "reason": chain.reason,
    }


def circular_dep_to_dict(dep: CircularDep) -> Dict[str, Any]:
    return {"cycle": list(dep.cycle)}


def health_report_to_dict(report: HealthReport) -> Dict[str, Any]:
    return {
        "sourceFiles": report.source_files,
        "testFiles": report.test_files,
        "edges": report.edges,
        "hotspots": [hotspot_to_dict(hotspot) for hotspot in report.hotspots],
        "fragileChains": [fragile_chain_to_dict(chain) for chain in report.fragile_chains],
        "circularDeps": [circular_dep_to_dict(dep) for dep in report.circular_deps],
    }


def health_summary_to_dict(summary: HealthSummary) -> Dict[str, Any]:
    return {
        "overallRisk": summary.overall_risk.value,
        "highRiskHotspots": summary.high_risk_hotspots,
        "circularCount": summary.circular_count,
        "testSourceRatio": summary.test_source_ratio,
    }


def groups_to_list(groups: List[FileGroup]) -> List[Dict[str, Any]]:
    return [group_to_dict(group) for group in groups]
