#!/usr/bin/env python3
"""Tests for whatbreaks/graph_io.py"""

import sys
import json
from pathlib import Path
from typing import Any, Dict

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from whatbreaks.constants import EXIT_INVALID_ARGS, GraphLoadError, UnknownAnalysisModeError
from whatbreaks.failing import analyze_failing_test
from whatbreaks.graph_index import GraphIndex
from whatbreaks.graph_io import (
    graph_from_dict,
    graph_to_dict,
    health_report_to_dict,
    impact_result_to_dict,
    load_graph,
    load_graph_index,
    result_to_dict,
    save_graph,
)
from whatbreaks.graph_types import CoverageLevel, FailingResult, Graph, NodeLayer, NodeType
from whatbreaks.impact import compute_forward_impact
from whatbreaks.refactor import analyze_refactor_impact
from whatbreaks.risk import analyze_risk

SCANNED_GRAPH: Dict[str, Any] = {
    "nodes": [
        {
            "id": "src/models/todo.ts",
            "label": "todo.ts",
            "layer": "entity",
            "type": "source",
            "functions": ["createTodo", "toggleTodo"],
            "depth": 0,
            "layerIndex": 0,
            "fanIn": 2,
            "size": 49,
        },
        {
            "id": "src/models/types.ts",
            "label": "types.ts",
            "layer": "entity",
            "type": "type-only",
            "functions": [],
            "depth": 0,
            "layerIndex": 0,
            "fanIn": 0,
            "size": 30,
        },
        {
            "id": "tests/unit/todo.test.ts",
            "label": "todo.test.ts",
            "layer": "test",
            "type": "test",
            "testLevel": "unit",
            "functions": [],
            "depth": 0,
            "layerIndex": -1,
            "fanIn": 0,
            "size": 30,
        },
    ],
    "edges": [
        {"source": "tests/unit/todo.test.ts", "target": "src/models/todo.ts", "type": "import"},
        {"source": "tests/unit/todo.test.ts", "target": "src/models/todo.ts", "type": "test-covers"},
    ],
    "groups": [
        {"id": "group-todo", "label": "Todo", "nodeIds": ["src/models/todo.ts", "src/models/types.ts"], "centralNodeId": "src/models/todo.ts", "level": 0},
        {
            "id": "group-todo-models",
            "label": "Models",
            "nodeIds": ["src/models/todo.ts", "src/models/types.ts"],
            "centralNodeId": "src/models/todo.ts",
            "parentGroupId": "group-todo",
            "level": 1,
        },
    ],
}


class TestGraphRoundTrip:
    """Test graph snapshot serialization."""

    def test_load_then_save_is_byte_identical(self, tmp_path: Path) -> None:
        original = tmp_path / "graph.json"
        original.write_text(json.dumps(SCANNED_GRAPH, indent=2), encoding="utf-8")

        saved = tmp_path / "saved.json"
        save_graph(load_graph(str(original)), str(saved))

        assert saved.read_bytes() == original.read_bytes()

    def test_save_load_save(self, tmp_path: Path, app_graph: Graph) -> None:
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"
        save_graph(app_graph, str(first))
        save_graph(load_graph(str(first)), str(second))

        assert first.read_text(encoding="utf-8") == second.read_text(encoding="utf-8")

    def test_fields_are_mapped(self) -> None:
        graph = graph_from_dict(SCANNED_GRAPH)

        todo, types, test = graph.nodes
        assert todo.fan_in == 2
        assert todo.functions == ["createTodo", "toggleTodo"]
        assert todo.layer is NodeLayer.ENTITY
        assert types.type is NodeType.TYPE_ONLY
        assert test.test_level is CoverageLevel.UNIT
        assert test.layer_index == -1
        assert graph.groups is not None
        assert graph.groups[1].parent_group_id == "group-todo"
        assert graph.groups[1].level == 1

    def test_optional_fields_omitted(self, linear_graph: Graph) -> None:
        data = graph_to_dict(linear_graph)

        assert "groups" not in data
        source = data["nodes"][1]
        assert "testLevel" not in source
        assert list(source) == ["id", "label", "layer", "type", "functions", "depth", "layerIndex", "fanIn", "size"]
        assert data["nodes"][0]["testLevel"] == "unit"

    def test_save_creates_directories(self, tmp_path: Path, linear_graph: Graph) -> None:
        path = tmp_path / ".whatbreaks" / "nested" / "graph.json"
        save_graph(linear_graph, str(path))

        assert path.is_file()
        assert not path.read_text(encoding="utf-8").endswith("\n")

    def test_load_graph_index(self, sample_graph_file: str) -> None:
        graph, index = load_graph_index(sample_graph_file)

        assert len(graph.nodes) == 11
        assert index.get_imports("tests/unit/todo.test.ts") == ("src/models/todo.ts",)


class TestGraphLoadErrors:
    """Test rejection of missing or malformed graph files."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(GraphLoadError) as exc_info:
            load_graph(str(tmp_path / "missing.json"))

        assert exc_info.value.exit_code == EXIT_INVALID_ARGS
        assert "Run the scanner first" in str(exc_info.value)

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "graph.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(GraphLoadError, match="Invalid JSON"):
            load_graph(str(path))

    @pytest.mark.parametrize("content", ['{"nodes": {}, "edges": []}', '{"nodes": [], "edges": "x"}', '{"nodes": []}', "[]"])
    def test_nodes_and_edges_must_be_lists(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "graph.json"
        path.write_text(content, encoding="utf-8")

        with pytest.raises(GraphLoadError, match="expected"):
            load_graph(str(path))

    def test_malformed_record(self) -> None:
        with pytest.raises(GraphLoadError, match="Invalid graph record"):
            graph_from_dict({"nodes": [{"label": "no id"}], "edges": []})

        with pytest.raises(GraphLoadError):
            graph_from_dict({"nodes": [], "edges": [{"source": "a", "target": "b", "type": "requires"}]})


class TestResultSerialization:
    """Test the JSON shapes of analysis results."""

    def test_impact_result(self, linear_graph: Graph) -> None:
        data = impact_result_to_dict(compute_forward_impact(GraphIndex(linear_graph), "src/b.ts"))

        assert data == {
            "nodes": [{"nodeId": "src/b.ts", "depth": 0}, {"nodeId": "src/a.ts", "depth": 1}, {"nodeId": "tests/chain.test.ts", "depth": 2}],
            "affectedTests": ["tests/chain.test.ts"],
        }

    def test_failing_result(self, linear_graph: Graph) -> None:
        data = result_to_dict(analyze_failing_test(GraphIndex(linear_graph), "tests/chain.test.ts"))

        assert data["mode"] == "failing"
        assert list(data) == ["test", "mode", "chain", "directlyTests", "deepDependencies", "filesToInvestigate", "otherTestsAtRisk"]
        assert data["chain"][0] == {"nodeId": "tests/chain.test.ts", "depth": 0, "layer": "test"}
        assert data["filesToInvestigate"] == ["src/c.ts", "src/b.ts", "src/a.ts"]

    def test_refactor_result(self, hub_graph: Graph) -> None:
        data = result_to_dict(analyze_refactor_impact(GraphIndex(hub_graph), "src/b.ts"))

        assert data["mode"] == "refactor"
        assert data["affected_files"] == 5
        assert data["risk_level"] == "medium"
        assert set(data) == {
            "file",
            "mode",
            "affected_files",
            "affected_tests",
            "direct_importers",
            "transitive_affected",
            "tests_to_run",
            "suggested_test_command",
            "risk_level",
            "risk_reason",
        }

    def test_unknown_mode_raises(self) -> None:
        result = FailingResult(test="tests/x.test.ts")
        result.mode = "unknown"  # type: ignore[assignment]

        with pytest.raises(UnknownAnalysisModeError):
            result_to_dict(result)

    def test_health_report(self, cycle_graph: Graph) -> None:
        data = health_report_to_dict(analyze_risk(GraphIndex(cycle_graph)))

        assert list(data) == ["sourceFiles", "testFiles", "edges", "hotspots", "fragileChains", "circularDeps"]
        assert data["circularDeps"] == [{"cycle": ["src/a.ts", "src/b.ts", "src/c.ts", "src/a.ts"]}]
        assert set(data["hotspots"][0]) == {"file", "fanIn", "testsAtRisk", "riskLevel", "reason"}
        assert set(data["fragileChains"][0]) == {"test", "chainDepth", "deepestDep", "reason"}
