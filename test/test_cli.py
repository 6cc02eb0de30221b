#!/usr/bin/env python3
"""End-to-end tests for the whatBreaks command-line tools."""

import sys
import json
from pathlib import Path
from typing import Any, List

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

import whatBreaksFailing
import whatBreaksGroups
import whatBreaksHealth
import whatBreaksImpact
import whatBreaksRefactor
from whatbreaks.constants import EXIT_INVALID_ARGS, EXIT_SUCCESS
from whatbreaks.graph_io import load_graph


def run_tool(module: Any, args: List[str], monkeypatch: Any) -> int:
    monkeypatch.setattr(sys, "argv", [f"{module.__name__}.py"] + args)
    return module.main()


class TestImpactTool:
    """Tests for whatBreaksImpact.py"""

    def test_json_both_directions(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksImpact, ["src/utils/formatter.ts", "--graph", sample_graph_file, "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["file"] == "src/utils/formatter.ts"
        assert [node["nodeId"] for node in data["forward"]["nodes"]] == [
            "src/utils/formatter.ts",
            "src/api/todoController.ts",
            "src/api/userController.ts",
            "tests/e2e/app.e2e.spec.ts",
        ]
        assert data["forward"]["affectedTests"] == ["tests/e2e/app.e2e.spec.ts"]
        assert data["backward"] == {"nodes": [{"nodeId": "src/utils/formatter.ts", "depth": 0}], "affectedTests": []}

    def test_single_direction(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksImpact, ["src/models/todo.ts", "--graph", sample_graph_file, "--direction", "backward", "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert "forward" not in data
        assert "backward" in data

    def test_text_report(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksImpact, ["src/models/todo.ts", "--graph", sample_graph_file, "--no-color"], monkeypatch)

        assert result == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert "Forward" in output
        assert "src/services/todoService.ts" in output
        assert "tests/unit/todo.test.ts" in output

    def test_missing_graph(self, tmp_path: Path, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksImpact, ["src/a.ts", "--graph", str(tmp_path / "none.json")], monkeypatch)

        assert result == EXIT_INVALID_ARGS
        assert "Graph not found" in capsys.readouterr().err

    def test_invalid_direction(self, sample_graph_file: str, monkeypatch: Any) -> None:
        with pytest.raises(SystemExit):
            run_tool(whatBreaksImpact, ["src/a.ts", "--graph", sample_graph_file, "--direction", "sideways"], monkeypatch)


class TestFailingTool:
    """Tests for whatBreaksFailing.py"""

    def test_json(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksFailing, ["tests/todoService.test.ts", "--graph", sample_graph_file, "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["mode"] == "failing"
        assert data["filesToInvestigate"] == ["src/models/todo.ts", "src/utils/validator.ts", "src/services/todoService.ts"]
        assert data["directlyTests"] == ["src/services/todoService.ts"]
        assert data["otherTestsAtRisk"] == ["tests/unit/todo.test.ts"]

    def test_text_report(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksFailing, ["tests/todoService.test.ts", "--graph", sample_graph_file, "--no-color"], monkeypatch)

        assert result == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert "1. src/models/todo.ts" in output

    def test_unknown_test_warns(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksFailing, ["tests/nope.test.ts", "--graph", sample_graph_file, "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert "not in the graph" in captured.err
        assert json.loads(captured.out)["chain"] == []


class TestRefactorTool:
    """Tests for whatBreaksRefactor.py"""

    def test_json(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksRefactor, ["src/models/todo.ts", "--graph", sample_graph_file, "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["mode"] == "refactor"
        assert data["affected_files"] == 5
        assert data["risk_level"] == "medium"

    def test_tests_only(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksRefactor, ["src/models/todo.ts", "--graph", sample_graph_file, "--tests-only"], monkeypatch)

        assert result == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "npx playwright test todo todoService app.e2e"

    def test_text_report(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksRefactor, ["src/utils/validator.ts", "--graph", sample_graph_file, "--no-color"], monkeypatch)

        assert result == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert "[MEDIUM]" in output
        assert "Suggested:" in output


class TestHealthTool:
    """Tests for whatBreaksHealth.py"""

    def test_json(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksHealth, ["--graph", sample_graph_file, "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["sourceFiles"] == 8
        assert data["testFiles"] == 3
        assert data["edges"] == 16
        assert data["circularDeps"] == []
        assert data["hotspots"][0]["fanIn"] == 2
        assert data["summary"]["overallRisk"] == "low"
        assert data["summary"]["testSourceRatio"] == 37.5

    def test_sections(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksHealth, ["--graph", sample_graph_file, "--section", "circular", "--no-color"], monkeypatch)

        assert result == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert "CODEBASE HEALTH" in output
        assert "Circular dependencies (0)" in output
        assert "Hotspots" not in output

    def test_invalid_top(self, sample_graph_file: str, monkeypatch: Any) -> None:
        assert run_tool(whatBreaksHealth, ["--graph", sample_graph_file, "--top", "0"], monkeypatch) == EXIT_INVALID_ARGS


class TestGroupsTool:
    """Tests for whatBreaksGroups.py"""

    def test_update_saves_groups(self, coupled_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksGroups, ["--graph", coupled_graph_file, "--update", "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        printed = json.loads(capsys.readouterr().out)
        assert sorted(group["label"] for group in printed) == ["Order", "User"]

        graph = load_graph(coupled_graph_file)
        assert graph.groups is not None
        assert sorted(group.label for group in graph.groups) == ["Order", "User"]
        assert all(node.fan_in == 3 for node in graph.nodes)
        assert all(node.size == 54 for node in graph.nodes)

    def test_update_computes_metrics(self, sample_graph_file: str, monkeypatch: Any) -> None:
        result = run_tool(whatBreaksGroups, ["--graph", sample_graph_file, "--update", "--no-color"], monkeypatch)

        assert result == EXIT_SUCCESS
        graph = load_graph(sample_graph_file)
        nodes = {node.id: node for node in graph.nodes}
        assert nodes["src/models/todo.ts"].fan_in == 2
        assert nodes["src/api/todoController.ts"].depth == 2
        assert nodes["tests/unit/todo.test.ts"].layer_index == -1
        assert graph.groups == []

    def test_list_without_groups(self, sample_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        result = run_tool(whatBreaksGroups, ["--graph", sample_graph_file, "--json"], monkeypatch)

        assert result == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out) == []

    def test_list_text(self, coupled_graph_file: str, monkeypatch: Any, capsys: Any) -> None:
        run_tool(whatBreaksGroups, ["--graph", coupled_graph_file, "--update", "--no-color"], monkeypatch)
        capsys.readouterr()

        result = run_tool(whatBreaksGroups, ["--graph", coupled_graph_file, "--no-color"], monkeypatch)

        assert result == EXIT_SUCCESS
        output = capsys.readouterr().out
        assert "File groups (2)" in output
        assert "group-order" in output
        assert "layer 0: 8" in output
