#!/usr/bin/env python3
"""Tests for whatbreaks/grouping.py"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from whatbreaks.graph_types import FileGroup, Graph
from whatbreaks.grouping import (
    compute_coupling,
    compute_file_groups,
    detect_subgroups,
    resolve_group_name,
    seed_groups,
    slugify_group_id,
)
from whatbreaks.metrics import compute_visual_metrics

ORDER_FILES = ["src/order.ts", "src/orderService.ts", "src/orderController.ts", "src/orderModel.ts"]
USER_FILES = ["src/user.ts", "src/userService.ts", "src/userRepo.ts", "src/userHelper.ts"]


class TestComputeFileGroups:
    """Test end-to-end clustering."""

    def test_two_coupled_clusters(self, coupled_graph: Graph) -> None:
        """Two dense clusters of four without cross imports give two groups of four."""
        compute_visual_metrics(coupled_graph)
        groups = compute_file_groups(coupled_graph)

        assert len(groups) == 2
        assert sorted(len(group.node_ids) for group in groups) == [4, 4]
        members = [set(group.node_ids) for group in groups]
        assert set(ORDER_FILES) in members
        assert set(USER_FILES) in members

    def test_group_naming(self, coupled_graph: Graph) -> None:
        """Groups are named after the most common stem with layer suffixes stripped."""
        compute_visual_metrics(coupled_graph)
        groups = {group.label: group for group in compute_file_groups(coupled_graph)}

        assert set(groups) == {"Order", "User"}
        assert groups["Order"].id == "group-order"
        assert groups["Order"].central_node_id == "src/order.ts"
        assert groups["Order"].level == 0
        assert groups["Order"].parent_group_id is None

    def test_tests_are_never_grouped(self, make_graph) -> None:
        imports = [(source, target) for files in (ORDER_FILES, USER_FILES) for source in files for target in files if source != target]
        imports += [("tests/all.test.ts", file_id) for file_id in ORDER_FILES + USER_FILES]
        graph = make_graph(imports, tests=["tests/all.test.ts"])
        compute_visual_metrics(graph)
        groups = compute_file_groups(graph)

        assert len(groups) == 2
        assert all("tests/all.test.ts" not in group.node_ids for group in groups)

    def test_too_few_files(self, make_graph) -> None:
        graph = make_graph([(f"src/f{i}.ts", "src/core.ts") for i in range(6)])

        assert len(graph.nodes) == 7
        assert compute_file_groups(graph) == []

    def test_single_all_encompassing_group_is_dropped(self, make_graph) -> None:
        files = [f"src/mod{i}.ts" for i in range(8)]
        graph = make_graph([(source, target) for source in files for target in files if source != target])

        assert compute_file_groups(graph) == []

    def test_directory_seeds_without_coupling(self, make_graph) -> None:
        """Uncoupled directories stay separate groups."""
        files = [
            "src/billing/invoice.ts",
            "src/billing/invoiceService.ts",
            "src/auth/session.ts",
            "src/auth/sessionStore.ts",
            "src/cart/cart.ts",
            "src/cart/cartHelper.ts",
            "src/search/query.ts",
            "src/search/queryUtils.ts",
        ]
        graph = make_graph([], extra_nodes=files)
        groups = compute_file_groups(graph)

        assert [group.label for group in groups] == ["Invoice", "Session", "Cart", "Query"]
        assert [group.id for group in groups] == ["group-invoice", "group-session", "group-cart", "group-query"]

    def test_merge_at_exact_threshold(self, make_graph) -> None:
        """A pair scoring exactly the coupling threshold is merged."""
        graph = make_graph(
            [("y/1.ts", "x/1.ts"), ("y/1.ts", "x/2.ts")],
            extra_nodes=["y/2.ts", "y/3.ts", "z/1.ts", "z/2.ts", "w/1.ts"],
        )
        groups = compute_file_groups(graph)

        assert compute_coupling({"y/1.ts", "y/2.ts", "y/3.ts"}, {"x/1.ts", "x/2.ts"}, {"y/1.ts": {"x/1.ts", "x/2.ts"}}) == 0.4
        assert [sorted(group.node_ids) for group in groups] == [
            ["x/1.ts", "x/2.ts", "y/1.ts", "y/2.ts", "y/3.ts"],
            ["z/1.ts", "z/2.ts"],
        ]

    def test_every_file_in_at_most_one_group(self, app_graph: Graph, coupled_graph: Graph) -> None:
        for graph in (app_graph, coupled_graph):
            compute_visual_metrics(graph)
            node_ids = [node_id for group in compute_file_groups(graph) for node_id in group.node_ids]
            assert len(node_ids) == len(set(node_ids))


class TestClusteringSteps:
    """Test the individual clustering passes."""

    def test_seed_groups_by_directory(self, app_graph: Graph) -> None:
        sources = [node for node in app_graph.nodes if not node.is_test]
        groups = seed_groups(sources)

        assert len(groups) == 4
        assert ["src/services/todoService.ts", "src/services/userService.ts"] in groups.values()

    def test_seed_groups_flat_layout(self, coupled_graph: Graph) -> None:
        """A directory holding half of the files or more is split into singletons."""
        groups = seed_groups(coupled_graph.nodes)

        assert len(groups) == 8
        assert all(len(node_ids) == 1 for node_ids in groups.values())

    def test_coupling_score(self) -> None:
        adjacency = {"a": {"b"}, "b": set(), "c": {"a", "b"}}

        assert compute_coupling({"a"}, {"b"}, adjacency) == 0.5
        assert compute_coupling({"a", "b"}, {"c"}, adjacency) == 2 / 3
        assert compute_coupling({"b"}, {"x"}, adjacency) == 0.0

    def test_slugify(self) -> None:
        assert slugify_group_id("Todo") == "group-todo"
        assert slugify_group_id("Todo List") == "group-todo-list"
        assert slugify_group_id("C++ Core") == "group-c-core"


class TestGroupNaming:
    """Test label resolution."""

    def test_most_common_stem(self) -> None:
        node_ids = ["src/services/todoService.ts", "src/models/todo.ts", "src/utils/format.ts"]

        assert resolve_group_name(node_ids, node_ids[0]) == "Todo"

    def test_first_seen_wins_ties(self) -> None:
        assert resolve_group_name(["src/alpha.ts", "src/beta.ts"], "src/beta.ts") == "Alpha"

    def test_lowercase_suffix(self) -> None:
        assert resolve_group_name(["src/todoservice.ts", "src/other.ts", "src/todo.ts"], "src/todo.ts") == "Todo"

    def test_suffix_only_name_is_kept(self) -> None:
        assert resolve_group_name(["src/Service.ts"], "src/Service.ts") == "Service"

    def test_directory_fallback(self) -> None:
        """Single-letter stems fall back to the central file's directory."""
        assert resolve_group_name(["src/db/a.ts", "src/db/b.ts"], "src/db/a.ts") == "Db"

    def test_file_name_fallback(self) -> None:
        assert resolve_group_name(["src/a.ts", "src/b.ts"], "src/a.ts") == "a"
        assert resolve_group_name(["a.ts", "b.ts"], "b.ts") == "b"


class TestSubgroups:
    """Test hierarchical subgroup detection."""

    MEMBERS = [
        "src/api/todoController.ts",
        "src/api/userController.ts",
        "src/services/todoService.ts",
        "src/services/userService.ts",
        "src/utils/formatter.ts",
    ]

    def test_one_subgroup_per_qualifying_directory(self, app_graph: Graph) -> None:
        compute_visual_metrics(app_graph)
        parent = FileGroup(id="group-todo", label="Todo", node_ids=list(self.MEMBERS), central_node_id="src/services/todoService.ts")

        result = detect_subgroups([parent], app_graph)

        assert [group.id for group in result] == ["group-todo", "group-todo-api", "group-todo-services"]
        assert result[0] is parent
        assert len(parent.node_ids) == 5

        api, services = result[1], result[2]
        assert api.label == "Api"
        assert api.level == 1
        assert api.parent_group_id == "group-todo"
        assert api.node_ids == ["src/api/todoController.ts", "src/api/userController.ts"]
        assert api.central_node_id == "src/api/todoController.ts"
        assert services.label == "Services"
        assert services.central_node_id == "src/services/todoService.ts"

    def test_single_directory_has_no_subgroups(self, coupled_graph: Graph) -> None:
        compute_visual_metrics(coupled_graph)
        groups = compute_file_groups(coupled_graph)

        assert detect_subgroups(groups, coupled_graph) == groups

    def test_subgroups_are_not_split_again(self, app_graph: Graph) -> None:
        child = FileGroup(id="group-x-api", label="Api", node_ids=list(self.MEMBERS), central_node_id=self.MEMBERS[0], level=1, parent_group_id="group-x")

        assert detect_subgroups([child], app_graph) == [child]
