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
"""List and recompute coupling-based file groups.

PURPOSE:
    Show how the codebase clusters into modules, and refresh the computed
    parts of the graph (visual metrics and file groups) in place.

WHAT IT DOES:
    - Loads the dependency graph produced by the scanner
    - Lists the file groups stored in the graph with their central file
    - --update: recomputes fan-in, depth, layer and size for every node,
      re-clusters the files, detects subgroups and writes the graph back

USE CASES:
    - "What are the natural modules of this codebase?"
    - Refreshing a graph whose metrics or groups are stale

METHOD:
    Depth uses the strongly connected component condensation of the import
    graph (NetworkX), so cycles count as a single step.
    Clustering seeds one group per directory (one per file for flat layouts),
    greedily merges the most coupled pair while the coupling score stays at or
    above 0.4, then names each group after its most common file stem.

OUTPUT:
    - Groups with member count and central file, subgroups indented
    - Nodes per visual layer
    - Optional: JSON list of groups

REQUIREMENTS:
    - Python 3.8+
    - networkx: pip install networkx
    - colorama: pip install colorama

COMPLEMENTARY TOOLS:
    - whatBreaksHealth.py: Hotspots and cycles inside the groups

EXAMPLES:
    # List the stored groups
    ./whatBreaksGroups.py

    # Recompute metrics and groups, save, and list them
    ./whatBreaksGroups.py --update
"""
import sys
import argparse
import logging
from typing import List

from whatbreaks.color_utils import Colors, configure_color, print_error, print_success, print_warning
from whatbreaks.constants import DEFAULT_GRAPH_PATH, EXIT_SUCCESS, GraphLoadError
from whatbreaks.graph_io import dumps, groups_to_list, load_graph, save_graph
from whatbreaks.graph_types import FileGroup, Graph
from whatbreaks.grouping import compute_file_groups, detect_subgroups
from whatbreaks.metrics import compute_visual_metrics, layer_histogram
from whatbreaks.report_format import print_placeholder, print_section


def update_graph(graph: Graph) -> List[FileGroup]:
    """Recompute visual metrics and file groups, storing both in the graph.

    Args:
        graph: Graph snapshot (modified in place)

    Returns:
        The new groups, subgroups included
    """
    compute_visual_metrics(graph)
    groups = detect_subgroups(compute_file_groups(graph), graph)
    graph.groups = groups
    return groups


def print_groups(graph: Graph, groups: List[FileGroup]) -> None:
    top_level = [group for group in groups if group.level == 0]
    print_section(f"File groups ({len(top_level)})")

    if not groups:
        print_placeholder("no groups: fewer than 8 source files or no coupled clusters")

    for group in groups:
        indent = "    " * (group.level + 1)
        print(
            f"{indent}{Colors.BRIGHT}{group.label}{Colors.RESET} {Colors.DIM}({group.id}){Colors.RESET}"
            f" {len(group.node_ids)} files, central {Colors.MAGENTA}{group.central_node_id}{Colors.RESET}"
        )

    print_section("Nodes per layer")
    for layer_index, count in enumerate(layer_histogram(graph)):
        print(f"  layer {layer_index}: {count}")


def main() -> int:
    """Main entry point for the file grouping tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="File groups: list module clusters, or recompute metrics and groups with --update.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--update", action="store_true", help="Recompute visual metrics and groups and save the graph")

    parser.add_argument("--graph", default=DEFAULT_GRAPH_PATH, help=f"Path to the graph file (default: {DEFAULT_GRAPH_PATH})")

    parser.add_argument("--json", action="store_true", help="Print groups as JSON")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    configure_color(no_color=args.no_color or args.json)

    try:
        graph = load_graph(args.graph)
    except GraphLoadError as e:
        print_error(str(e))
        return e.exit_code

    if args.update:
        groups = update_graph(graph)
        save_graph(graph, args.graph)
        if not args.json:
            print_success(f"Updated {len(graph.nodes)} nodes and {len(groups)} groups in {args.graph}")
    else:
        groups = graph.groups or []
        if graph.groups is None and not args.json:
            print_warning("Graph has no stored groups, run with --update to compute them")

    if args.json:
        print(dumps(groups_to_list(groups)))
        return EXIT_SUCCESS

    print_groups(graph, groups)
    return EXIT_SUCCESS


if __name__ == "__main__":
    from whatbreaks.constants import EXIT_KEYBOARD_INTERRUPT, EXIT_RUNTIME_ERROR, WhatBreaksError

    try:
        exit_code = main()
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user", prefix=False)
        sys.exit(EXIT_KEYBOARD_INTERRUPT)
    except WhatBreaksError as e:
        logging.error(str(e))
        sys.exit(e.exit_code)
    except Exception as e:
        logging.error("Unexpected error: %s", e)
        if logging.getLogger().level == logging.DEBUG:
            import traceback

            traceback.print_exc()
        sys.exit(EXIT_RUNTIME_ERROR)
