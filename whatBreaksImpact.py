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
"""Show which files and tests are affected when a file changes.

PURPOSE:
    Show the blast radius of a single file: every file that breaks when it
    changes (forward) and everything it depends on (backward), together with
    the tests that exercise the affected files.

WHAT IT DOES:
    - Loads the dependency graph produced by the scanner (.whatbreaks/graph.json)
    - Forward: walks importers transitively ("who imports me, and who imports them")
    - Backward: walks imports transitively ("what do I import, and what do those import")
    - Lists every reached file grouped by BFS depth
    - Lists the tests touched along the way

USE CASES:
    - "I am about to change this file, what else could break?"
    - "Which tests should I run after touching this file?"
    - "What does this test actually depend on?"

METHOD:
    Breadth-first traversal over a pre-built adjacency index. Every node is
    visited once, at the depth it was first discovered, so import cycles
    terminate.

OUTPUT:
    - Reached files with their depth (depth 0 is the file itself)
    - Affected tests
    - Optional: JSON with {nodes: [{nodeId, depth}], affectedTests} per direction

REQUIREMENTS:
    - Python 3.8+
    - colorama: pip install colorama

COMPLEMENTARY TOOLS:
    - whatBreaksRefactor.py: Risk-scored refactor plan with a test command
    - whatBreaksFailing.py: Root-cause ranking for a failing test
    - whatBreaksHealth.py: Hotspots, fragile chains and circular dependencies

EXAMPLES:
    # Forward and backward impact of a file
    ./whatBreaksImpact.py src/utils/formatter.ts

    # Only what breaks when the file changes
    ./whatBreaksImpact.py src/utils/formatter.ts --direction forward

    # Machine-readable output against a graph in another location
    ./whatBreaksImpact.py src/models/todo.ts --graph ../app/.whatbreaks/graph.json --json
"""
import sys
import argparse
import logging
from typing import Any, Dict, List

from whatbreaks.color_utils import Colors, configure_color, print_error, print_warning
from whatbreaks.constants import DEFAULT_GRAPH_PATH, EXIT_SUCCESS, GraphLoadError
from whatbreaks.graph_index import GraphIndex
from whatbreaks.graph_io import dumps, impact_result_to_dict, load_graph_index
from whatbreaks.graph_types import ImpactResult
from whatbreaks.impact import compute_backward_impact, compute_forward_impact
from whatbreaks.report_format import print_placeholder, print_section

DIRECTIONS = ("both", "forward", "backward")


def compute_impacts(index: GraphIndex, file_id: str, direction: str) -> Dict[str, ImpactResult]:
    """Run the requested impact directions.

    Args:
        index: Graph index
        file_id: File to analyze
        direction: "both", "forward" or "backward"

    Returns:
        Dictionary mapping direction name -> ImpactResult
    """
    results: Dict[str, ImpactResult] = {}
    if direction in ("both", "forward"):
        results["forward"] = compute_forward_impact(index, file_id)
    if direction in ("both", "backward"):
        results["backward"] = compute_backward_impact(index, file_id)
    return results


def format_json_output(file_id: str, results: Dict[str, ImpactResult]) -> str:
    data: Dict[str, Any] = {"file": file_id}
    for direction, result in results.items():
        data[direction] = impact_result_to_dict(result)
    return dumps(data)


def print_impact(title: str, result: ImpactResult) -> None:
    """Print one impact direction grouped by depth."""
    print_section(title)

    reached = result.nodes[1:]
    if not reached:
        print_placeholder("nothing")
    else:
        by_depth: Dict[int, List[str]] = {}
        for node in reached:
            by_depth.setdefault(node.depth, []).append(node.node_id)

        for depth in sorted(by_depth):
            print(f"  {Colors.BRIGHT}depth {depth}{Colors.RESET}")
            for node_id in by_depth[depth]:
                print(f"    {Colors.MAGENTA}{node_id}{Colors.RESET}")

    print(f"\n  Affected tests: {Colors.BRIGHT}{len(result.affected_tests)}{Colors.RESET}")
    for test_id in result.affected_tests:
        print(f"    {Colors.CYAN}{test_id}{Colors.RESET}")


def main() -> int:
    """Main entry point for the impact analysis tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="Impact analysis: what breaks when a file changes, and what it depends on.",
        epilog="""
Forward impact follows importers, backward impact follows imports.
Both directions report the tests touched along the way.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("file", metavar="FILE", help="Graph node id of the file (e.g., src/utils/formatter.ts)")

    parser.add_argument("--direction", choices=DIRECTIONS, default="both", help="Which direction to analyze (default: both)")

    parser.add_argument("--graph", default=DEFAULT_GRAPH_PATH, help=f"Path to the graph file (default: {DEFAULT_GRAPH_PATH})")

    parser.add_argument("--json", action="store_true", help="Print results as JSON")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    configure_color(no_color=args.no_color or args.json)

    try:
        _, index = load_graph_index(args.graph)
    except GraphLoadError as e:
        print_error(str(e))
        return e.exit_code

    if not index.has_node(args.file):
        print_warning(f"{args.file} is not in the graph")

    results = compute_impacts(index, args.file, args.direction)

    if args.json:
        print(format_json_output(args.file, results))
        return EXIT_SUCCESS

    print(f"\n{Colors.BRIGHT}Impact of {Colors.MAGENTA}{args.file}{Colors.RESET}")
    if "forward" in results:
        print_impact("Forward: files that break when this changes", results["forward"])
    if "backward" in results:
        print_impact("Backward: files this depends on", results["backward"])

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
