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
"""Rank the likely root causes of a failing test.

PURPOSE:
    Rank the files most likely to have caused a failing test, so the
    investigation starts at the shared root cause instead of the test's
    immediate imports.

WHAT IT DOES:
    - Loads the dependency graph produced by the scanner
    - Walks the failing test's imports transitively
    - Orders every dependency deepest first: the most transitively
      depended-upon file is the most likely root cause
    - Lists the files the test imports directly
    - Lists other tests sharing any of the same dependencies (likely to fail too)

USE CASES:
    - "This test went red, where do I look first?"
    - "Which other tests are probably failing for the same reason?"

METHOD:
    Breadth-first traversal of imports from the test, then a stable sort by
    depth (descending). Files at the same depth keep their discovery order.

OUTPUT:
    - Investigation order (deepest first)
    - Direct imports of the test
    - Other tests at risk
    - Optional: JSON failing-test result

REQUIREMENTS:
    - Python 3.8+
    - colorama: pip install colorama

COMPLEMENTARY TOOLS:
    - whatBreaksImpact.py: Raw forward/backward impact of a file
    - whatBreaksHealth.py: Fragile chains across all tests

EXAMPLES:
    # Where to look when a test fails
    ./whatBreaksFailing.py tests/unit/todo.test.ts

    # JSON output
    ./whatBreaksFailing.py tests/unit/todo.test.ts --json
"""
import sys
import argparse
import logging

from whatbreaks.color_utils import Colors, configure_color, print_error, print_warning
from whatbreaks.constants import DEFAULT_GRAPH_PATH, EXIT_SUCCESS, GraphLoadError
from whatbreaks.failing import analyze_failing_test
from whatbreaks.graph_io import dumps, load_graph_index, result_to_dict
from whatbreaks.graph_types import FailingResult
from whatbreaks.report_format import print_placeholder, print_section


def print_failing_report(result: FailingResult) -> None:
    """Print the investigation plan for a failing test."""
    print(f"\n{Colors.BRIGHT}Failing test: {Colors.RED}{result.test}{Colors.RESET}")

    print_section("Investigate in this order (deepest first)")
    if not result.files_to_investigate:
        print_placeholder("no dependencies")
    depth_by_id = {node.node_id: node.depth for node in result.chain}
    for position, file_id in enumerate(result.files_to_investigate, 1):
        depth = depth_by_id.get(file_id, 0)
        print(f"  {position:3}. {Colors.MAGENTA}{file_id}{Colors.RESET} {Colors.DIM}(depth {depth}){Colors.RESET}")

    print_section("Directly imported by the test")
    if not result.directly_tests:
        print_placeholder("none")
    for file_id in result.directly_tests:
        print(f"  {file_id}")

    print_section(f"Other tests at risk ({len(result.other_tests_at_risk)})")
    for test_id in result.other_tests_at_risk:
        print(f"  {Colors.YELLOW}{test_id}{Colors.RESET}")


def main() -> int:
    """Main entry point for the failing-test analysis tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="Failing-test analysis: which files to investigate first, deepest dependency first.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("test_file", metavar="TEST_FILE", help="Graph node id of the failing test (e.g., tests/unit/todo.test.ts)")

    parser.add_argument("--graph", default=DEFAULT_GRAPH_PATH, help=f"Path to the graph file (default: {DEFAULT_GRAPH_PATH})")

    parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    configure_color(no_color=args.no_color or args.json)

    try:
        _, index = load_graph_index(args.graph)
    except GraphLoadError as e:
        print_error(str(e))
        return e.exit_code

    if not index.has_node(args.test_file):
        print_warning(f"{args.test_file} is not in the graph")
    elif not index.is_test(args.test_file):
        print_warning(f"{args.test_file} is not a test file, analyzing it anyway")

    result = analyze_failing_test(index, args.test_file)

    if args.json:
        print(dumps(result_to_dict(result)))
    else:
        print_failing_report(result)

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
