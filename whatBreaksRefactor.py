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
"""Estimate the blast radius and risk of refactoring a file.

PURPOSE:
    Plan a refactor: how far does a change to one file ripple, how risky is
    it, and which tests must run afterwards.

WHAT IT DOES:
    - Loads the dependency graph produced by the scanner
    - Finds the files importing the target directly
    - Walks importers transitively to find every affected file
    - Collects every test covering an affected file
    - Suggests a test command (playwright for e2e tests, vitest otherwise)
    - Buckets the number of affected files into low/medium/high risk

USE CASES:
    - Before a refactor: "How big is this change really?"
    - In CI: "Which tests cover the files touched by this change?"
    - Code review: flagging changes to high-risk files

METHOD:
    Breadth-first traversal of importers from the changed file.
    Risk: >= 20 affected files is high, >= 5 medium, otherwise low.

OUTPUT:
    - Risk level and reason
    - Direct importers and transitively affected files
    - Tests to run and a suggested command
    - Optional: JSON refactor result

REQUIREMENTS:
    - Python 3.8+
    - colorama: pip install colorama

COMPLEMENTARY TOOLS:
    - whatBreaksImpact.py: Raw forward/backward impact of a file
    - whatBreaksHealth.py: Which files are hotspots in the first place

EXAMPLES:
    # Full refactor report
    ./whatBreaksRefactor.py src/models/todo.ts

    # Only print the suggested test command (handy in scripts)
    ./whatBreaksRefactor.py src/models/todo.ts --tests-only
"""
import sys
import argparse
import logging

from whatbreaks.color_utils import Colors, configure_color, print_error, print_warning
from whatbreaks.constants import DEFAULT_GRAPH_PATH, EXIT_SUCCESS, GraphLoadError
from whatbreaks.graph_io import dumps, load_graph_index, result_to_dict
from whatbreaks.graph_types import RefactorResult
from whatbreaks.refactor import analyze_refactor_impact
from whatbreaks.report_format import print_section, risk_badge


def print_refactor_report(result: RefactorResult) -> None:
    """Print the blast radius and test plan for a refactor."""
    print(f"\n{Colors.BRIGHT}Refactor: {Colors.MAGENTA}{result.file}{Colors.RESET} {risk_badge(result.risk_level)}")
    print(f"  {result.risk_reason}")

    print_section(f"Direct importers ({len(result.direct_importers)})")
    for file_id in result.direct_importers:
        print(f"  {file_id}")

    direct = set(result.direct_importers)
    indirect = [file_id for file_id in result.transitive_affected if file_id not in direct]
    print_section(f"Transitively affected ({result.affected_files} total, {len(indirect)} indirect)")
    for file_id in indirect:
        print(f"  {Colors.DIM}{file_id}{Colors.RESET}")

    print_section(f"Tests to run ({result.affected_tests})")
    for test_id in result.tests_to_run:
        print(f"  {Colors.CYAN}{test_id}{Colors.RESET}")

    if result.suggested_test_command:
        print(f"\n  {Colors.BRIGHT}Suggested:{Colors.RESET} {result.suggested_test_command}")


def main() -> int:
    """Main entry point for the refactor analysis tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="Refactor analysis: blast radius, risk level and tests to run for a file change.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("file", metavar="FILE", help="Graph node id of the file to change (e.g., src/models/todo.ts)")

    parser.add_argument("--tests-only", action="store_true", help="Only print the suggested test command")

    parser.add_argument("--graph", default=DEFAULT_GRAPH_PATH, help=f"Path to the graph file (default: {DEFAULT_GRAPH_PATH})")

    parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    configure_color(no_color=args.no_color or args.json or args.tests_only)

    try:
        _, index = load_graph_index(args.graph)
    except GraphLoadError as e:
        print_error(str(e))
        return e.exit_code

    result = analyze_refactor_impact(index, args.file)

    if args.json:
        print(dumps(result_to_dict(result)))
        return EXIT_SUCCESS

    if args.tests_only:
        if result.suggested_test_command:
            print(result.suggested_test_command)
        else:
            print_warning(f"No tests cover {args.file}")
        return EXIT_SUCCESS

    print_refactor_report(result)
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
