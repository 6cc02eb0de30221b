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
"""Report dependency hotspots, fragile test chains and import cycles.

PURPOSE:
    One-page health check of a codebase's dependency graph: which files are
    hotspots, which tests sit on fragile chains, and where imports go around
    in circles.

WHAT IT DOES:
    - Loads the dependency graph produced by the scanner
    - Hotspots: source files ranked by fan-in (number of importers)
    - Fragile chains: the deepest import chain reachable from each test
    - Circular dependencies: every import cycle, each reported once
    - Overall verdict: high / medium / low risk plus the test-to-source ratio

USE CASES:
    - Periodic architecture review
    - Spotting files that should be split before they become bottlenecks
    - Tracking down import cycles

METHOD:
    Fan-in from the adjacency index, breadth-first chain measurement per test,
    three-color depth-first search for cycles.
    Hotspot risk: fan-in >= 20 is high, >= 5 medium.
    Overall: high with more than 3 high-risk hotspots or more than 2 cycles.

OUTPUT:
    - Summary counts and overall risk
    - Top N hotspots, top N fragile chains, all cycles
    - Optional: JSON health report with summary

REQUIREMENTS:
    - Python 3.8+
    - colorama: pip install colorama

COMPLEMENTARY TOOLS:
    - whatBreaksRefactor.py: Plan a change to one of the hotspots
    - whatBreaksGroups.py: Module clusters of the codebase

EXAMPLES:
    # Full health report
    ./whatBreaksHealth.py

    # Only the 5 biggest hotspots
    ./whatBreaksHealth.py --section hotspots --top 5

    # Machine-readable report
    ./whatBreaksHealth.py --json
"""
import sys
import argparse
import logging
from typing import Any, Dict

from whatbreaks.color_utils import Colors, configure_color, print_error, print_warning
from whatbreaks.constants import DEFAULT_GRAPH_PATH, DEFAULT_TOP_N, EXIT_SUCCESS, REPORT_SEPARATOR_WIDTH, ArgumentError, GraphLoadError
from whatbreaks.graph_io import dumps, health_report_to_dict, health_summary_to_dict, load_graph_index
from whatbreaks.graph_types import HealthReport, HealthSummary
from whatbreaks.report_format import format_path, print_placeholder, print_section, risk_badge
from whatbreaks.risk import analyze_risk, summarize_health

SECTIONS = ("all", "hotspots", "chains", "circular")


def format_json_output(report: HealthReport, summary: HealthSummary) -> str:
    data: Dict[str, Any] = health_report_to_dict(report)
    data["summary"] = health_summary_to_dict(summary)
    return dumps(data)


def print_summary(report: HealthReport, summary: HealthSummary) -> None:
    print(f"\n{Colors.BRIGHT}{'=' * REPORT_SEPARATOR_WIDTH}{Colors.RESET}")
    print(f"{Colors.BRIGHT}CODEBASE HEALTH{Colors.RESET} {risk_badge(summary.overall_risk)}")
    print(f"{Colors.BRIGHT}{'=' * REPORT_SEPARATOR_WIDTH}{Colors.RESET}")
    print(f"  Source files:          {report.source_files}")
    print(f"  Test files:            {report.test_files} ({summary.test_source_ratio}% of source)")
    print(f"  Edges:                 {report.edges}")
    print(f"  High-risk hotspots:    {summary.high_risk_hotspots}")
    print(f"  Circular dependencies: {summary.circular_count}")


def print_hotspots(report: HealthReport, top: int) -> None:
    print_section(f"Hotspots (top {min(top, len(report.hotspots))} of {len(report.hotspots)})")
    if not report.hotspots:
        print_placeholder("no file is imported by another")
        return

    for hotspot in report.hotspots[:top]:
        print(
            f"  {risk_badge(hotspot.risk_level)} {Colors.MAGENTA}{hotspot.file}{Colors.RESET}"
            f" fan-in {Colors.BRIGHT}{hotspot.fan_in}{Colors.RESET}, {hotspot.tests_at_risk} tests at risk"
        )


def print_fragile_chains(report: HealthReport, top: int) -> None:
    print_section(f"Fragile chains (top {min(top, len(report.fragile_chains))} of {len(report.fragile_chains)})")
    if not report.fragile_chains:
        print_placeholder("no test imports anything")
        return

    for chain in report.fragile_chains[:top]:
        print(f"  {Colors.CYAN}{chain.test}{Colors.RESET} depth {Colors.BRIGHT}{chain.chain_depth}{Colors.RESET} → {chain.deepest_dep}")
        print(f"      {Colors.DIM}{chain.reason}{Colors.RESET}")


def print_circular_deps(report: HealthReport) -> None:
    print_section(f"Circular dependencies ({len(report.circular_deps)})")
    if not report.circular_deps:
        print(f"  {Colors.GREEN}None found{Colors.RESET}")
        return

    for dep in report.circular_deps:
        print(f"  {Colors.RED}{format_path(dep.cycle)}{Colors.RESET}")


def main() -> int:
    """Main entry point for the health analysis tool.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(
        description="Health analysis: hotspots, fragile test chains and circular dependencies.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--section", choices=SECTIONS, default="all", help="Which part of the report to show (default: all)")

    parser.add_argument("--top", type=int, default=DEFAULT_TOP_N, help=f"Number of hotspots / chains to display (default: {DEFAULT_TOP_N})")

    parser.add_argument("--graph", default=DEFAULT_GRAPH_PATH, help=f"Path to the graph file (default: {DEFAULT_GRAPH_PATH})")

    parser.add_argument("--json", action="store_true", help="Print the full report as JSON")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")
    configure_color(no_color=args.no_color or args.json)

    try:
        if args.top < 1:
            raise ArgumentError(f"--top must be at least 1, got {args.top}")
        _, index = load_graph_index(args.graph)
    except (ArgumentError, GraphLoadError) as e:
        print_error(str(e))
        return e.exit_code

    report = analyze_risk(index)
    summary = summarize_health(report)

    if args.json:
        print(format_json_output(report, summary))
        return EXIT_SUCCESS

    print_summary(report, summary)
    if args.section in ("all", "hotspots"):
        print_hotspots(report, args.top)
    if args.section in ("all", "chains"):
        print_fragile_chains(report, args.top)
    if args.section in ("all", "circular"):
        print_circular_deps(report)

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
