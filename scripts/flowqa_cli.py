#!/usr/bin/env python3
"""
flowqa CLI

Usage modes:
- Default run: load a flowchart document, analyze it, print the JSON report
- Summary: print score and issue counts instead of the full report
- Export: write GraphML for external tools
- Utility: show version
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

import yaml

from flowqa_core import __version__ as flowqa_version
from flowqa_core.analyzer import FlowQualityAnalyzer
from flowqa_core.compiler import compile_from_file
from flowqa_core.config import AnalyzerConfig
from flowqa_core.report import summarize


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Analyze the quality of a flowchart document (JSON or YAML)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Utilities / meta
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")

    # Primary input
    p.add_argument("path", nargs="?", help="Path to a flowchart document (e.g., flowchart.json)")

    # Output
    p.add_argument("--summary", action="store_true", help="Print a summary instead of the full report")
    p.add_argument("--out", type=str, default="", help="Optional output JSON file path")
    p.add_argument("--export-graphml", type=str, default="", help="Export the flowchart to GraphML at given path")
    p.add_argument("--fail-on-error", action="store_true", help="Exit with status 1 if any error-kind issue is found")

    # Analyzer config overrides
    p.add_argument("--pass-bonus", type=float, default=None, help="Maximum bonus for passed rules")
    p.add_argument("--min-decision-outputs", type=int, default=None, help="Minimum outgoing connections per decision node")

    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalyzerConfig:
    cfg = AnalyzerConfig()
    if args.pass_bonus is not None:
        cfg.pass_bonus = float(args.pass_bonus)
    if args.min_decision_outputs is not None:
        cfg.min_decision_outputs = int(args.min_decision_outputs)
    return cfg


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.version:
        print(flowqa_version)
        return 0

    if not args.path:
        print("error: missing flowchart document path", file=sys.stderr)
        return 2

    logging.info("Loading flowchart from %s", args.path)
    try:
        flowchart = compile_from_file(args.path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logging.error("Could not load %s: %s", args.path, exc)
        return 2

    if args.export_graphml:
        logging.info("Exporting GraphML to %s", args.export_graphml)
        flowchart.export_graphml(args.export_graphml)

    analysis = FlowQualityAnalyzer(build_config(args)).analyze(
        flowchart.nodes, flowchart.connections
    )
    summary = summarize(analysis)
    logging.info(
        "Score %d with %d issue(s) (errors=%d warnings=%d)",
        summary["score"],
        summary["total_issues"],
        summary["errors"],
        summary["warnings"],
    )

    payload = summary if args.summary else analysis.to_dict()
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
    else:
        print(json.dumps(payload, indent=2, ensure_ascii=False))

    if args.fail_on_error and summary["errors"] > 0:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
