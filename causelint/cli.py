#!/usr/bin/env python3
"""
causelint CLI

Thin wrapper over the analysis engine.

Exit codes:
  0  no findings remain
  1  findings remain
  2  invalid input (missing path, bad config, not a Git repository)
  3  internal error
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog

from causelint.config import load_config
from causelint.orchestrator import FileReport, analyze_paths
from causelint.telemetry import setup_logging

logger = structlog.get_logger(component="causelint.cli")

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_INVALID = 2
EXIT_INTERNAL = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="causelint",
        description="Find errors thrown in catch blocks that drop the caught error.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  causelint analyze src
  causelint analyze --fix src/server.ts
  causelint analyze --changed-since origin/main .
  causelint analyze --error-constructor HttpError --format json .
        """,
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        metavar="{analyze}",
    )

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze JavaScript/TypeScript files or directories",
    )
    analyze_parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Files or directories to analyze (default: current directory)",
    )
    analyze_parser.add_argument(
        "--fix",
        action="store_true",
        help="Rewrite files in place with the available fixes",
    )
    analyze_parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report format (default: text)",
    )
    analyze_parser.add_argument(
        "--error-constructor",
        action="append",
        default=[],
        metavar="NAME",
        help="Additional error constructor to check (repeatable)",
    )
    analyze_parser.add_argument(
        "--changed-since",
        metavar="REV",
        help="Only analyze files changed in Git since REV",
    )
    analyze_parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: causelint.toml or pyproject.toml in the current directory)",
    )
    analyze_parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug)",
    )
    analyze_parser.add_argument(
        "--log-format",
        choices=("console", "json"),
        default="console",
        help="Log renderer for stderr (default: console)",
    )

    return parser


def _log_level(verbosity: int) -> str:
    if verbosity >= 2:
        return "debug"
    if verbosity == 1:
        return "info"
    return "warning"


def _fix_payload(finding) -> dict | None:
    if finding.fix is None:
        return None
    return {
        "start": finding.fix.start,
        "end": finding.fix.end,
        "text": finding.fix.replacement_text,
    }


def _print_json(reports: list[FileReport]) -> None:
    records = []
    for report in reports:
        for explanation in report.explanations:
            finding = explanation.finding
            records.append({
                "path": explanation.path,
                "line": finding.location.line,
                "column": finding.location.column,
                "kind": finding.kind,
                "message": explanation.message,
                "fix": _fix_payload(finding),
            })
    print(json.dumps(records, indent=2))


def _print_text(reports: list[FileReport]) -> None:
    total = 0
    fixable = 0
    fixed = 0

    for report in reports:
        fixed += report.fixed
        for explanation in report.explanations:
            finding = explanation.finding
            total += 1
            fixable += finding.fixable
            print(
                f"{explanation.path}:{finding.location.line}:{finding.location.column}: "
                f"{finding.kind} {explanation.message}"
            )

    if total:
        print()
    print(f"Analyzed files: {len(reports)}")
    if fixed:
        print(f"Fixed: {fixed}")
    print(f"Total findings: {total} ({fixable} fixable)")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=_log_level(args.verbose), fmt=args.log_format)

    if args.command == "analyze":
        paths = [Path(p).resolve() for p in args.paths]

        for path in paths:
            if not path.exists():
                print(f"Error: Path does not exist: {path}", file=sys.stderr)
                return EXIT_INVALID

        try:
            config = load_config(Path.cwd(), args.config)
            config = config.with_error_constructors(args.error_constructor)
            reports = analyze_paths(
                paths,
                config=config,
                fix=args.fix,
                changed_since=args.changed_since,
            )
        except (ValueError, RuntimeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_INVALID
        except Exception:
            logger.exception("analysis_failed")
            print("Internal error while analyzing.", file=sys.stderr)
            return EXIT_INTERNAL

        if args.format == "json":
            _print_json(reports)
        else:
            _print_text(reports)

        remaining = sum(len(r.explanations) for r in reports)
        return EXIT_FINDINGS if remaining else EXIT_CLEAN

    # This should never happen because argparse enforces commands
    parser.error(f"Unknown command: {args.command}")
    return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
