"""Command-line entry points for the scanner."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .config import load_config
from .reporters import render_csv, render_human, render_json, render_sarif
from .scanner import scan_project

EXIT_CLEAN = 0
EXIT_FAILURE = 1
EXIT_FINDINGS = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pqcscan",
        description="Find quantum-vulnerable cryptography in Go source code",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-file progress",
    )
    subparsers = parser.add_subparsers(dest="command")

    scan_parser = subparsers.add_parser("scan", help="Scan a project")
    scan_parser.add_argument(
        "--project",
        default=".",
        help="Project root to scan (defaults to cwd)",
    )
    scan_parser.add_argument(
        "--config",
        help="Path to configuration file (.pqcscanrc.json by default)",
    )
    scan_parser.add_argument(
        "--deep",
        action="store_true",
        help="Also report calls nested inside blocks and expressions",
    )
    scan_parser.add_argument(
        "--no-tests",
        action="store_true",
        help="Skip _test.go files",
    )
    scan_parser.add_argument(
        "--format",
        choices=["json", "sarif", "human", "csv"],
        action="append",
        help="Report format(s) to emit (default: human)",
    )
    scan_parser.add_argument(
        "--output",
        action="append",
        nargs=2,
        metavar=("FORMAT", "PATH"),
        help="Write report to file (e.g., --output sarif report.sarif)",
    )
    return parser


def _config_overrides(ns: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if ns.deep:
        overrides["deep"] = True
    if ns.no_tests:
        overrides["include_tests"] = False
    return overrides


def _handle_scan(ns: argparse.Namespace) -> int:
    project_root = Path(ns.project)
    config = load_config(
        project_root=project_root,
        config_path=Path(ns.config) if ns.config else None,
        overrides=_config_overrides(ns) or None,
    )
    result = scan_project(config)
    report = result.to_dict()
    formats = ns.format or ["human"]
    output_targets: List[Tuple[str, Path]] = []
    for spec in ns.output or []:
        fmt, path_str = spec
        output_targets.append((fmt, Path(path_str)))
    _print_report(report, formats, output_targets)

    if result.errors:
        return EXIT_FAILURE
    if result.diagnostics:
        return EXIT_FINDINGS
    return EXIT_CLEAN


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not args.command:
        parser.print_help()
        return EXIT_FAILURE
    return _handle_scan(args)


def _print_report(
    data: Dict[str, object],
    formats: List[str],
    output_targets: List[Tuple[str, Path]],
) -> None:
    formatters = {
        "json": render_json,
        "sarif": render_sarif,
        "human": render_human,
        "csv": render_csv,
    }
    outputs: Dict[str, str] = {}
    for fmt in formats:
        renderer = formatters.get(fmt)
        if not renderer:
            continue
        outputs[fmt] = renderer(data)
    for idx, (fmt, content) in enumerate(outputs.items(), start=1):
        if len(outputs) > 1:
            print(f"--- {fmt} report {idx}/{len(outputs)} ---")
        print(content)
    for fmt, path in output_targets:
        renderer = formatters.get(fmt)
        if not renderer:
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        content = outputs.get(fmt) or renderer(data)
        outputs.setdefault(fmt, content)
        path.write_text(content)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
