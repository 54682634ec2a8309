"""CLI entry-point for laravel_doctor.

Usage:
    laravel-doctor [project] [--show-locations] [--config FILE] [--report FILE]
    laravel-doctor [project] --fix [--dry-run]
    laravel-doctor [project] --ci [--min-score N]
    python -m laravel_doctor [project] ...
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from laravel_doctor import __version__
from laravel_doctor.core.config import load_config
from laravel_doctor.core.runner import run_doctor
from laravel_doctor.errors import ProjectRootError
from laravel_doctor.fixer import SafeFixer
from laravel_doctor.policy.thresholds import DEFAULT_MIN_SCORE, ci_exit_code
from laravel_doctor.reports.console import render_console
from laravel_doctor.reports.exporters import write_report
from laravel_doctor.utils.exit_codes import ExitCode

logger = logging.getLogger("laravel_doctor")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="laravel-doctor",
        description=(
            "Analyze a Laravel project for architecture, quality, security, "
            "testability and environment issues."
        ),
    )
    p.add_argument(
        "project",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Path to the Laravel project (default: current directory).",
    )
    p.add_argument(
        "-f",
        "--fix",
        action="store_true",
        default=False,
        help="Apply safe automatic fixes (strict_types, tabs, trailing whitespace).",
    )
    p.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=False,
        help="List the files --fix would change without writing them.",
    )
    p.add_argument(
        "--show-locations",
        dest="show_locations",
        action="store_true",
        default=False,
        help="Show affected files and lines.",
    )
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Config file (.json, .yaml or .yml).",
    )
    p.add_argument(
        "-r",
        "--report",
        type=Path,
        default=None,
        help="Save the report to FILE (Markdown for .md/.markdown, JSON otherwise).",
    )
    p.add_argument(
        "--ci",
        dest="ci_mode",
        action="store_true",
        default=False,
        help=f"Exit with {int(ExitCode.VIOLATION)} when the score is below --min-score.",
    )
    p.add_argument(
        "--min-score",
        dest="min_score",
        type=int,
        default=DEFAULT_MIN_SCORE,
        help=f"Minimum score for a CI pass (default {DEFAULT_MIN_SCORE}).",
    )
    p.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Run analyzers on N threads (default 1).",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging on stderr.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _apply_fixes(report, project: Path, console: Console, *, dry_run: bool) -> None:
    summary = SafeFixer(project).run(report, dry_run=dry_run)
    verb = "Would fix" if dry_run else "Fixed"
    for rel in summary.modified:
        console.print(f"  [green]{verb}:[/] {escape(rel)}", highlight=False)
    if summary.count:
        console.print()
        action = "Would apply" if dry_run else "Applied"
        console.print(
            f"[green]{action} safe fixes to {summary.count} file(s): "
            "declare(strict_types=1), tabs → spaces, trailing whitespace.[/]",
            highlight=False,
        )
    else:
        console.print("No safe fixes to apply.", highlight=False)


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an ``ExitCode`` (0 ok, 1 CI violation, 2 error)."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    console = Console()

    project: Path = args.project
    if not project.is_dir():
        print(f"error: project path is not a directory: {project}", file=sys.stderr)
        return ExitCode.ERROR
    project = project.resolve()

    if args.workers < 1:
        print("error: --workers must be at least 1", file=sys.stderr)
        return ExitCode.ERROR

    config = load_config(args.config, project)

    started = time.perf_counter()
    try:
        report = run_doctor(project, config, workers=args.workers)
    except ProjectRootError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return ExitCode.ERROR
    duration = time.perf_counter() - started

    render_console(report, console=console, show_locations=args.show_locations, duration=duration)

    if args.fix or args.dry_run:
        _apply_fixes(report, project, console, dry_run=args.dry_run)

    exit_code = ExitCode.SUCCESS
    if args.report is not None:
        try:
            written = write_report(report, args.report, show_locations=args.show_locations)
        except OSError as exc:
            print(f"error: could not write report to {args.report}: {exc}", file=sys.stderr)
            exit_code = ExitCode.ERROR
        else:
            console.print(f"Report saved to: {written}", highlight=False, markup=False)

    if args.ci_mode:
        score = report.score()
        if ci_exit_code(score, args.min_score) == ExitCode.VIOLATION:
            console.print(
                f"[red]CI: Score {score} is below minimum {args.min_score}[/]",
                highlight=False,
            )
            return ExitCode.VIOLATION
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
