"""Hardcoded analyzer — credentials and URLs written as literals."""

from __future__ import annotations

import re
from pathlib import Path

from laravel_doctor.analyzers.base import report_missing_dir
from laravel_doctor.analyzers.patterns import LOOKUP_MARKERS, LineRule, scan_lines
from laravel_doctor.core.discover import iter_files, read_lines, relative_posix
from laravel_doctor.model import Category, Severity

SCAN_DIRS: tuple[str, ...] = ("app", "config", "routes", "database")

HARDCODED_RULES: tuple[LineRule, ...] = (
    LineRule(
        "password",
        re.compile(r"\bpassword\s*=\s*['\"][^'\"]+['\"]", re.I),
        message="Possible hardcoded sensitive value (password)",
        recommendation="Hardcoded password or credential: read it from .env or a secrets store.",
        severity=Severity.ERROR,
    ),
    LineRule(
        "secret",
        re.compile(r"\b(api_key|apikey|secret)\s*=\s*['\"][^'\"]+['\"]", re.I),
        message="Possible hardcoded sensitive value (secret)",
        recommendation="API key or secret in code: use env() or config().",
        severity=Severity.ERROR,
    ),
    LineRule(
        "url_http",
        re.compile(r"https?://[a-zA-Z0-9.-]+\.[a-z]{2,}(/[^\s'\"]*)?", re.I),
        message="Possible hardcoded sensitive value (url_http)",
        recommendation='Hardcoded URL: use config or .env (e.g. config("app.url")).',
        severity=Severity.ERROR,
    ),
)


class HardcodedAnalyzer:
    """Line scan of app/, config/, routes/ and database/ PHP files."""

    def analyze(self, project_root: Path, report, config) -> None:
        dirs = [project_root / d for d in SCAN_DIRS if (project_root / d).is_dir()]
        if not dirs:
            report_missing_dir(
                report,
                Category.SECURITY,
                "No app/, config/, routes/ or database/ directory to scan for hardcoded values",
                "Hardcoded value checks cover app/, config/, routes/ and database/.",
            )
            return

        for base in dirs:
            for path in iter_files(project_root, base, ignore_paths=config.ignore_paths):
                lines = read_lines(path)
                if lines is None:
                    continue
                rel = relative_posix(path, project_root)
                for match in scan_lines(lines, HARDCODED_RULES, suppress_markers=LOOKUP_MARKERS):
                    report.add(match.to_diagnostic(rel))

