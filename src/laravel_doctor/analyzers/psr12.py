"""PSR-12 analyzer — style issues in ``app/`` that the safe fixer can repair.

Rules:
  - missing ``declare(strict_types=1)`` (fix: strict_types)
  - trailing whitespace, CR line endings or a missing/duplicated final
    newline (fix: trailing_whitespace)
  - tab characters (fix: tabs)
"""

from __future__ import annotations

import re
from pathlib import Path

from laravel_doctor.analyzers.base import report_missing_dir
from laravel_doctor.core.discover import iter_files, relative_posix
from laravel_doctor.model import Category, FixType, Severity
from laravel_doctor.model.diagnostic import Diagnostic

APP_DIR = "app"

STRICT_TYPES_RE = re.compile(r"declare\s*\(\s*strict_types\s*=\s*1\s*\)")
_TRAILING_WS_RE = re.compile(r"[ \t]+$")


def has_strict_types(content: str) -> bool:
    return bool(STRICT_TYPES_RE.search(content))


def first_whitespace_issue(content: str) -> int | None:
    """1-based line of the first trailing-whitespace problem, or None.

    A file must use LF endings, carry no trailing blanks on any line and
    end with exactly one newline.
    """
    if "\r" in content:
        return content[: content.index("\r")].count("\n") + 1
    lines = content.split("\n")
    for num, line in enumerate(lines, start=1):
        if _TRAILING_WS_RE.search(line):
            return num
    if not content.endswith("\n"):
        return len(lines)
    if content.endswith("\n\n"):
        return max(1, len(lines) - 1)
    return None


class Psr12Analyzer:
    """Style checks over ``app/**/*.php``."""

    def analyze(self, project_root: Path, report, config) -> None:
        app_dir = project_root / APP_DIR
        if not app_dir.is_dir():
            report_missing_dir(
                report,
                Category.QUALITY,
                "Directory app/ not found for PSR-12 analysis",
                "Quality analysis only covers the app/ directory.",
            )
            return

        found = False
        for path in iter_files(project_root, app_dir, ignore_paths=config.ignore_paths):
            found = True
            self._check_file(path, project_root, report)

        if not found:
            report_missing_dir(
                report,
                Category.QUALITY,
                "No PHP files found in app/ for PSR-12 analysis",
                "Add code under app/ or adjust ignore_paths in the configuration.",
            )

    def _check_file(self, path: Path, root: Path, report) -> None:
        try:
            content = path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError):
            return
        rel = relative_posix(path, root)

        if not has_strict_types(content):
            report.add(Diagnostic(
                category=Category.QUALITY,
                severity=Severity.WARNING,
                message=f"File without declare(strict_types=1): {rel}",
                recommendation="Add declare(strict_types=1); right after the opening <?php tag.",
                file=rel,
                line=1,
                auto_fixable=True,
                fix_hint="Add declare(strict_types=1);",
                fix_type=FixType.STRICT_TYPES,
            ))

        ws_line = first_whitespace_issue(content)
        if ws_line is not None:
            report.add(Diagnostic(
                category=Category.QUALITY,
                severity=Severity.INFO,
                message=f"Trailing whitespace or missing final newline: {rel}",
                recommendation="Strip trailing spaces and end the file with a single newline.",
                file=rel,
                line=ws_line,
                auto_fixable=True,
                fix_type=FixType.TRAILING_WHITESPACE,
            ))

        if "\t" in content:
            report.add(Diagnostic(
                category=Category.QUALITY,
                severity=Severity.WARNING,
                message=f"File contains tabs (PSR-12 requires spaces): {rel}",
                recommendation="Replace tabs with 4 spaces.",
                file=rel,
                line=content[: content.index("\t")].count("\n") + 1,
                auto_fixable=True,
                fix_type=FixType.TABS,
            ))
