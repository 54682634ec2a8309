"""Apply the fixes that analyzers flagged as automatic.

Only three transformations exist and each is idempotent:

  - ``strict_types``: insert ``declare(strict_types=1);`` after ``<?php``
  - ``tabs``: replace every tab with four spaces
  - ``trailing_whitespace``: LF line endings, no trailing blanks, exactly
    one final newline

A target file must resolve (symlinks included) to a path strictly inside
the project root. Files are read and written as bytes decoded as UTF-8, so
nothing changes on disk unless a transformation actually altered the
content.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from laravel_doctor.model import FixType
from laravel_doctor.model.diagnostic import Diagnostic
from laravel_doctor.model.report import Report

logger = logging.getLogger(__name__)

# Application order when a file needs several fixes.
SAFE_FIX_TYPES: tuple[FixType, ...] = (
    FixType.STRICT_TYPES,
    FixType.TABS,
    FixType.TRAILING_WHITESPACE,
)

_OPEN_TAG_RE = re.compile(r"^(\s*<\?php)\s*", re.IGNORECASE)
# Any strict_types declaration, including strict_types=0; PHP allows only one.
_ANY_STRICT_TYPES_RE = re.compile(r"declare\s*\(\s*strict_types\s*=\s*\d")
_STRICT_DECLARATION = "\n\ndeclare(strict_types=1);\n\n"
_TAB_WIDTH = 4


def fix_strict_types(content: str) -> str:
    if _ANY_STRICT_TYPES_RE.search(content):
        return content
    # Files not starting with an open tag (templates, HTML) are left alone.
    return _OPEN_TAG_RE.sub(
        lambda m: m.group(1) + _STRICT_DECLARATION, content, count=1
    )


def fix_tabs(content: str) -> str:
    return content.replace("\t", " " * _TAB_WIDTH)


def fix_trailing_whitespace(content: str) -> str:
    content = content.replace("\r\n", "\n").replace("\r", "\n")
    lines = [line.rstrip(" \t\f\v") for line in content.split("\n")]
    content = "\n".join(lines).rstrip(" \t\n")
    return content + "\n"


_FIXERS: dict[FixType, Callable[[str], str]] = {
    FixType.STRICT_TYPES: fix_strict_types,
    FixType.TABS: fix_tabs,
    FixType.TRAILING_WHITESPACE: fix_trailing_whitespace,
}


def is_safe_fix(diagnostic: Diagnostic) -> bool:
    return (
        diagnostic.auto_fixable
        and diagnostic.file is not None
        and diagnostic.fix_type in SAFE_FIX_TYPES
    )


@dataclass
class FixSummary:
    """Outcome of one fixer pass.

    ``modified`` holds project-relative POSIX paths in application order;
    ``skipped`` holds ``(file, reason)`` pairs.
    """

    modified: list[str] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    dry_run: bool = False

    @property
    def count(self) -> int:
        return len(self.modified)


class SafeFixer:
    """Rewrites files under *project_path* for auto-fixable diagnostics."""

    def __init__(self, project_path: Path | str):
        self.project_path = Path(project_path)

    def run(self, report: Report | Iterable[Diagnostic], *, dry_run: bool = False) -> FixSummary:
        summary = FixSummary(dry_run=dry_run)
        try:
            root = self.project_path.resolve(strict=True)
        except OSError as exc:
            logger.warning("Cannot resolve project root %s: %s", self.project_path, exc)
            return summary

        for path, fix_types in self._group_by_file(root, report, summary).items():
            rel = path.relative_to(root).as_posix()
            self._apply(path, rel, fix_types, summary)
        return summary

    def _group_by_file(
        self,
        root: Path,
        diagnostics: Iterable[Diagnostic],
        summary: FixSummary,
    ) -> dict[Path, set[FixType]]:
        grouped: dict[Path, set[FixType]] = {}
        for d in diagnostics:
            if not is_safe_fix(d):
                continue
            target = self._contained_path(root, d.file)
            if target is None:
                summary.skipped.append((d.file, "outside project root or missing"))
                continue
            grouped.setdefault(target, set()).add(d.fix_type)
        return grouped

    @staticmethod
    def _contained_path(root: Path, file: str) -> Path | None:
        candidate = root / file.lstrip("/")
        try:
            real = candidate.resolve(strict=True)
        except (OSError, RuntimeError):
            logger.info("Skipping %s: cannot resolve path", file)
            return None
        if real == root or not real.is_relative_to(root):
            logger.warning("Skipping %s: resolves outside the project root", file)
            return None
        if not real.is_file():
            logger.info("Skipping %s: not a regular file", file)
            return None
        return real

    @staticmethod
    def _apply(path: Path, rel: str, fix_types: set[FixType], summary: FixSummary) -> None:
        if not os.access(path, os.R_OK | os.W_OK):
            logger.warning("Skipping %s: not readable and writable", rel)
            summary.skipped.append((rel, "not readable and writable"))
            return
        try:
            original = path.read_bytes()
            content = original.decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", rel, exc)
            summary.skipped.append((rel, "unreadable or not valid UTF-8"))
            return

        for fix_type in SAFE_FIX_TYPES:
            if fix_type in fix_types:
                content = _FIXERS[fix_type](content)

        updated = content.encode("utf-8")
        if updated == original:
            logger.debug("%s already clean", rel)
            return
        if summary.dry_run:
            logger.info("Would fix %s (%s)", rel, ", ".join(sorted(f.value for f in fix_types)))
            summary.modified.append(rel)
            return
        try:
            path.write_bytes(updated)
        except OSError as exc:
            logger.warning("Cannot write %s: %s", rel, exc)
            summary.skipped.append((rel, "unwritable"))
            return
        logger.info("Fixed %s", rel)
        summary.modified.append(rel)
