"""Line-based pattern rules shared by the text-scanning analyzers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Sequence

from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic

# Lines that read a value from env()/config() are indirections, not literals.
LOOKUP_MARKERS: tuple[str, ...] = ("env(", "config(")


@dataclass(frozen=True, slots=True)
class LineRule:
    """One regex evaluated line by line; the first matching line wins."""

    name: str
    pattern: re.Pattern[str]
    message: str
    recommendation: str
    category: Category = Category.SECURITY
    severity: Severity = Severity.WARNING

    @classmethod
    def literal(cls, needle: str, message: str, recommendation: str, **kw) -> "LineRule":
        return cls(needle, re.compile(re.escape(needle)), message, recommendation, **kw)


@dataclass(frozen=True, slots=True)
class LineMatch:
    rule: LineRule
    line: int  # 1-based
    text: str

    def to_diagnostic(self, rel_path: str) -> Diagnostic:
        return Diagnostic(
            category=self.rule.category,
            severity=self.rule.severity,
            message=f"{self.rule.message} in {rel_path}",
            recommendation=self.rule.recommendation,
            file=rel_path,
            line=self.line,
        )


def scan_lines(
    lines: Sequence[str],
    rules: Sequence[LineRule],
    *,
    suppress_markers: Sequence[str] = (),
) -> Iterator[LineMatch]:
    """Yield at most one match per rule, in rule order.

    A line containing any of *suppress_markers* never matches.
    """
    for rule in rules:
        for num, text in enumerate(lines, start=1):
            if suppress_markers and any(m in text for m in suppress_markers):
                continue
            if rule.pattern.search(text):
                yield LineMatch(rule=rule, line=num, text=text)
                break
