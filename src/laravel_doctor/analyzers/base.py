"""Analyzer protocol and helpers shared by the built-in analyzers."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic

if TYPE_CHECKING:
    from laravel_doctor.core.config import DoctorConfig
    from laravel_doctor.model.report import Report


@runtime_checkable
class Analyzer(Protocol):
    """Every analyzer exposes a single ``analyze()`` operation.

    Implementations append diagnostics to *report* and return nothing. They
    keep no state between calls and must not raise for problems in the
    analyzed project: missing directories become ``info`` diagnostics and
    unreadable files are skipped.
    """

    def analyze(self, project_root: Path, report: Report, config: DoctorConfig) -> None:
        ...


def report_missing_dir(
    report: Report,
    category: Category,
    message: str,
    recommendation: str,
) -> None:
    """Record the single ``info`` diagnostic for an absent target directory."""
    report.add(
        Diagnostic(
            category=category,
            severity=Severity.INFO,
            message=message,
            recommendation=recommendation,
        )
    )
