"""Dependencies analyzer — composer.lock presence and validity."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic

logger = logging.getLogger(__name__)

LOCK_FILE = "composer.lock"


class DependenciesAnalyzer:
    """Advisory only: vulnerability data needs ``composer audit``."""

    def analyze(self, project_root: Path, report, config) -> None:
        lock = project_root / LOCK_FILE
        if not lock.is_file():
            report.add(Diagnostic(
                category=Category.SECURITY,
                severity=Severity.WARNING,
                message="composer.lock not found",
                recommendation=(
                    "Run composer update and commit composer.lock for reproducible builds."
                ),
            ))
            return

        try:
            data = json.loads(lock.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.debug("Cannot parse %s: %s", lock, exc)
            data = None

        if not isinstance(data, dict):
            report.add(Diagnostic(
                category=Category.SECURITY,
                severity=Severity.WARNING,
                message="composer.lock is invalid or unreadable",
                recommendation="Check the contents of composer.lock.",
                file=LOCK_FILE,
            ))
            return

        report.add(Diagnostic(
            category=Category.SECURITY,
            severity=Severity.INFO,
            message=(
                "Dependencies: composer.lock present. To check for vulnerabilities, "
                "run: composer audit"
            ),
            recommendation='Add "composer audit" to CI or run it locally on a regular basis.',
        ))
