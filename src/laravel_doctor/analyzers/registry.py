"""AnalyzerRegistry — ordered key → analyzer table and the run loop."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Iterator

from laravel_doctor.analyzers.base import Analyzer
from laravel_doctor.analyzers.controllers import ControllersAnalyzer
from laravel_doctor.analyzers.dependencies import DependenciesAnalyzer
from laravel_doctor.analyzers.environment import EnvironmentAnalyzer
from laravel_doctor.analyzers.hardcoded import HardcodedAnalyzer
from laravel_doctor.analyzers.policies import PoliciesAnalyzer
from laravel_doctor.analyzers.psr12 import Psr12Analyzer
from laravel_doctor.analyzers.routes_tests import RoutesTestsAnalyzer
from laravel_doctor.analyzers.security import SecurityAnalyzer
from laravel_doctor.analyzers.test_coverage import TestCoverageAnalyzer
from laravel_doctor.model.report import Report

if TYPE_CHECKING:
    from laravel_doctor.core.config import DoctorConfig

_logger = logging.getLogger(__name__)


def builtin_analyzers() -> list[tuple[str, Analyzer]]:
    """The nine built-in analyzers in execution order."""
    return [
        ("environment", EnvironmentAnalyzer()),
        ("psr12", Psr12Analyzer()),
        ("routes_tests", RoutesTestsAnalyzer()),
        ("controllers", ControllersAnalyzer()),
        ("policies", PoliciesAnalyzer()),
        ("security", SecurityAnalyzer()),
        ("hardcoded", HardcodedAnalyzer()),
        ("test_coverage", TestCoverageAnalyzer()),
        ("dependencies", DependenciesAnalyzer()),
    ]


class AnalyzerRegistry:
    """Analyzers keyed by name, run in registration order.

    Registering an existing key replaces the analyzer in place, so the key
    keeps its original position.
    """

    def __init__(self, *, builtins: bool = True):
        self._analyzers: dict[str, Analyzer] = {}
        if builtins:
            for key, analyzer in builtin_analyzers():
                self.register(key, analyzer)

    def register(self, key: str, analyzer: Analyzer) -> None:
        if not isinstance(analyzer, Analyzer):
            raise TypeError(f"analyzer for {key!r} has no analyze() method")
        self._analyzers[key] = analyzer

    def get(self, key: str) -> Analyzer | None:
        return self._analyzers.get(key)

    def keys(self) -> list[str]:
        return list(self._analyzers)

    def __contains__(self, key: object) -> bool:
        return key in self._analyzers

    def __len__(self) -> int:
        return len(self._analyzers)

    def __iter__(self) -> Iterator[tuple[str, Analyzer]]:
        return iter(list(self._analyzers.items()))

    def enabled_keys(self, config: DoctorConfig) -> list[str]:
        return [key for key in self._analyzers if config.is_enabled(key)]

    # ── execution ───────────────────────────────────────────────────

    def run(
        self,
        project_root: Path,
        report: Report,
        config: DoctorConfig,
        *,
        workers: int = 1,
    ) -> None:
        """Run every enabled analyzer against *project_root*.

        An analyzer that raises is logged and skipped; the others still run.
        With ``workers > 1`` each analyzer writes to its own sink and the
        sinks are merged in registration order, so the resulting report is
        the same as a sequential run.
        """
        enabled: list[tuple[str, Analyzer]] = []
        for key, analyzer in self._analyzers.items():
            if config.is_enabled(key):
                enabled.append((key, analyzer))
            else:
                _logger.debug("Analyzer '%s' disabled by config", key)

        if workers <= 1 or len(enabled) <= 1:
            for key, analyzer in enabled:
                self._run_one(key, analyzer, project_root, report, config)
            return

        sinks = [Report(report.project_path, config) for _ in enabled]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                pool.submit(self._run_one, key, analyzer, project_root, sink, config)
                for (key, analyzer), sink in zip(enabled, sinks)
            ]
            for future in futures:
                future.result()
        for sink in sinks:
            report.extend(sink.diagnostics)

    @staticmethod
    def _run_one(
        key: str,
        analyzer: Analyzer,
        project_root: Path,
        report: Report,
        config: DoctorConfig,
    ) -> None:
        _logger.debug("Running analyzer '%s'", key)
        # Diagnostics appended before a failure are kept.
        try:
            analyzer.analyze(project_root, report, config)
        except Exception:
            _logger.exception("Analyzer '%s' raised an exception — skipped", key)
