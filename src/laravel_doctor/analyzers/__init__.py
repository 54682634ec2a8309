"""Analyzers produce diagnostics for a Laravel project.

Each analyzer satisfies the ``Analyzer`` protocol::

    analyzer.analyze(project_root, report, config)  # appends to report

Built-in analyzers (registry key → class):
    - environment: EnvironmentAnalyzer
    - psr12: Psr12Analyzer
    - routes_tests: RoutesTestsAnalyzer
    - controllers: ControllersAnalyzer
    - policies: PoliciesAnalyzer
    - security: SecurityAnalyzer
    - hardcoded: HardcodedAnalyzer
    - test_coverage: TestCoverageAnalyzer
    - dependencies: DependenciesAnalyzer
"""

from __future__ import annotations

from laravel_doctor.analyzers.base import Analyzer

__all__ = ["Analyzer", "AnalyzerRegistry"]


# Lazy import to avoid circular dependencies
def __getattr__(name: str):
    if name == "AnalyzerRegistry":
        from .registry import AnalyzerRegistry
        return AnalyzerRegistry
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
