"""Runner — resolves config, runs the registry, returns the Report."""

from __future__ import annotations

import logging
from pathlib import Path

from laravel_doctor.analyzers.registry import AnalyzerRegistry
from laravel_doctor.core.config import DoctorConfig, load_config
from laravel_doctor.errors import ProjectRootError
from laravel_doctor.model.report import Report

_logger = logging.getLogger(__name__)


def run_doctor(
    project_path: Path | str,
    config: DoctorConfig | None = None,
    *,
    config_path: Path | str | None = None,
    registry: AnalyzerRegistry | None = None,
    workers: int = 1,
) -> Report:
    """Audit the Laravel project at *project_path*.

    An explicit *config* wins over *config_path*; with neither, a config
    file at the project root is used when present. Raises
    ``ProjectRootError`` before any analyzer runs when *project_path* is
    not a directory.
    """
    root = Path(project_path)
    if not root.is_dir():
        raise ProjectRootError(f"project path is not a directory: {root}")
    root = root.resolve()

    if config is None:
        config = load_config(config_path, root)
    if registry is None:
        registry = AnalyzerRegistry()

    report = Report(root, config)
    _logger.info("Auditing %s with %d analyzer(s)", root, len(registry.enabled_keys(config)))
    registry.run(root, report, config, workers=workers)
    _logger.info("Collected %d diagnostic(s), score %d", len(report), report.score())
    return report
