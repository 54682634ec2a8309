"""Doctor configuration — built-in defaults merged with an optional file.

Supported files (first match at the project root wins when no explicit
path is given)::

    laravel-doctor.config.json
    laravel-doctor.config.yaml
    laravel-doctor.config.yml

A ``laravel-doctor.config.php`` file is not evaluated; finding one logs a
warning.

An unreadable or invalid file never fails a run: a warning is logged and
the built-in defaults are used instead.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import jsonschema
import yaml

from laravel_doctor.contracts.load import validate_instance
from laravel_doctor.errors import ConfigError
from laravel_doctor.model import (
    DEFAULT_SEVERITY_WEIGHTS,
    UNKNOWN_SEVERITY_WEIGHT,
    Severity,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAMES: tuple[str, ...] = (
    "laravel-doctor.config.json",
    "laravel-doctor.config.yaml",
    "laravel-doctor.config.yml",
)
# Never evaluated; its presence only triggers a warning.
PHP_CONFIG_FILENAME = "laravel-doctor.config.php"

DEFAULT_ANALYZERS: tuple[str, ...] = (
    "environment",
    "psr12",
    "routes_tests",
    "controllers",
    "policies",
    "security",
    "hardcoded",
    "test_coverage",
    "dependencies",
)

DEFAULT_IGNORE_PATHS: tuple[str, ...] = (
    "vendor/",
    "node_modules/",
    "storage/",
    "bootstrap/cache/",
)


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class DoctorConfig:
    """Immutable, fully resolved configuration for one run."""

    analyzers: Mapping[str, bool] = field(
        default_factory=lambda: _frozen({key: True for key in DEFAULT_ANALYZERS}),
    )
    ignore_paths: tuple[str, ...] = DEFAULT_IGNORE_PATHS
    severity_weights: Mapping[Severity, int] = field(
        default_factory=lambda: _frozen(DEFAULT_SEVERITY_WEIGHTS),
    )

    def is_enabled(self, key: str) -> bool:
        """Analyzers not mentioned in the config are enabled."""
        return bool(self.analyzers.get(key, True))

    def weight_for(self, severity: Severity | str) -> int:
        if isinstance(severity, Severity):
            return self.severity_weights.get(severity, UNKNOWN_SEVERITY_WEIGHT)
        return UNKNOWN_SEVERITY_WEIGHT

    def merged(self, overrides: Mapping[str, Any]) -> "DoctorConfig":
        """Return a new config with *overrides* applied field by field.

        Mappings merge key by key; a supplied ``ignore_paths`` list replaces
        the current one. Absent keys keep the current value.
        """
        analyzers = dict(self.analyzers)
        for key, enabled in (overrides.get("analyzers") or {}).items():
            analyzers[str(key)] = bool(enabled)

        ignore_paths = self.ignore_paths
        if overrides.get("ignore_paths") is not None:
            ignore_paths = tuple(str(p) for p in overrides["ignore_paths"])

        weights = dict(self.severity_weights)
        for name, weight in (overrides.get("severity_weights") or {}).items():
            weights[Severity(name)] = int(weight)

        return DoctorConfig(
            analyzers=_frozen(analyzers),
            ignore_paths=ignore_paths,
            severity_weights=_frozen(weights),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "analyzers": dict(self.analyzers),
            "ignore_paths": list(self.ignore_paths),
            "severity_weights": {
                sev.value: weight for sev, weight in self.severity_weights.items()
            },
        }


DEFAULT_CONFIG = DoctorConfig()


def find_config_file(project_path: Path) -> Path | None:
    """Return the first known config file present at *project_path*."""
    php_config = project_path / PHP_CONFIG_FILENAME
    if php_config.is_file():
        logger.warning(
            "%s found but PHP config files are not supported — use %s",
            php_config,
            " or ".join(CONFIG_FILENAMES),
        )
    for name in CONFIG_FILENAMES:
        candidate = project_path / name
        if candidate.is_file():
            return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse and validate a config file.

    Raises ``ConfigError`` when the file is unreadable, malformed, or does
    not satisfy ``config.schema.json``.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(data).__name__}")

    try:
        validate_instance(data, "config.schema.json")
    except jsonschema.ValidationError as exc:
        raise ConfigError(f"{path}: {exc.message}") from exc
    return data


def load_config(
    config_path: Path | str | None = None,
    project_path: Path | str | None = None,
) -> DoctorConfig:
    """Resolve the configuration for a run.

    *config_path* takes precedence; otherwise a config file is searched at
    *project_path*. Falls back to ``DEFAULT_CONFIG`` when nothing usable is
    found.
    """
    path: Path | None = Path(config_path) if config_path is not None else None
    if path is None and project_path is not None:
        path = find_config_file(Path(project_path))
    if path is None:
        return DEFAULT_CONFIG
    if not path.is_file():
        logger.warning("Config file %s not found — using defaults", path)
        return DEFAULT_CONFIG

    try:
        overrides = read_config_file(path)
    except ConfigError as exc:
        logger.warning("Invalid config file — using defaults: %s", exc)
        return DEFAULT_CONFIG

    logger.debug("Loaded config from %s", path)
    return DEFAULT_CONFIG.merged(overrides)
