"""Policies analyzer — Eloquent models without an authorization policy.

A model is covered when ``app/Policies/<Model>Policy.php`` exists or the
``AuthServiceProvider`` registers it through ``Gate::define``,
``Gate::resource``, ``Gate::policy`` or the ``$policies`` map. This is a
filename/regex heuristic, not a guarantee.
"""

from __future__ import annotations

import re
from pathlib import Path

from laravel_doctor.analyzers.base import report_missing_dir
from laravel_doctor.core.discover import iter_files, relative_posix
from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic

MODELS_DIR = "app/Models"
POLICIES_DIR = "app/Policies"
AUTH_PROVIDER = "app/Providers/AuthServiceProvider.php"

# Sub-directories holding helpers rather than models
_NON_MODEL_DIRS = ("Scopes/", "Concerns/", "Traits/")
_EXEMPT_MODELS = frozenset({"User"})

_GATE_STRING_RE = re.compile(
    r"Gate::(?:define|resource)\s*\(\s*['\"]([^'\"]+)['\"]\s*,\s*['\"]([^'\"]+)['\"]"
)
_CLASS_REF_RE = re.compile(r"([\w\\]+)::class\s*(?:,|=>)\s*([\w\\]+)::class")


def _short_name(name: str) -> str:
    return name.rsplit("\\", 1)[-1]


def registered_gates(provider_source: str) -> set[str]:
    """Names mentioned as gate abilities or policy registrations."""
    names: set[str] = set()
    for m in _GATE_STRING_RE.finditer(provider_source):
        names.add(m.group(1))
    for m in _CLASS_REF_RE.finditer(provider_source):
        names.add(_short_name(m.group(1)))
        names.add(_short_name(m.group(2)))
    return names


class PoliciesAnalyzer:
    """Cross-references ``app/Models`` against policies and gates."""

    def analyze(self, project_root: Path, report, config) -> None:
        models_dir = project_root / MODELS_DIR
        if not models_dir.is_dir():
            report_missing_dir(
                report,
                Category.SECURITY,
                "Directory app/Models not found",
                "No models to check for authorization policies.",
            )
            return

        models: list[tuple[str, str]] = []  # (model name, relative file)
        for path in iter_files(project_root, models_dir, ignore_paths=config.ignore_paths):
            inner = path.relative_to(models_dir).as_posix()
            if any(part in inner for part in _NON_MODEL_DIRS):
                continue
            if path.stem in _EXEMPT_MODELS:
                continue
            models.append((path.stem, relative_posix(path, project_root)))

        policies: set[str] = set()
        policies_dir = project_root / POLICIES_DIR
        for path in iter_files(project_root, policies_dir, ignore_paths=config.ignore_paths):
            policies.add(path.stem.replace("Policy", ""))

        gates: set[str] = set()
        provider = project_root / AUTH_PROVIDER
        if provider.is_file():
            try:
                gates = registered_gates(provider.read_text(encoding="utf-8", errors="replace"))
            except OSError:
                pass

        for model, rel in models:
            policy_name = f"{model}Policy"
            if model in policies or model in gates or policy_name in gates:
                continue
            report.add(Diagnostic(
                category=Category.SECURITY,
                severity=Severity.WARNING,
                message=f"Model {model} has no authorization Policy or Gate",
                recommendation=(
                    f"Create app/Policies/{policy_name}.php and register it in "
                    "AuthServiceProvider (Gate::policy or Gate::resource)."
                ),
                file=rel,
            ))
