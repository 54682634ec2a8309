"""Environment analyzer — checks the project's ``.env`` file."""

from __future__ import annotations

from pathlib import Path

from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic

ENV_FILE = ".env"
ENV_EXAMPLE_FILE = ".env.example"

REQUIRED_KEYS: tuple[str, ...] = ("APP_KEY", "APP_ENV", "APP_DEBUG")
RECOMMENDED_KEYS: tuple[str, ...] = (
    "CACHE_DRIVER",
    "QUEUE_CONNECTION",
    "SESSION_DRIVER",
    "DB_CONNECTION",
)

_TRUTHY = frozenset({"true", "1"})


def parse_env(content: str) -> dict[str, str]:
    """Parse ``KEY=value`` lines; comments and blank lines are skipped.

    Values are stripped of surrounding whitespace and quotes.
    """
    values: dict[str, str] = {}
    for raw in content.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        name, value = line.split("=", 1)
        name = name.strip()
        if name.startswith("export "):
            name = name[len("export "):].strip()
        values[name] = value.strip(" \t\"'")
    return values


class EnvironmentAnalyzer:
    """Required/recommended ``.env`` keys and debug mode."""

    def analyze(self, project_root: Path, report, config) -> None:
        env_path = project_root / ENV_FILE

        if not (project_root / ENV_EXAMPLE_FILE).is_file():
            report.add(Diagnostic(
                category=Category.ENVIRONMENT,
                severity=Severity.INFO,
                message=".env.example not found",
                recommendation="Commit a .env.example listing every key the application reads.",
                file=ENV_EXAMPLE_FILE,
            ))

        if not env_path.is_file():
            report.add(Diagnostic(
                category=Category.ENVIRONMENT,
                severity=Severity.ERROR,
                message=".env file not found",
                recommendation=(
                    "Create .env from .env.example: "
                    "cp .env.example .env && php artisan key:generate"
                ),
                file=ENV_FILE,
            ))
            return

        try:
            content = env_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            report.add(Diagnostic(
                category=Category.ENVIRONMENT,
                severity=Severity.ERROR,
                message="Unable to read the .env file",
                recommendation="Check the permissions of the .env file.",
                file=ENV_FILE,
            ))
            return

        values = parse_env(content)

        for key in REQUIRED_KEYS:
            if not values.get(key, "").strip():
                report.add(Diagnostic(
                    category=Category.ENVIRONMENT,
                    severity=Severity.ERROR,
                    message=f"Required environment variable missing or empty: {key}",
                    recommendation=(
                        "Run: php artisan key:generate"
                        if key == "APP_KEY"
                        else f"Set {key} in .env"
                    ),
                    file=ENV_FILE,
                    auto_fixable=key == "APP_KEY",
                ))

        for key in RECOMMENDED_KEYS:
            if not values.get(key, "").strip():
                report.add(Diagnostic(
                    category=Category.ENVIRONMENT,
                    severity=Severity.WARNING,
                    message=f"Recommended environment variable missing or empty: {key}",
                    recommendation=(
                        f"Set {key} in .env (e.g. CACHE_DRIVER=file, QUEUE_CONNECTION=sync)"
                    ),
                    file=ENV_FILE,
                ))

        if values.get("APP_DEBUG", "").lower() in _TRUTHY:
            report.add(Diagnostic(
                category=Category.ENVIRONMENT,
                severity=Severity.WARNING,
                message="APP_DEBUG is enabled (production must not run with debug on)",
                recommendation="Set APP_DEBUG=false in production.",
                file=ENV_FILE,
            ))
