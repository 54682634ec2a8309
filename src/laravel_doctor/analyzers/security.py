"""Security analyzer — CSRF/auth on write routes, middleware, dangerous calls.

Checks:
  - write routes in routes/web.php (CSRF reminder, info)
  - write routes in routes/api.php (authentication reminder, error)
  - app/Http/Kernel.php missing (info) or without CSRF middleware (warning)
  - raw query builder calls in app/ (SQL injection risk, warning)
  - banned function calls in app/ (code/command execution, error)
  - unescaped Blade output in resources/views (XSS risk, warning)
"""

from __future__ import annotations

import re
from pathlib import Path

from laravel_doctor.analyzers.base import report_missing_dir
from laravel_doctor.analyzers.patterns import LineRule, scan_lines
from laravel_doctor.core.discover import iter_files, read_lines, relative_posix
from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic

ROUTES_DIR = "routes"
APP_DIR = "app"
VIEWS_DIR = "resources/views"
KERNEL_FILE = "app/Http/Kernel.php"

_WRITE_ROUTE_RE = re.compile(r"->(post|put|patch|delete)\s*\(|Route::(post|put|patch|delete)\s*\(")
_CSRF_MIDDLEWARE = ("VerifyCsrfToken", "ValidateCsrfToken")

RAW_QUERY_RULES: tuple[LineRule, ...] = tuple(
    LineRule.literal(
        call,
        message=f"Raw SQL call {call} may allow SQL injection",
        recommendation=recommendation,
        severity=Severity.WARNING,
    )
    for call, recommendation in (
        ("DB::raw(", "Avoid DB::raw with user input; use the parameterized query builder."),
        ("whereRaw(", "Only use whereRaw with bindings (? or named)."),
        ("selectRaw(", "Only use selectRaw with bindings."),
        ("orderByRaw(", "Only use orderByRaw with bindings."),
        ("havingRaw(", "Only use havingRaw with bindings."),
    )
)

BANNED_CALL_RULES: tuple[LineRule, ...] = tuple(
    LineRule(
        name,
        re.compile(rf"(?<![\w>:$]){name}\s*\("),
        message=f"Banned function call {name}()",
        recommendation=recommendation,
        severity=Severity.ERROR,
    )
    for name, recommendation in (
        ("eval", "Remove eval(); it executes arbitrary code."),
        ("exec", "Use Symfony Process or Laravel's Process facade instead of exec()."),
        ("shell_exec", "Use Symfony Process or Laravel's Process facade instead of shell_exec()."),
        ("system", "Use Symfony Process or Laravel's Process facade instead of system()."),
        ("passthru", "Use Symfony Process or Laravel's Process facade instead of passthru()."),
        ("unserialize", "Use json_decode() or pass allowed_classes to unserialize()."),
    )
)

UNESCAPED_BLADE_RULE = LineRule(
    "{!!",
    re.compile(r"\{!!"),
    message="Unescaped Blade output {!! !!} may allow XSS",
    recommendation="Prefer {{ $var }}, which escapes output; keep {!! !!} for trusted HTML only.",
    severity=Severity.WARNING,
)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""


class SecurityAnalyzer:
    """Route, middleware and source-pattern security checks."""

    def analyze(self, project_root: Path, report, config) -> None:
        self._check_write_routes(project_root, report)
        self._check_kernel_middleware(project_root, report)
        self._check_app_sources(project_root, report, config)
        self._check_views(project_root, report, config)

    def _check_write_routes(self, project_root: Path, report) -> None:
        routes_dir = project_root / ROUTES_DIR
        if not routes_dir.is_dir():
            return

        web = routes_dir / "web.php"
        if web.is_file() and _WRITE_ROUTE_RE.search(_read(web)):
            report.add(Diagnostic(
                category=Category.SECURITY,
                severity=Severity.INFO,
                message=(
                    "POST/PUT/PATCH/DELETE routes in web.php: make sure VerifyCsrfToken "
                    "applies to the web group"
                ),
                recommendation=(
                    "The web middleware group must include "
                    "\\Illuminate\\Foundation\\Http\\Middleware\\VerifyCsrfToken."
                ),
                file="routes/web.php",
            ))

        api = routes_dir / "api.php"
        if api.is_file() and _WRITE_ROUTE_RE.search(_read(api)):
            report.add(Diagnostic(
                category=Category.SECURITY,
                severity=Severity.ERROR,
                message=(
                    "Write routes (POST/PUT/PATCH/DELETE) in api.php: stateless APIs do "
                    "not get CSRF protection; ensure authentication (Sanctum/session)"
                ),
                recommendation=(
                    "Protect API write routes with Laravel Sanctum or another auth guard; "
                    "keep form submissions in web.php behind CSRF."
                ),
                file="routes/api.php",
            ))

    def _check_kernel_middleware(self, project_root: Path, report) -> None:
        kernel = project_root / KERNEL_FILE
        if not kernel.is_file():
            report.add(Diagnostic(
                category=Category.SECURITY,
                severity=Severity.INFO,
                message="app/Http/Kernel.php not found (Laravel 11+ may use bootstrap/app.php)",
                recommendation=(
                    "Check that global and group middleware are defined in "
                    "bootstrap/app.php or the HTTP Kernel."
                ),
            ))
            return
        content = _read(kernel)
        if not any(name in content for name in _CSRF_MIDDLEWARE):
            report.add(Diagnostic(
                category=Category.SECURITY,
                severity=Severity.WARNING,
                message="Kernel does not reference VerifyCsrfToken/ValidateCsrfToken in the web group",
                recommendation=(
                    "Add \\Illuminate\\Foundation\\Http\\Middleware\\VerifyCsrfToken "
                    'to the "web" middleware group.'
                ),
                file=KERNEL_FILE,
            ))

    def _check_app_sources(self, project_root: Path, report, config) -> None:
        app_dir = project_root / APP_DIR
        if not app_dir.is_dir():
            report_missing_dir(
                report,
                Category.SECURITY,
                "Directory app/ not found for security pattern analysis",
                "Source pattern checks only cover the app/ directory.",
            )
            return

        rules = RAW_QUERY_RULES + BANNED_CALL_RULES
        for path in iter_files(project_root, app_dir, ignore_paths=config.ignore_paths):
            lines = read_lines(path)
            if lines is None:
                continue
            rel = relative_posix(path, project_root)
            for match in scan_lines(lines, rules):
                report.add(match.to_diagnostic(rel))

    def _check_views(self, project_root: Path, report, config) -> None:
        views_dir = project_root / VIEWS_DIR
        for path in iter_files(
            project_root, views_dir, suffix=".blade.php", ignore_paths=config.ignore_paths
        ):
            lines = read_lines(path)
            if lines is None:
                continue
            rel = relative_posix(path, project_root)
            for match in scan_lines(lines, (UNESCAPED_BLADE_RULE,)):
                report.add(match.to_diagnostic(rel))
