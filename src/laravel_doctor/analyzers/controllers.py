"""Controllers analyzer — doc comments and type hints on controller actions."""

from __future__ import annotations

import logging
from pathlib import Path

from laravel_doctor.analyzers.base import report_missing_dir
from laravel_doctor.core.discover import iter_files, relative_posix
from laravel_doctor.errors import DeclarationParseError
from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic
from laravel_doctor.parsing.php_declarations import (
    DeclarationVisitor,
    MethodDeclaration,
    walk_declarations,
)

logger = logging.getLogger(__name__)

CONTROLLERS_DIR = "app/Http/Controllers"


class ControllerConventionVisitor(DeclarationVisitor):
    """Collects a diagnostic for each public method missing conventions."""

    def __init__(self, rel_path: str):
        self.rel_path = rel_path
        self.diagnostics: list[Diagnostic] = []

    def visit_method(self, node: MethodDeclaration) -> None:
        if node.is_constructor_like or not node.is_public:
            return

        problems: list[str] = []
        if node.doc_comment is None:
            problems.append("no docblock")
        untyped = node.untyped_parameters
        if untyped:
            problems.append("parameters without type hint: " + ", ".join(untyped))
        if node.return_type is None:
            problems.append("no return type")
        if not problems:
            return

        self.diagnostics.append(Diagnostic(
            category=Category.QUALITY,
            severity=Severity.WARNING,
            message=(
                f"Controller {self.rel_path} – method {node.name} "
                + "; ".join(problems)
            ),
            recommendation=(
                "Add docblocks and type hints (Request, int, JsonResponse, ...) "
                "to controller methods."
            ),
            file=self.rel_path,
            line=node.line,
        ))


class ControllersAnalyzer:
    """Structural checks over ``app/Http/Controllers/**/*.php``."""

    def analyze(self, project_root: Path, report, config) -> None:
        controllers_dir = project_root / CONTROLLERS_DIR
        if not controllers_dir.is_dir():
            report_missing_dir(
                report,
                Category.QUALITY,
                "Directory app/Http/Controllers not found",
                "No controllers to analyze.",
            )
            return

        for path in iter_files(project_root, controllers_dir, ignore_paths=config.ignore_paths):
            try:
                source = path.read_text(encoding="utf-8", errors="replace")
            except OSError:
                continue
            rel = relative_posix(path, project_root)
            visitor = ControllerConventionVisitor(rel)
            try:
                walk_declarations(source, visitor)
            except DeclarationParseError as exc:
                logger.debug("Skipping unparseable controller %s: %s", rel, exc)
                continue
            report.extend(visitor.diagnostics)
