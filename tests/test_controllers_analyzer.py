"""Tests for the controller conventions analyzer."""

from __future__ import annotations

import textwrap
from pathlib import Path

from laravel_doctor.analyzers.controllers import ControllerConventionVisitor, ControllersAnalyzer
from laravel_doctor.core.config import DEFAULT_CONFIG
from laravel_doctor.model import Category, Severity
from laravel_doctor.model.report import Report
from laravel_doctor.parsing.php_declarations import walk_declarations


def write_php(root: Path, rel: str, content: str) -> Path:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return p


def analyze(root: Path) -> Report:
    report = Report(root, DEFAULT_CONFIG)
    ControllersAnalyzer().analyze(root, report, DEFAULT_CONFIG)
    return report


GOOD_CONTROLLER = """
<?php

declare(strict_types=1);

namespace App\\Http\\Controllers;

class UserController extends Controller
{
    public function __construct($service)
    {
    }

    /**
     * Show one user.
     */
    public function show(Request $request, int $id): JsonResponse
    {
        return response()->json([]);
    }

    private function helper($x)
    {
    }
}
"""


class TestControllersAnalyzer:
    def test_missing_directory_is_info(self, tmp_path: Path) -> None:
        (d,) = list(analyze(tmp_path))
        assert d.severity is Severity.INFO
        assert d.category is Category.QUALITY

    def test_conforming_controller_is_clean(self, tmp_path: Path) -> None:
        write_php(tmp_path, "app/Http/Controllers/UserController.php", GOOD_CONTROLLER)
        assert len(analyze(tmp_path)) == 0

    def test_reports_each_missing_convention(self, tmp_path: Path) -> None:
        write_php(
            tmp_path,
            "app/Http/Controllers/PostController.php",
            """
            <?php

            class PostController
            {
                public function index($request)
                {
                }
            }
            """,
        )
        (d,) = list(analyze(tmp_path))
        assert d.severity is Severity.WARNING
        assert d.category is Category.QUALITY
        assert d.file == "app/Http/Controllers/PostController.php"
        assert d.line == 5
        assert "method index" in d.message
        assert "no docblock" in d.message
        assert "parameters without type hint: $request" in d.message
        assert "no return type" in d.message

    def test_one_diagnostic_per_method(self, tmp_path: Path) -> None:
        write_php(
            tmp_path,
            "app/Http/Controllers/Api/OrderController.php",
            """
            <?php
            class OrderController
            {
                /** Store. */
                public function store(Request $request)
                {
                }

                public function destroy(int $id): Response
                {
                }
            }
            """,
        )
        messages = [d.message for d in analyze(tmp_path)]
        assert len(messages) == 2
        assert messages[0].endswith("method store no return type")
        assert messages[1].endswith("method destroy no docblock")

    def test_unparseable_file_skipped(self, tmp_path: Path) -> None:
        write_php(
            tmp_path,
            "app/Http/Controllers/Broken.php",
            "<?php class Broken { public function a($x) {}\n",
        )
        write_php(
            tmp_path,
            "app/Http/Controllers/Fine.php",
            "<?php class Fine { public function b($y) {} }\n",
        )
        report = analyze(tmp_path)
        assert [d.file for d in report] == ["app/Http/Controllers/Fine.php"]


def test_visitor_collects_without_report() -> None:
    visitor = ControllerConventionVisitor("app/Http/Controllers/X.php")
    walk_declarations("<?php class X { public function a() {} protected function b() {} }", visitor)
    assert len(visitor.diagnostics) == 1
    assert "method a" in visitor.diagnostics[0].message
