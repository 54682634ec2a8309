"""Tests for Report accumulation, capped scoring and grouping."""

from __future__ import annotations

from pathlib import Path

import pytest

from laravel_doctor.contracts.load import validate_instance
from laravel_doctor.core.config import DEFAULT_CONFIG
from laravel_doctor.model import CATEGORY_CAPS, CATEGORY_ORDER, Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic
from laravel_doctor.model.report import Report, count_test_files


def _diag(category=Category.SECURITY, severity=Severity.ERROR, message="m") -> Diagnostic:
    return Diagnostic(category=category, severity=severity, message=message, recommendation="r")


def _add_test_files(root: Path, count: int) -> None:
    tests = root / "tests" / "Feature"
    tests.mkdir(parents=True, exist_ok=True)
    for i in range(count):
        (tests / f"Example{i}Test.php").write_text("<?php\n", encoding="utf-8")


@pytest.fixture
def report(tmp_path: Path) -> Report:
    return Report(tmp_path, DEFAULT_CONFIG)


class TestScoreBounds:
    def test_empty_report_scores_100(self, report: Report) -> None:
        assert report.score() == 100
        assert report.bonus_points() == 0

    def test_everything_capped_scores_0(self, report: Report) -> None:
        for category in CATEGORY_ORDER:
            for _ in range(20):
                report.add(_diag(category=category))
        assert report.score() == 0

    def test_bonus_never_exceeds_100(self, report: Report, tmp_path: Path) -> None:
        _add_test_files(tmp_path, 6)
        (tmp_path / "composer.lock").write_text("{}", encoding="utf-8")
        assert report.bonus_points() == 15
        assert report.score() == 100

    def test_score_is_recomputed(self, report: Report) -> None:
        assert report.score() == 100
        report.add(_diag())
        assert report.score() == 90


class TestCategoryCaps:
    def test_ten_security_errors_capped_at_40(self, report: Report) -> None:
        for _ in range(10):
            report.add(_diag())
        assert report.deduction_by_category()[Category.SECURITY] == 40
        assert report.score() == 60

    @pytest.mark.parametrize("category", list(CATEGORY_ORDER))
    def test_deduction_monotonic_up_to_cap(self, report: Report, category: Category) -> None:
        previous = 0
        for _ in range(15):
            report.add(_diag(category=category, severity=Severity.WARNING))
            current = report.deduction_by_category()[category]
            assert previous <= current <= CATEGORY_CAPS[category]
            previous = current
        assert previous == CATEGORY_CAPS[category]

    def test_all_categories_present(self, report: Report) -> None:
        assert report.deduction_by_category() == {
            Category.SECURITY: 0,
            Category.QUALITY: 0,
            Category.DOCUMENTATION: 0,
            Category.ENVIRONMENT: 0,
        }

    def test_unknown_severity_weighs_five(self, report: Report) -> None:
        report.add(_diag(category=Category.QUALITY, severity="critical"))
        assert report.deduction_by_category()[Category.QUALITY] == 5

    def test_unknown_category_counts_as_quality(self, report: Report) -> None:
        report.add(_diag(category="performance"))
        assert report.deduction_by_category()[Category.QUALITY] == 10

    def test_configured_weights(self, tmp_path: Path) -> None:
        config = DEFAULT_CONFIG.merged({"severity_weights": {"error": 3}})
        report = Report(tmp_path, config)
        report.add(_diag())
        report.add(_diag(severity=Severity.WARNING))
        assert report.deduction_by_category()[Category.SECURITY] == 8


class TestEndToEndExample:
    def test_85_then_95_with_tests(self, report: Report, tmp_path: Path) -> None:
        assert report.score() == 100
        report.add(_diag(category=Category.SECURITY, severity=Severity.ERROR))
        report.add(_diag(category=Category.QUALITY, severity=Severity.WARNING))
        assert report.score() == 85

        _add_test_files(tmp_path, 6)
        assert report.score() == 95

    def test_five_test_files_earn_no_bonus(self, report: Report, tmp_path: Path) -> None:
        _add_test_files(tmp_path, 5)
        assert count_test_files(tmp_path / "tests") == 5
        assert report.bonus_points() == 0

    def test_lock_file_bonus(self, report: Report, tmp_path: Path) -> None:
        report.add(_diag())
        (tmp_path / "composer.lock").write_text("{}", encoding="utf-8")
        assert report.score() == 95


class TestGrouping:
    def test_groups_in_display_order(self, report: Report) -> None:
        report.add(_diag(category=Category.ENVIRONMENT))
        report.add(_diag(category=Category.SECURITY))
        assert list(report.grouped_by_category()) == list(CATEGORY_ORDER)

    def test_grouping_preserves_order_and_count(self, report: Report) -> None:
        added = [
            _diag(category=Category.QUALITY, message="q1"),
            _diag(category=Category.SECURITY, message="s1"),
            _diag(category=Category.QUALITY, message="q2"),
            _diag(category=Category.ENVIRONMENT, message="e1"),
            _diag(category=Category.SECURITY, message="s2"),
        ]
        report.extend(added)
        grouped = report.grouped_by_category()

        flattened = [d for items in grouped.values() for d in items]
        assert len(flattened) == len(added)
        assert [d.message for d in grouped[Category.SECURITY]] == ["s1", "s2"]
        assert [d.message for d in grouped[Category.QUALITY]] == ["q1", "q2"]
        assert grouped[Category.DOCUMENTATION] == []

    def test_insertion_order_kept(self, report: Report) -> None:
        report.add(_diag(message="a"))
        report.add(_diag(message="b"))
        assert [d.message for d in report] == ["a", "b"]
        assert len(report) == 2


class TestSerialisation:
    def test_to_dict_matches_schema(self, report: Report) -> None:
        report.add(_diag())
        report.add(
            Diagnostic(
                category=Category.QUALITY,
                severity=Severity.WARNING,
                message="File without declare(strict_types=1): app/A.php",
                recommendation="Add it",
                file="app/A.php",
                line=1,
                auto_fixable=True,
                fix_type="strict_types",
            )
        )
        data = report.to_dict()
        validate_instance(data, "report.schema.json")
        assert data["score"] == 85
        assert data["deductionByCategory"]["security"] == 10
        assert len(data["diagnostics"]) == 2
