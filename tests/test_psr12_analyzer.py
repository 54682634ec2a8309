"""Tests for the PSR-12 style analyzer."""

from __future__ import annotations

from pathlib import Path

import pytest

from laravel_doctor.analyzers.psr12 import Psr12Analyzer, first_whitespace_issue, has_strict_types
from laravel_doctor.core.config import DEFAULT_CONFIG
from laravel_doctor.model import Category, FixType, Severity
from laravel_doctor.model.report import Report

CLEAN = "<?php\n\ndeclare(strict_types=1);\n\nnamespace App;\n\nclass Clean\n{\n}\n"


def write_php(root: Path, rel: str, content: str) -> Path:
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(content.encode("utf-8"))
    return p


def analyze(root: Path, config=DEFAULT_CONFIG) -> Report:
    report = Report(root, config)
    Psr12Analyzer().analyze(root, report, config)
    return report


class TestHelpers:
    @pytest.mark.parametrize(
        "content",
        [
            "<?php declare(strict_types=1);",
            "<?php\ndeclare (strict_types = 1);\n",
        ],
    )
    def test_has_strict_types(self, content: str) -> None:
        assert has_strict_types(content)

    def test_strict_types_zero_is_not_strict(self) -> None:
        assert not has_strict_types("<?php declare(strict_types=0);")

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            ("a\n", None),
            ("\n", None),
            ("a", 1),
            ("a\nb", 2),
            ("a\n\n", 2),
            ("a \nb\n", 1),
            ("a\nb\t\n", 2),
            ("a\r\nb\n", 1),
        ],
    )
    def test_first_whitespace_issue(self, content: str, expected) -> None:
        assert first_whitespace_issue(content) == expected


class TestPsr12Analyzer:
    def test_missing_app_dir_is_single_info(self, tmp_path: Path) -> None:
        (d,) = list(analyze(tmp_path))
        assert d.severity is Severity.INFO
        assert d.category is Category.QUALITY

    def test_empty_app_dir_is_info(self, tmp_path: Path) -> None:
        (tmp_path / "app").mkdir()
        (d,) = list(analyze(tmp_path))
        assert d.severity is Severity.INFO
        assert "No PHP files" in d.message

    def test_clean_file_has_no_diagnostics(self, tmp_path: Path) -> None:
        write_php(tmp_path, "app/Clean.php", CLEAN)
        assert len(analyze(tmp_path)) == 0

    def test_all_three_rules(self, tmp_path: Path) -> None:
        write_php(tmp_path, "app/Models/Post.php", "<?php\n\nclass Post\n{\n\tpublic $x; \n}\n")
        report = analyze(tmp_path)
        by_fix = {d.fix_type: d for d in report}
        assert set(by_fix) == {FixType.STRICT_TYPES, FixType.TRAILING_WHITESPACE, FixType.TABS}

        strict = by_fix[FixType.STRICT_TYPES]
        assert strict.severity is Severity.WARNING
        assert strict.line == 1
        assert strict.file == "app/Models/Post.php"
        assert strict.fix_hint == "Add declare(strict_types=1);"

        assert by_fix[FixType.TRAILING_WHITESPACE].severity is Severity.INFO
        assert by_fix[FixType.TRAILING_WHITESPACE].line == 5
        assert by_fix[FixType.TABS].severity is Severity.WARNING
        assert by_fix[FixType.TABS].line == 5
        assert all(d.auto_fixable for d in report)

    def test_missing_final_newline(self, tmp_path: Path) -> None:
        write_php(tmp_path, "app/A.php", CLEAN.rstrip("\n"))
        (d,) = list(analyze(tmp_path))
        assert d.fix_type is FixType.TRAILING_WHITESPACE

    def test_crlf_line_endings(self, tmp_path: Path) -> None:
        write_php(tmp_path, "app/A.php", CLEAN.replace("\n", "\r\n"))
        (d,) = list(analyze(tmp_path))
        assert d.fix_type is FixType.TRAILING_WHITESPACE
        assert d.line == 1

    def test_ignored_paths_skipped(self, tmp_path: Path) -> None:
        write_php(tmp_path, "app/Clean.php", CLEAN)
        write_php(tmp_path, "app/Legacy/Old.php", "<?php\n\tfoo();\n")
        config = DEFAULT_CONFIG.merged({"ignore_paths": ["app/Legacy/"]})
        assert len(analyze(tmp_path, config)) == 0

    def test_undecodable_file_skipped(self, tmp_path: Path) -> None:
        (tmp_path / "app").mkdir()
        (tmp_path / "app" / "Bin.php").write_bytes(b"<?php\n\xff\xfe\n")
        assert len(analyze(tmp_path)) == 0
