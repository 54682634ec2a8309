"""Report — the append-only diagnostic accumulator for one run.

Score formula::

    score = clamp(100 − Σ min(category_sum, category_cap) + bonus, 0, 100)

``category_sum`` adds the configured severity weight of every diagnostic in
that category (unknown severities weigh 5). Caps are security 40,
quality 30, documentation 20, environment 10, so deductions never exceed
100 in total. Bonuses reward baseline hygiene independently of the
diagnostics: +10 for more than five test files under ``tests/`` and +5 for
a committed ``composer.lock``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

from laravel_doctor.core.config import DEFAULT_CONFIG, DoctorConfig
from laravel_doctor.model import CATEGORY_CAPS, CATEGORY_ORDER, Category
from laravel_doctor.model.diagnostic import Diagnostic

TESTS_DIR = "tests"
LOCK_FILE = "composer.lock"

_TEST_FILE_SUFFIX = ".php"
_TEST_BONUS_MIN_FILES = 5  # strictly more than this
_TEST_BONUS = 10
_LOCK_BONUS = 5


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def count_test_files(tests_dir: Path) -> int:
    """Recursively count ``*.php`` files under *tests_dir*."""
    if not tests_dir.is_dir():
        return 0
    count = 0
    for p in tests_dir.rglob("*"):
        try:
            if p.is_file() and p.suffix.lower() == _TEST_FILE_SUFFIX:
                count += 1
        except OSError:
            continue
    return count


class Report:
    """Ordered diagnostics plus the configuration they were produced under.

    Not safe for concurrent appenders; parallel runs give each analyzer its
    own ``Report`` and merge them with :meth:`extend`.
    """

    def __init__(self, project_path: Path | str, config: DoctorConfig | None = None):
        self.project_path = Path(project_path)
        self.config = config if config is not None else DEFAULT_CONFIG
        self._diagnostics: list[Diagnostic] = []

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self):
        return iter(self._diagnostics)

    def add(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self._diagnostics.extend(diagnostics)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    # ── scoring ─────────────────────────────────────────────────────

    def deduction_by_category(self) -> dict[Category, int]:
        """Per-category deduction, already limited to each category's cap."""
        sums: dict[Category, int] = {cat: 0 for cat in CATEGORY_ORDER}
        for d in self._diagnostics:
            sums[d.category] += self.config.weight_for(d.severity)
        return {cat: min(total, CATEGORY_CAPS[cat]) for cat, total in sums.items()}

    def bonus_points(self) -> int:
        bonus = 0
        if count_test_files(self.project_path / TESTS_DIR) > _TEST_BONUS_MIN_FILES:
            bonus += _TEST_BONUS
        if (self.project_path / LOCK_FILE).is_file():
            bonus += _LOCK_BONUS
        return bonus

    def score(self) -> int:
        """Return the 0-100 health score. Recomputed on every call."""
        deduction = sum(self.deduction_by_category().values())
        return _clamp(100 - deduction + self.bonus_points(), 0, 100)

    # ── grouping ────────────────────────────────────────────────────

    def grouped_by_category(self) -> dict[Category, list[Diagnostic]]:
        """Diagnostics partitioned by category in display order."""
        grouped: dict[Category, list[Diagnostic]] = {cat: [] for cat in CATEGORY_ORDER}
        for d in self._diagnostics:
            grouped[d.category].append(d)
        return grouped

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score(),
            "projectPath": self.project_path.as_posix(),
            "deductionByCategory": {
                cat.value: points for cat, points in self.deduction_by_category().items()
            },
            "diagnostics": [d.to_dict() for d in self._diagnostics],
        }
