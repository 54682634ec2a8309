"""Score → label → exit-code policy — single source of truth.

Formatters and the CLI derive the score label and CI exit code from this
module instead of hard-coding thresholds locally.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from laravel_doctor.utils.exit_codes import ExitCode

DEFAULT_MIN_SCORE = 70


class ScoreLabel(str, Enum):
    GOOD = "Good"
    WARNING = "Warning"
    CRITICAL = "Critical"

    @property
    def color(self) -> str:
        return _LABEL_COLORS[self]


_LABEL_COLORS = {
    ScoreLabel.GOOD: "green",
    ScoreLabel.WARNING: "yellow",
    ScoreLabel.CRITICAL: "red",
}


@dataclass(frozen=True, slots=True)
class ScoreThresholds:
    """Tunable thresholds for score → label mapping."""

    good_above: int = 80
    warning_min: int = 50


DEFAULT_THRESHOLDS = ScoreThresholds()


def label_from_score(
    score: int,
    *,
    thresholds: ScoreThresholds = DEFAULT_THRESHOLDS,
) -> ScoreLabel:
    """Policy: >80 Good, 50-80 Warning, <50 Critical."""
    if score > thresholds.good_above:
        return ScoreLabel.GOOD
    if score >= thresholds.warning_min:
        return ScoreLabel.WARNING
    return ScoreLabel.CRITICAL


def ci_exit_code(score: int, min_score: int = DEFAULT_MIN_SCORE) -> ExitCode:
    """Exit code for ``--ci``: violation when *score* is below *min_score*."""
    if score < min_score:
        return ExitCode.VIOLATION
    return ExitCode.SUCCESS
