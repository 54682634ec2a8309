"""Diagnostic — the normalized output of an analyzer for one detected issue."""

from __future__ import annotations

from dataclasses import dataclass

from . import Category, FixType, Severity


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Immutable finding produced by an analyzer.

    ``category``, ``severity`` and ``fix_type`` accept plain strings and are
    normalized on construction: an unknown category becomes
    ``Category.QUALITY``; unknown severities and fix types are kept verbatim
    (they score as warnings and are never auto-fixed, respectively).
    """

    category: Category
    severity: Severity | str
    message: str
    recommendation: str
    file: str | None = None
    line: int | None = None
    auto_fixable: bool = False
    fix_hint: str | None = None
    fix_type: FixType | str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", Category.coerce(self.category))
        object.__setattr__(self, "severity", Severity.coerce(self.severity))
        object.__setattr__(self, "fix_type", FixType.coerce(self.fix_type))
        if self.file is not None:
            # Normalize path separators for cross-platform stability
            object.__setattr__(self, "file", self.file.replace("\\", "/"))
        if self.line is not None and self.line < 1:
            raise ValueError(f"line must be 1-based, got {self.line}")

    @property
    def severity_name(self) -> str:
        return self.severity.value if isinstance(self.severity, Severity) else self.severity

    @property
    def fix_type_name(self) -> str | None:
        if isinstance(self.fix_type, FixType):
            return self.fix_type.value
        return self.fix_type

    @property
    def location(self) -> str:
        """``file:line`` for display, or an empty string."""
        if self.file is None and self.line is None:
            return ""
        loc = self.file or ""
        if self.line is not None:
            loc += f":{self.line}"
        return loc

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "severity": self.severity_name,
            "message": self.message,
            "recommendation": self.recommendation,
            "file": self.file,
            "line": self.line,
            "autoFixable": self.auto_fixable,
            "fixHint": self.fix_hint,
            "fixType": self.fix_type_name,
        }
