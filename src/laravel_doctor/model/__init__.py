"""Enums shared across analyzers, scoring, fixer and formatters."""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Diagnostic category — each one has a fixed deduction cap."""

    SECURITY = "security"
    QUALITY = "quality"
    DOCUMENTATION = "documentation"
    ENVIRONMENT = "environment"

    @classmethod
    def coerce(cls, value: "Category | str | None") -> "Category":
        """Convert *value* to a category; unknown values become ``QUALITY``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.QUALITY


class Severity(str, Enum):
    """Diagnostic severity — drives score weight and display icon."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def coerce(cls, value: "Severity | str") -> "Severity | str":
        """Convert known strings to a ``Severity``.

        Unknown strings are returned unchanged; they weigh
        ``UNKNOWN_SEVERITY_WEIGHT`` points when scored.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return str(value)


class FixType(str, Enum):
    """Allow-listed, behavior-preserving file transformations."""

    STRICT_TYPES = "strict_types"
    TABS = "tabs"
    TRAILING_WHITESPACE = "trailing_whitespace"

    @classmethod
    def coerce(cls, value: "FixType | str | None") -> "FixType | str | None":
        """Convert known strings to a ``FixType``; others pass through unchanged."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return str(value)


# Display order for grouped output; also the iteration order of deductions.
CATEGORY_ORDER: tuple[Category, ...] = (
    Category.SECURITY,
    Category.QUALITY,
    Category.DOCUMENTATION,
    Category.ENVIRONMENT,
)

# Maximum deduction points per category (sums to 100).
CATEGORY_CAPS: dict[Category, int] = {
    Category.SECURITY: 40,
    Category.QUALITY: 30,
    Category.DOCUMENTATION: 20,
    Category.ENVIRONMENT: 10,
}

DEFAULT_SEVERITY_WEIGHTS: dict[Severity, int] = {
    Severity.ERROR: 10,
    Severity.WARNING: 5,
    Severity.INFO: 2,
}

UNKNOWN_SEVERITY_WEIGHT = 5
