"""Terminal rendering of a Report with rich.

Layout::

    Laravel Doctor v0.1.0
    Score: 85 / 100 Good
      ████████████████████░░░░

    2 diagnostics across 2 categories in 0.12s

    ▸ Security
      ✗ Banned function call eval() in app/Foo.php (app/Foo.php:3)
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from laravel_doctor import __version__
from laravel_doctor.model import Category, Severity
from laravel_doctor.model.diagnostic import Diagnostic
from laravel_doctor.model.report import Report
from laravel_doctor.policy.thresholds import label_from_score

BAR_LENGTH = 24

CATEGORY_LABELS: dict[Category, str] = {
    Category.SECURITY: "Security",
    Category.QUALITY: "Quality",
    Category.DOCUMENTATION: "Testability",
    Category.ENVIRONMENT: "Environment",
}

# (icon, style) per severity; anything else renders as info.
_SEVERITY_ICONS: dict[Severity, tuple[str, str]] = {
    Severity.ERROR: ("✗", "red"),
    Severity.WARNING: ("⚠", "yellow"),
}
_DEFAULT_ICON = ("ℹ", "blue")


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def progress_bar(score: int, color: str) -> Text:
    filled = round(BAR_LENGTH * score / 100)
    bar = Text("  ")
    bar.append("█" * filled, style=color)
    bar.append("░" * (BAR_LENGTH - filled), style="grey50")
    return bar


def format_diagnostic(d: Diagnostic, *, show_locations: bool = False) -> Text:
    icon, style = _SEVERITY_ICONS.get(d.severity, _DEFAULT_ICON)
    line = Text("  ")
    line.append(icon, style=style)
    line.append(f" {d.message}")
    if show_locations and d.location:
        line.append(f" ({d.location})", style="grey50")
    return line


def format_console(
    report: Report,
    *,
    show_locations: bool = False,
    duration: float | None = None,
) -> Text:
    """Build the full console output as a single rich ``Text``."""
    score = report.score()
    label = label_from_score(score)
    grouped = report.grouped_by_category()
    non_empty = sum(1 for items in grouped.values() if items)

    out = Text()
    out.append("\n")
    out.append("Laravel Doctor", style="bold white")
    out.append(f" v{__version__}\n", style="grey50")
    out.append("Score: ")
    out.append(f"{score} / 100", style="bold")
    out.append(" ")
    out.append(label.value, style=label.color)
    out.append("\n")
    out.append_text(progress_bar(score, label.color))
    out.append("\n\n")

    summary = (
        f"{_plural(len(report), 'diagnostic', 'diagnostics')} across "
        f"{_plural(non_empty, 'category', 'categories')}"
    )
    out.append(summary, style=label.color)
    if duration is not None:
        out.append(f" in {duration:.2f}s", style="grey50")
    out.append("\n")

    for category, items in grouped.items():
        if not items:
            continue
        out.append("\n")
        out.append(f"▸ {CATEGORY_LABELS[category]}\n", style="bold white")
        for d in items:
            out.append_text(format_diagnostic(d, show_locations=show_locations))
            out.append("\n")
    return out


def render_console(
    report: Report,
    *,
    console: Console | None = None,
    show_locations: bool = False,
    duration: float | None = None,
) -> None:
    """Print *report* to *console* (stdout by default)."""
    console = console or Console()
    console.print(
        format_console(report, show_locations=show_locations, duration=duration),
        highlight=False,
        soft_wrap=True,
    )
