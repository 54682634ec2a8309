"""File exporters for a Report.

*  **JSON** — machine-readable, matches ``report.schema.json``.
*  **Markdown** — human-readable, suitable for PR comments.
"""

from __future__ import annotations

from pathlib import Path

from laravel_doctor.model.report import Report
from laravel_doctor.utils.json_norm import stable_json_dumps

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})


# ════════════════════════════════════════════════════════════════════
# JSON exporter
# ════════════════════════════════════════════════════════════════════


def export_json(report: Report, *, indent: int = 2) -> str:
    """Export a ``Report`` as canonical JSON."""
    return stable_json_dumps(report.to_dict(), indent=indent)


# ════════════════════════════════════════════════════════════════════
# Markdown exporter
# ════════════════════════════════════════════════════════════════════


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\r\n", " ").replace("\n", " ")


def export_markdown(report: Report, *, show_locations: bool = False) -> str:
    """Export a ``Report`` as a Markdown table of diagnostics."""
    lines: list[str] = [
        "# Laravel Doctor Report",
        "",
        f"**Score:** {report.score()} / 100  ",
        f"**Project:** `{report.project_path.as_posix()}`",
        "",
        "## Diagnostics",
        "",
    ]
    if show_locations:
        lines.append("| Category | Severity | Message | Recommendation | Location |")
        lines.append("|----------|----------|---------|----------------|----------|")
    else:
        lines.append("| Category | Severity | Message | Recommendation |")
        lines.append("|----------|----------|---------|----------------|")

    for d in report:
        cells = [
            d.category.value,
            d.severity_name,
            _escape_cell(d.message),
            _escape_cell(d.recommendation),
        ]
        if show_locations:
            cells.append(_escape_cell(d.location) or "-")
        lines.append("| " + " | ".join(cells) + " |")

    lines.append("")
    return "\n".join(lines)


def write_report(report: Report, path: Path | str, *, show_locations: bool = False) -> Path:
    """Write *report* to *path*: Markdown for ``.md``/``.markdown``, else JSON."""
    path = Path(path)
    if path.suffix.lower() in MARKDOWN_SUFFIXES:
        text = export_markdown(report, show_locations=show_locations)
    else:
        text = export_json(report)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
