"""Report formatters: rich console output, JSON and Markdown exports."""

from laravel_doctor.reports.console import format_console, render_console
from laravel_doctor.reports.exporters import export_json, export_markdown, write_report

__all__ = [
    "export_json",
    "export_markdown",
    "format_console",
    "render_console",
    "write_report",
]
