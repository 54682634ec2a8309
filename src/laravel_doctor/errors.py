"""Exception hierarchy for laravel_doctor."""

from __future__ import annotations


class DoctorError(Exception):
    """Base class for all laravel_doctor errors."""


class ProjectRootError(DoctorError, NotADirectoryError):
    """The project root handed to a run is not a directory."""


class ConfigError(DoctorError, ValueError):
    """An external config file could not be read, parsed or validated."""


class DeclarationParseError(DoctorError, ValueError):
    """PHP source is too malformed to scan for class method declarations."""

    def __init__(self, message: str, line: int | None = None):
        super().__init__(message if line is None else f"line {line}: {message}")
        self.line = line
