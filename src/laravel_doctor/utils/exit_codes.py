"""Centralized exit-code contract for the CLI.

Code  Meaning
----  -------
  0   Success — audit completed (and met --min-score under --ci)
  1   Violation — score below --min-score in CI mode
  2   Error — usage error, invalid project path, runtime failure
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    VIOLATION = 1
    ERROR = 2
