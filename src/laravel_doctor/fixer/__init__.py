"""Safe fixer — allow-listed, behavior-preserving file rewrites."""

from laravel_doctor.fixer.safe_fixer import SAFE_FIX_TYPES, FixSummary, SafeFixer

__all__ = ["SAFE_FIX_TYPES", "FixSummary", "SafeFixer"]
