"""laravel_doctor — health auditor for Laravel projects."""

__all__ = [
    "__version__",
    "AnalyzerRegistry",
    "Diagnostic",
    "DoctorConfig",
    "FixSummary",
    "Report",
    "SafeFixer",
    "load_config",
    "run_doctor",
]
__version__ = "0.1.0"

from laravel_doctor.analyzers.registry import AnalyzerRegistry  # noqa: E402
from laravel_doctor.core.config import DoctorConfig, load_config  # noqa: E402
from laravel_doctor.core.runner import run_doctor  # noqa: E402
from laravel_doctor.fixer import FixSummary, SafeFixer  # noqa: E402
from laravel_doctor.model.diagnostic import Diagnostic  # noqa: E402
from laravel_doctor.model.report import Report  # noqa: E402
