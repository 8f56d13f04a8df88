# kbverify/verification/__init__.py
# Comparison harness for known-bits mulhs transfer functions.
#
# ENTRY POINT:
#   python -m kbverify.verification.run_harness <bit_width> [options]
#
# CI GATE:
#   python -m kbverify.verification.ci_gate

from .harness_version import (
    HARNESS_VERSION,
    OPERATOR_NAME,
    STORAGE_FORMAT_VERSION,
)
from .data_models.comparison_report import (
    AggregateReport,
    ComparisonVerdict,
    VerdictCounters,
)
from .bit_comparator import BitComparator, classify
from .comparison_harness import IterationBudget, run_comparison
from .failure_handler import FailureHandler
from .report_formatter import format_report
from .ci_gate import main as run_ci_gate
from .run_harness import main as run_harness

__all__ = [
    # Version constants
    "HARNESS_VERSION",
    "OPERATOR_NAME",
    "STORAGE_FORMAT_VERSION",
    # Data models
    "AggregateReport",
    "ComparisonVerdict",
    "VerdictCounters",
    # Pipeline components
    "BitComparator",
    "classify",
    "IterationBudget",
    "run_comparison",
    "FailureHandler",
    "format_report",
    # Entry points
    "run_ci_gate",
    "run_harness",
]
