# kbverify/verification/data_models/failure_record.py
# FailureRecord data class and failure type registry.

from dataclasses import dataclass
from typing import Optional


# ---------------------------------------------------------------------------
# FAILURE TYPE REGISTRY
# ---------------------------------------------------------------------------
# Exit code mapping:
#   Code 1 -- USAGE_ERROR (no bit width given)
#   Code 2 -- IMPRACTICAL_BIT_WIDTH (beyond the brute-force ceiling)
#   Code 3 -- BUDGET_EXHAUSTED (report printed, but the run is incomplete)
#   Code 4 -- contract violations by a transfer function, internal errors
#
# An UNSOUND verdict is not a failure type. It is reported data.

FAILURE_TYPES = {
    # Exit Code 1
    "USAGE_ERROR":              1,
    # Exit Code 2
    "IMPRACTICAL_BIT_WIDTH":    2,
    # Exit Code 3
    "BUDGET_EXHAUSTED":         3,
    # Exit Code 4
    "MALFORMED_ABSTRACT_VALUE": 4,
    "BIT_WIDTH_MISMATCH":       4,
    "EMPTY_INPUT_SET":          4,
    "HARNESS_INTERNAL_ERROR":   4,
}

# Exception class name -> failure type id.
EXCEPTION_FAILURE_TYPES = {
    "ImpracticalBitWidth":    "IMPRACTICAL_BIT_WIDTH",
    "MalformedAbstractValue": "MALFORMED_ABSTRACT_VALUE",
    "BitWidthMismatch":       "BIT_WIDTH_MISMATCH",
    "EmptyInputSet":          "EMPTY_INPUT_SET",
}


@dataclass
class FailureRecord:
    """
    Failure record written by the FailureHandler when a run cannot produce a
    complete report.

    Fields:
      failure_type_id  -- Key from FAILURE_TYPES.
      exit_code        -- Integer exit code (1-4).
      bit_width        -- Requested bit width, or None if never resolved.
      detected_at_iso  -- UTC ISO-8601 timestamp of failure detection.
      run_id           -- Run identifier for this harness invocation.
      harness_version  -- HARNESS_VERSION at time of failure.
      detail           -- Human-readable failure description.
    """
    failure_type_id: str
    exit_code:       int
    bit_width:       Optional[int]
    detected_at_iso: str
    run_id:          str
    harness_version: str
    detail:          str
