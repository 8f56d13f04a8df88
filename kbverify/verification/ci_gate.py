#!/usr/bin/env python3
# kbverify/verification/ci_gate.py
# CI enforcement script for the mulhs transfer function.
#
# Runs the comparison harness in-process for every width in CI_BIT_WIDTHS
# with the default budget and exits 0 (PASS) or 1 (FAIL).
#
#   python -m kbverify.verification.ci_gate
#
# Exit codes:
#   0 -- every width complete with zero unsound pairs.
#   1 -- an unsound pair, a truncated run or a harness error: CI must block
#        merge.

import logging
import sys
from typing import Iterable, List, Optional

from kbverify.core.exceptions import KnownBitsError
from kbverify.transfer.capabilities import CandidateTransferFunction
from kbverify.transfer.composite import composite_mulhs
from kbverify.utils.constants import CI_BIT_WIDTHS
from kbverify.verification.comparison_harness import IterationBudget, run_comparison
from kbverify.verification.data_models.comparison_report import AggregateReport

logger = logging.getLogger(__name__)


def gate_failures(reports: Iterable[AggregateReport]) -> List[str]:
    """One message per report that blocks merge; empty means PASS."""
    failures = []
    for report in reports:
        if report.truncated:
            failures.append(
                "W%d truncated after %d of %d pairs (%s)" % (
                    report.bit_width, report.pairs_evaluated,
                    report.pairs_expected, report.truncation_reason,
                )
            )
        elif report.unsound:
            failures.append("W%d has %d unsound pair(s)" % (report.bit_width, report.unsound))
    return failures


def main(
    candidate:  CandidateTransferFunction = composite_mulhs,
    bit_widths: Optional[Iterable[int]] = None,
) -> int:
    """
    Run the harness for each CI width and return the exit code.

    Returns:
        0 if every report is complete and sound.
        1 otherwise, or if the harness raises.
    """
    widths = tuple(CI_BIT_WIDTHS if bit_widths is None else bit_widths)
    reports = []
    try:
        for bit_width in widths:
            report = run_comparison(bit_width, candidate, budget=IterationBudget.default())
            print(
                "CI-GATE: W%d pairs=%d ref>cand=%d cand>ref=%d equal=%d unsound=%d" % (
                    bit_width, report.pairs_evaluated, report.reference_more_precise,
                    report.candidate_more_precise, report.equal_precision, report.unsound,
                )
            )
            reports.append(report)
    except (KnownBitsError, ValueError) as exc:
        print("CI-GATE ERROR: " + str(exc), file=sys.stderr)
        return 1

    failures = gate_failures(reports)
    if failures:
        for message in failures:
            print("CI-GATE FAIL: " + message, file=sys.stderr)
        print("CI-GATE: result=FAIL. Merge BLOCKED.", file=sys.stderr)
        return 1

    print("CI-GATE: result=PASS for widths %s. Merge permitted." % ", ".join(map(str, widths)))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, stream=sys.stderr)
    sys.exit(main())
