# kbverify/verification/run_harness.py
# Known-bits mulhs comparison harness -- command-line entry point.
#
# Standard invocation:
#   python -m kbverify.verification.run_harness 4
#
# With a different candidate and a run record:
#   python -m kbverify.verification.run_harness 6 \
#       --candidate mypkg.transfer:mulhs --record-dir runs
#
# BIT WIDTH ARGUMENT
#   Missing            -> usage on stdout, exit 1.
#   Not a non-negative
#   integer            -> warning on stderr, DEFAULT_BIT_WIDTH is used.
#
# EXIT CODES:
#   0  -- Complete run. Report printed. (Unsound pairs do not change this;
#         use ci_gate for a pass/fail signal on soundness.)
#   1  -- USAGE_ERROR (missing bit width or an invalid option).
#   2  -- IMPRACTICAL_BIT_WIDTH.
#   3  -- BUDGET_EXHAUSTED. Partial report printed.
#   4  -- Transfer-function contract violation or internal harness error.
#
# Stdout carries only the report (and usage). Logs go to stderr.

import argparse
import importlib
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, NoReturn, Optional

from kbverify.core.exceptions import KnownBitsError
from kbverify.transfer.capabilities import CandidateTransferFunction
from kbverify.transfer.reference import reference_mulhs
from kbverify.utils.constants import (
    DEFAULT_BIT_WIDTH,
    DEFAULT_MAX_PAIRS,
    DEFAULT_TIMEOUT_SECONDS,
)
from kbverify.verification.comparison_harness import IterationBudget, run_comparison
from kbverify.verification.failure_handler import FailureHandler
from kbverify.verification.harness_version import HARNESS_VERSION, OPERATOR_NAME
from kbverify.verification.report_formatter import format_report
from kbverify.verification.storage.report_serializer import ReportSerializer

logger = logging.getLogger(__name__)

DEFAULT_CANDIDATE: str = "kbverify.transfer.composite:composite_mulhs"


def _new_run_id() -> str:
    return "RUN-" + datetime.now(timezone.utc).strftime("%Y%m%d") + "-" + str(uuid.uuid4())[:8].upper()


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0, got " + text)
    return value


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1, got " + text)
    return value


def _positive_float(text: str) -> float:
    value = float(text)
    if not value > 0:
        raise argparse.ArgumentTypeError("must be > 0, got " + text)
    return value


class _ArgumentParser(argparse.ArgumentParser):
    """Invalid options are usage errors: exit 1, not argparse's 2."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, "%s: error: %s\n" % (self.prog, message))


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        description=(
            "Compare a known-bits " + OPERATOR_NAME + " transfer function against the "
            "brute-force reference over every pair of abstract values. "
            "Harness v" + HARNESS_VERSION + "."
        ),
        prog="python -m kbverify.verification.run_harness",
    )
    parser.add_argument(
        "bit_width",
        nargs="?",
        default=None,
        help=(
            "Operand bit width. Unparsable values fall back to "
            + str(DEFAULT_BIT_WIDTH) + "."
        ),
    )
    parser.add_argument(
        "--candidate",
        default=DEFAULT_CANDIDATE,
        help="Candidate transfer function as 'module:function' (default: %(default)s).",
    )
    parser.add_argument(
        "--max-pairs",
        type=_non_negative_int,
        default=DEFAULT_MAX_PAIRS,
        help="Stop after this many pairs (default: %(default)s).",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=DEFAULT_TIMEOUT_SECONDS,
        help="Wall-clock budget in seconds (default: %(default)s).",
    )
    parser.add_argument(
        "--unbounded",
        action="store_true",
        default=False,
        help="Ignore --max-pairs and --timeout.",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=1,
        help="Worker processes (default: %(default)s).",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Allow bit widths beyond the practical brute-force limit.",
    )
    parser.add_argument(
        "--record-dir",
        default=None,
        help="Write a JSON run record (or failure record) to this directory.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Debug logging on stderr.",
    )
    return parser


def resolve_bit_width(raw: str) -> int:
    """
    Parse the bit-width argument.

    Anything that is not a non-negative integer is replaced by
    DEFAULT_BIT_WIDTH with a logged warning; it is never reported as an
    error.
    """
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(
            "Bit width %r is not an integer; using default %d", raw, DEFAULT_BIT_WIDTH,
        )
        return DEFAULT_BIT_WIDTH
    if value < 0:
        logger.warning(
            "Bit width %d is negative; using default %d", value, DEFAULT_BIT_WIDTH,
        )
        return DEFAULT_BIT_WIDTH
    return value


def load_candidate(target: str) -> CandidateTransferFunction:
    """
    Import a transfer function given as 'package.module:function'.

    Raises:
        ValueError if target is not of that form or does not name a callable.
        ImportError if the module cannot be imported.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError("candidate must be given as 'module:function', got " + repr(target))
    module = importlib.import_module(module_name)
    candidate = getattr(module, attr, None)
    if not callable(candidate):
        raise ValueError("candidate " + repr(target) + " is not a callable")
    return candidate


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Harness pipeline:
      resolve bit width -> load candidate -> run_comparison -> print report
      -> optional run record.

    Returns 0 on a complete run. Every failure exits through
    FailureHandler (SystemExit with the mapped code).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    run_id = _new_run_id()
    runs_dir = Path(args.record_dir) if args.record_dir else None
    fh = FailureHandler(run_id=run_id, runs_dir=runs_dir)

    if args.bit_width is None:
        parser.print_usage(sys.stdout)
        fh.handle("USAGE_ERROR", "the bit width argument is required")

    bit_width = resolve_bit_width(args.bit_width)
    fh.bit_width = bit_width

    try:
        candidate = load_candidate(args.candidate)
    except (ImportError, ValueError) as exc:
        fh.handle("HARNESS_INTERNAL_ERROR", "cannot load candidate: " + str(exc))

    budget = None
    if not args.unbounded:
        budget = IterationBudget(max_pairs=args.max_pairs, max_seconds=args.timeout)

    try:
        report = run_comparison(
            bit_width,
            candidate,
            reference_mulhs,
            budget=budget,
            workers=args.workers,
            allow_impractical=args.force,
        )
    except KnownBitsError as exc:
        fh.handle_from_exception(exc)
    except Exception as exc:
        # Anything else raised by a transfer function breaks its contract.
        fh.handle("HARNESS_INTERNAL_ERROR", type(exc).__name__ + ": " + str(exc))

    print(format_report(report, operator=OPERATOR_NAME))
    sys.stdout.flush()

    if runs_dir is not None:
        try:
            path = ReportSerializer().serialize(report, runs_dir, run_id, args.candidate)
        except OSError as exc:
            fh.handle("HARNESS_INTERNAL_ERROR", "failed to write run record: " + str(exc))
        logger.info("Run record written to %s", path)

    if report.truncated:
        fh.handle("BUDGET_EXHAUSTED", report.truncation_reason or "budget exhausted")

    return 0


if __name__ == "__main__":
    sys.exit(main())
