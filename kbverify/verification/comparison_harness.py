# kbverify/verification/comparison_harness.py
# Comparison harness -- exhaustive soundness and precision comparison of a
# candidate transfer function against the reference over every ordered pair
# of abstract values of one bit width.
#
# For every (lhs, rhs) in V x V, operand order preserved (N**2 pairs):
#   1. time and invoke the candidate,
#   2. time and invoke the reference,
#   3-4. classify via BitComparator,
#   5. fold the verdict and both timings into VerdictCounters.
# Averages are total time / pairs evaluated.
#
# UNSOUND verdicts never abort the run. A contract violation by a transfer
# function (wrong result width, malformed operands) does raise.
#
# RESOURCE MODEL
# --------------
# Sequential by default. Every pair is independent, so with workers > 1 the
# outer (lhs) rows are split into contiguous shards, each evaluated in its
# own process with local counters, and the shards are merged once at the
# end. No locking during the parallel phase. Transfer functions must be
# picklable (module-level) in that mode.
#
# Cost is O(9**bit_width) pairs with a reference cost of up to
# O(4**bit_width) each. An IterationBudget bounds pairs and wall-clock time;
# widths above PRACTICAL_BIT_WIDTH_LIMIT are refused unless forced.

import logging
import time
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from functools import reduce
from typing import List, Optional, Sequence

from kbverify.core.domain import AbstractValue
from kbverify.core.enumerator import enumerate_abstract_values
from kbverify.core.exceptions import ImpracticalBitWidth
from kbverify.transfer.capabilities import (
    CandidateTransferFunction,
    ReferenceTransferFunction,
)
from kbverify.transfer.reference import reference_mulhs
from kbverify.utils.constants import (
    DEFAULT_MAX_PAIRS,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_SUPPORTED_BIT_WIDTH,
    PRACTICAL_BIT_WIDTH_LIMIT,
    PROGRESS_LOG_INTERVAL_ROWS,
)
from kbverify.verification.bit_comparator import BitComparator
from kbverify.verification.data_models.comparison_report import (
    AggregateReport,
    VerdictCounters,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# BUDGET
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IterationBudget:
    """
    Upper bounds for one run. None means unbounded.

    Fields:
      max_pairs   -- stop after this many pairs have been compared.
      max_seconds -- stop once this much wall-clock time has elapsed.
    """
    max_pairs:   Optional[int] = None
    max_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_pairs is not None and self.max_pairs < 0:
            raise ValueError("IterationBudget: max_pairs must be >= 0, got " + repr(self.max_pairs))
        if self.max_seconds is not None and self.max_seconds <= 0:
            raise ValueError(
                "IterationBudget: max_seconds must be > 0, got " + repr(self.max_seconds)
            )

    @classmethod
    def default(cls) -> "IterationBudget":
        return cls(max_pairs=DEFAULT_MAX_PAIRS, max_seconds=DEFAULT_TIMEOUT_SECONDS)

    def split(self, blocks: Sequence[range]) -> List["IterationBudget"]:
        """
        One budget per block of rows, pair caps proportional to block size.

        The caps are differences of floored cumulative shares, so they sum
        to exactly max_pairs. Each block keeps the full wall-clock budget.
        """
        if self.max_pairs is None:
            return [self] * len(blocks)
        total_rows = sum(len(block) for block in blocks)
        if total_rows == 0:
            return [self] * len(blocks)
        shares = []
        rows_before = 0
        for block in blocks:
            start = self.max_pairs * rows_before // total_rows
            rows_before += len(block)
            stop = self.max_pairs * rows_before // total_rows
            shares.append(IterationBudget(max_pairs=stop - start, max_seconds=self.max_seconds))
        return shares


_PAIR_BUDGET_REASON = "pair budget of %d exhausted"
_WALL_CLOCK_REASON = "wall-clock budget exhausted"


class _BudgetClock:

    def __init__(self, budget: Optional[IterationBudget]):
        self._max_pairs = budget.max_pairs if budget is not None else None
        self._deadline = None
        if budget is not None and budget.max_seconds is not None:
            self._deadline = time.perf_counter() + budget.max_seconds

    def exhausted(self, pairs_evaluated: int) -> Optional[str]:
        if self._max_pairs is not None and pairs_evaluated >= self._max_pairs:
            return _PAIR_BUDGET_REASON % self._max_pairs
        if self._deadline is not None and time.perf_counter() >= self._deadline:
            return _WALL_CLOCK_REASON
        return None


def check_bit_width(bit_width: int, allow_impractical: bool = False) -> None:
    """
    Refuse widths the brute-force harness cannot finish.

    Raises:
        ValueError if bit_width is not a non-negative integer.
        ImpracticalBitWidth above PRACTICAL_BIT_WIDTH_LIMIT (unless
        allow_impractical) and always above MAX_SUPPORTED_BIT_WIDTH.
    """
    if not isinstance(bit_width, int) or isinstance(bit_width, bool) or bit_width < 0:
        raise ValueError("bit_width must be a non-negative integer, got " + repr(bit_width))
    if bit_width > MAX_SUPPORTED_BIT_WIDTH:
        raise ImpracticalBitWidth(bit_width, MAX_SUPPORTED_BIT_WIDTH)
    if bit_width > PRACTICAL_BIT_WIDTH_LIMIT and not allow_impractical:
        raise ImpracticalBitWidth(bit_width, PRACTICAL_BIT_WIDTH_LIMIT)


# ---------------------------------------------------------------------------
# SHARD EVALUATION
# ---------------------------------------------------------------------------

@dataclass
class ShardResult:
    """Counters of one contiguous block of rows, and why it stopped early."""
    counters:          VerdictCounters
    truncation_reason: Optional[str] = None


def partition_rows(total_rows: int, shards: int) -> List[range]:
    """
    Split range(total_rows) into at most `shards` contiguous, non-empty,
    ordered blocks whose sizes differ by at most one.
    """
    if shards < 1:
        raise ValueError("partition_rows: shards must be >= 1, got " + repr(shards))
    shards = min(shards, total_rows) or 1
    base, extra = divmod(total_rows, shards)
    blocks = []
    start = 0
    for index in range(shards):
        stop = start + base + (1 if index < extra else 0)
        blocks.append(range(start, stop))
        start = stop
    return blocks


def compare_rows(
    values:    Sequence[AbstractValue],
    rows:      range,
    candidate: CandidateTransferFunction,
    reference: ReferenceTransferFunction,
    budget:    Optional[IterationBudget] = None,
) -> ShardResult:
    """
    Compare every pair (values[i], rhs) for i in rows and rhs in values.

    Returns the shard's counters. Stops early, with a truncation reason, if
    the budget runs out.
    """
    bit_width = values[0].bit_width if values else 0
    comparator = BitComparator(bit_width)
    counters = VerdictCounters()
    clock = _BudgetClock(budget)
    perf_counter_ns = time.perf_counter_ns

    for row_index, i in enumerate(rows):
        lhs = values[i]
        for rhs in values:
            reason = clock.exhausted(counters.pairs_evaluated)
            if reason is not None:
                logger.debug("Shard stopped at row %d: %s", i, reason)
                return ShardResult(counters, reason)

            t0 = perf_counter_ns()
            candidate_result = candidate(lhs, rhs)
            t1 = perf_counter_ns()
            reference_result = reference(lhs, rhs)
            t2 = perf_counter_ns()

            counters.record(
                comparator.compare(candidate_result, reference_result),
                candidate_ns=t1 - t0,
                reference_ns=t2 - t1,
            )

        if (row_index + 1) % PROGRESS_LOG_INTERVAL_ROWS == 0:
            logger.debug(
                "Compared %d/%d rows (%d pairs) at bit width %d",
                row_index + 1, len(rows), counters.pairs_evaluated, bit_width,
            )

    return ShardResult(counters)


def _compare_rows_worker(
    bit_width: int,
    start:     int,
    stop:      int,
    candidate: CandidateTransferFunction,
    reference: ReferenceTransferFunction,
    budget:    Optional[IterationBudget],
) -> ShardResult:
    # Each worker enumerates locally; abstract values are never shipped.
    values = enumerate_abstract_values(bit_width)
    return compare_rows(values, range(start, stop), candidate, reference, budget)


def _run_sharded(
    bit_width: int,
    total:     int,
    candidate: CandidateTransferFunction,
    reference: ReferenceTransferFunction,
    budget:    Optional[IterationBudget],
    workers:   int,
) -> ShardResult:
    blocks = partition_rows(total, workers)
    budgets = budget.split(blocks) if budget is not None else [None] * len(blocks)
    logger.info("Evaluating %d shards on %d worker processes", len(blocks), workers)
    with ProcessPoolExecutor(max_workers=len(blocks)) as pool:
        futures = [
            pool.submit(
                _compare_rows_worker,
                bit_width,
                block.start,
                block.stop,
                candidate,
                reference,
                shard_budget,
            )
            for block, shard_budget in zip(blocks, budgets)
        ]
        results = [future.result() for future in futures]

    merged = reduce(VerdictCounters.merge, (r.counters for r in results), VerdictCounters())
    reasons = [r.truncation_reason for r in results if r.truncation_reason is not None]
    if not reasons:
        return ShardResult(merged)
    # Report the caller's budget, not a shard's portion of it.
    if budget.max_pairs is not None and merged.pairs_evaluated >= budget.max_pairs:
        return ShardResult(merged, _PAIR_BUDGET_REASON % budget.max_pairs)
    return ShardResult(merged, _WALL_CLOCK_REASON)


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------

def run_comparison(
    bit_width:         int,
    candidate:         CandidateTransferFunction,
    reference:         ReferenceTransferFunction = reference_mulhs,
    *,
    budget:            Optional[IterationBudget] = None,
    workers:           int = 1,
    allow_impractical: bool = False,
) -> AggregateReport:
    """
    Compare candidate against reference over all N**2 ordered pairs of
    abstract values of bit_width, N = 3**bit_width.

    Args:
        bit_width:         operand and result width.
        candidate:         transfer function under test.
        reference:         ground truth; reference_mulhs by default.
        budget:            optional pair / wall-clock bounds. When exhausted
                           the report is marked truncated.
        workers:           number of worker processes; 1 runs in-process.
        allow_impractical: accept widths above PRACTICAL_BIT_WIDTH_LIMIT.

    Returns:
        AggregateReport, frozen.

    Raises:
        ImpracticalBitWidth, ValueError (see check_bit_width).
        BitWidthMismatch if a transfer function returns a wrong-width result.
    """
    check_bit_width(bit_width, allow_impractical)
    if not isinstance(workers, int) or workers < 1:
        raise ValueError("workers must be a positive integer, got " + repr(workers))

    values = enumerate_abstract_values(bit_width)
    total = len(values)
    logger.info(
        "Comparing %d abstract values (%d ordered pairs) at bit width %d",
        total, total * total, bit_width,
    )

    if workers == 1:
        shard = compare_rows(values, range(total), candidate, reference, budget)
    else:
        shard = _run_sharded(bit_width, total, candidate, reference, budget, workers)

    report = AggregateReport.from_counters(
        bit_width=bit_width,
        total_abstract_values=total,
        counters=shard.counters,
        truncation_reason=shard.truncation_reason,
    )
    if report.truncated:
        logger.warning(
            "Run truncated after %d of %d pairs: %s",
            report.pairs_evaluated, report.pairs_expected, report.truncation_reason,
        )
    if report.unsound:
        logger.warning(
            "%d unsound pair(s) at bit width %d", report.unsound, bit_width,
        )
    logger.info(
        "Finished bit width %d: %d pairs evaluated", bit_width, report.pairs_evaluated,
    )
    return report
