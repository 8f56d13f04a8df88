# kbverify/verification/data_models/comparison_report.py
# ComparisonVerdict, VerdictCounters and AggregateReport data classes.
#
# Verdicts are folded into VerdictCounters as soon as they are computed and
# never retained individually, so memory is bounded by the enumeration size
# rather than its square. VerdictCounters.merge is an associative reduction
# (sum of counts, sum of times) used to combine independently evaluated
# shards. AggregateReport is frozen once built.

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class ComparisonVerdict(str, Enum):
    """
    Outcome of comparing candidate and reference results for one pair.

    REFERENCE_MORE_PRECISE -- both sound, reference knows strictly more bits.
    CANDIDATE_MORE_PRECISE -- both sound, candidate knows strictly more bits.
    EQUAL_PRECISION        -- both sound, same number of known bits.
    UNSOUND                -- the two results claim opposite values for some
                              bit; precision is not compared.
    """
    REFERENCE_MORE_PRECISE = "REFERENCE_MORE_PRECISE"
    CANDIDATE_MORE_PRECISE = "CANDIDATE_MORE_PRECISE"
    EQUAL_PRECISION        = "EQUAL_PRECISION"
    UNSOUND                = "UNSOUND"


def _zero_counts() -> Dict[ComparisonVerdict, int]:
    return {verdict: 0 for verdict in ComparisonVerdict}


@dataclass
class VerdictCounters:
    """
    Running accumulator for one harness run or one shard of it.

    Fields:
      counts             -- number of pairs per verdict.
      candidate_ns_total -- summed candidate call latency, nanoseconds.
      reference_ns_total -- summed reference call latency, nanoseconds.
      pairs_evaluated    -- number of pairs folded in.
    """
    counts:             Dict[ComparisonVerdict, int] = field(default_factory=_zero_counts)
    candidate_ns_total: int = 0
    reference_ns_total: int = 0
    pairs_evaluated:    int = 0

    def record(
        self,
        verdict:      ComparisonVerdict,
        candidate_ns: int,
        reference_ns: int,
    ) -> None:
        self.counts[verdict] += 1
        self.candidate_ns_total += candidate_ns
        self.reference_ns_total += reference_ns
        self.pairs_evaluated += 1

    def merge(self, other: "VerdictCounters") -> "VerdictCounters":
        """Return a new accumulator holding the sum of self and other."""
        merged = VerdictCounters()
        for verdict in ComparisonVerdict:
            merged.counts[verdict] = self.counts[verdict] + other.counts[verdict]
        merged.candidate_ns_total = self.candidate_ns_total + other.candidate_ns_total
        merged.reference_ns_total = self.reference_ns_total + other.reference_ns_total
        merged.pairs_evaluated = self.pairs_evaluated + other.pairs_evaluated
        return merged


@dataclass(frozen=True)
class AggregateReport:
    """
    Final, immutable summary of one harness run at one bit width.

    Fields:
      bit_width              -- width of every enumerated abstract value.
      total_abstract_values  -- N = 3**bit_width.
      pairs_expected         -- N**2, the size of a complete run.
      pairs_evaluated        -- pairs actually compared. Equals
                                pairs_expected unless truncated.
      reference_more_precise -- count of REFERENCE_MORE_PRECISE.
      candidate_more_precise -- count of CANDIDATE_MORE_PRECISE.
      equal_precision        -- count of EQUAL_PRECISION.
      unsound                -- count of UNSOUND. Nonzero means the
                                candidate (or the reference) is defective.
      average_candidate_ns   -- candidate time / pairs_evaluated.
      average_reference_ns   -- reference time / pairs_evaluated.
      truncated              -- True if an iteration budget stopped the run.
      truncation_reason      -- Why the run stopped early, or None.
    """
    bit_width:              int
    total_abstract_values:  int
    pairs_expected:         int
    pairs_evaluated:        int
    reference_more_precise: int
    candidate_more_precise: int
    equal_precision:        int
    unsound:                int
    average_candidate_ns:   float
    average_reference_ns:   float
    truncated:              bool = False
    truncation_reason:      Optional[str] = None

    @property
    def sound(self) -> bool:
        return self.unsound == 0

    @property
    def complete(self) -> bool:
        return not self.truncated and self.pairs_evaluated == self.pairs_expected

    def count(self, verdict: ComparisonVerdict) -> int:
        return {
            ComparisonVerdict.REFERENCE_MORE_PRECISE: self.reference_more_precise,
            ComparisonVerdict.CANDIDATE_MORE_PRECISE: self.candidate_more_precise,
            ComparisonVerdict.EQUAL_PRECISION:        self.equal_precision,
            ComparisonVerdict.UNSOUND:                self.unsound,
        }[verdict]

    @classmethod
    def from_counters(
        cls,
        bit_width:             int,
        total_abstract_values: int,
        counters:              VerdictCounters,
        truncation_reason:     Optional[str] = None,
    ) -> "AggregateReport":
        """
        Finalize a run. Averages divide by pairs evaluated, which is N**2
        for a complete run. An empty run reports zero averages.
        """
        evaluated = counters.pairs_evaluated
        divisor = evaluated if evaluated else 1
        return cls(
            bit_width=bit_width,
            total_abstract_values=total_abstract_values,
            pairs_expected=total_abstract_values * total_abstract_values,
            pairs_evaluated=evaluated,
            reference_more_precise=counters.counts[ComparisonVerdict.REFERENCE_MORE_PRECISE],
            candidate_more_precise=counters.counts[ComparisonVerdict.CANDIDATE_MORE_PRECISE],
            equal_precision=counters.counts[ComparisonVerdict.EQUAL_PRECISION],
            unsound=counters.counts[ComparisonVerdict.UNSOUND],
            average_candidate_ns=counters.candidate_ns_total / divisor,
            average_reference_ns=counters.reference_ns_total / divisor,
            truncated=truncation_reason is not None,
            truncation_reason=truncation_reason,
        )
