# kbverify/verification/bit_comparator.py
# BitComparator -- per-bit soundness and precision comparison of a candidate
# result against the reference result for one pair of abstract inputs.
#
# Rule, applied in this order:
#   1. Soundness: if any bit is known-zero in one result and known-one in the
#      other, the verdict is UNSOUND and precision is not compared.
#   2. Precision: compare popcount of known bits. Strictly more known bits on
#      one side wins; equal counts give EQUAL_PRECISION.
#
# UNSOUND is data. It is returned, never raised.

from kbverify.core.domain import AbstractValue
from kbverify.core.exceptions import BitWidthMismatch
from kbverify.verification.data_models.comparison_report import ComparisonVerdict


def classify(candidate: AbstractValue, reference: AbstractValue) -> ComparisonVerdict:
    """
    Verdict for one pair. Pure function of the two results.

    Both results must have the same bit width; BitComparator enforces it.
    """
    if candidate.conflicts_with(reference):
        return ComparisonVerdict.UNSOUND

    candidate_precision = candidate.precision
    reference_precision = reference.precision
    if candidate_precision > reference_precision:
        return ComparisonVerdict.CANDIDATE_MORE_PRECISE
    if reference_precision > candidate_precision:
        return ComparisonVerdict.REFERENCE_MORE_PRECISE
    return ComparisonVerdict.EQUAL_PRECISION


class BitComparator:
    """
    Compares transfer-function results at a fixed bit width.

    A result whose width differs from the operands is a contract violation
    by the transfer function that produced it and raises BitWidthMismatch.
    """

    def __init__(self, bit_width: int):
        self._bit_width = bit_width

    @property
    def bit_width(self) -> int:
        return self._bit_width

    def compare(
        self,
        candidate: AbstractValue,
        reference: AbstractValue,
    ) -> ComparisonVerdict:
        for label, result in (("candidate result", candidate), ("reference result", reference)):
            if result.bit_width != self._bit_width:
                raise BitWidthMismatch(
                    expected=self._bit_width,
                    actual=result.bit_width,
                    context=label + ":",
                )
        return classify(candidate, reference)
