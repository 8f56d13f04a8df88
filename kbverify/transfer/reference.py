# kbverify/transfer/reference.py
# Reference transfer function for signed multiply-high (mulhs).
#
# Ground truth by brute force: concretize both operands, compute the exact
# concrete mulhs for every pair, abstract the set of results. The result is
# the most precise value the known-bits domain can express for the inputs.
#
# Cost is O(2**(u_lhs + u_rhs)) per call, where u is the number of unknown
# bits of an operand. This is a correctness oracle, not a production
# transfer function.
#
# Concrete semantics: sign-extend both bw-bit operands to 2*bw bits, take
# the exact product (no overflow at the doubled width), keep bits
# [bw, 2*bw).

import numpy as np

from kbverify.core.domain import AbstractValue, ConcreteValue, width_mask
from kbverify.core.exceptions import BitWidthMismatch
from kbverify.core.galois import abstract_patterns, concretize_patterns


def concrete_mulhs(lhs: ConcreteValue, rhs: ConcreteValue) -> ConcreteValue:
    """High half of the signed double-width product of two bw-bit values."""
    if lhs.bit_width != rhs.bit_width:
        raise BitWidthMismatch(
            expected=lhs.bit_width,
            actual=rhs.bit_width,
            context="concrete_mulhs: rhs",
        )
    bit_width = lhs.bit_width
    wide = lhs.sext(2 * bit_width).signed * rhs.sext(2 * bit_width).signed
    return ConcreteValue.from_signed(2 * bit_width, wide).extract_bits(bit_width, bit_width)


def _to_signed(patterns: np.ndarray, bit_width: int) -> np.ndarray:
    """Reinterpret unsigned bw-bit patterns as signed int64 values."""
    signed = patterns.astype(np.int64)
    sign_bit = 1 << (bit_width - 1)
    return np.where(signed >= sign_bit, signed - (1 << bit_width), signed)


def mulhs_high_halves(lhs: AbstractValue, rhs: AbstractValue) -> np.ndarray:
    """
    Distinct concrete mulhs results over concretize(lhs) x concretize(rhs),
    as a sorted uint64 array of unsigned bw-bit patterns.
    """
    bit_width = _check_operands(lhs, rhs)
    if bit_width == 0:
        return np.zeros(1, dtype=np.uint64)
    lhs_signed = _to_signed(concretize_patterns(lhs), bit_width)
    rhs_signed = _to_signed(concretize_patterns(rhs), bit_width)
    products = np.multiply.outer(lhs_signed, rhs_signed)
    high = (products >> bit_width) & width_mask(bit_width)
    return np.unique(high.astype(np.uint64))


def reference_mulhs(lhs: AbstractValue, rhs: AbstractValue) -> AbstractValue:
    """
    Most precise known-bits result of signed multiply-high.

    Raises:
        BitWidthMismatch if lhs and rhs differ in width.
        ImpracticalBitWidth if the width exceeds MAX_SUPPORTED_BIT_WIDTH.
    """
    return abstract_patterns(lhs.bit_width, mulhs_high_halves(lhs, rhs))


def _check_operands(lhs: AbstractValue, rhs: AbstractValue) -> int:
    if lhs.bit_width != rhs.bit_width:
        raise BitWidthMismatch(
            expected=lhs.bit_width,
            actual=rhs.bit_width,
            context="reference_mulhs: rhs",
        )
    return lhs.bit_width
