# kbverify/transfer/composite.py
# Composite known-bits transfer function for signed multiply-high.
#
# This is the candidate the harness validates by default: the closed-form
# rule a compiler's known-bits analysis uses, built from three primitive
# known-bits operations:
#
#   mulhs(lhs, rhs) = extract_bits(mul(sext(lhs, 2bw), sext(rhs, 2bw)), bw, bw)
#
# mul() derives two families of facts about a product:
#   - leading zeros, from the product of the unsigned maxima of the operands
#     when that product does not overflow;
#   - low bits, from the known low bits of each operand. If a has tz_a
#     trailing zeros and tk_a trailing known bits (likewise b), then
#     a*b = 2**(tz_a + tz_b) * (a' * b'), and the low
#     min(tk_a - tz_a, tk_b - tz_b) bits of a' * b' are determined by the
#     known low bits alone.
#
# Runs in time linear in the width, against the exponential reference.

from kbverify.core.domain import AbstractValue, count_trailing_ones, width_mask
from kbverify.core.exceptions import BitWidthMismatch


def known_bits_mul(lhs: AbstractValue, rhs: AbstractValue) -> AbstractValue:
    """Known bits of the low bit_width bits of lhs * rhs (wrapping multiply)."""
    if lhs.bit_width != rhs.bit_width:
        raise BitWidthMismatch(
            expected=lhs.bit_width,
            actual=rhs.bit_width,
            context="known_bits_mul: rhs",
        )
    bit_width = lhs.bit_width
    mask = width_mask(bit_width)

    # High zeros from the unsigned maxima. An overflowing product says nothing.
    umax_product = lhs.max_unsigned * rhs.max_unsigned
    lead_zeros = 0 if umax_product > mask else bit_width - umax_product.bit_length()

    # Low bits from the known trailing bits of each operand.
    trail_known_lhs = count_trailing_ones(lhs.known_mask, bit_width)
    trail_known_rhs = count_trailing_ones(rhs.known_mask, bit_width)
    trail_zero_lhs = count_trailing_ones(lhs.zero_mask, bit_width)
    trail_zero_rhs = count_trailing_ones(rhs.zero_mask, bit_width)
    smallest_operand = min(trail_known_lhs - trail_zero_lhs, trail_known_rhs - trail_zero_rhs)
    result_bits_known = min(smallest_operand + trail_zero_lhs + trail_zero_rhs, bit_width)

    bottom_known = (
        (lhs.one_mask & width_mask(trail_known_lhs))
        * (rhs.one_mask & width_mask(trail_known_rhs))
    )
    low_mask = width_mask(result_bits_known)

    zero_mask = mask & ~width_mask(bit_width - lead_zeros)
    zero_mask |= ~bottom_known & low_mask
    one_mask = bottom_known & low_mask
    return AbstractValue(bit_width, zero_mask, one_mask)


def composite_mulhs(lhs: AbstractValue, rhs: AbstractValue) -> AbstractValue:
    """
    Known-bits signed multiply-high via sign extension, multiply and
    extraction of the high half.

    Raises:
        BitWidthMismatch if lhs and rhs differ in width.
    """
    if lhs.bit_width != rhs.bit_width:
        raise BitWidthMismatch(
            expected=lhs.bit_width,
            actual=rhs.bit_width,
            context="composite_mulhs: rhs",
        )
    bit_width = lhs.bit_width
    if bit_width == 0:
        return AbstractValue.top(0)
    wide = known_bits_mul(lhs.sext(2 * bit_width), rhs.sext(2 * bit_width))
    return wide.extract_bits(bit_width, bit_width)
