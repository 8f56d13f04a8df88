# =============================================================================
# tests/unit/transfer/test_composite.py
# =============================================================================
#
# Coverage:
#   known_bits_mul: constants, wrap-around, trailing zeros, leading zeros
#     from unsigned maxima, multiply by zero, width mismatch
#   composite_mulhs: width 0 and 1, result width, constants agree with the
#     reference, never more precise than the reference, width mismatch
# =============================================================================

from __future__ import annotations

import pytest

from kbverify.core.domain import AbstractValue
from kbverify.core.enumerator import enumerate_abstract_values
from kbverify.core.exceptions import BitWidthMismatch
from kbverify.transfer.composite import composite_mulhs, known_bits_mul
from kbverify.transfer.reference import reference_mulhs


class TestKnownBitsMul:

    def test_constants_multiply_exactly(self) -> None:
        result = known_bits_mul(AbstractValue.from_constant(4, 3), AbstractValue.from_constant(4, 5))
        assert result.render() == "1111"

    def test_wrapping_constants(self) -> None:
        # 6 * 7 = 42 = 0b10_1010
        result = known_bits_mul(AbstractValue.from_constant(4, 6), AbstractValue.from_constant(4, 7))
        assert result.render() == "1010"

    def test_trailing_zeros_add_up(self) -> None:
        result = known_bits_mul(AbstractValue.parse("???0"), AbstractValue.parse("???0"))
        assert result.render() == "??00"

    def test_leading_zeros_from_unsigned_maxima(self) -> None:
        # max 1 * max 3 = 3 needs two bits -> top two bits zero
        result = known_bits_mul(AbstractValue.parse("000?"), AbstractValue.parse("00??"))
        assert result.render() == "00??"

    def test_times_zero_is_zero(self) -> None:
        result = known_bits_mul(AbstractValue.top(4), AbstractValue.from_constant(4, 0))
        assert result.render() == "0000"

    def test_width_mismatch(self) -> None:
        with pytest.raises(BitWidthMismatch):
            known_bits_mul(AbstractValue.top(4), AbstractValue.top(2))


class TestCompositeMulhs:

    def test_width_zero(self) -> None:
        empty = AbstractValue(0, 0, 0)
        assert composite_mulhs(empty, empty) == empty

    def test_width_one_top_is_unknown(self) -> None:
        top = AbstractValue.top(1)
        assert composite_mulhs(top, top).render() == "?"

    def test_result_has_operand_width(self) -> None:
        assert composite_mulhs(AbstractValue.top(5), AbstractValue.top(5)).bit_width == 5

    def test_constants_match_reference(self) -> None:
        for a in range(-4, 4):
            for b in range(-4, 4):
                lhs = AbstractValue.from_constant(3, a)
                rhs = AbstractValue.from_constant(3, b)
                assert composite_mulhs(lhs, rhs) == reference_mulhs(lhs, rhs)

    @pytest.mark.parametrize("bit_width", [1, 2, 3])
    def test_never_more_precise_than_reference(self, bit_width: int) -> None:
        values = enumerate_abstract_values(bit_width)
        for lhs in values:
            for rhs in values:
                candidate = composite_mulhs(lhs, rhs)
                reference = reference_mulhs(lhs, rhs)
                assert not candidate.conflicts_with(reference)
                assert reference.is_at_least_as_precise_as(candidate)

    def test_width_mismatch(self) -> None:
        with pytest.raises(BitWidthMismatch, match="composite_mulhs"):
            composite_mulhs(AbstractValue.top(4), AbstractValue.top(3))
