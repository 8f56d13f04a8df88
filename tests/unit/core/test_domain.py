# =============================================================================
# tests/unit/core/test_domain.py
# =============================================================================
#
# Coverage:
#   AbstractValue validity: width >= 0, masks inside the width, disjoint masks
#   AbstractValue frozen -- FrozenInstanceError on mutation
#   precision / lattice order / conflict detection
#   sext and extract_bits on abstract and concrete values
#   render / parse
# =============================================================================

from __future__ import annotations

import dataclasses

import pytest

from kbverify.core.domain import (
    AbstractValue,
    ConcreteValue,
    count_trailing_ones,
    popcount,
    validate_abstract_value,
    width_mask,
)
from kbverify.core.exceptions import MalformedAbstractValue


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _av(text: str) -> AbstractValue:
    return AbstractValue.parse(text)


class TestBitHelpers:

    def test_width_mask(self) -> None:
        assert width_mask(0) == 0
        assert width_mask(1) == 1
        assert width_mask(4) == 0b1111

    def test_popcount(self) -> None:
        assert popcount(0) == 0
        assert popcount(0b1011) == 3

    @pytest.mark.parametrize("mask,width,expected", [
        (0b0000, 4, 0),
        (0b0001, 4, 1),
        (0b0111, 4, 3),
        (0b1111, 4, 4),
        (0b1011, 4, 2),
        (0b1111_1111, 4, 4),
    ])
    def test_count_trailing_ones(self, mask: int, width: int, expected: int) -> None:
        assert count_trailing_ones(mask, width) == expected


# ---------------------------------------------------------------------------
# AbstractValue -- validity
# ---------------------------------------------------------------------------

class TestAbstractValueValidity:

    def test_valid_construction(self) -> None:
        value = AbstractValue(4, 0b0011, 0b0100)
        assert value.bit_width == 4

    def test_overlapping_masks_rejected(self) -> None:
        with pytest.raises(MalformedAbstractValue, match="both known-zero and known-one"):
            AbstractValue(4, 0b0011, 0b0010)

    def test_mask_outside_width_rejected(self) -> None:
        with pytest.raises(MalformedAbstractValue, match="outside the bit width"):
            AbstractValue(2, 0b100, 0)

    def test_negative_mask_rejected(self) -> None:
        with pytest.raises(MalformedAbstractValue):
            AbstractValue(4, -1, 0)

    def test_negative_width_rejected(self) -> None:
        with pytest.raises(MalformedAbstractValue):
            AbstractValue(-1, 0, 0)

    def test_bool_width_rejected(self) -> None:
        with pytest.raises(MalformedAbstractValue):
            AbstractValue(True, 0, 0)  # type: ignore[arg-type]

    def test_zero_width_value(self) -> None:
        value = AbstractValue(0, 0, 0)
        assert value.is_top
        assert value.is_constant
        assert value.render() == ""

    def test_frozen(self) -> None:
        value = AbstractValue.top(4)
        with pytest.raises(dataclasses.FrozenInstanceError):
            value.zero_mask = 1  # type: ignore[misc]

    def test_validate_catches_forced_corruption(self) -> None:
        value = AbstractValue.top(2)
        object.__setattr__(value, "zero_mask", 1)
        object.__setattr__(value, "one_mask", 1)
        with pytest.raises(MalformedAbstractValue):
            validate_abstract_value(value)

    def test_equal_values_hash_equal(self) -> None:
        assert AbstractValue(3, 1, 2) == AbstractValue(3, 1, 2)
        assert hash(AbstractValue(3, 1, 2)) == hash(AbstractValue(3, 1, 2))


# ---------------------------------------------------------------------------
# AbstractValue -- queries
# ---------------------------------------------------------------------------

class TestAbstractValueQueries:

    def test_top(self) -> None:
        top = AbstractValue.top(4)
        assert top.is_top
        assert top.precision == 0
        assert top.unknown_count == 4

    def test_from_constant(self) -> None:
        value = AbstractValue.from_constant(4, 0b1010)
        assert value.render() == "1010"
        assert value.is_constant
        assert value.constant == 0b1010

    def test_from_negative_constant(self) -> None:
        assert AbstractValue.from_constant(4, -1).render() == "1111"
        assert AbstractValue.from_constant(4, -8).render() == "1000"

    def test_constant_of_partial_value_raises(self) -> None:
        with pytest.raises(ValueError, match="unknown bits"):
            _av("1?").constant

    def test_precision_counts_known_bits(self) -> None:
        assert _av("1?0?").precision == 2
        assert _av("1?0?").unknown_count == 2
        assert _av("1?0?").unknown_mask == 0b0101

    def test_max_unsigned(self) -> None:
        assert _av("1?0?").max_unsigned == 0b1101
        assert AbstractValue.top(3).max_unsigned == 0b111

    def test_contains(self) -> None:
        value = _av("1?0?")
        assert value.contains(ConcreteValue(4, 0b1101))
        assert not value.contains(ConcreteValue(4, 0b0101))
        assert not value.contains(ConcreteValue(3, 0b101))

    def test_lattice_order(self) -> None:
        assert _av("10").is_at_least_as_precise_as(_av("1?"))
        assert _av("1?").is_at_least_as_precise_as(_av("??"))
        assert not _av("??").is_at_least_as_precise_as(_av("1?"))
        assert not _av("0?").is_at_least_as_precise_as(_av("1?"))
        assert _av("1?").is_at_least_as_precise_as(_av("1?"))

    def test_conflicts_with(self) -> None:
        assert _av("1?").conflicts_with(_av("0?"))
        assert _av("?0").conflicts_with(_av("?1"))
        assert not _av("1?").conflicts_with(_av("?0"))
        assert not _av("??").conflicts_with(_av("10"))


# ---------------------------------------------------------------------------
# AbstractValue -- sext / extract_bits
# ---------------------------------------------------------------------------

class TestAbstractValueOperations:

    @pytest.mark.parametrize("text,extended", [
        ("0?", "000?"),
        ("1?", "111?"),
        ("?1", "???1"),
        ("10", "1110"),
    ])
    def test_sext(self, text: str, extended: str) -> None:
        assert _av(text).sext(4).render() == extended

    def test_sext_zero_width_extends_with_zeros(self) -> None:
        assert AbstractValue.top(0).sext(2).render() == "00"

    def test_sext_same_width_is_identity(self) -> None:
        assert _av("1?0").sext(3) == _av("1?0")

    def test_sext_cannot_narrow(self) -> None:
        with pytest.raises(ValueError):
            _av("1?0").sext(2)

    def test_extract_bits(self) -> None:
        assert _av("10?1").extract_bits(2, 2).render() == "10"
        assert _av("10?1").extract_bits(2, 0).render() == "?1"

    def test_extract_bits_out_of_range(self) -> None:
        with pytest.raises(ValueError):
            _av("10?1").extract_bits(3, 2)


class TestRenderParse:

    def test_render_msb_first(self) -> None:
        assert AbstractValue(4, 0b0010, 0b1000).render() == "1?0?"
        assert str(AbstractValue(4, 0b0010, 0b1000)) == "1?0?"

    def test_parse_inverse_of_render(self) -> None:
        for text in ("", "?", "0", "1", "1?0?", "0000", "????"):
            assert AbstractValue.parse(text).render() == text

    def test_parse_rejects_other_characters(self) -> None:
        with pytest.raises(ValueError, match="unexpected character"):
            AbstractValue.parse("1x0")


# ---------------------------------------------------------------------------
# ConcreteValue
# ---------------------------------------------------------------------------

class TestConcreteValue:

    def test_signed_interpretation(self) -> None:
        assert ConcreteValue(4, 0b0111).signed == 7
        assert ConcreteValue(4, 0b1000).signed == -8
        assert ConcreteValue(4, 0b1111).signed == -1
        assert ConcreteValue(0, 0).signed == 0

    def test_from_signed_wraps(self) -> None:
        assert ConcreteValue.from_signed(4, -1).bits == 0b1111
        assert ConcreteValue.from_signed(4, 17).bits == 1

    def test_bits_outside_width_rejected(self) -> None:
        with pytest.raises(ValueError):
            ConcreteValue(4, 16)
        with pytest.raises(ValueError):
            ConcreteValue(4, -1)

    def test_negative_width_rejected(self) -> None:
        with pytest.raises(ValueError):
            ConcreteValue(-1, 0)

    def test_sext(self) -> None:
        assert ConcreteValue(4, 0b1010).sext(8).bits == 0b1111_1010
        assert ConcreteValue(4, 0b0010).sext(8).bits == 0b0000_0010

    def test_sext_cannot_narrow(self) -> None:
        with pytest.raises(ValueError):
            ConcreteValue(4, 0).sext(2)

    def test_extract_bits(self) -> None:
        assert ConcreteValue(8, 0b1100_1000).extract_bits(4, 4).bits == 0b1100

    def test_repr_shows_signed_value(self) -> None:
        assert "signed=-1" in repr(ConcreteValue(4, 0b1111))
