# =============================================================================
# tests/unit/core/test_enumerator.py
# =============================================================================
#
# Coverage:
#   3**w values per width, no duplicates, every value valid
#   width 0: a single empty value
#   base-3 order: least significant digit drives bit 0; decode_index
#   iter_abstract_values matches enumerate_abstract_values
#   negative / non-int widths rejected
# =============================================================================

from __future__ import annotations

import pytest

from kbverify.core.domain import AbstractValue
from kbverify.core.enumerator import (
    abstract_value_count,
    decode_index,
    enumerate_abstract_values,
    iter_abstract_values,
)


class TestEnumerationSize:

    @pytest.mark.parametrize("bit_width", [0, 1, 2, 3, 4, 5])
    def test_count_is_power_of_three(self, bit_width: int) -> None:
        values = enumerate_abstract_values(bit_width)
        assert len(values) == 3 ** bit_width
        assert abstract_value_count(bit_width) == 3 ** bit_width

    def test_width_zero_yields_one_empty_value(self) -> None:
        assert enumerate_abstract_values(0) == [AbstractValue(0, 0, 0)]

    @pytest.mark.parametrize("bit_width", [1, 2, 3, 4])
    def test_no_duplicates(self, bit_width: int) -> None:
        values = enumerate_abstract_values(bit_width)
        assert len(set(values)) == len(values)

    @pytest.mark.parametrize("bit_width", [1, 2, 3])
    def test_every_value_valid_and_of_width(self, bit_width: int) -> None:
        for value in enumerate_abstract_values(bit_width):
            assert value.bit_width == bit_width
            assert value.zero_mask & value.one_mask == 0


class TestEnumerationOrder:

    def test_width_one_order(self) -> None:
        rendered = [v.render() for v in enumerate_abstract_values(1)]
        assert rendered == ["0", "1", "?"]

    def test_least_significant_digit_drives_bit_zero(self) -> None:
        rendered = [v.render() for v in enumerate_abstract_values(2)]
        assert rendered[:4] == ["00", "01", "0?", "10"]
        assert rendered[-1] == "??"

    def test_decode_index(self) -> None:
        # 5 = 2 + 1*3 -> bit 0 unknown, bit 1 known one
        assert decode_index(2, 5).render() == "1?"

    def test_iterator_matches_list(self) -> None:
        assert list(iter_abstract_values(3)) == enumerate_abstract_values(3)


class TestEnumerationErrors:

    def test_negative_width_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            enumerate_abstract_values(-1)

    def test_non_int_width_rejected(self) -> None:
        with pytest.raises(ValueError):
            enumerate_abstract_values(2.0)  # type: ignore[arg-type]
