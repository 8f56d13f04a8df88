# kbverify/core/enumerator.py
# Enumerator -- every valid AbstractValue of a given bit width.
#
# Index i in [0, 3**bit_width) is read as a base-3 number, least significant
# digit first. The digit at position b decides the fate of bit b:
#   0 -> known zero,  1 -> known one,  2 -> unknown.
# The mapping is a bijection onto the lattice, so the output has no
# duplicates and no conflicting values by construction.
#
# Cost and memory are both O(3**bit_width). The harness refuses widths above
# PRACTICAL_BIT_WIDTH_LIMIT unless explicitly forced.

from typing import Iterator, List

from kbverify.core.domain import AbstractValue

_DIGIT_ZERO = 0
_DIGIT_ONE = 1


def abstract_value_count(bit_width: int) -> int:
    """Number of valid abstract values of the given width: 3**bit_width."""
    _check_width(bit_width)
    return 3 ** bit_width


def decode_index(bit_width: int, index: int) -> AbstractValue:
    """Decode one base-3 index into its AbstractValue."""
    zero_mask = 0
    one_mask = 0
    remaining = index
    for bit in range(bit_width):
        remaining, digit = divmod(remaining, 3)
        if digit == _DIGIT_ZERO:
            zero_mask |= 1 << bit
        elif digit == _DIGIT_ONE:
            one_mask |= 1 << bit
    return AbstractValue(bit_width, zero_mask, one_mask)


def iter_abstract_values(bit_width: int) -> Iterator[AbstractValue]:
    """Lazily yield all 3**bit_width abstract values in index order."""
    total = abstract_value_count(bit_width)
    for index in range(total):
        yield decode_index(bit_width, index)


def enumerate_abstract_values(bit_width: int) -> List[AbstractValue]:
    """
    Return the ordered list of all 3**bit_width valid AbstractValues.

    bit_width == 0 yields exactly one (empty) value.

    Raises:
        ValueError if bit_width is negative or not an int.
    """
    return list(iter_abstract_values(bit_width))


def _check_width(bit_width: int) -> None:
    if not isinstance(bit_width, int) or isinstance(bit_width, bool) or bit_width < 0:
        raise ValueError(
            "enumerate_abstract_values: bit_width must be a non-negative integer, got "
            + repr(bit_width)
        )
