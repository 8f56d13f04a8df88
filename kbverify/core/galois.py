# kbverify/core/galois.py
# Concretizer and Abstractor -- the Galois connection between the known-bits
# lattice and sets of fixed-width concrete integers.
#
#   concretize(v)      -> all 2**u concrete values consistent with v
#                         (u = number of unknown bits)
#   abstract(S)        -> tightest AbstractValue whose concretization
#                         contains S (per-bit meet)
#
# Round-trip law: abstract(concretize(v)) == v for every valid v.
#
# Two renditions of each direction are provided:
#   - concretize / abstract work on ConcreteValue objects with Python ints
#     and have no width ceiling.
#   - concretize_patterns / abstract_patterns work on numpy uint64 arrays of
#     unsigned bit patterns. They are what the reference transfer function
#     uses; widths are bounded by MAX_SUPPORTED_BIT_WIDTH so that the
#     doubled-width products still fit a native int64.
#
# Enumeration order is binary counting over the unknown-bit positions in
# increasing index order: bit 0 of the counter drives the lowest unknown bit.
# Callers may rely on the order for test determinism only.

from itertools import chain
from typing import Iterable, List

import numpy as np

from kbverify.core.domain import (
    AbstractValue,
    ConcreteValue,
    validate_abstract_value,
    width_mask,
)
from kbverify.core.exceptions import BitWidthMismatch, EmptyInputSet, ImpracticalBitWidth
from kbverify.utils.constants import MAX_SUPPORTED_BIT_WIDTH


def _unknown_positions(value: AbstractValue) -> List[int]:
    unknown = value.unknown_mask
    return [bit for bit in range(value.bit_width) if unknown >> bit & 1]


def _check_vector_width(bit_width: int) -> None:
    if bit_width > MAX_SUPPORTED_BIT_WIDTH:
        raise ImpracticalBitWidth(bit_width, MAX_SUPPORTED_BIT_WIDTH)


# ---------------------------------------------------------------------------
# CONCRETIZATION
# ---------------------------------------------------------------------------

def concretize(value: AbstractValue) -> List[ConcreteValue]:
    """
    Return every ConcreteValue consistent with value.

    Known bits are fixed from the masks; the unknown bits take every 0/1
    combination. The result has exactly 2**value.unknown_count elements.

    Raises:
        MalformedAbstractValue if value violates the validity invariant.
    """
    validate_abstract_value(value)
    positions = _unknown_positions(value)
    result = []
    for counter in range(1 << len(positions)):
        bits = value.one_mask
        for index, bit in enumerate(positions):
            if counter >> index & 1:
                bits |= 1 << bit
        result.append(ConcreteValue(value.bit_width, bits))
    return result


def concretize_patterns(value: AbstractValue) -> np.ndarray:
    """
    Vectorized concretize(): unsigned bit patterns as a uint64 array.

    Same order as concretize().

    Raises:
        MalformedAbstractValue if value violates the validity invariant.
        ImpracticalBitWidth if value.bit_width > MAX_SUPPORTED_BIT_WIDTH.
    """
    validate_abstract_value(value)
    _check_vector_width(value.bit_width)
    positions = _unknown_positions(value)
    counter = np.arange(1 << len(positions), dtype=np.uint64)
    patterns = np.full(counter.shape, value.one_mask, dtype=np.uint64)
    one = np.uint64(1)
    for index, bit in enumerate(positions):
        patterns |= ((counter >> np.uint64(index)) & one) << np.uint64(bit)
    return patterns


# ---------------------------------------------------------------------------
# ABSTRACTION
# ---------------------------------------------------------------------------

def abstract(values: Iterable[ConcreteValue]) -> AbstractValue:
    """
    Return the tightest AbstractValue containing every input value.

    A bit is known-zero iff it is 0 in every input, known-one iff it is 1 in
    every input, and unknown otherwise. Accepts any iterable (set, list,
    generator).

    Raises:
        EmptyInputSet if values is empty.
        BitWidthMismatch if the inputs do not all share one bit width.
    """
    iterator = iter(values)
    try:
        first = next(iterator)
    except StopIteration:
        raise EmptyInputSet() from None

    bit_width = first.bit_width
    mask = width_mask(bit_width)
    known_zero = mask
    known_one = mask
    for value in chain((first,), iterator):
        if value.bit_width != bit_width:
            raise BitWidthMismatch(
                expected=bit_width,
                actual=value.bit_width,
                context="abstraction:",
            )
        known_zero &= ~value.bits
        known_one &= value.bits
    return AbstractValue(bit_width, known_zero & mask, known_one)


def abstract_patterns(bit_width: int, patterns: np.ndarray) -> AbstractValue:
    """
    Vectorized abstract() over an array of unsigned bit patterns.

    Raises:
        EmptyInputSet if patterns is empty.
        BitWidthMismatch if any pattern has bits at or above bit_width.
        ImpracticalBitWidth if bit_width > MAX_SUPPORTED_BIT_WIDTH.
    """
    _check_vector_width(bit_width)
    patterns = np.asarray(patterns, dtype=np.uint64)
    if patterns.size == 0:
        raise EmptyInputSet()

    mask = width_mask(bit_width)
    all_ones = int(np.bitwise_and.reduce(patterns, axis=None))
    any_ones = int(np.bitwise_or.reduce(patterns, axis=None))
    if any_ones & ~mask:
        raise BitWidthMismatch(
            expected=bit_width,
            actual=any_ones.bit_length(),
            context="abstraction:",
        )
    return AbstractValue(bit_width, ~any_ones & mask, all_ones)


__all__ = [
    "abstract",
    "abstract_patterns",
    "concretize",
    "concretize_patterns",
]
