# =============================================================================
# kbverify -- KNOWN-BITS VERIFICATION HARNESS
# File:   kbverify/core/domain.py
# =============================================================================
#
# SCOPE
# -----
# Frozen value types for the three-valued-per-bit domain:
#   AbstractValue  -- per-bit facts (known-zero / known-one / unknown).
#   ConcreteValue  -- one fixed-width two's-complement integer.
#
# Masks are plain Python ints used as bitsets (bit 0 = least significant).
# Python ints are arbitrary precision, so no width ceiling is imposed here;
# the vectorized paths in kbverify.core.galois are bounded separately.
#
# INVARIANTS ENFORCED
# -------------------
# AbstractValue
#   INV-AV-01  bit_width is an int >= 0.
#   INV-AV-02  zero_mask and one_mask are non-negative ints below 2**bit_width.
#   INV-AV-03  zero_mask & one_mask == 0.
# ConcreteValue
#   INV-CV-01  bit_width is an int >= 0.
#   INV-CV-02  0 <= bits < 2**bit_width (unsigned pattern).
#
# Every violation raises at construction. A malformed AbstractValue can
# therefore never exist.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import MalformedAbstractValue


# =============================================================================
# SECTION 1 -- BIT HELPERS
# =============================================================================

def width_mask(bit_width: int) -> int:
    """All-ones mask of the given width. width_mask(0) == 0."""
    return (1 << bit_width) - 1


def popcount(mask: int) -> int:
    return bin(mask).count("1")


def count_trailing_ones(mask: int, bit_width: int) -> int:
    """Number of consecutive set bits starting at bit 0, capped at bit_width."""
    mask &= width_mask(bit_width)
    return min(((~mask) & (mask + 1)).bit_length() - 1, bit_width)


def _is_plain_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# SECTION 2 -- CONCRETE VALUE
# =============================================================================

@dataclass(frozen=True)
class ConcreteValue:
    """
    A fixed-width two's-complement integer.

    Stored as its unsigned bit pattern so that set membership and bitwise
    reasoning never depend on the sign. Use .signed for arithmetic.
    """

    bit_width: int
    bits:      int

    def __post_init__(self) -> None:
        if not _is_plain_int(self.bit_width) or self.bit_width < 0:
            raise ValueError(
                "ConcreteValue: bit_width must be a non-negative integer, got "
                + repr(self.bit_width)
            )
        if not _is_plain_int(self.bits) or not (0 <= self.bits <= width_mask(self.bit_width)):
            raise ValueError(
                "ConcreteValue: bits must be an unsigned pattern in [0, 2**"
                + str(self.bit_width)
                + "), got "
                + repr(self.bits)
            )

    @classmethod
    def from_signed(cls, bit_width: int, value: int) -> "ConcreteValue":
        """Wrap any Python int into bit_width bits (two's complement)."""
        return cls(bit_width, value & width_mask(bit_width))

    @property
    def signed(self) -> int:
        if self.bit_width == 0:
            return 0
        sign_bit = 1 << (self.bit_width - 1)
        return self.bits - (1 << self.bit_width) if self.bits & sign_bit else self.bits

    def sext(self, new_width: int) -> "ConcreteValue":
        """Sign-extend to new_width bits. new_width must be >= bit_width."""
        if new_width < self.bit_width:
            raise ValueError(
                "ConcreteValue.sext: cannot narrow from "
                + str(self.bit_width)
                + " to "
                + str(new_width)
                + " bits"
            )
        return ConcreteValue.from_signed(new_width, self.signed)

    def extract_bits(self, num_bits: int, low_bit: int) -> "ConcreteValue":
        """Bits [low_bit, low_bit + num_bits) as a num_bits-wide value."""
        return ConcreteValue(num_bits, (self.bits >> low_bit) & width_mask(num_bits))

    def __repr__(self) -> str:
        return "ConcreteValue(bit_width=%d, bits=%#x, signed=%d)" % (
            self.bit_width, self.bits, self.signed,
        )


# =============================================================================
# SECTION 3 -- ABSTRACT VALUE
# =============================================================================

@dataclass(frozen=True)
class AbstractValue:
    """
    Independent per-bit facts over a fixed bit width.

    A bit is known-zero if set in zero_mask, known-one if set in one_mask,
    and unknown if set in neither. The all-unknown value is top; a value
    with no unknown bits denotes exactly one concrete integer.

    Precision is the number of known bits. A is at least as precise as B
    iff A's masks are supersets of B's masks.
    """

    bit_width: int
    zero_mask: int
    one_mask:  int

    def __post_init__(self) -> None:
        _check_valid(self.bit_width, self.zero_mask, self.one_mask)

    # -- constructors --------------------------------------------------------

    @classmethod
    def top(cls, bit_width: int) -> "AbstractValue":
        return cls(bit_width, 0, 0)

    @classmethod
    def from_constant(cls, bit_width: int, value: int) -> "AbstractValue":
        """Fully known value. Negative values are taken as two's complement."""
        mask = width_mask(bit_width)
        bits = value & mask
        return cls(bit_width, ~bits & mask, bits)

    # -- queries -------------------------------------------------------------

    @property
    def known_mask(self) -> int:
        return self.zero_mask | self.one_mask

    @property
    def unknown_mask(self) -> int:
        return ~self.known_mask & width_mask(self.bit_width)

    @property
    def unknown_count(self) -> int:
        return self.bit_width - self.precision

    @property
    def precision(self) -> int:
        """Number of known bits: popcount(zero_mask) + popcount(one_mask)."""
        return popcount(self.zero_mask) + popcount(self.one_mask)

    @property
    def is_top(self) -> bool:
        return self.known_mask == 0

    @property
    def is_constant(self) -> bool:
        return self.unknown_mask == 0

    @property
    def constant(self) -> int:
        """Unsigned pattern of a fully known value."""
        if not self.is_constant:
            raise ValueError(
                "AbstractValue.constant: value " + self.render() + " has unknown bits"
            )
        return self.one_mask

    @property
    def max_unsigned(self) -> int:
        return ~self.zero_mask & width_mask(self.bit_width)

    def contains(self, value: ConcreteValue) -> bool:
        """True iff value agrees with every known bit of self."""
        if value.bit_width != self.bit_width:
            return False
        return (value.bits & self.zero_mask) == 0 and (value.bits & self.one_mask) == self.one_mask

    def is_at_least_as_precise_as(self, other: "AbstractValue") -> bool:
        """Partial order of the lattice: self's masks contain other's masks."""
        return (
            self.bit_width == other.bit_width
            and (self.zero_mask & other.zero_mask) == other.zero_mask
            and (self.one_mask & other.one_mask) == other.one_mask
        )

    def conflicts_with(self, other: "AbstractValue") -> bool:
        """True iff some bit is known-zero in one value and known-one in the other."""
        return bool((self.zero_mask & other.one_mask) | (self.one_mask & other.zero_mask))

    # -- known-bits operations ----------------------------------------------

    def sext(self, new_width: int) -> "AbstractValue":
        """
        Sign-extend to new_width bits.

        The new high bits copy the fact known about the sign bit. An unknown
        sign bit leaves every new bit unknown. A zero-width value extends
        with known zeros.
        """
        if new_width < self.bit_width:
            raise ValueError(
                "AbstractValue.sext: cannot narrow from "
                + str(self.bit_width)
                + " to "
                + str(new_width)
                + " bits"
            )
        high = width_mask(new_width) & ~width_mask(self.bit_width)
        zero, one = self.zero_mask, self.one_mask
        if self.bit_width == 0:
            zero |= high
        else:
            sign_bit = 1 << (self.bit_width - 1)
            if zero & sign_bit:
                zero |= high
            elif one & sign_bit:
                one |= high
        return AbstractValue(new_width, zero, one)

    def extract_bits(self, num_bits: int, low_bit: int) -> "AbstractValue":
        """Facts about bits [low_bit, low_bit + num_bits) as a num_bits-wide value."""
        if low_bit < 0 or num_bits < 0 or low_bit + num_bits > self.bit_width:
            raise ValueError(
                "AbstractValue.extract_bits: range ["
                + str(low_bit)
                + ", "
                + str(low_bit + num_bits)
                + ") is outside a "
                + str(self.bit_width)
                + "-bit value"
            )
        mask = width_mask(num_bits)
        return AbstractValue(
            num_bits,
            (self.zero_mask >> low_bit) & mask,
            (self.one_mask >> low_bit) & mask,
        )

    # -- rendering -----------------------------------------------------------

    def render(self) -> str:
        """MSB-first string of '0', '1' and '?' characters."""
        chars = []
        for bit in range(self.bit_width - 1, -1, -1):
            if self.zero_mask >> bit & 1:
                chars.append("0")
            elif self.one_mask >> bit & 1:
                chars.append("1")
            else:
                chars.append("?")
        return "".join(chars)

    @classmethod
    def parse(cls, text: str) -> "AbstractValue":
        """Inverse of render(): MSB-first string over '0', '1', '?'."""
        zero = one = 0
        for char in text:
            zero <<= 1
            one <<= 1
            if char == "0":
                zero |= 1
            elif char == "1":
                one |= 1
            elif char != "?":
                raise ValueError(
                    "AbstractValue.parse: unexpected character " + repr(char) + " in " + repr(text)
                )
        return cls(len(text), zero, one)

    def __str__(self) -> str:
        return self.render()


def _check_valid(bit_width: object, zero_mask: object, one_mask: object) -> None:
    """Enforce INV-AV-01..03. Raises MalformedAbstractValue on the first violation."""
    if not _is_plain_int(bit_width) or bit_width < 0:
        raise MalformedAbstractValue(
            bit_width, zero_mask, one_mask, "bit_width must be a non-negative integer",
        )
    if not _is_plain_int(zero_mask) or not _is_plain_int(one_mask):
        raise MalformedAbstractValue(
            bit_width, zero_mask, one_mask, "masks must be integers",
        )
    limit = width_mask(bit_width)
    if zero_mask < 0 or one_mask < 0 or (zero_mask | one_mask) & ~limit:
        raise MalformedAbstractValue(
            bit_width, zero_mask, one_mask, "mask bits outside the bit width",
        )
    if zero_mask & one_mask:
        raise MalformedAbstractValue(
            bit_width, zero_mask, one_mask, "bits claimed both known-zero and known-one",
        )


def validate_abstract_value(value: AbstractValue) -> None:
    """
    Re-check the validity invariant of an existing value.

    Construction already enforces it; this is the entry check used by the
    Concretizer in case a value was assembled by object.__setattr__ or
    unpickled from an untrusted source.
    """
    _check_valid(value.bit_width, value.zero_mask, value.one_mask)


__all__ = [
    "AbstractValue",
    "ConcreteValue",
    "count_trailing_ones",
    "popcount",
    "validate_abstract_value",
    "width_mask",
]
