# =============================================================================
# kbverify -- KNOWN-BITS VERIFICATION HARNESS
# File:   kbverify/core/exceptions.py
# =============================================================================
#
# SCOPE
# -----
# Defines the exception hierarchy for the known-bits domain engine.
# All exceptions are pure value objects: no side effects, no logging,
# no I/O of any kind.
#
# EXCEPTION HIERARCHY
# -------------------
#   KnownBitsError(Exception)               -- base; never raised directly
#     MalformedAbstractValue(KnownBitsError) -- zero/one masks overlap, or a
#                                              mask does not fit the width
#     BitWidthMismatch(KnownBitsError)       -- operands of differing width
#     EmptyInputSet(KnownBitsError)          -- abstraction of an empty set
#     ImpracticalBitWidth(KnownBitsError)    -- width beyond the brute-force
#                                              ceiling of the harness
#
# MESSAGE CONTRACT
# ----------------
# Every exception message is:
#   - Deterministic: identical inputs -> identical message string.
#   - Explicit: the offending field and value are always included.
#   - ASCII-safe.
#   - Prefixed with the class name, so a failure summary is readable on
#     its own. FailureHandler maps exit codes by type(exc).__name__.
#
# =============================================================================

from __future__ import annotations

from typing import Any


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class KnownBitsError(Exception):
    """
    Base class for all known-bits domain exceptions.

    Never raised directly. Use a concrete subclass.

    Attributes:
        field_name:  Name of the offending field, or empty string if not
                     applicable.
        value:       The offending value, or None if the violation is
                     relational rather than field-local.
        message:     Human-readable description of the violation.
                     Always non-empty. Always deterministic.
    """

    def __init__(
        self,
        message:    str,
        field_name: str = "",
        value:      Any = None,
    ) -> None:
        if not isinstance(message, str) or not message:
            raise ValueError(
                "KnownBitsError: message must be a non-empty string"
            )
        if not isinstance(field_name, str):
            raise ValueError(
                "KnownBitsError: field_name must be a string"
            )
        super().__init__(message)
        self.field_name: str = field_name
        self.value:      Any = value
        self.message:    str = message

    def __repr__(self) -> str:
        return (
            self.__class__.__name__
            + "(field_name=" + repr(self.field_name)
            + ", value=" + repr(self.value)
            + ", message=" + repr(self.message)
            + ")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KnownBitsError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.field_name == other.field_name
            and self.value == other.value
            and self.message == other.message
        )

    __hash__ = Exception.__hash__


# =============================================================================
# CONCRETE EXCEPTIONS
# =============================================================================

class MalformedAbstractValue(KnownBitsError):
    """
    Raised when an abstract value would violate the validity invariant.

    Covers:
      - zero_mask & one_mask != 0 (a bit claimed both known-zero and
        known-one).
      - a mask with bits at or above bit_width, or a negative mask.
      - a negative bit_width.

    Message format:
        "MalformedAbstractValue: <reason> (bit_width=<w>, zero_mask=0x..,
         one_mask=0x..)."

    Args:
        bit_width:  Declared width of the offending value.
        zero_mask:  Declared known-zero mask.
        one_mask:   Declared known-one mask.
        reason:     What is wrong. Must be non-empty.
    """

    def __init__(
        self,
        bit_width: int,
        zero_mask: int,
        one_mask:  int,
        reason:    str,
    ) -> None:
        if not isinstance(reason, str) or not reason:
            raise ValueError(
                "MalformedAbstractValue: reason must be a non-empty string"
            )
        message = (
            "MalformedAbstractValue: "
            + reason
            + " (bit_width=" + repr(bit_width)
            + ", zero_mask=" + _hex(zero_mask)
            + ", one_mask=" + _hex(one_mask)
            + ")."
        )
        super().__init__(
            message=message,
            field_name="zero_mask/one_mask",
            value=(zero_mask, one_mask),
        )
        self.bit_width: int = bit_width
        self.zero_mask: int = zero_mask
        self.one_mask:  int = one_mask
        self.reason:    str = reason


class BitWidthMismatch(KnownBitsError):
    """
    Raised when two values that must share a bit width do not.

    Raised by the Abstractor (mixed-width input set), by the reference
    transfer function (lhs/rhs of different widths) and by the comparison
    harness (a transfer function returned a result of the wrong width).

    Message format:
        "BitWidthMismatch: <context> expected bit width <expected>,
         got <actual>."

    Args:
        expected:  The width every operand must share.
        actual:    The width actually observed.
        context:   Where the mismatch was detected. Must be non-empty.
    """

    def __init__(self, expected: int, actual: int, context: str) -> None:
        if not isinstance(context, str) or not context:
            raise ValueError(
                "BitWidthMismatch: context must be a non-empty string"
            )
        message = (
            "BitWidthMismatch: "
            + context
            + " expected bit width "
            + repr(expected)
            + ", got "
            + repr(actual)
            + "."
        )
        super().__init__(message=message, field_name="bit_width", value=actual)
        self.expected: int = expected
        self.actual:   int = actual
        self.context:  str = context


class EmptyInputSet(KnownBitsError):
    """
    Raised when the Abstractor is invoked on an empty collection.

    Unreachable through concretization, which always yields at least one
    value, but checked rather than assumed.
    """

    def __init__(self) -> None:
        super().__init__(
            message=(
                "EmptyInputSet: abstraction requires at least one concrete "
                "value; got an empty collection."
            ),
            field_name="values",
            value=0,
        )


class ImpracticalBitWidth(KnownBitsError):
    """
    Raised when the harness is asked to brute-force a width beyond its
    configured ceiling.

    The comparison harness costs O(9^bit_width) pairs, each costing up to
    O(4^bit_width) concrete products, so the ceiling is reported to the
    caller instead of stalling silently.

    Args:
        bit_width:  The requested width.
        limit:      The largest width accepted in the current mode.
    """

    def __init__(self, bit_width: int, limit: int) -> None:
        message = (
            "ImpracticalBitWidth: bit width "
            + repr(bit_width)
            + " exceeds the brute-force limit of "
            + repr(limit)
            + "."
        )
        super().__init__(message=message, field_name="bit_width", value=bit_width)
        self.bit_width: int = bit_width
        self.limit:     int = limit


def _hex(mask: int) -> str:
    if isinstance(mask, int) and not isinstance(mask, bool):
        return hex(mask)
    return repr(mask)


# =============================================================================
# MODULE __all__
# =============================================================================

__all__ = [
    "KnownBitsError",
    "MalformedAbstractValue",
    "BitWidthMismatch",
    "EmptyInputSet",
    "ImpracticalBitWidth",
]
