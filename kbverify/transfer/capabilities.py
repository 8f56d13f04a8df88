# kbverify/transfer/capabilities.py
# Named capabilities the comparison harness is parametrized over.
#
# Both roles share one functional signature:
#   (lhs: AbstractValue, rhs: AbstractValue) -> AbstractValue
# with equal bit widths in and out. The harness never hardcodes either role,
# so other operators or other candidate implementations plug in unchanged.
#
# Contract required of a candidate: pure, deterministic, sound in the
# known-bits domain. For workers > 1 the callable must also be picklable
# (a module-level function).

from typing import Protocol

from kbverify.core.domain import AbstractValue


class TransferFunction(Protocol):
    def __call__(self, lhs: AbstractValue, rhs: AbstractValue) -> AbstractValue:
        ...


class ReferenceTransferFunction(TransferFunction, Protocol):
    """Ground truth: the most precise sound result for the operator."""


class CandidateTransferFunction(TransferFunction, Protocol):
    """Implementation under test, measured against the reference."""
