# kbverify/transfer/__init__.py
# Transfer functions for signed multiply-high over the known-bits domain.

from .capabilities import (
    CandidateTransferFunction,
    ReferenceTransferFunction,
    TransferFunction,
)
from .composite import composite_mulhs, known_bits_mul
from .reference import concrete_mulhs, mulhs_high_halves, reference_mulhs

__all__ = [
    # Capabilities
    "TransferFunction",
    "ReferenceTransferFunction",
    "CandidateTransferFunction",
    # Reference (brute force)
    "concrete_mulhs",
    "mulhs_high_halves",
    "reference_mulhs",
    # Candidate (closed form)
    "composite_mulhs",
    "known_bits_mul",
]
