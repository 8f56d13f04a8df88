# kbverify/core/__init__.py
# Known-bits domain engine: value types, enumeration and the Galois pair.
# Authoritative import source for AbstractValue: kbverify.core.domain

from kbverify.core.exceptions import (
    KnownBitsError,
    MalformedAbstractValue,
    BitWidthMismatch,
    EmptyInputSet,
    ImpracticalBitWidth,
)
from kbverify.core.domain import (
    AbstractValue,
    ConcreteValue,
    validate_abstract_value,
)
from kbverify.core.enumerator import (
    abstract_value_count,
    enumerate_abstract_values,
    iter_abstract_values,
)
from kbverify.core.galois import (
    abstract,
    abstract_patterns,
    concretize,
    concretize_patterns,
)
