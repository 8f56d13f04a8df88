import pytest

from kbverify.core.exceptions import (
    BitWidthMismatch,
    EmptyInputSet,
    ImpracticalBitWidth,
    KnownBitsError,
    MalformedAbstractValue,
)


class TestKnownBitsErrorBase:
    """KnownBitsError base class -- construction and attributes."""

    def test_construction_stores_message(self):
        exc = KnownBitsError(message="test message")
        assert exc.message == "test message"
        assert str(exc) == "test message"

    def test_construction_defaults(self):
        exc = KnownBitsError(message="msg")
        assert exc.field_name == ""
        assert exc.value is None

    def test_construction_with_all_args(self):
        exc = KnownBitsError(message="msg", field_name="zero_mask", value=3)
        assert exc.field_name == "zero_mask"
        assert exc.value == 3

    def test_is_exception_subclass(self):
        assert issubclass(KnownBitsError, Exception)

    def test_empty_message_raises_value_error(self):
        with pytest.raises(ValueError, match="non-empty string"):
            KnownBitsError(message="")

    def test_non_string_field_name_raises_value_error(self):
        with pytest.raises(ValueError):
            KnownBitsError(message="msg", field_name=7)  # type: ignore[arg-type]

    def test_equality_same_type_same_values(self):
        assert KnownBitsError("msg", "f", 1) == KnownBitsError("msg", "f", 1)

    def test_equality_different_message(self):
        assert KnownBitsError("msg1") != KnownBitsError("msg2")

    def test_equality_different_type(self):
        assert KnownBitsError(message="msg") != "not an exception"

    def test_hashable(self):
        exc = KnownBitsError(message="msg")
        assert exc in {exc}

    def test_repr_contains_class_name(self):
        exc = KnownBitsError(message="msg", field_name="f", value=0)
        assert "KnownBitsError" in repr(exc)
        assert "field_name" in repr(exc)


class TestMalformedAbstractValue:

    def test_message_names_reason_and_masks(self):
        exc = MalformedAbstractValue(4, 0b0011, 0b0001, "overlap")
        assert exc.message.startswith("MalformedAbstractValue: overlap")
        assert "bit_width=4" in exc.message
        assert "zero_mask=0x3" in exc.message
        assert "one_mask=0x1" in exc.message

    def test_attributes(self):
        exc = MalformedAbstractValue(4, 2, 1, "reason")
        assert (exc.bit_width, exc.zero_mask, exc.one_mask) == (4, 2, 1)
        assert exc.value == (2, 1)

    def test_empty_reason_rejected(self):
        with pytest.raises(ValueError):
            MalformedAbstractValue(4, 0, 0, "")

    def test_non_int_mask_rendered_with_repr(self):
        exc = MalformedAbstractValue(4, "x", 0, "masks must be integers")
        assert "zero_mask='x'" in exc.message

    def test_is_known_bits_error(self):
        assert isinstance(MalformedAbstractValue(1, 1, 1, "r"), KnownBitsError)


class TestBitWidthMismatch:

    def test_message_format(self):
        exc = BitWidthMismatch(expected=4, actual=5, context="abstraction:")
        assert exc.message == "BitWidthMismatch: abstraction: expected bit width 4, got 5."

    def test_attributes(self):
        exc = BitWidthMismatch(expected=4, actual=5, context="ctx")
        assert exc.expected == 4
        assert exc.actual == 5
        assert exc.field_name == "bit_width"
        assert exc.value == 5

    def test_empty_context_rejected(self):
        with pytest.raises(ValueError):
            BitWidthMismatch(expected=1, actual=2, context="")


class TestEmptyInputSetAndImpracticalBitWidth:

    def test_empty_input_set_message(self):
        exc = EmptyInputSet()
        assert exc.message.startswith("EmptyInputSet:")
        assert exc.field_name == "values"

    def test_impractical_bit_width_message(self):
        exc = ImpracticalBitWidth(bit_width=12, limit=8)
        assert exc.message == (
            "ImpracticalBitWidth: bit width 12 exceeds the brute-force limit of 8."
        )
        assert exc.bit_width == 12
        assert exc.limit == 8

    def test_equal_when_constructed_identically(self):
        assert ImpracticalBitWidth(9, 8) == ImpracticalBitWidth(9, 8)
        assert ImpracticalBitWidth(9, 8) != ImpracticalBitWidth(10, 8)
