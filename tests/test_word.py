"""Tests for the Word value type."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from accumulator_cpu.errors import InvalidArgument
from accumulator_cpu.word import Word


class TestWordConstruction:
    """Test construction and truncation."""

    @pytest.mark.parametrize("value,width", [
        (0, 1), (1, 1), (2, 1), (255, 8), (256, 8), (1000, 8),
        (7, 3), (2**40 + 5, 16), (12345, 32),
    ])
    def test_value_is_masked(self, value, width):
        """Stored value is value mod 2**width."""
        assert Word(value, width).value == value % 2**width

    def test_truncation_is_silent(self):
        """High-order bits are dropped without error."""
        word = Word(0b1_0000_0101, 8)
        assert word.value == 0b0000_0101
        assert word.width == 8

    @pytest.mark.parametrize("value", [-1, 1.5, "3", None, True])
    def test_invalid_value(self, value):
        """Negative or non-integer values are rejected."""
        with pytest.raises(InvalidArgument):
            Word(value, 8)

    @pytest.mark.parametrize("width", [0, -4, 2.0, "8", False])
    def test_invalid_width(self, width):
        """Width must be a positive integer."""
        with pytest.raises(InvalidArgument):
            Word(1, width)

    def test_equality(self):
        """Words with the same value and width are equal."""
        assert Word(300, 8) == Word(44, 8)
        assert Word(1, 8) != Word(1, 16)

    def test_immutable(self):
        """Words cannot be modified in place."""
        word = Word(1, 8)
        with pytest.raises(AttributeError):
            word.value = 2


class TestWordLogic:
    """Test bitwise operators."""

    @pytest.fixture(params=[Word(0, 8), Word(0b1010_0101, 8), Word(255, 8), Word(5, 3)])
    def word(self, request):
        return request.param

    def test_double_invert(self, word):
        """~~a == a"""
        assert ~~word == word

    def test_and_self(self, word):
        assert word & word == word

    def test_or_self(self, word):
        assert word | word == word

    def test_xor_self(self, word):
        """a ^ a is zero."""
        assert word ^ word == Word(0, word.width)

    def test_invert_masks_to_width(self):
        assert (~Word(0, 8)).value == 255
        assert (~Word(0b0101, 4)).value == 0b1010

    def test_binary_operators(self):
        a, b = Word(0b1100, 4), Word(0b1010, 4)
        assert (a & b).value == 0b1000
        assert (a | b).value == 0b1110
        assert (a ^ b).value == 0b0110

    def test_width_mismatch(self):
        """Operands of different widths are rejected."""
        with pytest.raises(InvalidArgument):
            Word(1, 8) & Word(1, 16)

    def test_non_word_operand(self):
        """Plain ints are not accepted as operands."""
        with pytest.raises(InvalidArgument):
            Word(1, 8) | 1


class TestWordShifts:
    """Test logical shifts."""

    def test_left_shift_discards_overflow(self):
        assert (Word(0b1000_0001, 8) << 1).value == 0b0000_0010

    def test_right_shift_zero_fills(self):
        assert (Word(0b1000_0001, 8) >> 1).value == 0b0100_0000

    def test_shift_by_zero(self):
        assert Word(77, 8) << 0 == Word(77, 8)
        assert Word(77, 8) >> 0 == Word(77, 8)

    def test_shift_past_width(self):
        assert (Word(255, 8) << 8).value == 0
        assert (Word(255, 8) >> 100).value == 0

    @pytest.mark.parametrize("n", [-1, 1.0, None])
    def test_invalid_shift(self, n):
        with pytest.raises(InvalidArgument):
            Word(1, 8) << n
        with pytest.raises(InvalidArgument):
            Word(1, 8) >> n


class TestWordRendering:
    """Test binary string rendering."""

    def test_zero_padded(self):
        assert Word(5, 8).to_binary_string() == "00000101"
        assert str(Word(0, 4)) == "0000"

    def test_full_width(self):
        assert Word(255, 8).to_binary_string() == "11111111"

    def test_int_conversion(self):
        assert int(Word(42, 8)) == 42
