"""Word: fixed-width unsigned value with truncating construction.

A Word never holds bits beyond its width. Construction masks the raw value
(silently dropping high-order bits) and every operation returns a new Word,
so a Word is safe to share between snapshots.
"""

from dataclasses import dataclass
from typing import Any

from .errors import (
    InvalidArgument,
    require_non_negative_integer,
    require_positive_integer,
)


@dataclass(frozen=True)
class Word:
    """Immutable unsigned integer of a fixed bit width.

    Attributes:
        value: Unsigned value, always in [0, 2**width - 1]
        width: Number of bits
    """
    value: int
    width: int

    def __post_init__(self):
        require_non_negative_integer(self.value, "word value")
        require_positive_integer(self.width, "word width")
        object.__setattr__(self, "value", self.value & self.mask)

    @property
    def mask(self) -> int:
        """All-ones value for this width."""
        return (1 << self.width) - 1

    def _check_operand(self, other: Any) -> "Word":
        if not isinstance(other, Word):
            raise InvalidArgument(f"operand must be a Word, got {other!r}")
        if other.width != self.width:
            raise InvalidArgument(
                f"operand width {other.width} does not match word width {self.width}"
            )
        return other

    def __and__(self, other: "Word") -> "Word":
        other = self._check_operand(other)
        return Word(self.value & other.value, self.width)

    def __or__(self, other: "Word") -> "Word":
        other = self._check_operand(other)
        return Word(self.value | other.value, self.width)

    def __xor__(self, other: "Word") -> "Word":
        other = self._check_operand(other)
        return Word(self.value ^ other.value, self.width)

    def __invert__(self) -> "Word":
        return Word(~self.value & self.mask, self.width)

    def __lshift__(self, n: int) -> "Word":
        require_non_negative_integer(n, "shift amount")
        if n >= self.width:
            return Word(0, self.width)
        return Word((self.value << n) & self.mask, self.width)

    def __rshift__(self, n: int) -> "Word":
        require_non_negative_integer(n, "shift amount")
        return Word(self.value >> n, self.width)

    def __int__(self) -> int:
        return self.value

    def to_binary_string(self) -> str:
        """Render as a binary string left-padded with zeros to `width` digits."""
        return format(self.value, f"0{self.width}b")

    def __str__(self) -> str:
        return self.to_binary_string()
