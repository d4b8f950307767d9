"""Memory: fixed-size array of word-width cells.

Valid addresses are [0, size). Every stored value is masked to the word
size, so a cell never holds bits beyond it. Writes publish a
MemorySnapshot to subscribers.
"""

from typing import Any, List, Tuple

from .errors import OutOfRange, is_integer, require_integer, require_positive_integer
from .observer import Observable
from .state import MemorySnapshot


class Memory(Observable):
    """Word-addressable, zero-initialized memory.

    Attributes:
        word_size: Bits per cell
        size: Number of cells
        word_mask: All-ones value applied to every write
    """

    def __init__(self, word_size: int, size: int):
        super().__init__()
        self._word_size = require_positive_integer(word_size, "word size")
        self._size = require_positive_integer(size, "memory size")
        self._word_mask = (1 << word_size) - 1
        self._cells: List[int] = [0] * size

    @property
    def word_size(self) -> int:
        return self._word_size

    @property
    def size(self) -> int:
        return self._size

    @property
    def word_mask(self) -> int:
        return self._word_mask

    def __len__(self) -> int:
        return self._size

    def validate_address(self, address: Any) -> int:
        """Check that address is an integer in [0, size).

        Raises:
            OutOfRange: If address is not a valid cell index
        """
        if not is_integer(address) or not 0 <= address < self._size:
            raise OutOfRange(f"address {address!r} out of range [0, {self._size})")
        return address

    def read(self, address: int) -> int:
        """Read the masked value stored at address.

        Raises:
            OutOfRange: If address is invalid
        """
        self.validate_address(address)
        return self._cells[address]

    def write(self, value: int, address: int) -> None:
        """Store value & word_mask at address and notify subscribers.

        Raises:
            OutOfRange: If address is invalid
            InvalidArgument: If value is not an integer
        """
        self.validate_address(address)
        require_integer(value, "memory value")
        self._cells[address] = value & self._word_mask
        self._notify_observers()

    def dump(self) -> Tuple[int, ...]:
        """Copy of all cells in address order."""
        return tuple(self._cells)

    def snapshot(self) -> MemorySnapshot:
        return MemorySnapshot(word_size=self._word_size, cells=self.dump())
