"""Machine: accumulator ALU, registers and the decode/execute micro-cycle.

The machine owns one Memory and four registers:

    ACC  accumulator, the only register the ALU writes
    AR   address register, the memory cell selected by the last decode
    DR   data register, always equal to memory[AR]
    IR   instruction register, the last decoded Instruction

Executing an instruction takes two calls:

    {Idle} --decode(instruction)--> {Decoded} --execute()--> {Idle}

decode() loads the registers and records the pending operation without
performing it; execute() performs it using register state only. Callers can
observe the machine between the two calls to see what is about to happen.
"""

import logging
from typing import Optional

from .errors import InvalidArgument, InvalidState, UnknownOperation
from .instruction import Instruction, Operation
from .memory import Memory
from .observer import Observable
from .registry import OperationRegistry, get_registry
from .state import MachineSnapshot, MemorySnapshot
from .word import Word

logger = logging.getLogger(__name__)

DEFAULT_WORD_SIZE = 8
DEFAULT_MEMORY_SIZE = 256


class Machine(Observable):
    """Single-accumulator machine.

    Subscribers receive a MachineSnapshot after every observable change,
    including writes made directly through ``machine.memory``.

    Attributes:
        memory: The machine's exclusively owned Memory
        registry: Dispatch table used by execute()
    """

    def __init__(
        self,
        word_size: int = DEFAULT_WORD_SIZE,
        memory_size: int = DEFAULT_MEMORY_SIZE,
        registry: Optional[OperationRegistry] = None,
    ):
        super().__init__()
        self.memory = Memory(word_size, memory_size)
        self.registry = registry or get_registry()
        self._accumulator = 0
        self._address_register = 0
        self._data_register = 0
        self._instruction_register: Optional[Instruction] = None
        self._pending: Optional[Operation] = None
        self.memory.register_observer(self._on_memory_change)

    # =========================================================================
    # Registers
    # =========================================================================

    @property
    def word_size(self) -> int:
        return self.memory.word_size

    @property
    def word_mask(self) -> int:
        return self.memory.word_mask

    @property
    def accumulator(self) -> int:
        return self._accumulator

    @property
    def address_register(self) -> int:
        return self._address_register

    @property
    def data_register(self) -> int:
        return self._data_register

    @property
    def instruction_register(self) -> Optional[Instruction]:
        return self._instruction_register

    @property
    def pending_operation(self) -> Optional[Operation]:
        return self._pending

    @property
    def is_decoded(self) -> bool:
        return self._pending is not None

    def _set_accumulator(self, raw: int) -> None:
        # Every accumulator assignment goes through here.
        self._accumulator = raw & self.word_mask

    def _refresh_data_register(self) -> None:
        self._data_register = self.memory.read(self._address_register)

    def _acc_word(self) -> Word:
        return Word(self._accumulator, self.word_size)

    def _data_word(self) -> Word:
        return Word(self._data_register, self.word_size)

    def _on_memory_change(self, snapshot: MemorySnapshot) -> None:
        self._refresh_data_register()
        self._notify_observers()

    # =========================================================================
    # ALU
    # =========================================================================

    def or_(self) -> None:
        """ACC |= DR"""
        self._set_accumulator(int(self._acc_word() | self._data_word()))
        self._notify_observers()

    def and_(self) -> None:
        """ACC &= DR"""
        self._set_accumulator(int(self._acc_word() & self._data_word()))
        self._notify_observers()

    def xor(self) -> None:
        """ACC ^= DR"""
        self._set_accumulator(int(self._acc_word() ^ self._data_word()))
        self._notify_observers()

    def not_(self) -> None:
        """ACC = ~ACC"""
        self._set_accumulator(int(~self._acc_word()))
        self._notify_observers()

    def lshift(self) -> None:
        """ACC <<= 1, high bit discarded."""
        self._set_accumulator(int(self._acc_word() << 1))
        self._notify_observers()

    def rshift(self) -> None:
        """ACC >>= 1, zero filled."""
        self._set_accumulator(int(self._acc_word() >> 1))
        self._notify_observers()

    def load(self) -> None:
        """ACC = DR"""
        self._set_accumulator(self._data_register)
        self._notify_observers()

    def store(self) -> None:
        """memory[AR] = ACC"""
        # Notification arrives through the memory subscription.
        self.memory.write(self._accumulator, self._address_register)

    def write(self, value: int, address: int) -> None:
        """Write value directly to memory, bypassing the accumulator.

        Raises:
            OutOfRange: If address is invalid
            InvalidArgument: If value is not an integer
        """
        self.memory.write(value, address)

    # =========================================================================
    # Decode / Execute
    # =========================================================================

    def decode(self, instruction: Instruction) -> None:
        """Load an instruction into the registers without performing it.

        Sets IR, sets AR to the instruction's argument when it has one,
        refreshes DR from memory and records the pending operation.

        Raises:
            InvalidArgument: If instruction is not an Instruction
            UnknownOperation: If the registry has no handler for the operation
            OutOfRange: If the argument is not a valid address
        """
        if not isinstance(instruction, Instruction):
            raise InvalidArgument(f"cannot decode {instruction!r}: not an Instruction")
        if instruction.operation not in self.registry:
            raise UnknownOperation(f"Unknown operation: {instruction.name}")
        address = instruction.address
        if address is not None:
            self.memory.validate_address(address)

        self._instruction_register = instruction
        if address is not None:
            self._address_register = address
        self._refresh_data_register()
        self._pending = instruction.operation
        logger.debug("decode %s: AR=%d DR=%d", instruction, self._address_register, self._data_register)
        self._notify_observers()

    def execute(self) -> None:
        """Perform the operation recorded by the last decode.

        The pending operation is consumed before the handler runs; an error
        raised by a subscriber after the operation applied leaves the machine
        idle, never ready to apply it a second time.

        Raises:
            InvalidState: If no operation is pending
        """
        if self._pending is None:
            raise InvalidState("execute() called with no decoded instruction")
        operation = self._pending
        self._pending = None
        self.registry.execute(self, operation)
        logger.debug("execute %s: ACC=%d", operation.value, self._accumulator)

    # =========================================================================
    # Snapshots
    # =========================================================================

    def snapshot(self) -> MachineSnapshot:
        return MachineSnapshot(
            accumulator=self._accumulator,
            address_register=self._address_register,
            data_register=self._data_register,
            instruction_register=self._instruction_register,
            pending_operation=self._pending.value if self._pending is not None else None,
            memory=self.memory.snapshot(),
        )

    def __str__(self) -> str:
        return str(self.snapshot())
