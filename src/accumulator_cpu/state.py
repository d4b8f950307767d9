"""Read-only snapshots of memory, machine and program state.

Snapshots are what subscribers receive after every state change. They are
frozen dataclasses holding only immutable values (ints, tuples,
Instructions), so a presentation layer can keep them around without seeing
later mutations.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .instruction import Instruction
from .word import Word


@dataclass(frozen=True)
class MemorySnapshot:
    """Immutable view of memory contents.

    Attributes:
        word_size: Bits per cell
        cells: Every cell value, in address order
    """
    word_size: int
    cells: Tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.cells)

    def binary_cells(self) -> Tuple[str, ...]:
        """Cells rendered as zero-padded binary strings."""
        return tuple(Word(v, self.word_size).to_binary_string() for v in self.cells)

    def as_dict(self) -> dict:
        return {"word_size": self.word_size, "cells": list(self.cells)}


@dataclass(frozen=True)
class MachineSnapshot:
    """Immutable view of machine registers and memory.

    Attributes:
        accumulator: Accumulator value
        address_register: Currently selected address
        data_register: Mirror of memory[address_register]
        instruction_register: Last decoded instruction, or None
        pending_operation: Mnemonic waiting for execute, or None when idle
        memory: Memory contents
    """
    accumulator: int
    address_register: int
    data_register: int
    instruction_register: Optional[Instruction]
    pending_operation: Optional[str]
    memory: MemorySnapshot

    @property
    def word_size(self) -> int:
        return self.memory.word_size

    @property
    def is_decoded(self) -> bool:
        return self.pending_operation is not None

    def as_dict(self) -> dict:
        ir = self.instruction_register
        return {
            "accumulator": self.accumulator,
            "address_register": self.address_register,
            "data_register": self.data_register,
            "instruction_register": (
                {"name": ir.name, "args": list(ir.args)} if ir is not None else None
            ),
            "pending_operation": self.pending_operation,
            "memory": self.memory.as_dict(),
        }

    def __str__(self) -> str:
        acc = Word(self.accumulator, self.word_size).to_binary_string()
        dr = Word(self.data_register, self.word_size).to_binary_string()
        ir = str(self.instruction_register) if self.instruction_register else "-"
        pending = " DECODED" if self.is_decoded else ""
        return f"ACC={acc} AR={self.address_register} DR={dr} IR={ir}{pending}"


@dataclass(frozen=True)
class ProgramSnapshot:
    """Immutable view of a program and its progress.

    Attributes:
        instructions: Program instructions in order
        counter: Index of the next instruction to decode or execute
        phase: "fetch" (next step decodes) or "decoded" (next step executes)
        complete: Whether the counter reached the end of the program
        playing: Whether a play loop is running
    """
    instructions: Tuple[Instruction, ...]
    counter: int
    phase: str
    complete: bool
    playing: bool

    def as_dict(self) -> dict:
        return {
            "instructions": [str(i) for i in self.instructions],
            "counter": self.counter,
            "phase": self.phase,
            "complete": self.complete,
            "playing": self.playing,
        }
