"""Accumulator CPU: a single-accumulator teaching machine.

A fixed-width word memory, an ALU built around one accumulator register, and
a stepper that runs a stored program through an explicit
fetch -> decode -> execute cycle.

Architecture:
    PROGRAM -> FETCH -> DECODE -> [registers] -> EXECUTE -> REGISTRY -> ACC/MEMORY
                 |         |           |            |
             [counter] [IR, AR, DR] [Decoded]  [Operation enum]

Every state change publishes an immutable snapshot to subscribers, which is
how a presentation layer follows execution one phase at a time.

Modules:
    word: Word fixed-width value type
    memory: Memory word array with bounds checking
    instruction: Operation enum and Instruction value
    registry: Frozen dispatch table for operations
    machine: Machine registers, ALU and decode/execute
    program: Program stepper with step/play/stop
    assembler: Text assembler for in-memory authoring
    state: Read-only snapshots
    errors: Error kinds
"""

__version__ = "0.1.0"

from .errors import (
    MachineError,
    InvalidArgument,
    OutOfRange,
    UnknownOperation,
    InvalidState,
)
from .word import Word
from .memory import Memory
from .instruction import Operation, Instruction
from .registry import OperationRegistry
from .machine import Machine
from .program import Program, Phase, TraceEntry
from .assembler import parse_instruction, parse_program
from .state import MemorySnapshot, MachineSnapshot, ProgramSnapshot

__all__ = [
    "MachineError", "InvalidArgument", "OutOfRange", "UnknownOperation", "InvalidState",
    "Word", "Memory", "Operation", "Instruction", "OperationRegistry", "Machine",
    "Program", "Phase", "TraceEntry", "parse_instruction", "parse_program",
    "MemorySnapshot", "MachineSnapshot", "ProgramSnapshot",
]
