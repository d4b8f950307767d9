"""Operation and Instruction: the unit of program storage.

Operation is the closed set of things the accumulator machine can do. An
Instruction pairs one Operation with at most one argument, the memory
address the operation works on. Unknown operation names are rejected when
the Instruction is built, never at dispatch time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Tuple, Union

from .errors import InvalidArgument, UnknownOperation, require_non_negative_integer


class Operation(str, Enum):
    """Operations implemented by the machine, keyed by mnemonic."""
    OR = "or"
    AND = "and"
    XOR = "xor"
    NOT = "not"
    LSHIFT = "lshift"
    RSHIFT = "rshift"
    LOAD = "load"
    STORE = "store"

    @classmethod
    def from_name(cls, name: Union[str, "Operation"]) -> "Operation":
        """Resolve a mnemonic (case-insensitive) to an Operation.

        Raises:
            UnknownOperation: If no operation has that mnemonic
        """
        if isinstance(name, Operation):
            return name
        if not isinstance(name, str):
            raise UnknownOperation(f"Unknown operation: {name!r}")
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise UnknownOperation(f"Unknown operation: {name!r}") from None


MAX_ARGS = 1


@dataclass(frozen=True)
class Instruction:
    """Immutable (operation, args) pair.

    Attributes:
        operation: Operation to perform (a mnemonic string is accepted and resolved)
        args: Zero or one non-negative integer address
    """
    operation: Operation
    args: Tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "operation", Operation.from_name(self.operation))

        args = self.args
        if args is None:
            args = ()
        elif not isinstance(args, (list, tuple)):
            raise InvalidArgument(f"args must be a list or tuple, got {args!r}")
        if len(args) > MAX_ARGS:
            raise InvalidArgument(
                f"{self.operation.value} takes at most {MAX_ARGS} argument, got {len(args)}"
            )
        for arg in args:
            require_non_negative_integer(arg, "instruction argument")
        object.__setattr__(self, "args", tuple(args))

    @property
    def name(self) -> str:
        return self.operation.value

    @property
    def address(self):
        """The address argument, or None when the instruction has none."""
        return self.args[0] if self.args else None

    def __str__(self) -> str:
        return f"{self.name}({', '.join(str(a) for a in self.args)})"


def make_instructions(entries: Iterable) -> list:
    """Build Instructions from Instructions or (name, args) pairs."""
    instructions = []
    for entry in entries:
        if isinstance(entry, Instruction):
            instructions.append(entry)
        else:
            name, args = entry
            instructions.append(Instruction(name, tuple(args)))
    return instructions
