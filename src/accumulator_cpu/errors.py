"""Error kinds raised by the accumulator machine.

Every failure is local and synchronous: the call that violates its contract
raises before mutating any state. Each kind also derives from the builtin
exception a Python caller would naturally catch for it.

Kinds:
    InvalidArgument: non-integer, wrong sign, or wrong-width operand
    OutOfRange: address or insertion index outside bounds
    UnknownOperation: operation name the machine does not implement
    InvalidState: execute without a prior decode, play on a finished program
"""

from typing import Any


class MachineError(Exception):
    """Base class for all accumulator machine errors."""


class InvalidArgument(MachineError, ValueError):
    """An operand has the wrong type, sign, or width."""


class OutOfRange(MachineError, IndexError):
    """An address or position lies outside its valid range."""


class UnknownOperation(MachineError, KeyError):
    """An instruction names an operation the machine does not implement."""

    def __str__(self) -> str:
        # KeyError.__str__ would wrap the message in quotes
        return str(self.args[0]) if self.args else ""


class InvalidState(MachineError, RuntimeError):
    """The call is not allowed in the current machine or program state."""


def is_integer(value: Any) -> bool:
    """Check for a real integer; bools are rejected."""
    return isinstance(value, int) and not isinstance(value, bool)


def require_integer(value: Any, what: str = "value") -> int:
    """Raise InvalidArgument unless value is an integer."""
    if not is_integer(value):
        raise InvalidArgument(f"{what} must be an integer, got {value!r}")
    return value


def require_non_negative_integer(value: Any, what: str = "value") -> int:
    """Raise InvalidArgument unless value is an integer >= 0."""
    if not is_integer(value) or value < 0:
        raise InvalidArgument(f"{what} must be a non-negative integer, got {value!r}")
    return value


def require_positive_integer(value: Any, what: str = "value") -> int:
    """Raise InvalidArgument unless value is an integer >= 1."""
    if not is_integer(value) or value < 1:
        raise InvalidArgument(f"{what} must be a positive integer, got {value!r}")
    return value
