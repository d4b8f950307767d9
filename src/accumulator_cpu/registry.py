"""OperationRegistry: explicit dispatch table for machine operations.

Each Operation maps to exactly one handler that runs the operation against a
Machine using register state only. The table is frozen after construction,
so the set of executable operations cannot change at runtime.

Registry Keys:
    or, and, xor: combine the accumulator with the data register
    not: complement the accumulator
    lshift, rshift: logical shift of the accumulator by one bit
    load: copy the data register into the accumulator
    store: write the accumulator to memory at the address register
"""

from typing import TYPE_CHECKING, Callable, Dict, Optional

from .errors import UnknownOperation
from .instruction import Operation

if TYPE_CHECKING:
    from .machine import Machine

Handler = Callable[["Machine"], None]


class OperationRegistry:
    """Frozen registry of machine operation handlers.

    Attributes:
        _handlers: Mapping from Operation to handler
        _frozen: Whether the registry is locked against modifications
    """

    def __init__(self):
        self._handlers: Dict[Operation, Handler] = {}
        self._frozen = False
        self._register_all_operations()
        self.freeze()

    def _register_all_operations(self) -> None:
        # Logic
        self.register(Operation.OR, lambda machine: machine.or_())
        self.register(Operation.AND, lambda machine: machine.and_())
        self.register(Operation.XOR, lambda machine: machine.xor())
        self.register(Operation.NOT, lambda machine: machine.not_())

        # Shifts
        self.register(Operation.LSHIFT, lambda machine: machine.lshift())
        self.register(Operation.RSHIFT, lambda machine: machine.rshift())

        # Data movement
        self.register(Operation.LOAD, lambda machine: machine.load())
        self.register(Operation.STORE, lambda machine: machine.store())

    def register(self, operation: Operation, handler: Handler) -> None:
        """Register the handler for an operation.

        Raises:
            RuntimeError: If the registry is frozen
            ValueError: If the operation already has a handler
        """
        if self._frozen:
            raise RuntimeError("Cannot register operations: registry is frozen")
        if operation in self._handlers:
            raise ValueError(f"Operation already registered: {operation.value}")
        self._handlers[operation] = handler

    def freeze(self) -> None:
        self._frozen = True

    def is_frozen(self) -> bool:
        return self._frozen

    def get_valid_keys(self) -> set:
        """Set of all operations with a handler."""
        return set(self._handlers.keys())

    def __contains__(self, operation: Operation) -> bool:
        return operation in self._handlers

    def execute(self, machine: "Machine", operation: Operation) -> None:
        """Run the handler for operation against machine.

        Raises:
            UnknownOperation: If operation has no handler
        """
        handler = self._handlers.get(operation)
        if handler is None:
            raise UnknownOperation(f"Unknown operation: {operation!r}")
        handler(machine)


_registry: Optional[OperationRegistry] = None


def get_registry() -> OperationRegistry:
    """Shared frozen registry instance."""
    global _registry
    if _registry is None:
        _registry = OperationRegistry()
    return _registry
