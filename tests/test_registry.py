"""Tests for the OperationRegistry dispatch table."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from accumulator_cpu.errors import UnknownOperation
from accumulator_cpu.instruction import Operation
from accumulator_cpu.machine import Machine
from accumulator_cpu.registry import OperationRegistry, get_registry


class TestRegistry:
    """Test registration and freezing."""

    def test_every_operation_registered(self):
        assert get_registry().get_valid_keys() == set(Operation)

    def test_frozen(self):
        registry = OperationRegistry()
        assert registry.is_frozen() is True
        with pytest.raises(RuntimeError, match="frozen"):
            registry.register(Operation.LOAD, lambda machine: None)

    def test_duplicate_registration(self):
        class DoubleRegistry(OperationRegistry):
            def _register_all_operations(self):
                self.register(Operation.NOT, lambda machine: machine.not_())
                self.register(Operation.NOT, lambda machine: machine.not_())

        with pytest.raises(ValueError, match="already registered"):
            DoubleRegistry()

    def test_singleton(self):
        assert get_registry() is get_registry()

    def test_execute_dispatches(self):
        machine = Machine(word_size=4, memory_size=2)
        get_registry().execute(machine, Operation.NOT)
        assert machine.accumulator == 0b1111

    def test_execute_missing_key(self):
        class EmptyRegistry(OperationRegistry):
            def _register_all_operations(self):
                pass

        with pytest.raises(UnknownOperation):
            EmptyRegistry().execute(Machine(), Operation.LOAD)
