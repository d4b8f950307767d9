"""Tests for the text assembler and instruction types."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from accumulator_cpu.assembler import parse_instruction, parse_program
from accumulator_cpu.errors import InvalidArgument, UnknownOperation
from accumulator_cpu.instruction import Instruction, Operation


class TestInstruction:
    """Test the Instruction value."""

    def test_from_name(self):
        instruction = Instruction("XOR", (1,))
        assert instruction.operation is Operation.XOR
        assert instruction.name == "xor"
        assert instruction.address == 1

    def test_no_args(self):
        instruction = Instruction("lshift")
        assert instruction.args == ()
        assert instruction.address is None
        assert str(instruction) == "lshift()"

    def test_list_args_become_tuple(self):
        assert Instruction("load", [3]).args == (3,)

    def test_unknown_operation(self):
        with pytest.raises(UnknownOperation):
            Instruction("add", (0,))

    @pytest.mark.parametrize("args", [(0, 1), (-1,), (1.5,), ("0",), 3])
    def test_invalid_args(self, args):
        with pytest.raises(InvalidArgument):
            Instruction("load", args)

    def test_immutable(self):
        instruction = Instruction("load", (0,))
        with pytest.raises(AttributeError):
            instruction.args = (1,)

    def test_all_operations_resolve(self):
        for name in ["or", "and", "xor", "not", "lshift", "rshift", "load", "store"]:
            assert Operation.from_name(name).value == name


class TestParseInstruction:
    """Test single-line parsing."""

    @pytest.mark.parametrize("text,expected", [
        ("load 0", Instruction("load", (0,))),
        ("load(0)", Instruction("load", (0,))),
        ("LOAD ( 12 )", Instruction("load", (12,))),
        ("xor 0x0F", Instruction("xor", (15,))),
        ("and 0b101", Instruction("and", (5,))),
        ("lshift", Instruction("lshift")),
        ("lshift()", Instruction("lshift")),
        ("  store   3  ", Instruction("store", (3,))),
    ])
    def test_valid_forms(self, text, expected):
        assert parse_instruction(text) == expected

    def test_unknown_mnemonic(self):
        with pytest.raises(UnknownOperation):
            parse_instruction("jmp 3")

    @pytest.mark.parametrize("text", ["load x", "load(0", "load 0 1", "load -1", "", "3 load"])
    def test_malformed(self, text):
        with pytest.raises(InvalidArgument):
            parse_instruction(text)


class TestParseProgram:
    """Test multi-line parsing."""

    def test_comments_and_blank_lines(self):
        source = """
            load 0      # a
            ; whole-line comment

            xor(1)      ; a ^ b
            store 2
        """
        assert parse_program(source) == [
            Instruction("load", (0,)),
            Instruction("xor", (1,)),
            Instruction("store", (2,)),
        ]

    def test_error_reports_line(self):
        with pytest.raises(UnknownOperation, match="line 2"):
            parse_program("load 0\nadd 1\n")

    def test_malformed_line(self):
        with pytest.raises(InvalidArgument, match="line 1"):
            parse_program("load zero")

    def test_empty_source(self):
        assert parse_program("") == []
