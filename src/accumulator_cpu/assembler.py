"""Text assembler for authoring programs in memory.

Accepts one instruction per line in either of two forms:

    load 0          mnemonic, whitespace, argument
    load(0)         call form, as programs are usually written down
    lshift          no argument
    lshift()

Arguments may be decimal, hex (0x) or binary (0b). Comments start with
';' or '#'. Nothing here touches the filesystem.
"""

import re
from typing import List

from .errors import InvalidArgument, MachineError
from .instruction import Instruction, Operation

_INSTRUCTION_RE = re.compile(
    r"""^(?P<name>[A-Za-z_]\w*)
        \s*
        (?:
            \(\s*(?P<call_args>[^)]*?)\s*\)   # name(arg)
          | (?P<bare_args>\S.*)?              # name arg
        )$""",
    re.VERBOSE,
)


def _parse_immediate(text: str) -> int:
    """Parse a decimal, 0x hex or 0b binary literal.

    Raises:
        InvalidArgument: If text is not a literal
    """
    value = text.strip().upper()
    try:
        if value.startswith("0X"):
            return int(value, 16)
        if value.startswith("0B"):
            return int(value, 2)
        return int(value)
    except ValueError:
        raise InvalidArgument(f"Invalid argument: {text!r}") from None


def parse_instruction(text: str) -> Instruction:
    """Parse a single instruction.

    Raises:
        UnknownOperation: If the mnemonic is not a machine operation
        InvalidArgument: If the text is malformed or has too many arguments
    """
    match = _INSTRUCTION_RE.match(text.strip())
    if not match:
        raise InvalidArgument(f"Unknown instruction format: {text!r}")

    operation = Operation.from_name(match.group("name"))
    raw_args = match.group("call_args")
    if raw_args is None:
        raw_args = match.group("bare_args")
    raw_args = (raw_args or "").strip()

    args = [_parse_immediate(a) for a in re.split(r"[,\s]+", raw_args)] if raw_args else []
    return Instruction(operation, tuple(args))


def parse_program(source: str) -> List[Instruction]:
    """Parse a multi-line program.

    Raises:
        MachineError: The parse error for the first bad line, prefixed with
            its line number
    """
    instructions = []
    for lineno, line in enumerate(source.split("\n"), start=1):
        line = re.sub(r"[;#].*$", "", line).strip()
        if not line:
            continue
        try:
            instructions.append(parse_instruction(line))
        except MachineError as e:
            raise type(e)(f"line {lineno}: {e}") from e
    return instructions
