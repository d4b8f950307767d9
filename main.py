#!/usr/bin/env python3
"""Accumulator CPU Command Line Interface.

Run a program on the accumulator machine and print the final state.

Usage:
    python main.py --set 0=7 --set 1=1
    python main.py --inline "load 0; not; store 0" --set 0=0b1010 --trace
    python main.py --set 0=7 --set 1=1 --play --delay 0.2 --verbose
"""

import argparse
import asyncio
import logging
import math
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from accumulator_cpu import Machine, MachineError, Program, Word, parse_program
from accumulator_cpu.machine import DEFAULT_MEMORY_SIZE, DEFAULT_WORD_SIZE
from accumulator_cpu.program import DEFAULT_STEP_DELAY

# One carry-propagation pass: M[0] ^= M[1], M[1] = (M[0] & M[1]) << 1
ADDER_PASS = "load 0; xor 1; store 2; load 0; and 1; lshift; store 1; load 2; store 0"


def parse_assignment(text: str) -> tuple:
    """Parse ADDR=VALUE (decimal, 0x or 0b literals)."""
    try:
        address, value = text.split("=", 1)
        return int(address, 0), int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected ADDR=VALUE, got {text!r}")


def format_memory(machine: Machine) -> str:
    """Render memory as a square table of binary cells."""
    snapshot = machine.memory.snapshot()
    cells = snapshot.binary_cells()
    width = math.ceil(math.sqrt(snapshot.size))
    rows = []
    for start in range(0, snapshot.size, width):
        rows.append(" ".join(cells[start:start + width]))
    return "\n".join(rows)


def format_registers(machine: Machine) -> str:
    snapshot = machine.snapshot()
    size = machine.word_size
    ir = snapshot.instruction_register
    return "\n".join([
        f"ACC: {Word(snapshot.accumulator, size)} ({snapshot.accumulator})",
        f"AR:  {snapshot.address_register}",
        f"DR:  {Word(snapshot.data_register, size)} ({snapshot.data_register})",
        f"IR:  {ir if ir is not None else '-'}",
    ])


def main():
    parser = argparse.ArgumentParser(
        description="Accumulator CPU: single-accumulator teaching machine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # One pass of the XOR/AND/carry adder on 7 + 1
    python main.py --set 0=7 --set 1=1

    # Invert a word and show the trace
    python main.py --inline "load 0; not; store 0" --set 0=0b1010 --trace

    # Animate the run with a delay between steps
    python main.py --set 0=7 --set 1=1 --play --delay 0.2
        """
    )

    parser.add_argument(
        "--inline", "-i",
        type=str,
        default=ADDER_PASS,
        help="Program source (separate instructions with ; or newlines). "
             "Default: one adder pass"
    )
    parser.add_argument(
        "--word-size", "-w",
        type=int,
        default=DEFAULT_WORD_SIZE,
        help=f"Bits per word. Default: {DEFAULT_WORD_SIZE}"
    )
    parser.add_argument(
        "--memory-size", "-m",
        type=int,
        default=DEFAULT_MEMORY_SIZE,
        help=f"Number of memory words. Default: {DEFAULT_MEMORY_SIZE}"
    )
    parser.add_argument(
        "--set", "-s",
        type=parse_assignment,
        action="append",
        default=[],
        metavar="ADDR=VALUE",
        help="Write VALUE to memory address ADDR before running (repeatable)"
    )
    parser.add_argument(
        "--play", "-p",
        action="store_true",
        help="Run with a delay between steps instead of all at once"
    )
    parser.add_argument(
        "--delay", "-d",
        type=float,
        default=DEFAULT_STEP_DELAY,
        help=f"Seconds between steps when playing. Default: {DEFAULT_STEP_DELAY}"
    )
    parser.add_argument(
        "--trace", "-t",
        action="store_true",
        help="Print full execution trace"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output (non-zero memory cells only)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log every decode and execute"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s:%(name)s:%(message)s")

    try:
        machine = Machine(word_size=args.word_size, memory_size=args.memory_size)
        for address, value in args.set:
            machine.write(value, address)
        program = Program(
            machine,
            parse_program(args.inline.replace(";", "\n")),
            step_delay=args.delay,
        )
    except MachineError as e:
        print(f"Error: {e}")
        return 1

    if not args.quiet:
        print(f"Running {len(program)} instructions")
        print("-" * 60)

    try:
        if args.play:
            if args.verbose:
                program.register_observer(lambda snap: print(machine.snapshot()))
            if not program.is_complete:
                asyncio.run(program.play())
        else:
            program.run()
    except MachineError as e:
        print(f"Execution error: {e}")
        return 1
    except KeyboardInterrupt:
        program.stop()
        print("Stopped")

    if args.trace:
        print(program.format_trace())
        print("-" * 60)

    if args.quiet:
        for address, value in enumerate(machine.memory.dump()):
            if value != 0:
                print(f"M[{address}]={value}")
        return 0

    summary = program.get_summary()
    print(format_registers(machine))
    print()
    print(format_memory(machine))
    print()
    print(f"Steps: {summary['steps']}/{summary['length']}")
    print(f"Complete: {summary['complete']}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
