"""Accumulator CPU Interactive Demo.

A Gradio web interface for stepping through accumulator machine programs.

Usage:
    cd /path/to/accumulator-cpu
    python demo/gradio_app.py

Features:
    - Write or load example programs
    - Seed memory before running
    - Step one phase at a time: see the decoded instruction before it executes
    - Play with a delay between steps, stop at any step boundary
    - Memory and registers rendered as binary words
"""

import asyncio
import math
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import gradio as gr
from accumulator_cpu import (
    Machine,
    MachineError,
    MachineSnapshot,
    MemorySnapshot,
    Program,
    ProgramSnapshot,
    Word,
    parse_program,
)
from accumulator_cpu.machine import DEFAULT_MEMORY_SIZE, DEFAULT_WORD_SIZE
from accumulator_cpu.program import DEFAULT_STEP_DELAY

REFRESH_INTERVAL = 0.05


# =============================================================================
# Example Programs
# =============================================================================

EXAMPLE_PROGRAMS = {
    "Adder pass (7 + 1)": ("""load 0      # a
xor 1       # a ^ b
store 2     # partial sum
load 0
and 1       # a & b
lshift      # carry
store 1
load 2
store 0     # M[0] = partial sum, M[1] = carry""", "0=7, 1=1"),

    "Invert": ("""load 0
not
store 1""", "0=0b10100101"),

    "Halve": ("""load 0
rshift
store 0""", "0=200"),

    "Custom": ("", ""),
}


# =============================================================================
# Session
# =============================================================================

@dataclass
class Session:
    """Per-browser machine, program and latest published snapshots."""
    machine: Machine
    program: Program
    machine_view: Optional[MachineSnapshot] = None
    program_view: Optional[ProgramSnapshot] = None

    def subscribe(self) -> None:
        self.machine.register_observer(self._on_machine)
        self.program.register_observer(self._on_program)

    def _on_machine(self, snapshot: MachineSnapshot) -> None:
        self.machine_view = snapshot

    def _on_program(self, snapshot: ProgramSnapshot) -> None:
        self.program_view = snapshot


def parse_memory_init(text: str) -> list:
    """Parse "ADDR=VALUE, ADDR=VALUE" into (address, value) pairs."""
    pairs = []
    for item in text.replace("\n", ",").split(","):
        item = item.strip()
        if not item:
            continue
        address, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"expected ADDR=VALUE, got {item!r}")
        pairs.append((int(address.strip(), 0), int(value.strip(), 0)))
    return pairs


def build_session(source: str, memory_init: str, word_size: int, memory_size: int) -> Session:
    machine = Machine(word_size=int(word_size), memory_size=int(memory_size))
    for address, value in parse_memory_init(memory_init):
        machine.write(value, address)
    program = Program(machine, parse_program(source))
    session = Session(machine, program)
    session.subscribe()
    return session


# =============================================================================
# Rendering
# =============================================================================

def render_memory(snapshot: MemorySnapshot, selected: Optional[int] = None) -> str:
    """Square markdown table of binary cells; the selected address is bold."""
    cells = snapshot.binary_cells()
    width = math.ceil(math.sqrt(snapshot.size))
    lines = [
        "| | " + " | ".join(str(c) for c in range(width)) + " |",
        "|---" * (width + 1) + "|",
    ]
    for start in range(0, snapshot.size, width):
        row = []
        for address in range(start, start + width):
            if address >= snapshot.size:
                row.append("")
            elif address == selected:
                row.append(f"**{cells[address]}**")
            else:
                row.append(f"`{cells[address]}`")
        lines.append(f"| **{start}** | " + " | ".join(row) + " |")
    return "\n".join(lines)


def render_registers(snapshot: MachineSnapshot) -> str:
    size = snapshot.word_size
    ir = snapshot.instruction_register
    if snapshot.pending_operation is not None:
        status = f"decoded `{ir}`, about to execute"
    elif ir is not None:
        status = f"executed `{ir}`"
    else:
        status = "idle"
    return "\n".join([
        "| Register | Binary | Decimal |",
        "|---|---|---|",
        f"| ACC | `{Word(snapshot.accumulator, size)}` | {snapshot.accumulator} |",
        f"| AR | | {snapshot.address_register} |",
        f"| DR | `{Word(snapshot.data_register, size)}` | {snapshot.data_register} |",
        f"| IR | `{ir if ir is not None else '-'}` | |",
        "",
        f"**Status:** {status}",
    ])


def render_program(snapshot: ProgramSnapshot) -> str:
    if not snapshot.instructions:
        return "(empty program)"
    lines = []
    for index, instruction in enumerate(snapshot.instructions):
        marker = "   "
        if index == snapshot.counter:
            marker = "=> " if snapshot.phase == "decoded" else "-> "
        lines.append(f"{marker}{index:3d}  {instruction}")
    if snapshot.complete:
        lines.append("     (complete)")
    return "\n".join(lines)


def render_views(session: Optional[Session], status: str = "") -> tuple:
    if session is None or session.machine_view is None:
        return session, "", "", "", status or "Load a program first"
    machine = session.machine_view
    program = session.program_view
    if not status:
        status = "Playing" if program.playing else ("Complete" if program.complete else "Ready")
    return (
        session,
        render_memory(machine.memory, selected=machine.address_register),
        render_registers(machine),
        render_program(program),
        status,
    )


# =============================================================================
# Event Handlers
# =============================================================================

# Handlers that mutate a session are coroutines so they share the event loop
# with play_program and never step a program from a worker thread.

def load_program(source: str, memory_init: str, word_size: int, memory_size: int) -> tuple:
    try:
        session = build_session(source, memory_init, word_size, memory_size)
    except (MachineError, ValueError) as e:
        return render_views(None, f"Error: {e}")
    return render_views(session, "Loaded")


async def step_program(session: Optional[Session]) -> tuple:
    if session is None:
        return render_views(None)
    try:
        session.program.step()
    except MachineError as e:
        return render_views(session, f"Error: {e}")
    return render_views(session)


async def play_program(session: Optional[Session], delay: float):
    if session is None:
        yield render_views(None)
        return
    try:
        loop = session.program.play(delay)
    except MachineError as e:
        yield render_views(session, f"Error: {e}")
        return

    task = asyncio.ensure_future(loop)
    try:
        while not task.done():
            yield render_views(session)
            await asyncio.wait({task}, timeout=REFRESH_INTERVAL)
    finally:
        session.program.stop()

    error = task.exception()
    yield render_views(session, f"Error: {error}" if error else "")


async def stop_program(session: Optional[Session]) -> tuple:
    if session is None:
        return render_views(None)
    session.program.stop()
    return render_views(session, "Stopped")


def load_example(example_name: str) -> tuple:
    """Load an example program and its memory setup."""
    return EXAMPLE_PROGRAMS.get(example_name, ("", ""))


# =============================================================================
# Gradio Interface
# =============================================================================

def create_demo():
    """Create and return the Gradio demo interface."""

    default_name = "Adder pass (7 + 1)"
    default_source, default_init = EXAMPLE_PROGRAMS[default_name]

    with gr.Blocks(title="Accumulator CPU Demo", theme=gr.themes.Soft()) as demo:
        gr.Markdown("""
        # Accumulator CPU

        A single-accumulator machine executing a stored program through an
        explicit **fetch -> decode -> execute** cycle. Each *Step* runs one
        phase: decode loads the registers, execute performs the operation.
        """)

        session_state = gr.State(None)

        with gr.Row():
            with gr.Column(scale=2):
                gr.Markdown("### Program")

                example_dropdown = gr.Dropdown(
                    choices=list(EXAMPLE_PROGRAMS.keys()),
                    value=default_name,
                    label="Load Example"
                )

                program_input = gr.Textbox(
                    value=default_source,
                    label="Source Code",
                    lines=12,
                    placeholder="load 0\nxor 1\nstore 2"
                )

                memory_input = gr.Textbox(
                    value=default_init,
                    label="Initial Memory (ADDR=VALUE, ...)",
                )

                gr.Markdown("### Settings")

                with gr.Row():
                    word_size = gr.Slider(
                        minimum=1, maximum=32, value=DEFAULT_WORD_SIZE, step=1,
                        label="Word Size (bits)"
                    )
                    memory_size = gr.Slider(
                        minimum=1, maximum=DEFAULT_MEMORY_SIZE, value=16, step=1,
                        label="Memory Size (words)"
                    )
                    delay = gr.Slider(
                        minimum=0.0, maximum=2.0, value=DEFAULT_STEP_DELAY, step=0.05,
                        label="Play Delay (s)"
                    )

                with gr.Row():
                    load_button = gr.Button("Load", variant="primary")
                    step_button = gr.Button("Step")
                    play_button = gr.Button("Play")
                    stop_button = gr.Button("Stop", variant="stop")

                status_output = gr.Textbox(label="Status", interactive=False)

            with gr.Column(scale=3):
                registers_output = gr.Markdown(label="Registers")
                program_output = gr.Textbox(label="Program", lines=12, interactive=False)
                memory_output = gr.Markdown(label="Memory")

        with gr.Accordion("ISA Reference", open=False):
            gr.Markdown("""
            | Instruction | Effect |
            |-------------|--------|
            | `load a` | ACC = M[a] |
            | `store a` | M[a] = ACC |
            | `and a` | ACC &= M[a] |
            | `or a` | ACC \\|= M[a] |
            | `xor a` | ACC ^= M[a] |
            | `not` | ACC = ~ACC |
            | `lshift` | ACC <<= 1 |
            | `rshift` | ACC >>= 1 (zero fill) |

            The address argument is optional: without it an instruction uses
            the address already in AR.
            """)

        outputs = [session_state, memory_output, registers_output, program_output, status_output]

        example_dropdown.change(
            fn=load_example,
            inputs=[example_dropdown],
            outputs=[program_input, memory_input]
        )

        load_button.click(
            fn=load_program,
            inputs=[program_input, memory_input, word_size, memory_size],
            outputs=outputs
        )

        step_button.click(fn=step_program, inputs=[session_state], outputs=outputs)

        play_event = play_button.click(
            fn=play_program,
            inputs=[session_state, delay],
            outputs=outputs
        )

        stop_button.click(
            fn=stop_program,
            inputs=[session_state],
            outputs=outputs,
            cancels=[play_event]
        )

    return demo


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    demo = create_demo()
    demo.launch(
        share=False,
        server_name="0.0.0.0",
        server_port=7861,
        show_error=True
    )
