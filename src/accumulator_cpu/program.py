"""Program: instruction list, program counter and the stepper.

The program drives one Machine through the split fetch/decode/execute
cycle. Each call to step() performs one phase:

    FETCH    -> machine.decode(instructions[counter]); phase = DECODED
    DECODED  -> machine.execute(); counter += 1; phase = FETCH

so a program of N instructions completes after 2 * N steps. play() repeats
step() with a delay between steps until the program completes or stop() is
called. Cancellation is checked only at step boundaries.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .errors import InvalidState, OutOfRange, is_integer
from .instruction import Instruction, make_instructions
from .machine import Machine
from .observer import Observable
from .state import MachineSnapshot, ProgramSnapshot

logger = logging.getLogger(__name__)

DEFAULT_STEP_DELAY = 0.5


class Phase(str, Enum):
    """Stepper sub-state."""
    FETCH = "fetch"
    DECODED = "decoded"


@dataclass
class TraceEntry:
    """One executed instruction.

    Attributes:
        step: Sequence number of the executed instruction (0-indexed)
        counter: Program counter of the instruction
        instruction: The executed instruction
        pre_state: Machine snapshot after decode, before execute
        post_state: Machine snapshot after execute
    """
    step: int
    counter: int
    instruction: Instruction
    pre_state: MachineSnapshot
    post_state: MachineSnapshot


class Program(Observable):
    """Ordered instructions plus a program counter driving a Machine.

    Subscribers receive a ProgramSnapshot after every step phase and every
    change to the instruction list.

    Attributes:
        machine: The machine this program drives
        step_delay: Default seconds between steps in play()
        trace: Executed instructions, oldest first
    """

    def __init__(
        self,
        machine: Machine,
        instructions: Iterable = (),
        step_delay: float = DEFAULT_STEP_DELAY,
    ):
        super().__init__()
        self.machine = machine
        self.step_delay = step_delay
        self.trace: List[TraceEntry] = []
        self._instructions: List[Instruction] = []
        self._counter = 0
        self._phase = Phase.FETCH
        self._playing = False
        self._run_id = 0
        self._stepping = False
        for instruction in make_instructions(instructions):
            self._check_args(instruction)
            self._instructions.append(instruction)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def instructions(self) -> tuple:
        return tuple(self._instructions)

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_complete(self) -> bool:
        return self._counter >= len(self._instructions)

    @property
    def is_playing(self) -> bool:
        return self._playing

    def __len__(self) -> int:
        return len(self._instructions)

    def snapshot(self) -> ProgramSnapshot:
        return ProgramSnapshot(
            instructions=self.instructions,
            counter=self._counter,
            phase=self._phase.value,
            complete=self.is_complete,
            playing=self._playing,
        )

    # =========================================================================
    # Authoring
    # =========================================================================

    def _check_args(self, instruction: Instruction) -> None:
        if instruction.address is not None:
            self.machine.memory.validate_address(instruction.address)

    def append(self, name: Any, args: Sequence[int] = ()) -> Instruction:
        """Add an instruction at the end of the program.

        Raises:
            UnknownOperation: If name is not a machine operation
            InvalidArgument: If args are malformed
            OutOfRange: If the argument is not a valid memory address
        """
        return self.insert(name, args, len(self._instructions))

    def insert(self, name: Any, args: Sequence[int], position: int) -> Instruction:
        """Insert an instruction before position.

        position == len(program) appends. The counter follows the
        instruction it pointed at.

        Raises:
            OutOfRange: If position is outside [0, len(program)] or the
                argument is not a valid memory address
            UnknownOperation: If name is not a machine operation
            InvalidArgument: If args are malformed
        """
        if not is_integer(position) or not 0 <= position <= len(self._instructions):
            raise OutOfRange(
                f"insert position {position!r} out of range [0, {len(self._instructions)}]"
            )
        instruction = name if isinstance(name, Instruction) else Instruction(name, tuple(args))
        self._check_args(instruction)

        self._instructions.insert(position, instruction)
        if position < self._counter or (
            position == self._counter and self._phase is Phase.DECODED
        ):
            self._counter += 1
        self._notify_observers()
        return instruction

    # =========================================================================
    # Stepping
    # =========================================================================

    def step(self) -> bool:
        """Run one phase of the current instruction.

        If the machine raises after it has already consumed the phase (for
        example a subscriber failing during notification), the program still
        moves past that phase, so an applied operation is never run twice.

        Returns:
            True if a phase ran, False if the program is already complete

        Raises:
            InvalidState: If called from inside another step()
        """
        if self._stepping:
            raise InvalidState("step() called while a step is in progress")
        if self.is_complete:
            return False

        self._stepping = True
        try:
            if self._phase is Phase.FETCH:
                self._decode_phase()
            else:
                self._execute_phase()
        finally:
            self._stepping = False

        self._notify_observers()
        return True

    def _decode_phase(self) -> None:
        instruction = self._instructions[self._counter]
        try:
            self.machine.decode(instruction)
        finally:
            if self.machine.is_decoded and self.machine.instruction_register is instruction:
                self._phase = Phase.DECODED
        logger.debug("step %d: decoded %s", self._counter, instruction)

    def _execute_phase(self) -> None:
        instruction = self._instructions[self._counter]
        pre_state = self.machine.snapshot()
        try:
            self.machine.execute()
        finally:
            if not self.machine.is_decoded:
                self.trace.append(TraceEntry(
                    step=len(self.trace),
                    counter=self._counter,
                    instruction=instruction,
                    pre_state=pre_state,
                    post_state=self.machine.snapshot(),
                ))
                self._counter += 1
                self._phase = Phase.FETCH
        logger.debug("step %d: executed %s", self._counter - 1, instruction)

    def run(self) -> List[TraceEntry]:
        """Step synchronously until the program completes.

        Returns:
            The execution trace
        """
        while self.step():
            pass
        return self.trace

    def play(self, delay: Optional[float] = None):
        """Start stepping with a delay between steps.

        The program is marked as playing immediately; the returned
        coroutine runs the loop and must be awaited (or wrapped in a task).
        A stop() issued before the loop starts prevents every step.

        Args:
            delay: Seconds between steps (defaults to step_delay)

        Raises:
            InvalidState: If the program is complete or already playing
        """
        if self.is_complete:
            raise InvalidState("program is complete")
        if self._playing:
            raise InvalidState("program is already playing")
        self._run_id += 1
        self._playing = True
        logger.info("play: counter=%d", self._counter)
        self._notify_observers()
        return self._play_loop(self._run_id, self.step_delay if delay is None else delay)

    async def _play_loop(self, run_id: int, delay: float) -> None:
        try:
            while self._run_id == run_id and not self.is_complete:
                self.step()
                if self.is_complete:
                    break
                await asyncio.sleep(delay)
        finally:
            if self._run_id == run_id:
                self._playing = False
                self._notify_observers()
        logger.info("play finished: counter=%d complete=%s", self._counter, self.is_complete)

    def stop(self) -> None:
        """Request cancellation of a running play(); idempotent."""
        if not self._playing:
            return
        # Invalidates the running loop; it exits at its next step boundary.
        self._run_id += 1
        self._playing = False
        logger.info("stop: counter=%d", self._counter)
        self._notify_observers()

    # =========================================================================
    # Reporting
    # =========================================================================

    def get_summary(self) -> Dict[str, Any]:
        """Execution statistics and final machine state."""
        machine = self.machine.snapshot()
        return {
            "steps": len(self.trace),
            "counter": self._counter,
            "length": len(self._instructions),
            "complete": self.is_complete,
            "accumulator": machine.accumulator,
            "memory": list(machine.memory.cells),
        }

    def format_trace(self) -> str:
        """Human-readable execution trace."""
        lines = []
        for entry in self.trace:
            lines.append(f"[{entry.step}] PC={entry.counter} {entry.instruction}")
            pre, post = entry.pre_state, entry.post_state
            if pre.accumulator != post.accumulator:
                lines.append(f"    ACC: {pre.accumulator} -> {post.accumulator}")
            changed = [
                f"M[{addr}]: {a} -> {b}"
                for addr, (a, b) in enumerate(zip(pre.memory.cells, post.memory.cells))
                if a != b
            ]
            if changed:
                lines.append(f"    {', '.join(changed)}")
        return "\n".join(lines)
