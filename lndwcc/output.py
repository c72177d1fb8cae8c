"""Compiled program view: instructions, execution progress and machine state."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple, Type

from lndwcc.ast import LpError
from lndwcc.compiler import CompileOptions, Compiler
from lndwcc.interpreter import Interpreter
from lndwcc.isa import (
    Add,
    Div,
    Inst,
    Load,
    Mul,
    Result,
    Shl,
    Shr,
    Store,
    Sub,
    Transfer,
    Write,
    register_name,
)
from lndwcc.options import InterpreterOptions

FRAME_TIME = 0.016667

# Share of an instruction completed per frame; slower instructions take more frames.
PROGRESS_PER_FRAME: Dict[Type, float] = {
    Add: 0.03333,
    Sub: 0.03333,
    Mul: 0.01667,
    Div: 0.00833,
    Shl: 0.03333,
    Shr: 0.03333,
    Store: 0.0667,
    Transfer: 0.0667,
    Result: 0.0667,
    Write: 0.0033,
    Load: 0.0033,
}


class AssemblyOutput:
    """One compiled version of a program and the animated run of it."""

    def __init__(self, heading: str = "", instructions: Optional[Iterable[Inst]] = None) -> None:
        self.heading = heading
        self._asm: Optional[List[Inst]] = None
        self._progress: List[float] = []
        self.clear()
        if instructions is not None:
            self._set_instructions(instructions)

    @property
    def name(self) -> str:
        """Name of the view, used as its window key."""
        return self.heading

    def _set_instructions(self, instructions: Iterable[Inst]) -> None:
        self._asm = list(instructions)
        self._progress = [0.0] * len(self._asm)

    def clear(self) -> None:
        """Forget the instructions, any error and the state of any run."""
        self._asm = None
        self._progress = []
        self.error: Optional[str] = None
        self.program_result: Optional[int] = None
        self.running = False
        self.total_time = 0.0
        self.hw: Optional[InterpreterOptions] = None
        self.interpreter: Optional[Interpreter] = None
        self.stepwise = False
        self.step_triggered = False

    def instructions(self) -> List[Inst]:
        """The compiled instructions, or an empty list if there are none."""
        return list(self._asm) if self._asm is not None else []

    @property
    def progress(self) -> Tuple[float, ...]:
        """How far the animation of each instruction has got, from 0 to 1."""
        return tuple(self._progress)

    def is_running(self) -> bool:
        """Whether a run has been started and is being shown."""
        return self.running

    def compile(
        self,
        source: str,
        options: CompileOptions = None,
        hw: InterpreterOptions = None,
    ) -> Set[str]:
        """Compile source and keep the result; return the input variables it uses.

        On failure the message is kept in ``error`` and the error is raised.
        """
        self.clear()
        options = options if options is not None else CompileOptions()
        hw = hw if hw is not None else InterpreterOptions()
        try:
            instructions, variables = Compiler(options, hw).compile(source)
        except LpError as exc:
            self.hw = hw
            self.error = f"Compile error: {exc}"
            raise
        self.hw = hw
        self._set_instructions(instructions)
        return variables

    def run(self, variables: Mapping[str, str], stepwise: bool = False) -> None:
        """Execute the program; the result or a runtime error is kept on the view."""
        self.program_result = None
        self.stepwise = stepwise
        self.step_triggered = False

        if self._asm is None:
            return
        hw = self.hw if self.hw is not None else InterpreterOptions()

        try:
            result = (
                Interpreter(hw)
                .load_instructions(self.instructions())
                .with_variables(variables)
                .ready()
                .run_to_end()
            )
        except LpError as exc:
            self.error = f"Runtime error: {exc}"
            return

        self.program_result = result
        self.running = True
        if self.interpreter is None:
            self.interpreter = (
                Interpreter(hw)
                .load_instructions(self.instructions())
                .with_variables(variables)
                .with_tracing()
                .ready()
            )

    def can_step(self) -> bool:
        """Whether a single step may be requested now."""
        return (
            self.interpreter is not None
            and self.interpreter.running
            and self.stepwise
            and not self.step_triggered
        )

    def trigger_step(self) -> None:
        """Request the animation of the next instruction in stepwise mode."""
        if self.can_step():
            self.step_triggered = True

    def run_to_finish(self) -> None:
        """Leave stepwise mode so the remaining instructions run on their own."""
        if self.interpreter is not None and self.interpreter.running and self.stepwise:
            self.stepwise = False

    def tick(self) -> bool:
        """Advance the animation by one frame; return True once every instruction is done."""
        if self.error is not None or self._asm is None:
            return False

        self.step_triggered = self.step_triggered or not self.stepwise
        if not (self.running and self.step_triggered):
            return False

        index = next((i for i, p in enumerate(self._progress) if p < 1.0), None)
        if index is None:
            return True

        if self._progress[index] == 0.0 and self.interpreter is not None:
            try:
                self.interpreter.step()
            except LpError:
                pass
        self._progress[index] += PROGRESS_PER_FRAME[type(self._asm[index])]
        if self._progress[index] >= 1.0:
            self.step_triggered = False
        self.total_time += FRAME_TIME
        return False

    def current(self) -> str:
        """Description of the instruction being executed."""
        return self.interpreter.display_current() if self.interpreter is not None else " "

    def registers(self) -> List[Tuple[str, int]]:
        """Register names with their current contents; empty registers read as 0."""
        if self.hw is None:
            return []
        store = self.interpreter.reg_store if self.interpreter is not None else {}
        names = (register_name(i) for i in range(self.hw.num_registers))
        return [(name, store.get(name, 0)) for name in names]

    def visible_ram(self) -> Tuple[List[Tuple[int, int]], bool]:
        """RAM cells worth showing and whether further cells are hidden.

        At least one cell after the last non-zero one is shown, and between
        four and all of the cells.
        """
        if self.hw is None:
            return [], False
        ram_size = self.hw.num_cachelines
        ram = self.interpreter.ram if self.interpreter is not None else [0] * ram_size
        end = next((i for i in reversed(range(len(ram))) if ram[i] != 0), 0)
        shown = min(max(end + 1, 4), ram_size)
        return [(i, ram[i]) for i in range(shown)], shown < ram_size