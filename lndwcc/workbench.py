"""Editor state and the actions that compile and run the edited program."""

from __future__ import annotations

import enum
from typing import Iterable, List, Optional

from lndwcc.ast import LpError
from lndwcc.compiler import CompileOptions
from lndwcc.examples import Example, preloaded_examples
from lndwcc.options import InterpreterOptions
from lndwcc.output import AssemblyOutput

EDITOR = "editor.name"
UNOPTIMIZED = "output.unopt"
OPTIMIZED = "output.opt"
INTERPRETER_OPTIONS = "interp_opts.name"
EXAMPLES = "examples.name"

LANGUAGES = ("en", "de")


class EditorAction(enum.Enum):
    """Actions the editor can request."""

    COMPILE = "compile"
    RUN = "run"
    STEP = "step"
    CLEAR = "clear"


class Workbench:
    """The edited program, its compiled versions and which views are open."""

    def __init__(
        self,
        code: str = "1 + 1",
        compile_options: Optional[CompileOptions] = None,
        hw: Optional[InterpreterOptions] = None,
    ) -> None:
        self.code = code
        self.compile_options = (
            compile_options
            if compile_options is not None
            else CompileOptions(run_cache_optimization=True)
        )
        self.interpreter_options = hw if hw is not None else InterpreterOptions()
        self.input_variables: dict = {}
        self.asm_unoptimized = AssemblyOutput(UNOPTIMIZED)
        self.asm_optimized = AssemblyOutput(OPTIMIZED)
        self.examples: List[Example] = preloaded_examples()
        self.result: Optional[int] = None
        self.language = "en"
        self.open_windows = {EDITOR}

    @property
    def disable_run(self) -> bool:
        """Whether running is currently disallowed because a run is being shown."""
        return self.asm_unoptimized.is_running() or self.asm_optimized.is_running()

    def set_open(self, name: str, is_open: bool) -> None:
        """Open or close the view with the given name."""
        if is_open:
            self.open_windows.add(name)
        else:
            self.open_windows.discard(name)

    def set_language(self, language: str) -> None:
        """Switch the display language."""
        if language not in LANGUAGES:
            raise ValueError(f"unsupported language: {language!r}")
        self.language = language

    def perform(self, action: EditorAction) -> None:
        """Carry out one editor action."""
        match action:
            case EditorAction.COMPILE:
                self._compile()
            case EditorAction.RUN:
                self._run(stepwise=False)
            case EditorAction.STEP:
                self._run(stepwise=True)
            case EditorAction.CLEAR:
                self.asm_unoptimized.clear()
                self.asm_optimized.clear()
                self.result = None
            case _:
                raise ValueError(f"unknown action: {action!r}")

    def perform_all(self, actions: Iterable[EditorAction]) -> None:
        """Carry out several actions in order."""
        for action in actions:
            self.perform(action)

    def compile_and_run(self) -> None:
        """Compile the program and run it to the end at once."""
        self.perform_all((EditorAction.COMPILE, EditorAction.RUN))

    def use_example(self, index: int) -> None:
        """Replace the program and options with those of a preloaded example."""
        example = self.examples[index]
        self.input_variables.clear()
        self.code = example.input
        self.compile_options = example.options

    def tick(self) -> bool:
        """Advance every open output by one frame; True once all of them are done."""
        finished = [
            output.tick()
            for output in (self.asm_unoptimized, self.asm_optimized)
            if output.name in self.open_windows
        ]
        return bool(finished) and all(finished)

    def _compile(self) -> None:
        try:
            variables = self.asm_unoptimized.compile(
                self.code, CompileOptions(), self.interpreter_options
            )
        except LpError:
            self.input_variables.clear()
        else:
            self.input_variables = {name: "" for name in sorted(variables)}

        if self.compile_options.any():
            try:
                self.asm_optimized.compile(
                    self.code, self.compile_options, self.interpreter_options
                )
            except LpError:
                pass
            self.set_open(OPTIMIZED, True)

        self.set_open(UNOPTIMIZED, True)

    def _run(self, stepwise: bool) -> None:
        self.set_open(UNOPTIMIZED, True)
        self.asm_unoptimized.run(self.input_variables, stepwise)
        if self.compile_options.any():
            self.set_open(OPTIMIZED, True)
            self.asm_optimized.run(self.input_variables, stepwise)