"""Step-by-step interpreter for the register machine."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Type

from lndwcc.ast import I32_MAX, I32_MIN, InterpretError, Operator
from lndwcc.isa import (
    Add,
    BinaryInst,
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
)
from lndwcc.options import InterpreterOptions

_log = logging.getLogger(__name__)

_INTEGER = re.compile(r"[+-]?[0-9]+")

_OPERATORS: Dict[Type[BinaryInst], Operator] = {
    Add: Operator.ADD,
    Sub: Operator.SUB,
    Mul: Operator.MUL,
    Div: Operator.DIV,
    Shl: Operator.SHL,
    Shr: Operator.SHR,
}


class Interpreter:
    """Runs an instruction list while keeping registers and RAM open to inspection."""

    def __init__(self, hw: InterpreterOptions = None) -> None:
        hw = hw if hw is not None else InterpreterOptions()
        self.reg_store: Dict[str, int] = {}
        self.ram: List[int] = [0] * hw.num_cachelines
        self.running = False
        self._instructions: List[Inst] = []
        self._pc = 0
        self._variables: Optional[Dict[str, str]] = None
        self._trace = ""
        self._tracing = False

    def load_instructions(self, instructions: Iterable[Inst]) -> Interpreter:
        """Load the program to execute."""
        self._instructions = list(instructions)
        if self._tracing:
            self._trace = self._describe_current()
        return self

    def with_variables(self, variables: Mapping[str, str]) -> Interpreter:
        """Map input variable names to the text of their values."""
        self._variables = dict(variables)
        return self

    def with_tracing(self) -> Interpreter:
        """Record a description of each instruction as it is executed."""
        self._tracing = True
        if self._instructions:
            self._trace = self._describe_current()
        return self

    def ready(self) -> Interpreter:
        """Mark the interpreter as loaded and allow execution."""
        self.running = True
        return self

    def run_to_end(self) -> int:
        """Execute until the program returns its result."""
        while True:
            result = self.step()
            if result is not None:
                return result

    def step(self) -> Optional[int]:
        """Execute one instruction; return the result once the program finishes, else None."""
        if not self.running:
            raise InterpretError(
                "The interpreter was either not ready to run or finished execution"
            )
        if self._pc >= len(self._instructions):
            raise InterpretError("no result found")

        inst = self._instructions[self._pc]
        if self._tracing:
            self._trace = self._describe(inst)

        match inst:
            case Result(reg):
                self._pc += 1
                self.running = False
                return self._register(reg)
            case BinaryInst():
                self._binary(inst)
            case Store(value, reg):
                self._set(reg, value)
            case Transfer(var, reg):
                self._set(reg, self._variable(var))
            case Write(reg, addr):
                self._check_address(addr)
                self.ram[addr] = self._register(reg)
            case Load(addr, reg):
                self._check_address(addr)
                self.reg_store[reg] = self.ram[addr]

        self._pc += 1
        return None

    def display_current(self) -> str:
        """Description of the instruction executed last, if tracing is on."""
        return self._trace

    def reset(self) -> None:
        """Rewind to the first instruction and clear registers and RAM."""
        self._pc = 0
        self.ram = [0] * len(self.ram)
        self.reg_store.clear()

    def _register(self, reg: str) -> int:
        if reg not in self.reg_store:
            raise InterpretError(f"register `{reg}` is empty")
        return self.reg_store[reg]

    def _set(self, reg: str, value: int) -> None:
        if reg in self.reg_store:
            _log.warning("overwriting register `%s`", reg)
        self.reg_store[reg] = value

    def _check_address(self, addr: int) -> None:
        if addr >= len(self.ram):
            raise InterpretError(f"requested RAM address {addr} doesn't exist.")

    def _binary(self, inst: BinaryInst) -> None:
        if isinstance(inst, Div) and self.reg_store.get(inst.b) == 0:
            raise InterpretError("division by zero")
        for reg in (inst.a, inst.b):
            if reg not in self.reg_store:
                raise InterpretError(f"no such reg `{reg}`")
        operator = _OPERATORS[type(inst)]
        self.reg_store[inst.b] = operator.apply(self.reg_store[inst.a], self.reg_store[inst.b])

    def _variable(self, name: str) -> int:
        if self._variables is None:
            raise InterpretError("No variables loaded")
        if name not in self._variables:
            raise InterpretError(f"unknown variable `{name}`")
        text = self._variables[name]
        if not text:
            raise InterpretError(f"no value given for variable `{name}`")
        if not _INTEGER.fullmatch(text) or not I32_MIN <= int(text) <= I32_MAX:
            raise InterpretError(f"value `{text}` of variable `{name}` is not a number")
        return int(text)

    def _show(self, reg: str) -> str:
        return str(self.reg_store.get(reg, "?"))

    def _describe_current(self) -> str:
        if self._pc < len(self._instructions):
            return self._describe(self._instructions[self._pc])
        return ""

    def _describe(self, inst: Inst) -> str:
        match inst:
            case BinaryInst(a=a, b=b):
                return f"{self._show(a)} {_OPERATORS[type(inst)]} {self._show(b)}"
            case Store(value, reg):
                return f"{value} ➡ [{reg}]"
            case Transfer(var, reg):
                return f"{var} ➡ [{reg}]"
            case Result(reg):
                return f"= {self._show(reg)}"
            case Write(reg, addr):
                return f"⎘ [{reg}] ➡ [{addr}]"
            case Load(addr, reg):
                return f"⎗ [{reg}] ⬅ [{addr}]"
        return ""