"""Lowering of expressions to register-machine instructions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Set, Tuple, Type, Union

from lndwcc.ast import BinaryOp, Expr, IRError, Num, Operator, UnaryOp, Var
from lndwcc.cache import run_cache_optimization
from lndwcc.common_factors import extract_common_factors
from lndwcc.constant_folding import fold_constants
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
    register_name,
)
from lndwcc.options import InterpreterOptions
from lndwcc.parser import parse
from lndwcc.shift_replacement import replace_multiplications_with_bitshifts

_log = logging.getLogger(__name__)

_BINARY_INSTRUCTIONS: Dict[Operator, Type[BinaryInst]] = {
    Operator.ADD: Add,
    Operator.SUB: Sub,
    Operator.MUL: Mul,
    Operator.DIV: Div,
    Operator.SHL: Shl,
    Operator.SHR: Shr,
}


@dataclass(frozen=True)
class CompileOptions:
    """Which optimisation passes the compiler runs."""

    do_constant_folding: bool = False
    run_cache_optimization: bool = False
    do_common_factor_elimination: bool = False
    do_shift_replacement: bool = False

    def any(self) -> bool:
        """Whether at least one optimisation is switched on."""
        return (
            self.do_constant_folding
            or self.run_cache_optimization
            or self.do_common_factor_elimination
            or self.do_shift_replacement
        )


@dataclass(frozen=True)
class _InRegister:
    index: int


@dataclass(frozen=True)
class _InRam:
    addr: int


_Location = Union[_InRegister, _InRam]


@dataclass
class _Lowering:
    """State of one code generation run: register allocation and spills to RAM."""

    hw: InterpreterOptions
    next_reg: int = 0
    ram_idx: int = 0
    code: List[Inst] = field(default_factory=list)
    variables: Set[str] = field(default_factory=set)
    _locations: Dict[Expr, _Location] = field(default_factory=dict)
    _registers: Dict[int, Expr] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.hw.num_registers == 0:
            raise IRError("at least one register is required")

    @staticmethod
    def register(index: int) -> str:
        try:
            return register_name(index)
        except ValueError as exc:
            raise IRError(str(exc)) from None

    def _advance_register(self) -> None:
        self.next_reg = (self.next_reg + 1) % self.hw.num_registers

    def _write(self, expr: Expr) -> None:
        location = self._locations.get(expr)
        if location is None:
            _log.warning("tried to create write for non-existent expression %r", expr)
            return
        if not isinstance(location, _InRegister):
            _log.warning("tried to write RAM to RAM for %r", expr)
            return
        if self.hw.num_cachelines == 0:
            raise IRError("no RAM available to spill registers")
        self.code.append(Write(self.register(location.index), self.ram_idx))
        self._locations[expr] = _InRam(self.ram_idx)
        self.ram_idx = (self.ram_idx + 1) % self.hw.num_cachelines
        if self.ram_idx == 0:
            _log.warning("RAM overrun detected")

    def _load(self, expr: Expr) -> None:
        location = self._locations.get(expr)
        if location is None:
            _log.warning("tried to create load for non-existent expression %r", expr)
            return
        if not isinstance(location, _InRam):
            _log.warning("tried to load register to register for %r", expr)
            return
        self.code.append(Load(location.addr, self.register(self.next_reg)))
        self._locations[expr] = _InRegister(self.next_reg)
        self._advance_register()

    def _claim(self, reg: int, expr: Expr) -> None:
        """Reserve a register for expr, spilling its previous occupant to RAM."""
        previous = self._registers.get(reg)
        if previous is not None:
            self._write(previous)
        self._registers[reg] = expr

    def _fetch(self, reg: int, expr: Expr) -> int:
        """Return the register holding expr, reloading it if it was evicted."""
        if self._registers.get(reg) == expr:
            return reg
        target = self.next_reg
        self._claim(target, expr)
        self._load(expr)
        return target

    def _leaf(self, expr: Expr, make: Callable[[str], Inst]) -> int:
        reg = self.next_reg
        self._claim(reg, expr)
        self.code.append(make(self.register(reg)))
        if expr in self._locations:
            _log.warning("duplicate expression %r is already mapped", expr)
        else:
            self._locations[expr] = _InRegister(reg)
        self._advance_register()
        return reg

    def _combine(
        self, expr: Expr, left: Expr, right: Expr, inst_type: Type[BinaryInst]
    ) -> int:
        left_reg = self.lower(left)
        right_reg = self.lower(right)
        left_reg = self._fetch(left_reg, left)
        right_reg = self._fetch(right_reg, right)
        self.code.append(inst_type(self.register(left_reg), self.register(right_reg)))
        if right_reg in self._registers:
            self._registers[right_reg] = expr
        # A register is more useful than a possible copy in RAM.
        self._locations[expr] = _InRegister(right_reg)
        return right_reg

    def lower(self, expr: Expr) -> int:
        """Emit code for expr and return the register holding its value."""
        match expr:
            case Num(value):
                return self._leaf(expr, lambda reg: Store(value, reg))
            case Var(name):
                reg = self._leaf(expr, lambda target: Transfer(name, target))
                self.variables.add(name)
                return reg
            case UnaryOp(Operator.SUB, operand):
                return self._combine(expr, Num(0), operand, Sub)
            case UnaryOp(op, _):
                raise IRError(f"invalid unary operator `{op}`")
            case BinaryOp(left, op, right):
                return self._combine(expr, left, right, _BINARY_INSTRUCTIONS[op])
        raise IRError(f"not an expression: {expr!r}")


class Compiler:
    """Turns source text into instructions for a given hardware configuration."""

    def __init__(self, options: CompileOptions = None, hw: InterpreterOptions = None) -> None:
        self.options = options if options is not None else CompileOptions()
        self.hw = hw if hw is not None else InterpreterOptions()

    def compile(self, source: str) -> Tuple[List[Inst], Set[str]]:
        """Return the instruction list and the names of the input variables used."""
        options = self.options
        ast = parse(source)
        if options.do_constant_folding:
            ast = fold_constants(ast)
        if options.do_common_factor_elimination:
            ast = extract_common_factors(ast)
        if options.do_shift_replacement:
            ast = replace_multiplications_with_bitshifts(ast)
        if options.do_constant_folding:
            ast = fold_constants(ast)

        lowering = _Lowering(self.hw)
        try:
            result_reg = lowering.lower(ast)
        except RecursionError:
            raise IRError("expression is nested too deeply") from None
        lowering.code.append(Result(lowering.register(result_reg)))

        instructions = lowering.code
        if options.run_cache_optimization:
            instructions = run_cache_optimization(instructions)
        return instructions, lowering.variables