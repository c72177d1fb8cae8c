"""Expression tree, operators and the error types shared by every stage."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union

I32_MIN = -(1 << 31)
I32_MAX = (1 << 31) - 1


def wrap_i32(value: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    return (value - I32_MIN) % (1 << 32) + I32_MIN


class LpError(Exception):
    """Base class of all errors raised while compiling or running a program."""

    stage = ""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.message} ({self.stage})"


class ParseError(LpError):
    """The source text is not a valid expression."""

    stage = "parse"


class IRError(LpError):
    """The expression cannot be lowered to instructions."""

    stage = "ir gen"


class InterpretError(LpError):
    """The instructions failed while being executed."""

    stage = "interpreter"


class Operator(enum.Enum):
    """Arithmetic operators known to the compiler."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    SHL = "<<"
    SHR = ">>"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, char: str) -> Operator:
        """Return the operator written as a single character in source text."""
        if char in ("+", "-", "*", "/"):
            return cls(char)
        raise ValueError(f"not an operator: {char!r}")

    def apply(self, left: int, right: int) -> int:
        """Evaluate the operator with signed 32-bit wrapping semantics."""
        if self is Operator.ADD:
            return wrap_i32(left + right)
        if self is Operator.SUB:
            return wrap_i32(left - right)
        if self is Operator.MUL:
            return wrap_i32(left * right)
        if self is Operator.DIV:
            if right == 0:
                raise ZeroDivisionError("division by zero")
            quotient = abs(left) // abs(right)
            if (left < 0) != (right < 0):
                quotient = -quotient
            return wrap_i32(quotient)
        if self is Operator.SHL:
            return wrap_i32(left << (right & 31))
        return left >> (right & 31)


@dataclass(frozen=True)
class Num:
    """An integer literal."""

    value: int


@dataclass(frozen=True)
class Var:
    """A named input variable."""

    name: str


@dataclass(frozen=True)
class UnaryOp:
    """An operator applied to a single operand."""

    op: Operator
    operand: Expr


@dataclass(frozen=True)
class BinaryOp:
    """An operator applied to two operands."""

    left: Expr
    op: Operator
    right: Expr


Expr = Union[Num, Var, UnaryOp, BinaryOp]