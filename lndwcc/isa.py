"""Instruction set of the register machine."""

from __future__ import annotations

import string
from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class BinaryInst:
    """An operation on registers ``a`` and ``b`` whose result lands in ``b``."""

    a: str
    b: str
    mnemonic: ClassVar[str] = ""

    def __str__(self) -> str:
        return f"{self.mnemonic} {self.a}, {self.b}"


@dataclass(frozen=True)
class Add(BinaryInst):
    """Add register ``a`` to register ``b``."""

    mnemonic: ClassVar[str] = "add"


@dataclass(frozen=True)
class Sub(BinaryInst):
    """Subtract register ``b`` from register ``a``."""

    mnemonic: ClassVar[str] = "sub"


@dataclass(frozen=True)
class Mul(BinaryInst):
    """Multiply registers ``a`` and ``b``."""

    mnemonic: ClassVar[str] = "mul"


@dataclass(frozen=True)
class Div(BinaryInst):
    """Divide register ``a`` by register ``b``."""

    mnemonic: ClassVar[str] = "div"


@dataclass(frozen=True)
class Shl(BinaryInst):
    """Shift register ``a`` left by the amount in register ``b``."""

    mnemonic: ClassVar[str] = "shl"


@dataclass(frozen=True)
class Shr(BinaryInst):
    """Shift register ``a`` right by the amount in register ``b``."""

    mnemonic: ClassVar[str] = "shr"


@dataclass(frozen=True)
class Store:
    """Put a constant into a register."""

    value: int
    reg: str

    def __str__(self) -> str:
        return f"store {self.value}, {self.reg}"


@dataclass(frozen=True)
class Transfer:
    """Put the value of an input variable into a register."""

    var: str
    reg: str

    def __str__(self) -> str:
        return f"transfer {self.var}, {self.reg}"


@dataclass(frozen=True)
class Result:
    """Return the value of a register and stop."""

    reg: str

    def __str__(self) -> str:
        return f"result {self.reg}"


@dataclass(frozen=True)
class Write:
    """Copy a register into a RAM cell."""

    reg: str
    addr: int

    def __str__(self) -> str:
        return f"write {self.reg}, {self.addr}"


@dataclass(frozen=True)
class Load:
    """Copy a RAM cell into a register."""

    addr: int
    reg: str

    def __str__(self) -> str:
        return f"load {self.addr}, {self.reg}"


Inst = Union[Add, Sub, Mul, Div, Shl, Shr, Store, Transfer, Result, Write, Load]


def register_name(index: int) -> str:
    """Name of the register with the given index: 0 is ``a``, 25 is ``z``."""
    if not 0 <= index < len(string.ascii_lowercase):
        raise ValueError(f"max 26 registers supported (a..z), got index {index}")
    return string.ascii_lowercase[index]