"""Replace multiplication and division by powers of two with bit shifts."""

from __future__ import annotations

from typing import Optional

from lndwcc.ast import BinaryOp, Expr, Num, Operator, UnaryOp


def _exponent_of_two(value: int) -> Optional[int]:
    if value > 0 and value & (value - 1) == 0:
        return value.bit_length() - 1
    return None


def replace_multiplications_with_bitshifts(expr: Expr) -> Expr:
    """Rewrite ``x * 2**n`` and ``2**n * x`` as ``x << n`` and ``x / 2**n`` as ``x >> n``."""
    match expr:
        case UnaryOp(op, operand):
            return UnaryOp(op, replace_multiplications_with_bitshifts(operand))
        case BinaryOp(left, op, right) if op in (Operator.MUL, Operator.DIV):
            if op is Operator.MUL and isinstance(left, Num):
                shift = _exponent_of_two(left.value)
                if shift is not None:
                    return BinaryOp(right, Operator.SHL, Num(shift))
            if isinstance(right, Num):
                shift = _exponent_of_two(right.value)
                if shift is not None:
                    shift_op = Operator.SHL if op is Operator.MUL else Operator.SHR
                    return BinaryOp(
                        replace_multiplications_with_bitshifts(left), shift_op, Num(shift)
                    )
            return BinaryOp(
                replace_multiplications_with_bitshifts(left),
                op,
                replace_multiplications_with_bitshifts(right),
            )
        case BinaryOp(left, op, right):
            return BinaryOp(
                replace_multiplications_with_bitshifts(left),
                op,
                replace_multiplications_with_bitshifts(right),
            )
        case _:
            return expr