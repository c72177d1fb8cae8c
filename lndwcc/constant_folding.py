"""Evaluate sub-expressions whose operands are all constants."""

from __future__ import annotations

import logging

from lndwcc.ast import BinaryOp, Expr, Num, Operator, UnaryOp, wrap_i32

_log = logging.getLogger(__name__)


def fold_constants(expr: Expr) -> Expr:
    """Return the expression with every constant sub-expression evaluated."""
    match expr:
        case UnaryOp(op, operand):
            inner = fold_constants(operand)
            if op is Operator.SUB and isinstance(inner, Num):
                return Num(wrap_i32(-inner.value))
            return UnaryOp(op, inner)
        case BinaryOp(left, op, right):
            lhs = fold_constants(left)
            rhs = fold_constants(right)
            if isinstance(lhs, Num) and isinstance(rhs, Num):
                if op is Operator.DIV and rhs.value == 0:
                    _log.warning("division by zero during constant folding; not folding")
                    return BinaryOp(lhs, op, rhs)
                return Num(op.apply(lhs.value, rhs.value))
            return BinaryOp(lhs, op, rhs)
        case _:
            return expr