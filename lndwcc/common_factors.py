"""Pull a factor shared by both sides of an addition out of the sum."""

from __future__ import annotations

from typing import List, Optional

from lndwcc.ast import BinaryOp, Expr, Num, Operator, UnaryOp


def _factors(expr: Expr) -> List[Expr]:
    if isinstance(expr, BinaryOp) and expr.op is Operator.MUL:
        return _factors(expr.left) + _factors(expr.right)
    return [expr]


def _first_common_factor(left: Expr, right: Expr) -> Optional[Expr]:
    right_factors = _factors(right)
    return next((factor for factor in _factors(left) if factor in right_factors), None)


def _remove_factor(expr: Expr, factor: Expr) -> Expr:
    if isinstance(expr, BinaryOp) and expr.op is Operator.MUL:
        if expr.left == factor:
            return expr.right
        if expr.right == factor:
            return expr.left
        new_left = _remove_factor(expr.left, factor)
        new_right = _remove_factor(expr.right, factor)
        if new_left == expr.left and new_right == expr.right:
            return expr
        return BinaryOp(new_left, Operator.MUL, new_right)
    return Num(1) if expr == factor else expr


def extract_common_factors(expr: Expr) -> Expr:
    """Rewrite ``f * a + f * b`` as ``f * (a + b)``, bottom up."""
    match expr:
        case BinaryOp(left, Operator.ADD, right):
            lhs = extract_common_factors(left)
            rhs = extract_common_factors(right)
            factor = _first_common_factor(lhs, rhs)
            if factor is None:
                return BinaryOp(lhs, Operator.ADD, rhs)
            remainder = BinaryOp(
                _remove_factor(lhs, factor), Operator.ADD, _remove_factor(rhs, factor)
            )
            return BinaryOp(factor, Operator.MUL, remainder)
        case BinaryOp(left, op, right):
            return BinaryOp(extract_common_factors(left), op, extract_common_factors(right))
        case UnaryOp(op, operand):
            return UnaryOp(op, extract_common_factors(operand))
        case _:
            return expr