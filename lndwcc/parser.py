"""Parser for arithmetic expressions over integers and variables."""

from __future__ import annotations

import string

from lndwcc.ast import I32_MAX, BinaryOp, Expr, Num, Operator, ParseError, UnaryOp, Var

_DIGITS = frozenset(string.digits)
_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_REST = frozenset(string.ascii_letters + string.digits + "_")


class _Parser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _fail(self, expected: str) -> ParseError:
        char = self._peek()
        found = repr(char) if char else "end of input"
        return ParseError(f"found {found} at {self._pos} expected {expected}")

    def parse(self) -> Expr:
        expr = self._sum()
        if self._pos != len(self._text):
            raise self._fail("operator or end of input")
        return expr

    def _sum(self) -> Expr:
        expr = self._product()
        while self._peek() in ("+", "-") and self._peek():
            op = Operator.from_char(self._peek())
            self._pos += 1
            expr = BinaryOp(expr, op, self._product())
        return expr

    def _product(self) -> Expr:
        expr = self._unary()
        while self._peek() in ("*", "/") and self._peek():
            op = Operator.from_char(self._peek())
            self._pos += 1
            expr = BinaryOp(expr, op, self._unary())
        return expr

    def _unary(self) -> Expr:
        negations = 0
        self._skip_whitespace()
        while self._peek() == "-":
            self._pos += 1
            negations += 1
            self._skip_whitespace()
        expr = self._atom()
        for _ in range(negations):
            expr = UnaryOp(Operator.SUB, expr)
        return expr

    def _atom(self) -> Expr:
        self._skip_whitespace()
        char = self._peek()
        if char in _DIGITS:
            expr: Expr = self._integer()
        elif char == "(":
            self._pos += 1
            expr = self._sum()
            if self._peek() != ")":
                raise self._fail("')'")
            self._pos += 1
        elif char in _IDENT_START:
            start = self._pos
            while self._peek() in _IDENT_REST and self._peek():
                self._pos += 1
            expr = Var(self._text[start:self._pos])
        else:
            raise self._fail("integer, '(' or identifier")
        self._skip_whitespace()
        return expr

    def _integer(self) -> Num:
        start = self._pos
        if self._peek() == "0":
            self._pos += 1
        else:
            while self._peek() in _DIGITS and self._peek():
                self._pos += 1
        value = int(self._text[start:self._pos])
        if value > I32_MAX:
            raise ParseError(f"integer literal at {start} is too large")
        return Num(value)


def parse(text: str) -> Expr:
    """Parse an expression; raise ParseError if the text is not one."""
    try:
        return _Parser(text).parse()
    except RecursionError:
        raise ParseError("expression is nested too deeply") from None