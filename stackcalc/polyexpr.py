"""Polynomial expression evaluator.

Shunting-yard over + - * ( ) where every operand is a single-letter reference
resolved through a lookup callable (normally the registry). '*' binds tighter
than '+'/'-'; operators of equal precedence associate to the left.

Stacks are created per call; the caller (PolynomialRegistry) provides locking.
"""

from __future__ import annotations

from typing import Callable, Optional

from stackcalc.errors import (
    EmptyInputError,
    InvalidCharacterError,
    InvalidExpressionError,
    ParenthesisMismatchError,
    PolynomialNotFoundError,
    UnknownOperatorError,
)
from stackcalc.polynomial import Polynomial
from stackcalc.stack import Stack

Lookup = Callable[[str], Optional[Polynomial]]

PRECEDENCE: dict[str, int] = {"+": 1, "-": 1, "*": 2}
BRACKETS = frozenset("()")


def combine(op: str, left: Polynomial, right: Polynomial) -> Polynomial:
    if op == "+":
        return left.add(right)
    if op == "-":
        return left.subtract(right)
    if op == "*":
        return left.multiply(right)
    raise UnknownOperatorError(f"Unknown operator {op!r}")


class PolynomialExpressionEvaluator:
    """Evaluates expressions such as "a+b*(c-d)" over named polynomials."""

    def __init__(self, alphabet: str = "abcde", capacity: int = 16) -> None:
        self.alphabet = alphabet
        self.capacity = capacity

    def evaluate(self, expr: Optional[str], lookup: Lookup) -> Polynomial:
        """Evaluate expr, resolving each letter with lookup.

        Raises:
            EmptyInputError: expr is None or blank.
            InvalidCharacterError: a character outside the alphabet and + - * ( ).
            PolynomialNotFoundError: lookup returned None for a letter.
            ParenthesisMismatchError: unmatched ')' or unclosed '('.
            InvalidExpressionError: missing operands, or not exactly one result.
        """
        if expr is None:
            raise EmptyInputError("Empty expression")
        cleaned = "".join(expr.split())
        if not cleaned:
            raise EmptyInputError("Empty expression")
        for pos, ch in enumerate(cleaned):
            if ch not in self.alphabet and ch not in PRECEDENCE and ch not in BRACKETS:
                raise InvalidCharacterError(f"Invalid character {ch!r} at position {pos}")

        operands: Stack[Polynomial] = Stack(self.capacity)
        operators: Stack[str] = Stack(self.capacity)

        for ch in cleaned:
            if ch in self.alphabet:
                poly = lookup(ch)
                if poly is None:
                    raise PolynomialNotFoundError(f"Polynomial '{ch}' is not defined")
                operands.push(poly.copy())
            elif ch in PRECEDENCE:
                while (
                    not operators.empty()
                    and operators.top() != "("
                    and PRECEDENCE[operators.top()] >= PRECEDENCE[ch]
                ):
                    self._reduce(operands, operators)
                operators.push(ch)
            elif ch == "(":
                operators.push(ch)
            else:
                while not operators.empty() and operators.top() != "(":
                    self._reduce(operands, operators)
                if operators.empty():
                    raise ParenthesisMismatchError("Unmatched ')'")
                operators.pop()

        while not operators.empty():
            if operators.top() == "(":
                raise ParenthesisMismatchError("Unclosed '('")
            self._reduce(operands, operators)

        if operands.size() != 1:
            raise InvalidExpressionError(
                f"Expression left {operands.size()} operands instead of one"
            )
        return operands.pop()

    @staticmethod
    def _reduce(operands: Stack[Polynomial], operators: Stack[str]) -> None:
        if operands.size() < 2:
            raise InvalidExpressionError(f"Operator {operators.top()!r} needs two operands")
        op = operators.pop()
        right = operands.pop()
        left = operands.pop()
        operands.push(combine(op, left, right))
