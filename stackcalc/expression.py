"""Integer expression evaluator: dual-stack reduction over + - * / ^ ( ) | |.

Single left-to-right scan: digit runs are pushed onto the operand stack, symbols
are compared against the operator stack's top with a pairwise should-reduce
table (not an integer precedence), and the operator stack is drained at the end.

Policies:
- A leading '-' (start of input, after '(' or after an opening '|') is unary and
  seeds a synthetic 0 operand.
- '/' truncates toward zero; '^' rejects negative exponents.
- Every operand and result is a signed 64-bit integer; IntegerOverflowError
  is raised instead of growing past that range.
- Absolute-value bars do not nest: one open bar at a time.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from stackcalc.bounds import checked, checked_power, parse_digits
from stackcalc.errors import (
    DivisionByZeroError,
    EmptyInputError,
    InitializationError,
    InvalidCharacterError,
    InvalidExponentError,
    InvalidExpressionError,
    NoResultError,
    ParenthesisMismatchError,
    UnknownOperatorError,
)
from stackcalc.models import OperationLog, StackAction, StackKind, StackOperation
from stackcalc.stack import Stack

logger = logging.getLogger(__name__)

DIGITS = frozenset("0123456789")
BINARY_OPERATORS = frozenset("+-*/^")
SYMBOLS = BINARY_OPERATORS | frozenset("()|")

# stack top -> incoming symbols that make it reduce first.
# "( |" and "| )" are listed so the scan loop sees them and rejects the mismatch.
_REDUCE_BEFORE: dict[str, frozenset[str]] = {
    "+": frozenset("+-)|"),
    "-": frozenset("+-)|"),
    "*": frozenset("+-*/)|"),
    "/": frozenset("+-*/)|"),
    "^": frozenset("+-*/^)|"),
    "(": frozenset(")|"),
    "|": frozenset("|)"),
}


def should_reduce(top: str, incoming: str) -> bool:
    """True when the stacked symbol must be resolved before incoming is pushed."""
    return incoming in _REDUCE_BEFORE.get(top, frozenset())


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def apply_operator(op: str, right: int, left: int) -> int:
    """Apply a binary operator.

    Args:
        op: One of + - * / ^.
        right: Right operand (popped first).
        left: Left operand (popped second).

    Raises:
        DivisionByZeroError: '/' with right == 0.
        InvalidExponentError: '^' with a negative exponent.
        IntegerOverflowError: the result does not fit in 64 bits.
        UnknownOperatorError: op is not a binary operator.
    """
    if op == "+":
        return checked(left + right)
    if op == "-":
        return checked(left - right)
    if op == "*":
        return checked(left * right)
    if op == "/":
        if right == 0:
            raise DivisionByZeroError()
        return checked(_truncating_div(left, right))
    if op == "^":
        if right < 0:
            raise InvalidExponentError(f"Negative exponent {right} is not supported")
        return checked_power(left, right)
    raise UnknownOperatorError(f"Unknown operator {op!r}")


class ExpressionEvaluator:
    """Evaluates integer expressions; safe to share between threads.

    Each call to evaluate() holds the evaluator lock for its whole duration and
    starts from cleared stacks, so a failed evaluation never leaks into the next.
    The push/pop history of the most recent call stays queryable afterwards.
    """

    def __init__(self, capacity: int = 100) -> None:
        try:
            self._nums: Stack[int] = Stack(capacity)
            self._syms: Stack[str] = Stack(capacity)
        except (ValueError, MemoryError) as e:
            raise InitializationError(f"Cannot allocate stacks of capacity {capacity}: {e}") from e
        self._lock = threading.Lock()
        self._log = OperationLog()
        self._abs_open = False
        self._abs_base = 0

    @property
    def capacity(self) -> int:
        return self._nums.capacity()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def evaluate(self, text: Optional[str]) -> int:
        """Evaluate text and return its integer value.

        Raises a CalcError subclass for empty input, invalid characters,
        bracket/bar mismatches, missing operands, division by zero and
        negative exponents.
        """
        with self._lock:
            result = self._evaluate(text)
            logger.debug("evaluate %r -> %d (%d stack operations)", text, result, self._log.count())
            return result

    def history(self) -> list[StackOperation]:
        """Push/pop records of the most recent evaluation, in timestamp order."""
        with self._lock:
            return self._log.snapshot()

    def operation_count(self, stack: Optional[StackKind] = None) -> int:
        with self._lock:
            return self._log.count(stack)

    def operation_at(self, index: int, stack: Optional[StackKind] = None) -> StackOperation:
        with self._lock:
            return self._log.at(index, stack)

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._nums.clear()
        self._syms.clear()
        self._log.reset()
        self._abs_open = False
        self._abs_base = 0

    def _evaluate(self, text: Optional[str]) -> int:
        if text is None:
            raise EmptyInputError()
        expr = "".join(text.split())
        if not expr:
            raise EmptyInputError()
        for pos, ch in enumerate(expr):
            if ch not in DIGITS and ch not in SYMBOLS:
                raise InvalidCharacterError(f"Invalid character {ch!r} at position {pos}")

        self._reset()
        unary_ok = True
        i = 0
        while i < len(expr):
            ch = expr[i]
            if ch in DIGITS:
                j = i
                while j < len(expr) and expr[j] in DIGITS:
                    j += 1
                self._push_num(parse_digits(expr[i:j]))
                i = j
                unary_ok = False
                continue

            if ch == "-" and unary_ok:
                self._push_num(0)
            opened_bar = self._feed_symbol(ch)
            unary_ok = ch == "(" or opened_bar
            i += 1

        self._drain()

        if self._nums.empty():
            raise NoResultError()
        if self._nums.size() > 1:
            raise InvalidExpressionError(
                f"{self._nums.size()} operands left without an operator"
            )
        return self._pop_num()

    def _feed_symbol(self, ch: str) -> bool:
        """Process one operator/bracket symbol. Returns True if it opened a bar."""
        while not self._syms.empty() and should_reduce(self._syms.top(), ch):
            top = self._syms.top()

            if ch == "|" and not self._abs_open:
                break

            if top == "(" and ch == ")":
                self._pop_sym()
                return False

            if (top == "(" and ch == "|") or (top == "|" and ch == ")"):
                raise ParenthesisMismatchError(f"{top!r} closed by {ch!r}")

            if top == "|":
                self._close_bar()
                return False

            self._reduce_top()

        if ch == ")":
            raise ParenthesisMismatchError("Unmatched ')'")
        if ch == "|":
            if self._abs_open:
                raise ParenthesisMismatchError("Nested absolute-value bars are not supported")
            self._abs_open = True
            self._abs_base = self._nums.size()
        self._push_sym(ch)
        return ch == "|"

    def _close_bar(self) -> None:
        if self._nums.size() <= self._abs_base:
            raise InvalidExpressionError("Empty absolute-value group")
        value = self._pop_num()
        self._push_num(checked(abs(value)))
        self._pop_sym()
        self._abs_open = False

    def _reduce_top(self) -> None:
        top = self._syms.top()
        if self._nums.size() < 2:
            raise InvalidExpressionError(f"Operator {top!r} needs two operands")
        right = self._pop_num()
        left = self._pop_num()
        result = apply_operator(top, right, left)
        self._push_num(result)
        self._pop_sym()

    def _drain(self) -> None:
        while not self._syms.empty():
            top = self._syms.top()
            if top in ("(", "|"):
                raise ParenthesisMismatchError(f"Unclosed {top!r}")
            self._reduce_top()

    # ------------------------------------------------------------------
    # Recorded stack access
    # ------------------------------------------------------------------

    def _push_num(self, value: int) -> None:
        self._nums.push(value)
        self._log.record(StackKind.NUM, StackAction.PUSH, value)

    def _pop_num(self) -> int:
        value = self._nums.pop()
        self._log.record(StackKind.NUM, StackAction.POP, value)
        return value

    def _push_sym(self, symbol: str) -> None:
        self._syms.push(symbol)
        self._log.record(StackKind.SYM, StackAction.PUSH, symbol)

    def _pop_sym(self) -> str:
        symbol = self._syms.pop()
        self._log.record(StackKind.SYM, StackAction.POP, symbol)
        return symbol
