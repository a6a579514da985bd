"""Sparse single-variable polynomials with integer coefficients.

A Polynomial always holds its terms normalized: exponents strictly decreasing,
no duplicate exponents, no zero coefficients. The empty term list is the zero
polynomial.

Standard serialization (used for display; parse(text, counted=True) reads it back):
    "0"                          zero polynomial
    "<n>,<c1>,<e1>,...,<cn>,<en>"  n terms in descending exponent order
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Union

from stackcalc.bounds import INT_MAX, INT_MIN, MAX_DIGITS, checked, checked_power
from stackcalc.errors import ParseError

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Term:
    """A single coefficient·x^exponent term."""

    coefficient: int
    exponent: int

    def __post_init__(self) -> None:
        if self.exponent < 0:
            raise ValueError(f"exponent must be non-negative, got {self.exponent}")

    def negated(self) -> Term:
        return Term(-self.coefficient, self.exponent)

    def __str__(self) -> str:
        return f"({self.coefficient}x^{self.exponent})"


TermLike = Union[Term, tuple[int, int]]


def _parse_int(token: str) -> int:
    if not _INT_RE.fullmatch(token):
        raise ValueError(f"not an integer: {token!r}")
    if len(token.lstrip("+-").lstrip("0")) > MAX_DIGITS:
        raise ValueError(f"integer out of range: {token[:MAX_DIGITS]}...")
    value = int(token)
    if value < INT_MIN or value > INT_MAX:
        raise ValueError(f"integer out of range: {token}")
    return value


def _parse_terms(text: str, counted: bool = False) -> list[Term]:
    """Split "c1,e1,c2,e2,..." into terms.

    With counted set the text must be in standard format instead:
    "n,c1,e1,...,cn,en" or "0".

    Raises ValueError on any malformed input.
    """
    cleaned = "".join(text.split())
    if cleaned.endswith(","):
        cleaned = cleaned[:-1]
    if not cleaned:
        return []

    values = [_parse_int(tok) for tok in cleaned.split(",")]
    if values == [0]:
        return []
    if counted:
        if len(values) % 2 == 0 or values[0] != len(values) // 2:
            raise ValueError(f"expected a term count followed by pairs, got {len(values)} values")
        values = values[1:]
    elif len(values) % 2 == 1:
        raise ValueError(f"odd number of values ({len(values)})")

    return [Term(values[i], values[i + 1]) for i in range(0, len(values), 2)]


class Polynomial:
    """Normalized sparse polynomial. Copies are deep and independent."""

    __slots__ = ("_terms",)

    def __init__(self, terms: Iterable[TermLike] = ()) -> None:
        self._terms: list[Term] = [t if isinstance(t, Term) else Term(*t) for t in terms]
        self._normalize()

    @classmethod
    def parse(cls, text: Optional[str], strict: bool = False, counted: bool = False) -> Polynomial:
        """Build a polynomial from comma-separated coefficient,exponent pairs.

        Malformed input (non-integer or out-of-range token, odd value count,
        negative exponent) yields the zero polynomial, or raises ParseError
        when strict is set. counted=True reads the standard format written by
        format_standard() instead of bare pairs.
        """
        try:
            if text is None:
                raise ValueError("no input")
            return cls(_parse_terms(text, counted))
        except ValueError as e:
            if strict:
                raise ParseError(f"Cannot parse polynomial {text!r}: {e}") from e
            logger.debug("lenient parse of %r gave zero polynomial: %s", text, e)
            return cls()

    # --- normalization ---

    def _normalize(self) -> None:
        merged: dict[int, int] = {}
        for term in self._terms:
            merged[term.exponent] = merged.get(term.exponent, 0) + term.coefficient
        self._terms = [
            Term(coeff, exp)
            for exp, coeff in sorted(merged.items(), reverse=True)
            if coeff != 0
        ]

    def add_term(self, term: TermLike) -> None:
        """Add a term in place and re-normalize."""
        self._terms.append(term if isinstance(term, Term) else Term(*term))
        self._normalize()

    # --- access ---

    @property
    def terms(self) -> tuple[Term, ...]:
        return tuple(self._terms)

    def term_count(self) -> int:
        return len(self._terms)

    def is_zero(self) -> bool:
        return not self._terms

    def degree(self) -> Optional[int]:
        """Highest exponent, or None for the zero polynomial."""
        return self._terms[0].exponent if self._terms else None

    def copy(self) -> Polynomial:
        return Polynomial(self._terms)

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[Term]:
        return iter(tuple(self._terms))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self._terms == other._terms

    __hash__ = None  # type: ignore[assignment]

    # --- algebra ---

    def add(self, other: Polynomial) -> Polynomial:
        return Polynomial(self._terms + other._terms)

    def subtract(self, other: Polynomial) -> Polynomial:
        return Polynomial(self._terms + [t.negated() for t in other._terms])

    def multiply(self, other: Polynomial) -> Polynomial:
        return Polynomial(
            Term(a.coefficient * b.coefficient, a.exponent + b.exponent)
            for a in self._terms
            for b in other._terms
        )

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply

    def __neg__(self) -> Polynomial:
        return Polynomial(t.negated() for t in self._terms)

    def evaluate(self, x: int) -> int:
        """Sum of coefficient·x^exponent over all terms.

        x, every term and every partial sum must fit in 64 bits, otherwise
        IntegerOverflowError is raised.
        """
        checked(x)
        total = 0
        for t in self._terms:
            total = checked(total + checked(t.coefficient * checked_power(x, t.exponent)))
        return total

    def derivative(self) -> Polynomial:
        return Polynomial(
            Term(t.coefficient * t.exponent, t.exponent - 1)
            for t in self._terms
            if t.exponent > 0
        )

    # --- formatting ---

    def format_standard(self) -> str:
        """Count-prefixed pair list; the canonical round-trip form."""
        if not self._terms:
            return "0"
        parts = [str(len(self._terms))]
        for t in self._terms:
            parts.append(str(t.coefficient))
            parts.append(str(t.exponent))
        return ",".join(parts)

    def _render(self, power: Callable[[int], str]) -> str:
        if not self._terms:
            return "0"
        out: list[str] = []
        for i, t in enumerate(self._terms):
            coeff = t.coefficient
            if i == 0:
                if coeff < 0:
                    out.append("-")
            else:
                out.append(" - " if coeff < 0 else " + ")
            coeff = abs(coeff)
            if coeff != 1 or t.exponent == 0:
                out.append(str(coeff))
            if t.exponent > 0:
                out.append("x")
                if t.exponent > 1:
                    out.append(power(t.exponent))
        return "".join(out)

    def format_latex(self) -> str:
        """LaTeX rendering, e.g. "3x^{2} - x + 1"."""
        return self._render(lambda e: "^{" + str(e) + "}")

    def format_readable(self) -> str:
        """Plain-text rendering, e.g. "3x^2 - x + 1"."""
        return self._render(lambda e: f"^{e}")

    def __str__(self) -> str:
        return self.format_readable()

    def __repr__(self) -> str:
        pairs = ", ".join(f"({t.coefficient}, {t.exponent})" for t in self._terms)
        return f"Polynomial([{pairs}])"
