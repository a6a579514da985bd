"""Named-polynomial registry.

A bounded mapping from single-letter names to Polynomials. Every public method
holds the registry lock for its whole duration, so concurrent callers see whole
operations in some linear order. Values handed out are copies.
"""

from __future__ import annotations

import logging
import string
import threading
from typing import Optional

from stackcalc.errors import InvalidNameError, PolynomialNotFoundError, TooManyPolynomialsError
from stackcalc.polyexpr import PolynomialExpressionEvaluator
from stackcalc.polynomial import Polynomial

logger = logging.getLogger(__name__)

DEFAULT_ALPHABET = "abcde"
DEFAULT_SLOTS = 5


def validate_alphabet(alphabet: str) -> str:
    """Return alphabet if it is a non-empty run of distinct lowercase letters.

    Raises ValueError otherwise.
    """
    if not alphabet:
        raise ValueError("alphabet must not be empty")
    bad = [ch for ch in alphabet if ch not in string.ascii_lowercase]
    if bad:
        raise ValueError(f"alphabet may only contain lowercase letters, got {bad!r}")
    if len(set(alphabet)) != len(alphabet):
        raise ValueError(f"alphabet has repeated letters: {alphabet!r}")
    return alphabet


class PolynomialRegistry:
    """Stores up to `slots` polynomials under names drawn from `alphabet`."""

    def __init__(self, alphabet: str = DEFAULT_ALPHABET, slots: int = DEFAULT_SLOTS) -> None:
        if slots <= 0:
            raise ValueError(f"slots must be positive, got {slots}")
        self._alphabet = validate_alphabet(alphabet)
        self._slots = slots
        self._polynomials: dict[str, Polynomial] = {}
        self._lock = threading.Lock()
        self._evaluator = PolynomialExpressionEvaluator(alphabet)

    @property
    def alphabet(self) -> str:
        return self._alphabet

    @property
    def slots(self) -> int:
        return self._slots

    # --- helpers (caller holds the lock) ---

    def _check_name(self, name: str) -> None:
        if not isinstance(name, str) or len(name) != 1 or name not in self._alphabet:
            raise InvalidNameError(
                f"Invalid polynomial name {name!r} (must be one of '{self._alphabet}')"
            )

    def _require(self, name: str) -> Polynomial:
        self._check_name(name)
        poly = self._polynomials.get(name)
        if poly is None:
            raise PolynomialNotFoundError(f"Polynomial '{name}' is not defined")
        return poly

    def _check_slot(self, name: str) -> None:
        self._check_name(name)
        if name not in self._polynomials and len(self._polynomials) >= self._slots:
            raise TooManyPolynomialsError(
                f"Cannot define '{name}': all {self._slots} slots are in use"
            )

    def _store(self, name: str, poly: Polynomial) -> None:
        self._check_slot(name)
        self._polynomials[name] = poly
        logger.debug("stored %s = %s", name, poly.format_standard())

    # --- public API ---

    def define(self, name: str, text: Optional[str], strict: bool = False) -> Polynomial:
        """Parse text and store it under name, overwriting any previous value.

        Malformed text stores the zero polynomial unless strict is set, in
        which case ParseError is raised and the registry is left unchanged.
        """
        with self._lock:
            self._check_slot(name)
            poly = Polynomial.parse(text, strict=strict)
            self._store(name, poly)
            return poly.copy()

    def assign(self, name: str, poly: Polynomial) -> None:
        """Store an already-built polynomial under name."""
        with self._lock:
            self._store(name, poly.copy())

    def get(self, name: str) -> Polynomial:
        with self._lock:
            return self._require(name).copy()

    def exists(self, name: str) -> bool:
        """Whether name is defined. Still raises InvalidNameError for bad names."""
        with self._lock:
            self._check_name(name)
            return name in self._polynomials

    def term_count(self, name: str) -> int:
        with self._lock:
            return self._require(name).term_count()

    def evaluate_at(self, name: str, x: int) -> int:
        with self._lock:
            return self._require(name).evaluate(x)

    def derivative_of(self, name: str) -> Polynomial:
        with self._lock:
            return self._require(name).derivative()

    def evaluate(self, expr: Optional[str]) -> Polynomial:
        """Evaluate a polynomial expression such as "a+b*c" over the stored values."""
        with self._lock:
            return self._evaluator.evaluate(expr, self._polynomials.get)

    def clear_all(self) -> None:
        with self._lock:
            self._polynomials.clear()
            logger.debug("registry cleared")

    def list_names(self) -> list[str]:
        """Defined names, in alphabet order."""
        with self._lock:
            return [ch for ch in self._alphabet if ch in self._polynomials]

    def snapshot(self) -> dict[str, Polynomial]:
        """Independent copies of every stored polynomial, keyed by name."""
        with self._lock:
            return {name: poly.copy() for name, poly in self._polynomials.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._polynomials)
