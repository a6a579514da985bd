"""CalculatorService: the public boundary over both evaluators.

One object owns the integer evaluator (created by init()) and the polynomial
registry. Every call either returns a value or raises a CalcError subclass;
string results longer than the caller's max_output raise OutputTooLargeError
instead of being truncated.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from stackcalc.environment import Settings
from stackcalc.errors import NotInitializedError, OutputTooLargeError
from stackcalc.expression import ExpressionEvaluator
from stackcalc.models import PolynomialOutput, StackKind, StackOperation
from stackcalc.polynomial import Polynomial
from stackcalc.registry import PolynomialRegistry

logger = logging.getLogger(__name__)


class CalculatorService:
    """Integer expression evaluation plus a registry of named polynomials."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[PolynomialRegistry] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.registry = registry or PolynomialRegistry(self.settings.alphabet, self.settings.slots)
        self._evaluator: Optional[ExpressionEvaluator] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Integer evaluator
    # ------------------------------------------------------------------

    def init(self, capacity: Optional[int] = None) -> None:
        """(Re)create the integer evaluator's stacks.

        Raises InitializationError if the stacks cannot be allocated.
        """
        capacity = capacity if capacity is not None else self.settings.capacity
        evaluator = ExpressionEvaluator(capacity)
        with self._lock:
            self._evaluator = evaluator
        logger.debug("integer evaluator initialized (capacity=%d)", capacity)

    @property
    def initialized(self) -> bool:
        with self._lock:
            return self._evaluator is not None

    def _require_evaluator(self) -> ExpressionEvaluator:
        with self._lock:
            if self._evaluator is None:
                raise NotInitializedError("Call init() before evaluating expressions")
            return self._evaluator

    def evaluate_expression(self, text: Optional[str]) -> int:
        return self._require_evaluator().evaluate(text)

    def operation_history(self) -> list[StackOperation]:
        """Stack pushes/pops of the most recent evaluate_expression() call."""
        return self._require_evaluator().history()

    def operation_count(self, stack: Optional[StackKind] = None) -> int:
        return self._require_evaluator().operation_count(stack)

    def operation_at(self, index: int, stack: Optional[StackKind] = None) -> StackOperation:
        return self._require_evaluator().operation_at(index, stack)

    # ------------------------------------------------------------------
    # Polynomials
    # ------------------------------------------------------------------

    def _fit(self, text: str, max_output: Optional[int]) -> str:
        limit = self.settings.output_limit if max_output is None else max_output
        if len(text) > limit:
            raise OutputTooLargeError(
                f"Result is {len(text)} characters, limit is {limit}"
            )
        return text

    def _output(self, poly: Polynomial, max_output: Optional[int]) -> PolynomialOutput:
        return PolynomialOutput(
            standard=self._fit(poly.format_standard(), max_output),
            latex=self._fit(poly.format_latex(), max_output),
        )

    def define_polynomial(self, name: str, spec: Optional[str], strict: Optional[bool] = None) -> None:
        strict = self.settings.strict if strict is None else strict
        self.registry.define(name, spec, strict=strict)

    def polynomial_to_string(self, name: str, max_output: Optional[int] = None) -> str:
        return self._fit(self.registry.get(name).format_standard(), max_output)

    def polynomial_to_latex(self, name: str, max_output: Optional[int] = None) -> str:
        return self._fit(self.registry.get(name).format_latex(), max_output)

    def polynomial_with_latex(self, name: str, max_output: Optional[int] = None) -> PolynomialOutput:
        return self._output(self.registry.get(name), max_output)

    def evaluate_polynomial_expression(self, expr: Optional[str], max_output: Optional[int] = None) -> str:
        return self._fit(self.registry.evaluate(expr).format_standard(), max_output)

    def evaluate_polynomial_expression_with_latex(
        self, expr: Optional[str], max_output: Optional[int] = None
    ) -> PolynomialOutput:
        return self._output(self.registry.evaluate(expr), max_output)

    def evaluate_polynomial_at(self, name: str, x: int) -> int:
        return self.registry.evaluate_at(name, x)

    def derivative_of(self, name: str, max_output: Optional[int] = None) -> str:
        return self._fit(self.registry.derivative_of(name).format_standard(), max_output)

    def derivative_with_latex(self, name: str, max_output: Optional[int] = None) -> PolynomialOutput:
        return self._output(self.registry.derivative_of(name), max_output)

    def clear_all_polynomials(self) -> None:
        self.registry.clear_all()

    def list_polynomial_names(self) -> list[str]:
        return self.registry.list_names()

    def polynomial_exists(self, name: str) -> bool:
        return self.registry.exists(name)

    def polynomial_term_count(self, name: str) -> int:
        return self.registry.term_count(name)
