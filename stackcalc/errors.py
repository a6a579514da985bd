"""Error taxonomy for stackcalc.

Every classified failure is a ``CalcError`` subclass carrying an ``ErrorCode``.
Subclasses also derive from the closest builtin (``ValueError``, ``LookupError``,
``ZeroDivisionError``) so plain ``except ValueError`` handling keeps working.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """Broad failure classes."""

    SETUP = "setup"
    VALIDATION = "validation"
    STRUCTURAL = "structural"
    ARITHMETIC = "arithmetic"
    LOOKUP = "lookup"
    CAPACITY = "capacity"


class ErrorCode(str, Enum):
    """Classified error values returned across the service boundary."""

    NOT_INITIALIZED = "not-initialized"
    INITIALIZATION_FAILED = "initialization-failed"
    EMPTY_INPUT = "empty-input"
    DIVISION_BY_ZERO = "division-by-zero"
    UNKNOWN_OPERATOR = "unknown-operator"
    INVALID_EXPRESSION = "invalid-expression"
    NO_RESULT = "no-result"
    PARENTHESIS_MISMATCH = "parenthesis-mismatch"
    INVALID_CHARACTER = "invalid-character"
    INVALID_EXPONENT = "invalid-exponent"
    INVALID_NAME = "invalid-name"
    PARSE_ERROR = "parse-error"
    POLYNOMIAL_NOT_FOUND = "polynomial-not-found"
    TOO_MANY_POLYNOMIALS = "too-many-polynomials"
    OUTPUT_TOO_LARGE = "output-too-large"
    INTEGER_OVERFLOW = "integer-overflow"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]

    def describe(self) -> str:
        """Fixed human-readable description of the code."""
        return _DESCRIPTIONS[self]


_CATEGORIES: dict[ErrorCode, ErrorCategory] = {
    ErrorCode.NOT_INITIALIZED: ErrorCategory.SETUP,
    ErrorCode.INITIALIZATION_FAILED: ErrorCategory.SETUP,
    ErrorCode.EMPTY_INPUT: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_CHARACTER: ErrorCategory.VALIDATION,
    ErrorCode.PARSE_ERROR: ErrorCategory.VALIDATION,
    ErrorCode.INVALID_EXPONENT: ErrorCategory.VALIDATION,
    ErrorCode.PARENTHESIS_MISMATCH: ErrorCategory.STRUCTURAL,
    ErrorCode.INVALID_EXPRESSION: ErrorCategory.STRUCTURAL,
    ErrorCode.NO_RESULT: ErrorCategory.STRUCTURAL,
    ErrorCode.UNKNOWN_OPERATOR: ErrorCategory.STRUCTURAL,
    ErrorCode.DIVISION_BY_ZERO: ErrorCategory.ARITHMETIC,
    ErrorCode.INTEGER_OVERFLOW: ErrorCategory.ARITHMETIC,
    ErrorCode.INVALID_NAME: ErrorCategory.LOOKUP,
    ErrorCode.POLYNOMIAL_NOT_FOUND: ErrorCategory.LOOKUP,
    ErrorCode.TOO_MANY_POLYNOMIALS: ErrorCategory.CAPACITY,
    ErrorCode.OUTPUT_TOO_LARGE: ErrorCategory.CAPACITY,
}

_DESCRIPTIONS: dict[ErrorCode, str] = {
    ErrorCode.NOT_INITIALIZED: "Evaluator not initialized",
    ErrorCode.INITIALIZATION_FAILED: "Failed to initialize evaluator",
    ErrorCode.EMPTY_INPUT: "Empty input",
    ErrorCode.DIVISION_BY_ZERO: "Division by zero",
    ErrorCode.UNKNOWN_OPERATOR: "Unknown operator",
    ErrorCode.INVALID_EXPRESSION: "Invalid expression",
    ErrorCode.NO_RESULT: "Expression produced no result",
    ErrorCode.PARENTHESIS_MISMATCH: "Parentheses mismatch",
    ErrorCode.INVALID_CHARACTER: "Invalid character in expression",
    ErrorCode.INVALID_EXPONENT: "Exponent must be non-negative",
    ErrorCode.INVALID_NAME: "Invalid polynomial name",
    ErrorCode.PARSE_ERROR: "Invalid polynomial format",
    ErrorCode.POLYNOMIAL_NOT_FOUND: "Polynomial not found",
    ErrorCode.TOO_MANY_POLYNOMIALS: "Too many polynomials",
    ErrorCode.OUTPUT_TOO_LARGE: "Output exceeds the declared maximum size",
    ErrorCode.INTEGER_OVERFLOW: "Integer result out of 64-bit range",
}


class CalcError(Exception):
    """Base class for all classified stackcalc failures."""

    code: ErrorCode = ErrorCode.INVALID_EXPRESSION

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.code.describe()
        super().__init__(self.message)


# --- setup ---

class NotInitializedError(CalcError, RuntimeError):
    code = ErrorCode.NOT_INITIALIZED


class InitializationError(CalcError, RuntimeError):
    code = ErrorCode.INITIALIZATION_FAILED


# --- input validation ---

class EmptyInputError(CalcError, ValueError):
    code = ErrorCode.EMPTY_INPUT


class InvalidCharacterError(CalcError, ValueError):
    code = ErrorCode.INVALID_CHARACTER


class ParseError(CalcError, ValueError):
    code = ErrorCode.PARSE_ERROR


class InvalidExponentError(CalcError, ValueError):
    code = ErrorCode.INVALID_EXPONENT


# --- structural ---

class ParenthesisMismatchError(CalcError, ValueError):
    code = ErrorCode.PARENTHESIS_MISMATCH


class InvalidExpressionError(CalcError, ValueError):
    code = ErrorCode.INVALID_EXPRESSION


class NoResultError(CalcError, ValueError):
    code = ErrorCode.NO_RESULT


class UnknownOperatorError(CalcError, ValueError):
    code = ErrorCode.UNKNOWN_OPERATOR


# --- arithmetic ---

class DivisionByZeroError(CalcError, ZeroDivisionError):
    code = ErrorCode.DIVISION_BY_ZERO


class IntegerOverflowError(CalcError, OverflowError):
    code = ErrorCode.INTEGER_OVERFLOW


# --- lookup ---

class InvalidNameError(CalcError, LookupError):
    code = ErrorCode.INVALID_NAME


class PolynomialNotFoundError(CalcError, LookupError):
    code = ErrorCode.POLYNOMIAL_NOT_FOUND


# --- capacity ---

class TooManyPolynomialsError(CalcError):
    code = ErrorCode.TOO_MANY_POLYNOMIALS


class OutputTooLargeError(CalcError):
    code = ErrorCode.OUTPUT_TOO_LARGE
