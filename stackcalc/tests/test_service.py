"""Tests for CalculatorService, the boundary over both evaluators."""

import pytest

from stackcalc.environment import Settings
from stackcalc.errors import (
    CalcError,
    DivisionByZeroError,
    ErrorCategory,
    ErrorCode,
    InitializationError,
    InvalidNameError,
    NotInitializedError,
    OutputTooLargeError,
    PolynomialNotFoundError,
    TooManyPolynomialsError,
)
from stackcalc.models import PolynomialOutput, StackKind
from stackcalc.registry import PolynomialRegistry
from stackcalc.service import CalculatorService


@pytest.fixture
def svc():
    s = CalculatorService(Settings())
    s.init()
    return s


# --- init ---

def test_evaluate_before_init():
    s = CalculatorService()
    assert not s.initialized
    with pytest.raises(NotInitializedError) as exc:
        s.evaluate_expression("1+1")
    assert exc.value.code.category == ErrorCategory.SETUP
    with pytest.raises(NotInitializedError):
        s.operation_history()


def test_init_bad_capacity():
    with pytest.raises(InitializationError):
        CalculatorService().init(0)


def test_reinit_keeps_working(svc):
    svc.init(2)
    assert svc.evaluate_expression("(1+2)*3") == 9


# --- integer expressions ---

def test_scenarios(svc):
    assert svc.evaluate_expression("3+4*2") == 11
    assert svc.evaluate_expression("(1+2)*3") == 9
    with pytest.raises(DivisionByZeroError):
        svc.evaluate_expression("10/0")
    assert svc.evaluate_expression("|-5|") == 5


def test_operation_history(svc):
    svc.evaluate_expression("2*3")
    assert svc.operation_count() == len(svc.operation_history())
    assert svc.operation_count(StackKind.NUM) + svc.operation_count(StackKind.SYM) == svc.operation_count()
    assert svc.operation_at(0).value == 2


# --- polynomials ---

def test_define_and_format(svc):
    svc.define_polynomial("a", "2,1,3,0")
    assert svc.polynomial_to_string("a") == "2,2,1,3,0"
    assert svc.polynomial_to_latex("a") == "2x + 3"
    assert svc.polynomial_with_latex("a") == PolynomialOutput("2,2,1,3,0", "2x + 3")


def test_expression_scenario(svc):
    svc.define_polynomial("a", "1,1,0,0")
    svc.define_polynomial("b", "1,1,0,0")
    assert svc.evaluate_polynomial_expression("a+b") == "1,2,1"
    out = svc.evaluate_polynomial_expression_with_latex("a*b")
    assert out.standard == "1,1,2"
    assert out.latex == "x^{2}"


def test_evaluate_at_and_derivative(svc):
    svc.define_polynomial("c", "1,3,-4,1")
    assert svc.evaluate_polynomial_at("c", 2) == 0
    assert svc.derivative_of("c") == "2,3,2,-4,0"
    assert svc.derivative_with_latex("c").latex == "3x^{2} - 4"


def test_strict_define_from_settings():
    s = CalculatorService(Settings(strict=True))
    with pytest.raises(CalcError) as exc:
        s.define_polynomial("a", "1,2,3,4,5,6,7")
    assert exc.value.code == ErrorCode.PARSE_ERROR
    s.define_polynomial("a", "bad", strict=False)
    assert s.polynomial_to_string("a") == "0"


def test_lookup_errors(svc):
    with pytest.raises(InvalidNameError):
        svc.polynomial_to_string("z")
    with pytest.raises(PolynomialNotFoundError):
        svc.polynomial_to_string("a")


def test_too_many_polynomials():
    s = CalculatorService(registry=PolynomialRegistry("abcdef", 5))
    for name in "abcde":
        s.define_polynomial(name, "1,0")
    with pytest.raises(TooManyPolynomialsError):
        s.define_polynomial("f", "1,0")


def test_clear_list_exists_term_count(svc):
    svc.define_polynomial("b", "1,1,1,0")
    svc.define_polynomial("a", "1,0")
    assert svc.list_polynomial_names() == ["a", "b"]
    assert svc.polynomial_exists("b")
    assert svc.polynomial_term_count("b") == 2
    svc.clear_all_polynomials()
    assert svc.list_polynomial_names() == []
    assert not svc.polynomial_exists("b")


# --- output limit ---

def test_output_too_large(svc):
    svc.define_polynomial("a", "2,1,3,0")
    assert svc.polynomial_to_string("a", max_output=9) == "2,2,1,3,0"
    with pytest.raises(OutputTooLargeError):
        svc.polynomial_to_string("a", max_output=8)
    with pytest.raises(OutputTooLargeError):
        svc.evaluate_polynomial_expression("a*a*a", max_output=4)


def test_output_limit_from_settings():
    s = CalculatorService(Settings(output_limit=5))
    s.define_polynomial("a", "1,1")
    assert s.polynomial_to_string("a") == "1,1,1"
    s.define_polynomial("a", "12,1")
    with pytest.raises(OutputTooLargeError):
        s.polynomial_to_string("a")


# --- error codes ---

def test_every_code_has_category_and_description():
    for code in ErrorCode:
        assert isinstance(code.category, ErrorCategory)
        assert code.describe()


def test_default_message_is_description():
    err = DivisionByZeroError()
    assert err.message == "Division by zero"
    assert str(err) == "Division by zero"


# --- bounded integers ---

def test_overflow_is_a_calc_error(svc):
    with pytest.raises(CalcError) as exc:
        svc.evaluate_expression("9^5000")
    assert exc.value.code == ErrorCode.INTEGER_OVERFLOW
    assert exc.value.code.category == ErrorCategory.ARITHMETIC
    svc.define_polynomial("a", "1,5000")
    with pytest.raises(CalcError):
        svc.evaluate_polynomial_at("a", 10)
    assert svc.evaluate_expression("3+4*2") == 11
