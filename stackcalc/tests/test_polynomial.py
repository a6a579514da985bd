"""Tests for the Polynomial model: parsing, normalization, algebra, formatting."""

import random

import pytest

from stackcalc.errors import IntegerOverflowError, ParseError
from stackcalc.polynomial import Polynomial, Term


def _random_poly(rng, max_terms=6):
    return Polynomial(
        (rng.randint(-9, 9), rng.randint(0, 7))
        for _ in range(rng.randint(0, max_terms))
    )


@pytest.fixture
def samples():
    rng = random.Random(1234)
    return [_random_poly(rng) for _ in range(60)]


# --- parsing ---

def test_parse_pairs_and_format_standard():
    p = Polynomial.parse("2,1,3,0")
    assert p.format_standard() == "2,2,1,3,0"


def test_parse_merges_and_sorts():
    p = Polynomial.parse("1,0,2,3,4,0,-2,3,5,1")
    assert p.terms == (Term(5, 1), Term(5, 0))


def test_parse_drops_zero_sum_terms():
    assert Polynomial.parse("1,1,0,0").terms == (Term(1, 1),)
    assert Polynomial.parse("3,2,-3,2").is_zero()


def test_parse_ignores_whitespace_and_trailing_comma():
    assert Polynomial.parse(" 2, 1 ,3,0, ") == Polynomial([(2, 1), (3, 0)])


def test_parse_standard_format_when_counted():
    assert Polynomial.parse("2,2,1,3,0", counted=True) == Polynomial([(2, 1), (3, 0)])
    assert Polynomial.parse("1,2,3", counted=True) == Polynomial([(2, 3)])
    assert Polynomial.parse("0", counted=True).is_zero()
    assert Polynomial.parse("0", strict=True).is_zero()


@pytest.mark.parametrize("text", ["1,2,3", "2,2,1,3,0"])
def test_odd_count_is_malformed_unless_counted(text):
    assert Polynomial.parse(text).is_zero()
    with pytest.raises(ParseError):
        Polynomial.parse(text, strict=True)


@pytest.mark.parametrize("text", ["2,1,3,0", "2,2,1,3", "3,2,1,3,0"])
def test_counted_rejects_bare_or_miscounted_pairs(text):
    with pytest.raises(ParseError):
        Polynomial.parse(text, strict=True, counted=True)


@pytest.mark.parametrize("text", ["5,2,3", "x,1", "1.5,2", "1,-1", None, "1,,2", "9223372036854775808,1", "1," + "9" * 5000])
def test_malformed_parses_to_zero(text):
    assert Polynomial.parse(text).is_zero()


@pytest.mark.parametrize("text", ["5,2,3", "x,1", "1,-1", None])
def test_malformed_strict_raises(text):
    with pytest.raises(ParseError):
        Polynomial.parse(text, strict=True)


def test_empty_string_is_zero():
    assert Polynomial.parse("").is_zero()
    assert Polynomial.parse("", strict=True).is_zero()


def test_term_rejects_negative_exponent():
    with pytest.raises(ValueError):
        Term(1, -1)


# --- normalization ---

def test_add_term_renormalizes():
    p = Polynomial([(1, 2)])
    p.add_term((3, 2))
    p.add_term(Term(1, 5))
    assert p.terms == (Term(1, 5), Term(4, 2))
    assert p.degree() == 5


def test_zero_polynomial():
    z = Polynomial()
    assert z.is_zero()
    assert z.degree() is None
    assert z.term_count() == 0
    assert len(z) == 0


def test_copy_is_independent():
    p = Polynomial([(1, 1)])
    q = p.copy()
    q.add_term((1, 0))
    assert p.term_count() == 1
    assert q.term_count() == 2


# --- algebra ---

def test_add_subtract_multiply():
    p = Polynomial.parse("1,1,1,0")        # x + 1
    q = Polynomial.parse("1,1,-1,0")       # x - 1
    assert (p + q).format_standard() == "1,2,1"
    assert (p - q).format_standard() == "1,2,0"
    assert (p * q).format_standard() == "2,1,2,-1,0"


def test_subtract_self_is_zero():
    p = Polynomial.parse("3,4,-2,1,7,0")
    assert (p - p).is_zero()


def test_negation():
    assert -Polynomial([(2, 1), (-3, 0)]) == Polynomial([(-2, 1), (3, 0)])


def test_evaluate_and_derivative():
    p = Polynomial.parse("3,2,-1,1,5,0")   # 3x^2 - x + 5
    assert p.evaluate(2) == 15
    assert p.evaluate(0) == 5
    assert p.derivative() == Polynomial([(6, 1), (-1, 0)])
    assert Polynomial([(7, 0)]).derivative().is_zero()


def test_evaluate_overflow_is_classified():
    with pytest.raises(IntegerOverflowError):
        Polynomial([(1, 5000)]).evaluate(10)
    with pytest.raises(IntegerOverflowError):
        Polynomial([(9223372036854775807, 0), (1, 1)]).evaluate(1)
    with pytest.raises(IntegerOverflowError):
        Polynomial([(1, 1)]).evaluate(2 ** 63)
    assert Polynomial([(1, 5000)]).evaluate(-1) == 1
    assert Polynomial([(1, 62)]).evaluate(2) == 2 ** 62


def test_polynomials_are_unhashable():
    with pytest.raises(TypeError):
        hash(Polynomial())


# --- formatting ---

@pytest.mark.parametrize("pairs, latex, readable", [
    ([], "0", "0"),
    ([(3, 2), (-1, 1), (1, 0)], "3x^{2} - x + 1", "3x^2 - x + 1"),
    ([(-1, 3), (2, 0)], "-x^{3} + 2", "-x^3 + 2"),
    ([(1, 1)], "x", "x"),
    ([(-5, 0)], "-5", "-5"),
    ([(1, 10)], "x^{10}", "x^10"),
])
def test_formats(pairs, latex, readable):
    p = Polynomial(pairs)
    assert p.format_latex() == latex
    assert p.format_readable() == readable
    assert str(p) == readable


def test_standard_format_has_no_trailing_comma():
    assert Polynomial([(2, 1), (3, 0)]).format_standard() == "2,2,1,3,0"
    assert Polynomial().format_standard() == "0"


def test_repr():
    assert repr(Polynomial([(2, 1), (3, 0)])) == "Polynomial([(2, 1), (3, 0)])"


# --- algebraic properties (seeded samples) ---

def test_round_trip(samples):
    for p in samples:
        assert Polynomial.parse(p.format_standard(), strict=True, counted=True) == p


def test_idempotent_normalization(samples):
    for p in samples:
        q = p.copy()
        q.add_term((0, 3))
        assert q == p
        assert Polynomial(p.terms) == p


def test_addition_commutative_and_associative(samples):
    for p, q, r in zip(samples, samples[1:], samples[2:]):
        assert p + q == q + p
        assert (p + q) + r == p + (q + r)


def test_derivative_is_linear(samples):
    for p, q in zip(samples, samples[1:]):
        assert (p + q).derivative() == p.derivative() + q.derivative()


def test_evaluation_consistent_with_addition(samples):
    rng = random.Random(99)
    for p, q in zip(samples, samples[1:]):
        x = rng.randint(-10, 10)
        assert (p + q).evaluate(x) == p.evaluate(x) + q.evaluate(x)


def test_multiplication_evaluates_pointwise(samples):
    for p, q in zip(samples, samples[1:]):
        for x in (-3, 0, 2):
            assert (p * q).evaluate(x) == p.evaluate(x) * q.evaluate(x)
