from fractions import Fraction
from functools import reduce
from math import gcd

from sympy import Poly, Symbol, ZZ

from algnum.kernel.errors import PolynomialError

X = Symbol('X')


def to_poly(coefficients, gen=X):
    """ Return a sympy Poly over ZZ. Coefficients are listed low-to-high, so [-2, 0, 1] is X**2 - 2.
    """
    return Poly(list(reversed([int(c) for c in coefficients])), gen, domain=ZZ)


def from_poly(poly):
    """ Return the coefficients of a univariate sympy Poly, low-to-high, as Python ints.
    """
    return tuple(int(c) for c in reversed(poly.all_coeffs()))


def strip(coefficients):
    coefficients = [int(c) for c in coefficients]
    while coefficients and coefficients[-1] == 0:
        coefficients.pop()
    return coefficients


def content(coefficients):
    return reduce(gcd, coefficients, 0)


def normalize(coefficients):
    """ Divide out the content and make the leading coefficient positive.
    """
    c = content(coefficients)
    if coefficients[-1] < 0:
        c = -c
    return tuple(a // c for a in coefficients)


def canonical_form(coefficients):
    """ Return the primitive, squarefree polynomial with positive leading coefficient that has
        the same roots as the given one.

            >>> canonical_form([2, -4, 2])
            (-1, 1)

        The zero polynomial and nonzero constants have no roots and raise PolynomialError.
    """
    coefficients = strip(coefficients)
    if not coefficients:
        raise PolynomialError('the zero polynomial has no roots.')
    if len(coefficients) == 1:
        raise PolynomialError('a nonzero constant polynomial has no roots.')
    if len(coefficients) > 2:
        coefficients = from_poly(to_poly(coefficients).sqf_part())
    return normalize(coefficients)


def irreducible_factors(coefficients):
    """ Return the distinct irreducible factors of a nonzero polynomial, each in canonical form,
        lowest degree first.
    """
    _, factors = to_poly(canonical_form(coefficients)).factor_list()
    result = [normalize(from_poly(f)) for f, _ in factors]
    result.sort(key=len)
    return result


def derivative(coefficients):
    return tuple(i * c for i, c in enumerate(coefficients))[1:]


def is_binomial(coefficients):
    """ True for a canonical polynomial a*X^d - b with d >= 2 and a, b > 0, whose roots are the
        d-th roots of the positive rational b/a.
    """
    d = len(coefficients) - 1
    if d < 2 or coefficients[0] >= 0:
        return False
    return all(c == 0 for c in coefficients[1:d])


def binomial_value(coefficients):
    """ For a*X^d - b, return b/a. """
    return Fraction(-coefficients[0], coefficients[-1])


def rational_coefficients(value):
    value = Fraction(value)
    return (-value.numerator, value.denominator)


def rational_value(coefficients):
    b, a = coefficients
    return Fraction(-b, a)


def substitute_power(coefficients, n):
    """ Return the coefficients of P(X^n). """
    result = [0] * ((len(coefficients) - 1) * n + 1)
    for i, c in enumerate(coefficients):
        result[i * n] = c
    return tuple(result)


def mobius_transform(coefficients, a, b, c, d):
    """ Given the polynomial P of x, return a canonical polynomial of w = (a*x + b)/(c*x + d).

        Substituting x = (d*w - b)/(a - c*w) into P and clearing denominators gives
        sum p_i (d*w - b)^i (a - c*w)^(n-i).
    """
    n = len(coefficients) - 1
    num = to_poly([-b, d])
    den = to_poly([a, -c])
    total = to_poly([0])
    for i, p in enumerate(coefficients):
        if p:
            total += p * num**i * den**(n - i)
    return canonical_form(from_poly(total))


def separation_bits(coefficients):
    """ Return k such that 2**-k is smaller than the distance between any two distinct roots of
        a squarefree integer polynomial of degree d >= 2.

        Mahler's bound gives sep > sqrt(3|disc|) d^(-(d+2)/2) ||P||_2^(-(d-1)), and |disc| >= 1
        for squarefree integer polynomials.
    """
    d = len(coefficients) - 1
    norm = sum(c * c for c in coefficients)
    return ((d + 2) * d.bit_length() + 1) // 2 + (d - 1) * ((norm.bit_length() + 1) // 2) + 1
