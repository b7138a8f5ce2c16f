import logging
from fractions import Fraction
from math import gcd

from algnum.constants import DEFAULT_PRECISION, DIV, MUL
from algnum.kernel import polynomial
from algnum.kernel.interval import Enclosure
from algnum.kernel.isolation import minimal_polynomial

logger = logging.getLogger(__name__)


def is_pure_power(x):
    """ True if x is the positive real root of a*X^d - b, that is x = (b/a)^(1/d). """
    return polynomial.is_binomial(x.coefficients()) and x.is_real() and x.sign() > 0


def applies(x, y):
    return is_pure_power(x) and is_pure_power(y)


def rational_root(value, n, start=DEFAULT_PRECISION):
    """ Return (coefficients, enclosure) of the nonnegative real n-th root of a nonnegative
        rational. X^n - value is reduced to the true minimal polynomial, so the square root of 4
        comes out as the rational 2.
    """
    value = Fraction(value)
    if value < 0:
        raise ValueError('{0} has no nonnegative real root.'.format(value))
    if value == 0 or n == 1:
        return polynomial.rational_coefficients(value), Enclosure.from_rational(value, start)
    candidate = [-value.numerator] + [0] * (n - 1) + [value.denominator]

    def approx(prec):
        return Enclosure.from_rational(value, prec).nth_root(n)

    return minimal_polynomial(candidate, approx, start)


def combine(x, y, op):
    """ Product or quotient of x = (p/q)^(1/d) and y = (r/s)^(1/e).

        With g = gcd(d, e) and f = d*e/g, the result is the positive real f-th root of
        (p/q)^(e/g) op (r/s)^(d/g).
    """
    d, e = x.degree(), y.degree()
    g = gcd(d, e)
    f = (d // g) * e
    t = polynomial.binomial_value(x.coefficients()) ** (e // g)
    u = polynomial.binomial_value(y.coefficients()) ** (d // g)
    if op == MUL:
        t = t * u
    elif op == DIV:
        t = t / u
    else:
        raise ValueError('the radical form only covers products and quotients, not {0}.'.format(op))
    logger.debug('radical form: root of degree %d of %s', f, t)
    return rational_root(t, f, max(x.prec(), y.prec()))


def power(x, n):
    """ x^n for x = c^(1/d) and n >= 1, as the positive real (d/g)-th root of c^(n/g), g = gcd(n, d). """
    d = x.degree()
    g = gcd(n, d)
    return rational_root(polynomial.binomial_value(x.coefficients()) ** (n // g), d // g, x.prec())
