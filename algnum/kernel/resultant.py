import logging
import operator

from sympy import Poly, ZZ, resultant, symbols

from algnum.constants import ADD, DIV, MUL, SUB
from algnum.kernel import polynomial
from algnum.kernel.isolation import minimal_polynomial

logger = logging.getLogger(__name__)

X, Y, Z = symbols('X Y Z')

_INTERVAL_OPS = {ADD: operator.add, SUB: operator.sub, MUL: operator.mul, DIV: operator.truediv}


def _expr(coefficients, var):
    return sum(c * var**i for i, c in enumerate(coefficients))


def _in_z(expr):
    return polynomial.from_poly(Poly(expr, Z, domain=ZZ))


def eliminate(p, q, op):
    """ Return the coefficients of an integer polynomial in Z vanishing at x op y for every root x
        of p and every root y of q.

            add:  Res_X(p(X), q(Z - X))
            sub:  Res_X(p(X), q(X - Z))
            mul:  Res_X(p(X), X^m q(Z/X))
            div:  Res_Y(q(Y), p(Z*Y))
    """
    if op == ADD:
        r = resultant(_expr(p, X), _expr(q, Z - X), X)
    elif op == SUB:
        r = resultant(_expr(p, X), _expr(q, X - Z), X)
    elif op == MUL:
        m = len(q) - 1
        r = resultant(_expr(p, X), sum(c * Z**i * X**(m - i) for i, c in enumerate(q)), X)
    elif op == DIV:
        r = resultant(_expr(q, Y), _expr(p, Z * Y), Y)
    else:
        raise ValueError('unknown operation: {0}'.format(op))
    return _in_z(r)


def combine(x, y, op):
    """ Return (coefficients, enclosure) of x op y.

        The resultant has a root at every combination of a conjugate of x with a conjugate of y,
        possibly repeated; the factor vanishing at x op y is picked out with interval arithmetic
        on the enclosures of x and y.
    """
    r = eliminate(x.coefficients(), y.coefficients(), op)
    apply = _INTERVAL_OPS[op]

    def approx(prec):
        return apply(x.interval(prec), y.interval(prec))

    logger.debug('%s by resultant: degrees %d and %d, resultant of degree %d', op, x.degree(), y.degree(), len(r) - 1)
    return minimal_polynomial(r, approx, max(x.prec(), y.prec()))


def power(x, n):
    """ Return (coefficients, enclosure) of x^n for n >= 2, using Res_X(p(X), Z - X^n). """
    r = _in_z(resultant(_expr(x.coefficients(), X), Z - X**n, X))

    def approx(prec):
        return x.interval(prec) ** n

    logger.debug('power %d by resultant of a degree %d number', n, x.degree())
    return minimal_polynomial(r, approx, x.prec())
