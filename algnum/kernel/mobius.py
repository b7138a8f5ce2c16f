import logging

from algnum.kernel import polynomial
from algnum.kernel.interval import Enclosure
from algnum.kernel.isolation import isolate

logger = logging.getLogger(__name__)


def scalar_op(x, a, b, c, d):
    """ Return (coefficients, enclosure) of (a*x + b)/(c*x + d) for integers a, b, c, d with
        a*d - b*c != 0.

        A rational x is handled exactly. Otherwise the minimal polynomial of the result is obtained by
        substituting the inverse map into the one of x, which keeps it irreducible of the same degree,
        and the enclosure is the interval image of the enclosure of x.
    """
    if x.is_rational():
        q = x.to_rational()
        value = (a * q + b) / (c * q + d)
        return polynomial.rational_coefficients(value), Enclosure.from_rational(value, x.prec())

    coefficients = polynomial.mobius_transform(x.coefficients(), a, b, c, d)

    def approx(prec):
        return x.interval(prec).mobius(a, b, c, d)

    logger.debug('scalar transform (%d, %d, %d, %d) of a degree %d number', a, b, c, d, x.degree())
    return coefficients, isolate(coefficients, approx, x.prec())
