from contextlib import contextmanager
from fractions import Fraction

from mpmath import iv

from algnum.constants import DEFAULT_PRECISION

_INF = iv.mpf(float('inf'))
_EVERYWHERE = iv.mpf([float('-inf'), float('inf')])


@contextmanager
def working_precision(prec):
    """ Run a block with mpmath's interval context set to prec bits, restoring it afterwards.
    """
    saved = iv.prec
    iv.prec = prec
    try:
        yield
    finally:
        iv.prec = saved


def to_interval(value):
    """ Convert an Enclosure, an int, a Fraction or an mpmath interval to a complex interval at
        the current working precision.
    """
    if isinstance(value, Enclosure):
        return value.cif()
    if isinstance(value, iv.mpc):
        return value
    if isinstance(value, Fraction):
        return iv.mpc(iv.mpf(value.numerator) / value.denominator, 0)
    return iv.mpc(iv.mpf(value), 0)


## The helpers below act on raw mpmath intervals and are meant to be called inside
## working_precision(). Endpoints (x.a, x.b) are point intervals, so comparing them is exact.

def evaluate(coefficients, z):
    """ Horner evaluation of an integer polynomial (low-to-high) on a complex interval.
    """
    result = iv.mpc(coefficients[-1], 0)
    for c in reversed(coefficients[:-1]):
        result = result * z + c
    return result


def midpoint(z):
    return iv.mpc(z.real.mid, z.imag.mid)


def larger(x, y):
    return x if y < x else y


def half_width(x):
    return ((x.b - x.a) / 2).b


def width(z):
    """ Upper bound for the real width plus the imaginary width, which bounds the diameter. """
    return ((z.real.b - z.real.a) + (z.imag.b - z.imag.a)).b


def square_box(center, radius):
    re, im = center.real, center.imag
    return iv.mpc(iv.mpf([(re - radius).a, (re + radius).b]),
                  iv.mpf([(im - radius).a, (im + radius).b]))


def contains_zero(z):
    return 0 in z.real and 0 in z.imag


def is_finite(z):
    return all(-_INF < x.a and x.b < _INF for x in (z.real, z.imag))


def _within(x, y):
    return y.a <= x.a and x.b <= y.b


def _strictly_within(x, y):
    return y.a < x.a and x.b < y.b


def inside(inner, outer):
    return _within(inner.real, outer.real) and _within(inner.imag, outer.imag)


def strictly_inside(inner, outer):
    return _strictly_within(inner.real, outer.real) and _strictly_within(inner.imag, outer.imag)


def _apart(x, y):
    return x.b < y.a or y.b < x.a


def disjoint(z, w):
    return _apart(z.real, w.real) or _apart(z.imag, w.imag)


def _divide(x, y):
    if contains_zero(y):
        return iv.mpc(_EVERYWHERE, _EVERYWHERE)
    return x / y


class Enclosure:
    def __init__(self, cif, prec):
        """ A complex interval cif (an mpmath iv.mpc) computed at prec bits of working precision.

            Enclosures are immutable; arithmetic returns new ones at the larger of the operands'
            precisions. Dividing by an enclosure that contains zero gives an unbounded enclosure,
            see is_finite().
        """
        self._cif = cif
        self._prec = prec

    @classmethod
    def from_rational(cls, value, prec=DEFAULT_PRECISION):
        with working_precision(prec):
            return cls(to_interval(Fraction(value)), prec)

    @classmethod
    def from_bounds(cls, real, imag=0, prec=DEFAULT_PRECISION):
        """ real and imag are numbers or [lower, upper] pairs of anything mpmath accepts
            (ints, floats, decimal strings).

                >>> Enclosure.from_bounds([1.4, 1.5])
                >>> Enclosure.from_bounds(['-0.1', '0.1'], [0.9, 1.1])
        """
        with working_precision(prec):
            return cls(iv.mpc(iv.mpf(real), iv.mpf(imag)), prec)

    @classmethod
    def unbounded(cls, prec=DEFAULT_PRECISION):
        return cls(iv.mpc(_EVERYWHERE, _EVERYWHERE), prec)

    def cif(self):
        return self._cif

    def prec(self):
        return self._prec

    def real(self):
        return self._cif.real

    def imag(self):
        return self._cif.imag

    def center(self):
        with working_precision(self._prec):
            return midpoint(self._cif)

    def width(self):
        with working_precision(self._prec):
            return width(self._cif)

    def approximation(self):
        """ The center of the enclosure as a Python complex. """
        c = self.center()
        return complex(float(c.real), float(c.imag))

    def is_finite(self):
        return is_finite(self._cif)

    def contains_zero(self):
        return contains_zero(self._cif)

    def real_contains_zero(self):
        return 0 in self._cif.real

    def imag_contains_zero(self):
        return 0 in self._cif.imag

    def real_is_positive(self):
        return self._cif.real.a > 0

    def real_is_negative(self):
        return self._cif.real.b < 0

    def imag_is_positive(self):
        return self._cif.imag.a > 0

    def imag_is_negative(self):
        return self._cif.imag.b < 0

    def is_conjugate_symmetric(self):
        """ True if the enclosure is its own mirror image in the real axis. """
        im = self._cif.imag
        return self.imag_contains_zero() and bool(im.a == -im.b)

    def real_precedes(self, other):
        """ True if every real part in self is smaller than every real part in other. """
        return self._cif.real.b < other.cif().real.a

    def contains(self, other):
        return inside(other.cif(), self._cif)

    def contains_real(self, other):
        """ True if the real part of other lies in the real part of self. """
        return _within(other.cif().real, self._cif.real)

    def real_disjoint(self, other):
        return _apart(self._cif.real, other.cif().real)

    def overlaps(self, other):
        return not disjoint(self._cif, other.cif())

    def disjoint(self, other):
        return disjoint(self._cif, other.cif())

    def conjugate(self):
        return Enclosure(iv.mpc(self._cif.real, -self._cif.imag), self._prec)

    def _binary(self, other, op):
        prec = self._prec
        if isinstance(other, Enclosure):
            prec = max(prec, other.prec())
        elif not isinstance(other, (int, Fraction)):
            return NotImplemented
        with working_precision(prec):
            return Enclosure(op(self._cif, to_interval(other)), prec)

    def __add__(self, other):
        return self._binary(other, lambda x, y: x + y)

    def __radd__(self, other):
        return self._binary(other, lambda x, y: y + x)

    def __sub__(self, other):
        return self._binary(other, lambda x, y: x - y)

    def __rsub__(self, other):
        return self._binary(other, lambda x, y: y - x)

    def __mul__(self, other):
        return self._binary(other, lambda x, y: x * y)

    def __rmul__(self, other):
        return self._binary(other, lambda x, y: y * x)

    def __truediv__(self, other):
        return self._binary(other, _divide)

    def __rtruediv__(self, other):
        return self._binary(other, lambda x, y: _divide(y, x))

    def __neg__(self):
        return Enclosure(-self._cif, self._prec)

    def __pow__(self, n):
        if not isinstance(n, int):
            return NotImplemented
        with working_precision(self._prec):
            result = iv.mpc(1, 0)
            base = self._cif
            k = abs(n)
            while k:
                if k & 1:
                    result = result * base
                k >>= 1
                if k:
                    base = base * base
            if n < 0:
                result = _divide(iv.mpc(1, 0), result)
            return Enclosure(result, self._prec)

    def mobius(self, a, b, c, d):
        """ Interval image of (a*z + b)/(c*z + d) for integers a, b, c, d. """
        num = self * a + b
        if c == 0:
            return num / d
        return num / (self * c + d)

    def nth_root(self, n):
        """ Enclosure of the positive real n-th root of any positive number whose real part lies in
            this enclosure. Unbounded until the real part is known to be positive.
        """
        if not self.real_is_positive():
            return Enclosure.unbounded(self._prec)
        with working_precision(self._prec):
            return Enclosure(iv.mpc(iv.exp(iv.log(self._cif.real) / n), 0), self._prec)

    def __repr__(self):
        return 'Enclosure({0}, prec={1})'.format(self._cif, self._prec)

    def __str__(self):
        return str(self._cif)
