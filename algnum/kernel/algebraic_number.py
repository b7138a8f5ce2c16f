import logging
import numbers
from fractions import Fraction

from mpmath import iv

from algnum import constants
from algnum.constants import ADD, DIV, MUL, SUB
from algnum.kernel import isolation, mobius, polynomial, radical, resultant
from algnum.kernel.errors import DivisionByZeroError, IntervalError
from algnum.kernel.interval import Enclosure

logger = logging.getLogger(__name__)


def _as_rational(value):
    """ Return value as a Fraction if it is an exact rational (int, Fraction, sympy Rational, ...),
        otherwise None. Floats are not accepted.
    """
    if isinstance(value, numbers.Rational):
        return Fraction(int(value.numerator), int(value.denominator))
    return None


def _coerce(value):
    if isinstance(value, AlgebraicNum):
        return value
    q = _as_rational(value)
    if q is None:
        return None
    return AlgebraicNum(q)


class AlgebraicNum:
    def __init__(self, value=0):
        """ An exact complex algebraic number, stored as its minimal polynomial over the integers
            together with an Enclosure holding exactly one root of it.

            AlgebraicNum(value) injects a rational (int, Fraction, or anything registered as a
            numbers.Rational) or copies another AlgebraicNum. Irrational numbers come from
            from_polynomial(), polynomial_roots(), from_rational_root() or arithmetic.
        """
        if isinstance(value, AlgebraicNum):
            self._coefficients = value.coefficients()
            self._enclosure = value.enclosure()
            self._real = value._real
            return
        q = _as_rational(value)
        if q is None:
            raise TypeError('cannot make an algebraic number out of {0!r}.'.format(value))
        self._coefficients = polynomial.rational_coefficients(q)
        self._enclosure = Enclosure.from_rational(q)
        self._real = True

    @classmethod
    def _from_parts(cls, parts):
        coefficients, enclosure = parts
        x = cls.__new__(cls)
        x._coefficients = tuple(coefficients)
        x._enclosure = enclosure
        x._real = True if len(coefficients) == 2 else None
        return x

    @classmethod
    def from_polynomial(cls, coefficients, real, imag=0):
        """ The root of an integer polynomial (coefficients low-to-high, any scaling, repeated
            factors allowed) lying in a given region.

            The region is an Enclosure, an mpmath iv.mpc, or bounds for the real and imaginary
            parts as accepted by Enclosure.from_bounds. It must contain exactly one root of the
            polynomial, otherwise PolynomialError is raised.

                >>> AlgebraicNum.from_polynomial([-2, 0, 1], [1, 2])
                >>> AlgebraicNum.from_polynomial([1, 0, 1], [-0.5, 0.5], [0.5, 1.5])
        """
        if isinstance(real, Enclosure):
            region = real
        elif isinstance(real, iv.mpc):
            region = Enclosure(real, constants.DEFAULT_PRECISION)
        else:
            region = Enclosure.from_bounds(real, imag)
        return cls._from_parts(isolation.locate(polynomial.canonical_form(coefficients), region))

    @classmethod
    def polynomial_roots(cls, coefficients):
        """ All the distinct roots of a nonzero integer polynomial. """
        roots = []
        for factor in polynomial.irreducible_factors(coefficients):
            roots.extend(cls._from_parts((factor, box)) for box in isolation.isolate_all(factor))
        return roots

    @classmethod
    def from_rational_root(cls, value, n):
        """ The nonnegative real n-th root of a nonnegative rational. """
        q = _as_rational(value)
        if q is None:
            raise TypeError('{0!r} is not a rational number.'.format(value))
        if n < 1:
            raise ValueError('root index must be positive, got {0}.'.format(n))
        return cls._from_parts(radical.rational_root(q, n))

    def degree(self):
        return len(self._coefficients) - 1

    def coefficients(self):
        return self._coefficients

    def minimal_polynomial(self):
        """ The minimal polynomial as a sympy Poly in X. """
        return polynomial.to_poly(self._coefficients)

    def enclosure(self):
        return self._enclosure

    def prec(self):
        return self._enclosure.prec()

    def interval(self, prec):
        """ Return an Enclosure of this number computed with at least prec bits, refining (and
            keeping) the stored one if it is not that precise yet.
        """
        if prec <= self.prec():
            return self._enclosure
        if self.is_rational():
            self._enclosure = Enclosure.from_rational(self.to_rational(), prec)
        else:
            self._enclosure = isolation.refine(self._coefficients, self._enclosure, prec)
        return self._enclosure

    def is_rational(self):
        return len(self._coefficients) == 2

    def is_integer(self):
        return self.is_rational() and self._coefficients[1] == 1

    def is_zero(self):
        return self._coefficients == (0, 1)

    def is_one(self):
        return self._coefficients == (-1, 1)

    def is_neg_one(self):
        return self._coefficients == (1, 1)

    def to_rational(self):
        if not self.is_rational():
            raise ValueError('{0} is not rational.'.format(self))
        return polynomial.rational_value(self._coefficients)

    def is_real(self):
        """ Exact test: a box symmetric about the real axis that holds a single root of the
            (real) minimal polynomial holds a real root.
        """
        if self._real is not None:
            return self._real
        if self._enclosure.is_conjugate_symmetric():
            self._real = True
            return True
        for prec in isolation.precision_schedule(self.prec()):
            enclosure = self.interval(prec)
            if not enclosure.imag_contains_zero():
                self._real = False
                return False
            if isolation.certify_real(self._coefficients, enclosure, prec) is not None:
                self._real = True
                return True
        raise IntervalError('max precision reached: unable to decide whether a root is real.')

    def sign(self):
        """ -1, 0 or 1 for a real number. """
        if self.is_rational():
            q = self.to_rational()
            return (q > 0) - (q < 0)
        if not self.is_real():
            raise TypeError('sign is only defined for real numbers.')
        for prec in isolation.precision_schedule(self.prec()):
            enclosure = self.interval(prec)
            if enclosure.real_is_positive():
                return 1
            if enclosure.real_is_negative():
                return -1
        raise IntervalError('max precision reached: unable to decide the sign of a real root.')

    def conjugate(self):
        if self.is_rational():
            return self
        return AlgebraicNum._from_parts((self._coefficients, self._enclosure.conjugate()))

    def inverse(self):
        return inv(self)

    def root(self, n):
        return root(self, n)

    def _same_root(self, other):
        """ Both numbers share a minimal polynomial. other's enclosure isolates its root, so self
            equals other once self is known to lie inside it, and differs once the two are apart.
        """
        for prec in isolation.precision_schedule(max(self.prec(), other.prec())):
            mine = self.interval(prec)
            if other.enclosure().contains(mine):
                return True
            if other.enclosure().disjoint(mine):
                return False
        raise IntervalError('max precision reached: unable to tell two conjugate roots apart.')

    def __eq__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        if self._coefficients != other.coefficients():
            return False
        if self.is_rational() or self is other:
            return True
        return self._same_root(other)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        if self.is_rational():
            return hash(self.to_rational())
        return hash(self._coefficients)

    def _compare(self, other):
        if not (self.is_real() and other.is_real()):
            raise TypeError('only real algebraic numbers can be ordered.')
        if self == other:
            return 0
        if self.is_rational() and other.is_rational():
            return -1 if self.to_rational() < other.to_rational() else 1
        for prec in isolation.precision_schedule(max(self.prec(), other.prec())):
            mine, theirs = self.interval(prec), other.interval(prec)
            if mine.real_precedes(theirs):
                return -1
            if theirs.real_precedes(mine):
                return 1
        raise IntervalError('max precision reached: unable to order two real roots.')

    def __lt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self._compare(other) >= 0

    def __add__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return add(self, other)

    def __radd__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return add(other, self)

    def __sub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return sub(self, other)

    def __rsub__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return sub(other, self)

    def __mul__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return mul(self, other)

    def __rmul__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return mul(other, self)

    def __truediv__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return div(self, other)

    def __rtruediv__(self, other):
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return div(other, self)

    def __pow__(self, exponent):
        if isinstance(exponent, AlgebraicNum):
            if not exponent.is_rational():
                return NotImplemented
            q = exponent.to_rational()
        else:
            q = _as_rational(exponent)
            if q is None:
                return NotImplemented
        if q.denominator == 1:
            return power(self, q.numerator)
        return power(root(self, q.denominator), q.numerator)

    def __rpow__(self, base):
        base = _coerce(base)
        if base is None:
            return NotImplemented
        return base.__pow__(self)

    def __neg__(self):
        return neg(self)

    def __pos__(self):
        return self

    def __abs__(self):
        if self.is_real():
            return self if self.sign() >= 0 else neg(self)
        return root(mul(self, self.conjugate()), 2)

    def __bool__(self):
        return not self.is_zero()

    def __complex__(self):
        return self.interval(constants.DEFAULT_PRECISION).approximation()

    def __float__(self):
        if self.is_rational():
            return float(self.to_rational())
        if not self.is_real():
            raise TypeError('{0} is not real.'.format(self))
        return complex(self).real

    def __repr__(self):
        if self.is_rational():
            return 'AlgebraicNum({0})'.format(self.to_rational())
        return 'AlgebraicNum.from_polynomial({0}, {1})'.format(list(self._coefficients), self._enclosure)

    def __str__(self):
        if self.is_rational():
            return str(self.to_rational())
        z = complex(self)
        approx = '{0:.6g}'.format(z.real) if self.is_real() else '{0:.6g}'.format(z)
        return '{0} (root of {1})'.format(approx, self.minimal_polynomial().as_expr())


## Dispatcher. Each operation tries, in order: identity and absorbing operands, a rational operand
## (scalar transform, exact when both are rational), two positive real radicals (mul/div only),
## and finally resultants.

def _scalar(x, a, b, c, d):
    return AlgebraicNum._from_parts(mobius.scalar_op(x, a, b, c, d))


def _combined(x, y, op):
    if op in (MUL, DIV) and radical.applies(x, y):
        logger.debug('%s: radical form', op)
        return AlgebraicNum._from_parts(radical.combine(x, y, op))
    logger.debug('%s: resultant', op)
    return AlgebraicNum._from_parts(resultant.combine(x, y, op))


def add(x, y):
    if x.is_zero():
        return y
    if y.is_zero():
        return x
    if y.is_rational():
        q = y.to_rational()
        return _scalar(x, q.denominator, q.numerator, 0, q.denominator)
    if x.is_rational():
        q = x.to_rational()
        return _scalar(y, q.denominator, q.numerator, 0, q.denominator)
    return _combined(x, y, ADD)


def sub(x, y):
    if y.is_zero():
        return x
    if x.is_zero():
        return neg(y)
    if y.is_rational():
        q = y.to_rational()
        return _scalar(x, q.denominator, -q.numerator, 0, q.denominator)
    if x.is_rational():
        q = x.to_rational()
        return _scalar(y, -q.denominator, q.numerator, 0, q.denominator)
    return _combined(x, y, SUB)


def mul(x, y):
    if x.is_zero() or y.is_one():
        return x
    if y.is_zero() or x.is_one():
        return y
    if x.is_neg_one():
        return neg(y)
    if y.is_neg_one():
        return neg(x)
    if y.is_rational():
        q = y.to_rational()
        return _scalar(x, q.numerator, 0, 0, q.denominator)
    if x.is_rational():
        q = x.to_rational()
        return _scalar(y, q.numerator, 0, 0, q.denominator)
    return _combined(x, y, MUL)


def div(x, y):
    if y.is_zero():
        raise DivisionByZeroError('division by the zero algebraic number.')
    if x.is_zero() or y.is_one():
        return x
    if x.is_one():
        return inv(y)
    if y.is_neg_one():
        return neg(x)
    if x.is_neg_one():
        return _scalar(y, 0, -1, 1, 0)
    if y.is_rational():
        q = y.to_rational()
        return _scalar(x, q.denominator, 0, 0, q.numerator)
    if x.is_rational():
        q = x.to_rational()
        return _scalar(y, 0, q.numerator, q.denominator, 0)
    return _combined(x, y, DIV)


def neg(x):
    if x.is_zero():
        return x
    return _scalar(x, -1, 0, 0, 1)


def inv(x):
    if x.is_zero():
        raise DivisionByZeroError('the zero algebraic number has no inverse.')
    if x.is_one() or x.is_neg_one():
        return x
    return _scalar(x, 0, 1, 1, 0)


def power(x, n):
    """ x**n for an integer n; 0**0 is 1. """
    if n < 0:
        return inv(power(x, -n))
    if n == 0:
        return AlgebraicNum(1)
    if n == 1 or x.is_zero() or x.is_one():
        return x
    if x.is_rational():
        return AlgebraicNum(x.to_rational() ** n)
    if radical.is_pure_power(x):
        logger.debug('power %d: radical form', n)
        return AlgebraicNum._from_parts(radical.power(x, n))
    return AlgebraicNum._from_parts(resultant.power(x, n))


def root(x, n):
    """ The nonnegative real n-th root of a nonnegative real x. """
    if n < 1:
        raise ValueError('root index must be positive, got {0}.'.format(n))
    if n == 1 or x.is_zero() or x.is_one():
        return x
    if x.is_rational():
        return AlgebraicNum._from_parts(radical.rational_root(x.to_rational(), n, x.prec()))
    if not x.is_real() or x.sign() < 0:
        raise ValueError('{0} has no nonnegative real root.'.format(x))

    def approx(prec):
        return x.interval(prec).nth_root(n)

    candidate = polynomial.substitute_power(x.coefficients(), n)
    return AlgebraicNum._from_parts(isolation.minimal_polynomial(candidate, approx, x.prec()))
