import logging

from mpmath import im, iv, polyroots, re, workprec
from mpmath.libmp.libhyper import NoConvergence

from algnum import constants
from algnum.kernel import polynomial
from algnum.kernel.errors import IntervalError, IterationError, PolynomialError
from algnum.kernel.interval import (Enclosure, contains_zero, disjoint, evaluate, half_width,
                                    inside, is_finite, larger, midpoint, square_box, strictly_inside,
                                    width, working_precision)

logger = logging.getLogger(__name__)

_max_precision = constants.MAX_PRECISION


def max_precision():
    return _max_precision


def set_max_precision(bits):
    """ Set the working precision (in bits) beyond which root isolation gives up with an
        IntervalError.
    """
    global _max_precision
    _max_precision = bits


def precision_schedule(start=constants.DEFAULT_PRECISION):
    """ Yield start, 2*start, 4*start, ... up to max_precision(). """
    prec = max(start, 2)
    while prec <= _max_precision:
        yield prec
        prec = 2 * prec


def _tolerance(z, prec):
    return ((1 + abs(z)) / 2**prec).b


def _krawczyk(coefficients, derivative, center, box):
    """ Return the Krawczyk image K = c - Y*P(c) + (1 - Y*P'(box))*(box - c) with Y close to
        1/P'(c), or None when P'(c) cannot be inverted.

        Every root of P in box lies in K, and if K is strictly inside box then box holds
        exactly one root of P.
    """
    slope = evaluate(derivative, center)
    if contains_zero(slope):
        return None
    one = iv.mpc(1, 0)
    y = midpoint(one / midpoint(slope))
    return center - y * evaluate(coefficients, center) + (one - y * evaluate(derivative, box)) * (box - center)


def _isolates(coefficients, derivative, box, separation):
    """ True if box, already known to hold at least one root, holds exactly one. """
    if width(box) < (iv.mpf(1) / 2**separation).a:
        return True
    image = _krawczyk(coefficients, derivative, midpoint(box), box)
    return image is not None and strictly_inside(image, box)


def _candidate_boxes(cif, prec):
    """ Square boxes containing cif strictly in their interior. When the imaginary part of cif
        contains zero, a box symmetric about the real axis is offered first.
    """
    center = midpoint(cif)
    eps = _tolerance(center, prec)
    re_reach = half_width(cif.real)
    if 0 in cif.imag:
        im_reach = larger(abs(cif.imag.a), abs(cif.imag.b))
        yield square_box(iv.mpc(center.real, 0), (2 * larger(re_reach, im_reach) + eps).b)
    yield square_box(center, (2 * larger(re_reach, half_width(cif.imag)) + eps).b)


def _newton_box(coefficients, derivative, start, prec):
    """ Polish start with Newton's method, then try to certify a small box around it.

        Returns (box, image) where box holds exactly one root and image is its Krawczyk image,
        which contains that root, or None.
    """
    z = start
    for _ in range(constants.NEWTON_STEPS):
        slope = evaluate(derivative, z)
        if contains_zero(slope):
            return None
        step = evaluate(coefficients, z) / slope
        if not is_finite(step):
            return None
        z = midpoint(z - step)
        if abs(step).b < _tolerance(z, prec):
            break
    slope = evaluate(derivative, z)
    if contains_zero(slope):
        return None
    radius = (abs(evaluate(coefficients, z) / slope) * 4 + _tolerance(z, prec)).b
    box = square_box(z, radius)
    image = _krawczyk(coefficients, derivative, z, box)
    if image is not None and strictly_inside(image, box):
        return box, image
    return None


def _quarters(coefficients, box):
    """ Split box into quarters and keep those on which P may vanish. """
    re_mid, im_mid = box.real.mid, box.imag.mid
    reals = [iv.mpf([box.real.a, re_mid]), iv.mpf([re_mid, box.real.b])]
    imags = [iv.mpf([box.imag.a, im_mid]), iv.mpf([im_mid, box.imag.b])]
    quarters = [iv.mpc(x, y) for x in reals for y in imags]
    return [q for q in quarters if contains_zero(evaluate(coefficients, q))]


def isolate(coefficients, approx, start=constants.DEFAULT_PRECISION):
    """ Return an Enclosure holding exactly one root of a squarefree integer polynomial.

        approx(prec) must return an Enclosure guaranteed to contain the wanted root, computed at
        working precision prec. Starting from start bits, the precision is doubled until a box
        around approx(prec) is certified, either because it is narrower than the root separation
        bound of the polynomial or because the Krawczyk test succeeds on it.
    """
    if len(coefficients) == 2:
        return Enclosure.from_rational(polynomial.rational_value(coefficients), start)
    derivative = polynomial.derivative(coefficients)
    separation = polynomial.separation_bits(coefficients)
    for prec in precision_schedule(start):
        target = approx(prec)
        if not target.is_finite():
            logger.debug('approximation unbounded at %d bits', prec)
            continue
        with working_precision(prec):
            for box in _candidate_boxes(target.cif(), prec):
                if _isolates(coefficients, derivative, box, separation):
                    return Enclosure(box, prec)
        logger.debug('no isolating box for a degree %d root at %d bits', len(coefficients) - 1, prec)
    raise IntervalError('max precision reached: unable to isolate a root of a polynomial of degree {0}.'.format(len(coefficients) - 1))


def refine(coefficients, enclosure, prec):
    """ Return a narrower Enclosure of the single root held by enclosure, computed with about prec
        bits.

        Newton's method is started from the center of every piece of the box that may still hold
        the root. A polished box whose Krawczyk image lies inside the original box holds that root.
        Each failed round quadrisects the pieces and drops those on which P cannot vanish; the
        working precision grows every few rounds.
    """
    if len(coefficients) == 2:
        return Enclosure.from_rational(polynomial.rational_value(coefficients), prec)
    derivative = polynomial.derivative(coefficients)
    outer = enclosure.cif()
    pieces = [outer]
    work = prec
    for step in range(1, constants.REFINE_STEPS + 1):
        with working_precision(work + constants.GUARD_BITS):
            for piece in pieces:
                polished = _newton_box(coefficients, derivative, midpoint(piece), work)
                if polished is not None and inside(polished[1], outer):
                    return Enclosure(polished[0], work)
            pieces = [q for piece in pieces for q in _quarters(coefficients, piece)]
        if step % 16 == 0:
            work = 2 * work
            logger.debug('refinement escalated to %d bits', work)
    raise IterationError('unable to refine a root of a polynomial of degree {0} in {1} steps.'.format(len(coefficients) - 1, constants.REFINE_STEPS))


def certify_real(coefficients, enclosure, prec):
    """ Try to prove the root held by enclosure real: a box symmetric about the real axis that
        contains enclosure and holds a single root must hold a root equal to its conjugate.

        Returns the symmetric Enclosure, or None if this precision is not enough.
    """
    if len(coefficients) == 2:
        return enclosure
    derivative = polynomial.derivative(coefficients)
    separation = polynomial.separation_bits(coefficients)
    with working_precision(prec + constants.GUARD_BITS):
        cif = enclosure.cif()
        if 0 not in cif.imag:
            return None
        box = next(_candidate_boxes(cif, prec))
        if _isolates(coefficients, derivative, box, separation):
            return Enclosure(box, prec)
    return None


def select_factor(factors, approx, start=constants.DEFAULT_PRECISION):
    """ Return the one factor (of a squarefree polynomial) that vanishes at the root enclosed by
        approx(prec).
    """
    if len(factors) == 1:
        return factors[0]
    for prec in precision_schedule(start):
        target = approx(prec)
        if not target.is_finite():
            continue
        with working_precision(prec):
            hits = [f for f in factors if contains_zero(evaluate(f, target.cif()))]
        if not hits:
            raise PolynomialError('no factor of the polynomial vanishes inside the enclosure.')
        if len(hits) == 1:
            logger.debug('selected a degree %d factor out of %d at %d bits', len(hits[0]) - 1, len(factors), prec)
            return hits[0]
    raise IntervalError('max precision reached: unable to tell which factor vanishes at the root.')


def minimal_polynomial(coefficients, approx, start=constants.DEFAULT_PRECISION):
    """ Given any nonzero integer polynomial vanishing at the number enclosed by approx(prec),
        return its minimal polynomial and an isolating Enclosure.
    """
    factors = polynomial.irreducible_factors(coefficients)
    factor = select_factor(factors, approx, start)
    return factor, isolate(factor, approx, start)


def isolate_all(coefficients, start=constants.DEFAULT_PRECISION):
    """ Return pairwise disjoint Enclosures of all the roots of a squarefree integer polynomial.
    """
    if len(coefficients) == 2:
        return [Enclosure.from_rational(polynomial.rational_value(coefficients), start)]
    derivative = polynomial.derivative(coefficients)
    for prec in precision_schedule(start):
        try:
            with workprec(prec):
                estimates = polyroots(list(reversed(coefficients)), maxsteps=4 * prec, extraprec=prec)
        except NoConvergence:
            logger.debug('polyroots did not converge at %d bits', prec)
            continue
        with working_precision(prec + constants.GUARD_BITS):
            boxes = []
            for z in estimates:
                polished = _newton_box(coefficients, derivative, iv.mpc(re(z), im(z)), prec)
                if polished is None:
                    break
                boxes.append(polished[0])
            else:
                if all(disjoint(a, b) for i, a in enumerate(boxes) for b in boxes[i + 1:]):
                    return [Enclosure(box, prec) for box in boxes]
        logger.debug('root boxes not separated at %d bits', prec)
    raise IntervalError('max precision reached: two of the roots are too close together to be distinguished by intervals.')


def _placement(coefficients, box, region, prec):
    """ True if the root held by box lies in region, False if it does not, None if box is not
        tight enough to tell.

        A root proven real is placed by the real parts alone, so regions given by real bounds
        only (a zero-width imaginary part) work.
    """
    if box.disjoint(region):
        return False
    if region.contains(box):
        return True
    if box.imag_contains_zero() and certify_real(coefficients, box, max(prec, box.prec())) is not None:
        if not region.imag_contains_zero() or region.real_disjoint(box):
            return False
        if region.contains_real(box):
            return True
    return None


def locate(coefficients, region, start=constants.DEFAULT_PRECISION):
    """ Return (factor, enclosure) for the single root of the polynomial lying in region, where
        factor is the minimal polynomial of that root.

        All roots are isolated once; the boxes straddling the border of region are then refined
        until each root is known to be inside or outside.

        Raises PolynomialError when region holds no root, or more than one.
    """
    factors = polynomial.irreducible_factors(coefficients)
    pending = [(f, box) for f in factors for box in isolate_all(f, start)]
    inner = []
    for prec in precision_schedule(start):
        undecided = []
        for f, box in pending:
            placed = _placement(f, box, region, prec)
            if placed is None:
                undecided.append((f, box))
            elif placed:
                inner.append((f, box))
        if len(inner) > 1:
            raise PolynomialError('the given region contains more than one root of the polynomial.')
        if not undecided:
            if not inner:
                raise PolynomialError('no root of the polynomial lies in the given region.')
            return inner[0]
        logger.debug('%d roots on the border of the region at %d bits', len(undecided), prec)
        pending = [(f, refine(f, box, 2 * prec)) for f, box in undecided]
    raise IntervalError('max precision reached: unable to tell whether a root lies in the given region.')
