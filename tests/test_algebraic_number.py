"""Tests for AlgebraicNum and the operation dispatcher."""

from fractions import Fraction

import pytest
from mpmath import iv

from algnum.kernel import algebraic_number, mobius, radical, resultant
from algnum.kernel.algebraic_number import AlgebraicNum
from algnum.kernel.errors import DivisionByZeroError, PolynomialError
from algnum.kernel.interval import Enclosure


def sqrt(n):
    return AlgebraicNum.from_rational_root(n, 2)


@pytest.fixture
def i():
    return AlgebraicNum.from_polynomial([1, 0, 1], [-0.5, 0.5], [0.5, 1.5])


@pytest.fixture
def no_resultants(monkeypatch):
    def fail(*args):
        raise AssertionError('resultant path taken')
    monkeypatch.setattr(resultant, 'combine', fail)
    monkeypatch.setattr(resultant, 'power', fail)


@pytest.fixture
def no_radicals(monkeypatch):
    def fail(*args):
        raise AssertionError('radical path taken')
    monkeypatch.setattr(radical, 'combine', fail)


class TestConstruction:
    """Tests for the constructors and accessors."""

    def test_default_is_zero(self) -> None:
        zero = AlgebraicNum()
        assert zero.is_zero()
        assert zero.coefficients() == (0, 1)
        assert not zero

    def test_rationals(self) -> None:
        assert AlgebraicNum(1).is_one()
        assert AlgebraicNum(-1).is_neg_one()
        x = AlgebraicNum(Fraction(-3, 4))
        assert x.degree() == 1
        assert x.coefficients() == (3, 4)
        assert x.to_rational() == Fraction(-3, 4)
        assert AlgebraicNum(Fraction(4, 2)).is_integer()
        assert not x.is_integer()

    def test_copy(self) -> None:
        x = sqrt(2)
        assert AlgebraicNum(x) == x

    def test_float_rejected(self) -> None:
        with pytest.raises(TypeError):
            AlgebraicNum(1.5)

    @pytest.mark.parametrize('coefficients', [[-2, 0, 1], [-4, 0, 2], [-6, 0, 3], [2, 0, -1], [4, 0, -4, 0, 1]])
    def test_from_polynomial_is_canonical(self, coefficients) -> None:
        """The stored polynomial does not depend on how the input was scaled."""
        x = AlgebraicNum.from_polynomial(coefficients, [1.4, 1.5])
        assert x.coefficients() == (-2, 0, 1)
        assert x == sqrt(2)

    def test_from_polynomial_regions(self) -> None:
        box = Enclosure.from_bounds([1, 2])
        assert AlgebraicNum.from_polynomial([-2, 0, 1], box) == sqrt(2)
        assert AlgebraicNum.from_polynomial([-2, 0, 1], iv.mpc(iv.mpf([-2, -1]), 0)) == -sqrt(2)

    def test_from_polynomial_with_real_bounds(self) -> None:
        cube_root = AlgebraicNum.from_polynomial([-2, 0, 0, 1], [1.2, 1.3])
        assert cube_root.coefficients() == (-2, 0, 0, 1)
        assert cube_root == AlgebraicNum.from_rational_root(2, 3)
        x = AlgebraicNum.from_polynomial([1, 0, -10, 0, 1], ['3.14', '3.15'])
        assert x == sqrt(2) + sqrt(3)

    def test_from_polynomial_collapses_to_rational(self) -> None:
        x = AlgebraicNum.from_polynomial([6, -2, -3, 1], ['2.5', '3.5'])
        assert x == 3
        assert x.degree() == 1

    def test_from_polynomial_errors(self) -> None:
        with pytest.raises(PolynomialError):
            AlgebraicNum.from_polynomial([-2, 0, 1], [3, 4])
        with pytest.raises(PolynomialError):
            AlgebraicNum.from_polynomial([-2, 0, 1], [-2, 2])
        with pytest.raises(PolynomialError):
            AlgebraicNum.from_polynomial([0, 0], [-1, 1])

    def test_polynomial_roots(self) -> None:
        roots = AlgebraicNum.polynomial_roots([0, -1, 0, 1])
        assert sorted(root.to_rational() for root in roots) == [-1, 0, 1]

    def test_polynomial_roots_without_multiplicity(self) -> None:
        roots = sorted(AlgebraicNum.polynomial_roots([4, 0, -4, 0, 1]))
        assert len(roots) == 2
        assert roots[0] == -sqrt(2)
        assert roots[1] == sqrt(2)

    def test_rational_root(self) -> None:
        assert sqrt(4) == 2
        assert sqrt(4).degree() == 1
        assert AlgebraicNum.from_rational_root(2, 3).coefficients() == (-2, 0, 0, 1)
        with pytest.raises(ValueError):
            AlgebraicNum.from_rational_root(-2, 2)
        with pytest.raises(ValueError):
            AlgebraicNum.from_rational_root(2, 0)

    def test_minimal_polynomial(self) -> None:
        assert sqrt(2).minimal_polynomial().all_coeffs() == [1, 0, -2]

    def test_interval_refines(self) -> None:
        x = sqrt(2)
        box = x.interval(200)
        assert box.prec() >= 200
        assert x.prec() >= 200
        assert box.width() < iv.mpf(1) / 2**150
        assert x.interval(100) is box


class TestPredicates:
    """Realness, sign and conversions."""

    def test_is_real(self, i) -> None:
        assert sqrt(2).is_real()
        assert (sqrt(2) + sqrt(3)).is_real()
        assert AlgebraicNum(5).is_real()
        assert not i.is_real()

    def test_sign(self, i) -> None:
        assert sqrt(2).sign() == 1
        assert (-sqrt(2)).sign() == -1
        assert AlgebraicNum(0).sign() == 0
        assert (sqrt(2) - sqrt(3)).sign() == -1
        with pytest.raises(TypeError):
            i.sign()

    def test_to_rational_of_irrational(self) -> None:
        with pytest.raises(ValueError):
            sqrt(2).to_rational()

    def test_conversions(self, i) -> None:
        assert abs(float(sqrt(2)) - 2 ** 0.5) < 1e-12
        assert float(AlgebraicNum(Fraction(1, 4))) == 0.25
        assert abs(complex(i) - 1j) < 1e-12
        with pytest.raises(TypeError):
            float(i)

    def test_text(self) -> None:
        assert str(AlgebraicNum(Fraction(1, 2))) == '1/2'
        assert repr(AlgebraicNum(3)) == 'AlgebraicNum(3)'
        assert str(sqrt(2)).startswith('1.41421')


class TestEquality:
    """Equality, hashing and ordering."""

    def test_conjugate_roots_differ(self) -> None:
        assert sqrt(2) != -sqrt(2)
        assert not sqrt(2) == -sqrt(2)

    def test_independent_constructions_agree(self) -> None:
        a = AlgebraicNum.from_polynomial([-2, 0, 1], [1, 2])
        b = AlgebraicNum.from_polynomial([-2, 0, 1], [1.41, 1.42])
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_rational_hash_matches_fraction(self) -> None:
        assert hash(AlgebraicNum(Fraction(1, 2))) == hash(Fraction(1, 2))
        assert hash(AlgebraicNum(7)) == hash(7)

    def test_ordering(self) -> None:
        assert sqrt(2) < sqrt(3)
        assert sqrt(3) > sqrt(2)
        assert sqrt(2) > 1
        assert sqrt(2) < Fraction(3, 2)
        assert -sqrt(2) < 0
        assert sqrt(2) <= sqrt(2)
        assert sqrt(2) >= AlgebraicNum.from_polynomial([-2, 0, 1], [1, 2])
        assert sorted([sqrt(3), AlgebraicNum(1), -sqrt(2)]) == [-sqrt(2), 1, sqrt(3)]

    def test_complex_numbers_are_unordered(self, i) -> None:
        with pytest.raises(TypeError):
            i < 1
        with pytest.raises(TypeError):
            sqrt(2) > i


class TestRationalArithmetic:
    """Two rationals always go through the exact scalar transform."""

    @pytest.mark.parametrize('p, q', [(Fraction(1, 3), Fraction(-5, 7)), (Fraction(2), Fraction(3, 4)), (Fraction(-9, 2), Fraction(-1, 6))])
    def test_matches_fractions(self, no_resultants, no_radicals, p, q) -> None:
        x, y = AlgebraicNum(p), AlgebraicNum(q)
        assert x + y == p + q
        assert x - y == p - q
        assert x * y == p * q
        assert x / y == p / q
        assert (x + y).degree() == 1

    def test_mixed_operands(self, no_resultants) -> None:
        x = sqrt(2)
        assert 1 + x == x + 1
        assert 1 - x == -(x - 1)
        assert 2 / x == x
        assert Fraction(1, 2) * x == x / 2
        assert (x + 1).coefficients() == (-1, -2, 1)

    def test_float_operand_unsupported(self) -> None:
        with pytest.raises(TypeError):
            sqrt(2) + 1.5


class TestDispatcher:
    """Path selection and algebraic identities."""

    def test_identities(self, no_resultants, no_radicals) -> None:
        x = AlgebraicNum.from_polynomial([1, 0, -10, 0, 1], [3, 3.2])
        assert x + 0 is x
        assert 0 + x is x
        assert x * 1 is x
        assert x / 1 is x
        assert (x * 0).is_zero()
        assert (0 / x).is_zero()
        assert x * -1 == -x
        assert -1 * x == -x

    def test_radicals(self, no_resultants) -> None:
        assert sqrt(2) / sqrt(2) == 1
        assert sqrt(2) * sqrt(8) == 4
        assert (sqrt(2) * sqrt(3)).coefficients() == (-6, 0, 1)
        assert sqrt(6) / sqrt(3) == sqrt(2)

    @pytest.mark.parametrize('p, d', [(2, 2), (Fraction(5, 3), 3), (3, 4), (Fraction(1, 7), 5)])
    def test_root_then_power(self, no_resultants, p, d) -> None:
        assert AlgebraicNum.from_rational_root(p, d) ** d == p

    def test_sum_of_square_roots(self) -> None:
        assert (sqrt(2) + sqrt(3)).coefficients() == (1, 0, -10, 0, 1)

    def test_quotient_times_divisor(self) -> None:
        x = 1 + sqrt(2)
        y = sqrt(3)
        assert (x / y) * y == x

    def test_self_division(self) -> None:
        x = 1 + sqrt(2)
        assert x / x == 1
        assert 1 / (1 / x) == x
        assert x - x == 0

    def test_division_by_zero(self) -> None:
        zero = AlgebraicNum(0)
        for x in (zero, AlgebraicNum(1), sqrt(2), sqrt(2) + sqrt(3)):
            with pytest.raises(DivisionByZeroError):
                x / zero
        with pytest.raises(ZeroDivisionError):
            sqrt(2) / 0
        with pytest.raises(DivisionByZeroError):
            zero.inverse()

    def test_imaginary_unit(self, i) -> None:
        assert i * i == -1
        assert i ** 2 == -1
        assert i ** 4 == 1
        assert i.conjugate() == -i
        assert i.inverse() == -i
        assert abs(i) == 1

    def test_integer_powers(self) -> None:
        x = sqrt(2)
        assert x ** 0 == 1
        assert x ** -2 == Fraction(1, 2)
        assert (1 + x) ** 2 == 3 + 2 * x
        assert AlgebraicNum(Fraction(2, 3)) ** 3 == Fraction(8, 27)

    def test_algebraic_exponents(self) -> None:
        assert sqrt(2) ** AlgebraicNum(2) == 2
        assert AlgebraicNum(4) ** AlgebraicNum(Fraction(1, 2)) == 2
        assert 2 ** AlgebraicNum(3) == 8
        assert 2 ** AlgebraicNum(Fraction(1, 2)) == sqrt(2)
        with pytest.raises(TypeError):
            2 ** sqrt(2)

    def test_roots(self, i) -> None:
        assert sqrt(2).root(2) == AlgebraicNum.from_rational_root(2, 4)
        assert AlgebraicNum(4) ** Fraction(1, 2) == 2
        assert AlgebraicNum(8) ** Fraction(2, 3) == 4
        with pytest.raises(ValueError):
            (-sqrt(2)).root(2)
        with pytest.raises(ValueError):
            i ** Fraction(1, 2)

    def test_absolute_value(self) -> None:
        assert abs(-sqrt(2)) == sqrt(2)
        assert abs(sqrt(2)) == sqrt(2)

    def test_operands_unchanged(self) -> None:
        x, y = sqrt(2), sqrt(3)
        before = (x.coefficients(), y.coefficients())
        x + y
        x * y
        x / y
        assert (x.coefficients(), y.coefficients()) == before

    def test_module_functions(self) -> None:
        x = sqrt(2)
        assert algebraic_number.add(x, x) == 2 * x
        assert algebraic_number.neg(algebraic_number.neg(x)) == x
        assert algebraic_number.inv(x) == x / 2

    def test_scalar_transform_used(self, monkeypatch) -> None:
        calls = []
        scalar_op = mobius.scalar_op

        def spy(x, a, b, c, d):
            calls.append((a, b, c, d))
            return scalar_op(x, a, b, c, d)
        monkeypatch.setattr(mobius, 'scalar_op', spy)
        sqrt(2) * 3
        assert calls == [(3, 0, 0, 1)]
