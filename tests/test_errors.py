"""Tests for the error types."""

from algnum.kernel.errors import DivisionByZeroError, IntervalError, IterationError, PolynomialError


class TestErrors:
    """Error messages and base classes."""

    def test_messages(self) -> None:
        assert str(IntervalError('max precision reached')) == 'IntervalError: max precision reached'
        assert str(IterationError('stuck')) == 'IterationError: stuck'
        assert PolynomialError('bad').message == 'bad'

    def test_division_by_zero_is_zero_division(self) -> None:
        assert issubclass(DivisionByZeroError, ZeroDivisionError)
        assert str(DivisionByZeroError('x / 0')) == 'DivisionByZeroError: x / 0'

    def test_polynomial_error_is_value_error(self) -> None:
        assert issubclass(PolynomialError, ValueError)
