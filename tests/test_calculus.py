import math
import unittest
from unittest.mock import patch

import sympy as sp

from polykalk_pkg import calculus
from polykalk_pkg import config
from polykalk_pkg.polynomial import Polynomial
from polykalk_pkg.types import DivisionByZero
from polykalk_pkg.types import DomainError
from polykalk_pkg.types import ValidationError


def poly(text):
    return Polynomial.from_text(text)


class TestSumAndProduct(unittest.TestCase):
    def test_sum(self):
        self.assertEqual(calculus.sum_range(poly("2*x"), 1, 10), 110)

    def test_product(self):
        self.assertEqual(calculus.product_range(poly("x"), 1, 5), 120)

    def test_empty_sum_is_zero(self):
        self.assertEqual(calculus.sum_range(poly("2*x"), 5, 1), 0)

    def test_empty_product_is_one(self):
        self.assertEqual(calculus.product_range(poly("x"), 5, 1), 1)

    def test_single_term(self):
        self.assertEqual(calculus.sum_range(poly("x^2"), 3, 3), 9)
        self.assertEqual(calculus.product_range(poly("x^2"), 3, 3), 9)

    def test_negative_bounds(self):
        self.assertEqual(calculus.sum_range(poly("x"), -3, 3), 0)

    def test_integral_float_bounds_accepted(self):
        self.assertEqual(calculus.sum_range(poly("x"), 1.0, 4.0), 10)

    def test_fractional_bounds_rejected(self):
        with self.assertRaises(ValidationError):
            calculus.sum_range(poly("x"), 1.5, 4)
        with self.assertRaises(ValidationError):
            calculus.product_range(poly("x"), 1, True)

    def test_range_length_limit(self):
        with patch.object(config, "MAX_RANGE_TERMS", 10):
            with self.assertRaises(ValidationError):
                calculus.sum_range(poly("x"), 1, 11)

    def test_evaluation_error_aborts(self):
        with self.assertRaises(DivisionByZero):
            calculus.sum_range(poly("1/x"), -1, 1)

    def test_overflow_is_reported(self):
        with self.assertRaises(DomainError):
            calculus.product_range(poly("10^x"), 1, 30)


class TestDerivative(unittest.TestCase):
    def test_square(self):
        self.assertAlmostEqual(calculus.derivative(poly("x^2"), 5.0), 10.0, delta=1e-3)

    def test_central_difference_is_more_accurate(self):
        central = calculus.derivative(poly("x^2"), 5.0, method="central")
        self.assertAlmostEqual(central, 10.0, delta=1e-6)

    def test_matches_exact_derivative(self):
        text = "sin(x)*exp(x)"
        x = sp.Symbol("x")
        exact = float(sp.diff(sp.sin(x) * sp.exp(x), x).subs(x, 0.7))
        self.assertAlmostEqual(calculus.derivative(poly(text), 0.7), exact, delta=1e-3)

    def test_constant_has_zero_derivative(self):
        self.assertEqual(calculus.derivative(poly("5"), 3.0), 0.0)

    def test_custom_step(self):
        self.assertAlmostEqual(calculus.derivative(poly("x^2"), 5.0, step=0.5), 10.5)

    def test_invalid_step(self):
        with self.assertRaises(ValidationError):
            calculus.derivative(poly("x"), 1.0, step=0)

    def test_unknown_method(self):
        with self.assertRaises(ValidationError):
            calculus.derivative(poly("x"), 1.0, method="backward")

    def test_pole_propagates(self):
        with self.assertRaises(DivisionByZero):
            calculus.derivative(poly("1/x"), 0.0)


class TestLimit(unittest.TestCase):
    def test_limit_away_from_pole(self):
        self.assertAlmostEqual(calculus.limit(poly("1/(x-1)"), 2), 1.0, places=4)

    def test_removable_singularity(self):
        self.assertAlmostEqual(calculus.limit(poly("sin(x)/x"), 0), 1.0, places=6)

    def test_left_side(self):
        value = calculus.limit(poly("1/(x-1)"), 2, side="-")
        self.assertAlmostEqual(value, 1 / (1 - config.LIMIT_STEP))

    def test_division_by_zero_at_shifted_point(self):
        with self.assertRaises(DivisionByZero):
            calculus.limit(poly("1/x"), -1e-5, step=1e-5)

    def test_no_divergence_detection(self):
        """Approaching a pole just returns a large finite number."""
        value = calculus.limit(poly("1/(x-1)"), 1)
        self.assertTrue(math.isfinite(value))
        self.assertGreater(value, 1e4)

    def test_invalid_side(self):
        with self.assertRaises(ValidationError):
            calculus.limit(poly("x"), 0, side="both")


if __name__ == "__main__":
    unittest.main()
