import dataclasses
import math
import unittest

import sympy as sp

from polykalk_pkg.evaluator import FUNCTIONS
from polykalk_pkg.evaluator import NodeType
from polykalk_pkg.expression import Expression
from polykalk_pkg.expression import evaluate
from polykalk_pkg.types import DivisionByZero
from polykalk_pkg.types import DomainError
from polykalk_pkg.types import UnknownIdentifier
from polykalk_pkg.types import ValidationError


class TestEvaluate(unittest.TestCase):
    def test_polynomial(self):
        expr = Expression.parse("3x^2 - 2x + 1")
        self.assertEqual(evaluate(expr, 2.0), 9.0)

    def test_constants(self):
        self.assertAlmostEqual(Expression.parse("pi*e").evaluate(), math.pi * math.e)
        self.assertAlmostEqual(Expression.parse("tau/2").evaluate(), math.pi)

    def test_atan2_convention(self):
        expr = Expression.parse("atan2(1, x)")
        self.assertAlmostEqual(expr.evaluate(1.0), math.pi / 4)
        self.assertAlmostEqual(expr.evaluate(-1.0), 3 * math.pi / 4)

    def test_two_argument_functions(self):
        self.assertEqual(Expression.parse("min(x, 3)").evaluate(5), 3)
        self.assertEqual(Expression.parse("max(x, 3)").evaluate(5), 5)
        self.assertEqual(Expression.parse("pow(x, 3)").evaluate(2), 8)

    def test_every_unary_function_is_callable(self):
        for name, spec in FUNCTIONS.items():
            if spec.arity != 1:
                continue
            with self.subTest(function=name):
                value = Expression.parse(f"{name}(x)").evaluate(0.5)
                self.assertTrue(math.isfinite(value))

    def test_deterministic(self):
        expr = Expression.parse("sin(x)*exp(x)/(1+x^2)")
        self.assertEqual(expr.evaluate(0.37), expr.evaluate(0.37))

    def test_near_pole_is_finite(self):
        self.assertAlmostEqual(Expression.parse("1/(x-1)").evaluate(1 + 1e-5), 1e5, delta=1.0)

    def test_underflow_is_zero(self):
        self.assertEqual(Expression.parse("exp(x)").evaluate(-1000), 0.0)

    def test_custom_variable(self):
        self.assertEqual(Expression.parse("t^2", variable="t").evaluate(3), 9)
        with self.assertRaises(UnknownIdentifier):
            Expression.parse("x", variable="t")

    def test_reserved_variable_name(self):
        with self.assertRaises(ValidationError):
            Expression.parse("sin", variable="sin")
        with self.assertRaises(ValidationError):
            Expression.parse("pi", variable="pi")


class TestEvaluationErrors(unittest.TestCase):
    def test_division_by_zero(self):
        with self.assertRaises(DivisionByZero):
            Expression.parse("1/(x-1)").evaluate(1.0)

    def test_zero_to_negative_power(self):
        with self.assertRaises(DivisionByZero):
            Expression.parse("x^-1").evaluate(0.0)

    def test_sqrt_of_negative(self):
        with self.assertRaises(DomainError):
            Expression.parse("sqrt(x)").evaluate(-1)

    def test_log_of_zero(self):
        with self.assertRaises(DomainError):
            Expression.parse("log(x)").evaluate(0)

    def test_asin_outside_unit_interval(self):
        with self.assertRaises(DomainError):
            Expression.parse("asin(x)").evaluate(2)

    def test_fractional_power_of_negative(self):
        with self.assertRaises(DomainError):
            Expression.parse("x^0.5").evaluate(-4)

    def test_integer_power_of_negative(self):
        self.assertEqual(Expression.parse("x^3").evaluate(-2), -8)

    def test_overflow(self):
        with self.assertRaises(DomainError):
            Expression.parse("exp(x)").evaluate(1000)
        with self.assertRaises(DomainError):
            Expression.parse("x*1e200*1e200").evaluate(1)

    def test_missing_value(self):
        with self.assertRaises(ValidationError):
            Expression.parse("x+1").evaluate()

    def test_non_finite_value(self):
        with self.assertRaises(DomainError):
            Expression.parse("x+1").evaluate(float("nan"))


class TestExpressionObject(unittest.TestCase):
    def test_literals_are_unevaluated(self):
        expr = Expression.parse("3x^2 - 12.5/x + pi")
        self.assertEqual(sorted(expr.literals()), [2.0, 3.0, 12.5])

    def test_uses_variable(self):
        self.assertTrue(Expression.parse("2x").uses_variable)
        self.assertFalse(Expression.parse("2*pi").uses_variable)

    def test_to_sympy(self):
        x = sp.Symbol("x")
        self.assertEqual(Expression.parse("3*x^2 + 1").to_sympy(), 3 * x**2 + 1)
        self.assertEqual(Expression.parse("atan2(1, x)").to_sympy(), sp.atan2(1, x))

    def test_str_is_fully_parenthesised(self):
        self.assertEqual(str(Expression.parse("1+2*x")), "(1 + (2 * x))")

    def test_immutable(self):
        expr = Expression.parse("x")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            expr.source = "y"

    def test_tree_shape(self):
        root = Expression.parse("-sin(x)").root
        self.assertEqual(root.node_type, NodeType.NEGATE)
        self.assertEqual(root.children[0].node_type, NodeType.FUNCTION)
        self.assertEqual(root.depth(), 3)
        self.assertEqual(root.count_nodes(), 3)


if __name__ == "__main__":
    unittest.main()
