import math
import unittest

from polykalk_pkg.solver import Equation
from polykalk_pkg.solver import NewtonSolver
from polykalk_pkg.solver import SolverConfig
from polykalk_pkg.solver import SolverState
from polykalk_pkg.solver import solve
from polykalk_pkg.types import DivisionByZero
from polykalk_pkg.types import MalformedExpression
from polykalk_pkg.types import NoConvergence
from polykalk_pkg.types import ValidationError
from polykalk_pkg.types import ZeroDerivative


class TestEquation(unittest.TestCase):
    def test_normalised_to_lhs_minus_rhs(self):
        equation = Equation.from_text("2*x = 4")
        self.assertEqual(equation.insert(2), 0)
        self.assertEqual(equation.insert(3), 2)

    def test_rhs_is_grouped(self):
        equation = Equation.from_text("x = 1 + 2")
        self.assertEqual(equation.insert(3), 0)

    def test_missing_equals(self):
        with self.assertRaises(MalformedExpression):
            Equation.from_text("2*x")

    def test_multiple_equals(self):
        with self.assertRaises(MalformedExpression):
            Equation.from_text("x = 1 = 2")
        with self.assertRaises(MalformedExpression):
            Equation.from_text("x == 1")

    def test_empty_side(self):
        with self.assertRaises(MalformedExpression):
            Equation.from_text("= 4")

    def test_sides_must_parse_alone(self):
        with self.assertRaises(MalformedExpression):
            Equation.from_text("x)+(1 = 3")

    def test_copy(self):
        original = Equation.from_text("x^2 = 2")
        copy = Equation.from_equation(original)
        self.assertEqual(copy, original)
        self.assertEqual(copy.insert(1.5), original.insert(1.5))


class TestSolverConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = SolverConfig()
        self.assertEqual(cfg.error_threshold, 1e-5)
        self.assertEqual(cfg.max_iterations, 1000)
        self.assertIsNone(cfg.initial_guess)
        self.assertEqual(cfg.residual_threshold, 1e-9)

    def test_rejects_invalid_values(self):
        for kwargs in (
            {"error_threshold": 0},
            {"error_threshold": -1e-3},
            {"error_threshold": float("nan")},
            {"max_iterations": 0},
            {"max_iterations": 1.5},
            {"initial_guess": float("inf")},
            {"residual_threshold": 0},
            {"residual_threshold": float("inf")},
        ):
            with self.subTest(**kwargs):
                with self.assertRaises(ValidationError):
                    SolverConfig(**kwargs)


class TestNewton(unittest.TestCase):
    def test_linear(self):
        solver = NewtonSolver(Equation.from_text("2*x=4"))
        root = solver.run()
        self.assertAlmostEqual(root, 2.0, delta=1e-5)
        self.assertEqual(solver.state, SolverState.CONVERGED)

    def test_square_root(self):
        self.assertAlmostEqual(solve(Equation.from_text("x^2 = 2")), math.sqrt(2), places=5)

    def test_transcendental(self):
        """atan2(1, x) only approaches 0; the solver stops once it is within tolerance."""
        root = solve(Equation.from_text("atan2(1,x)=0"))
        self.assertGreater(root, 0)
        self.assertLess(abs(math.atan2(1, root)), 1e-9)

    def test_default_guess_is_largest_coefficient(self):
        self.assertAlmostEqual(solve(Equation.from_text("x^2 = 4")), 2.0, places=5)

    def test_explicit_zero_guess_is_honoured(self):
        root = solve(Equation.from_text("x^2 = 4"), SolverConfig(initial_guess=-1.0))
        self.assertAlmostEqual(root, -2.0, places=5)
        root = solve(Equation.from_text("x = 3"), SolverConfig(initial_guess=0.0))
        self.assertAlmostEqual(root, 3.0, places=5)

    def test_flat_function_is_not_taken_for_a_root(self):
        """|f(45)| is only 5e-6 here, yet 45 is far from the root."""
        solver = NewtonSolver(
            Equation.from_text("(x-50)/1000000 = 0"), SolverConfig(initial_guess=45.0)
        )
        self.assertAlmostEqual(solver.run(), 50.0, delta=1e-3)
        self.assertGreater(solver.iterations, 0)
        self.assertEqual(solver.state, SolverState.CONVERGED)

    def test_residual_threshold_is_configurable(self):
        cfg = SolverConfig(initial_guess=45.0, residual_threshold=1e-5)
        self.assertEqual(solve(Equation.from_text("(x-50)/1000000 = 0"), cfg), 45.0)

    def test_initial_guess_already_a_root(self):
        solver = NewtonSolver(Equation.from_text("x = 3"), SolverConfig(initial_guess=3.0))
        self.assertEqual(solver.run(), 3.0)
        self.assertEqual(solver.iterations, 0)

    def test_constant_equation_has_zero_derivative(self):
        solver = NewtonSolver(Equation.from_text("5 = 0"))
        with self.assertLogs("polykalk.solver.newton", level="WARNING"):
            with self.assertRaises(ZeroDerivative) as ctx:
                solver.run()
        self.assertEqual(solver.state, SolverState.DIVERGED)
        self.assertEqual(ctx.exception.last_guess, 5.0)
        self.assertEqual(ctx.exception.iterations, 0)

    def test_oscillation_does_not_converge(self):
        """Newton cycles between 0 and 1 on x^3 - 2x + 2."""
        cfg = SolverConfig(initial_guess=0.0, max_iterations=50)
        solver = NewtonSolver(Equation.from_text("x^3 - 2*x + 2 = 0"), cfg)
        with self.assertRaises(NoConvergence) as ctx:
            solver.run()
        self.assertEqual(solver.state, SolverState.MAX_ITERATIONS_EXCEEDED)
        self.assertEqual(ctx.exception.iterations, 51)
        self.assertTrue(math.isfinite(ctx.exception.last_guess))

    def test_pole_in_derivative_is_zero_derivative(self):
        cfg = SolverConfig(initial_guess=-1e-5)
        with self.assertRaises(ZeroDerivative) as ctx:
            solve(Equation.from_text("1/x = 2"), cfg)
        self.assertIsInstance(ctx.exception.__cause__, DivisionByZero)

    def test_pole_at_guess_propagates(self):
        solver = NewtonSolver(Equation.from_text("1/x = 1"), SolverConfig(initial_guess=0.0))
        with self.assertRaises(DivisionByZero):
            solver.run()
        self.assertEqual(solver.state, SolverState.DIVERGED)

    def test_state_before_run(self):
        solver = NewtonSolver(Equation.from_text("x = 1"))
        self.assertEqual(solver.state, SolverState.INITIALIZED)


if __name__ == "__main__":
    unittest.main()
