import unittest

from nodegrad.domain._errors import (
    BackwardError,
    GradientCheckError,
    GradientShapeError,
    ShapeMismatch,
    StaleGradientError,
    StaleGradientWarning,
    UninitializedParameter,
    UnregisteredOp,
)
from nodegrad.domain._shape import Shape


class TestErrorTypes(unittest.TestCase):
    def test_shape_mismatch_carries_shapes(self):
        e = ShapeMismatch("matmul", Shape((3, 4)), Shape((5, 4)))
        self.assertIsInstance(e, ValueError)
        self.assertEqual(e.op, "matmul")
        self.assertEqual(e.expected, Shape((3, 4)))
        self.assertEqual(e.actual, Shape((5, 4)))
        self.assertIn("(3, 4)", str(e))
        self.assertIn("(5, 4)", str(e))

    def test_shape_mismatch_accepts_textual_constraint(self):
        e = ShapeMismatch("transpose", "a rank-2 shape", (3,))
        self.assertIn("a rank-2 shape", str(e))

    def test_gradient_shape_error(self):
        e = GradientShapeError((2, 2), (1,), node_index=7)
        self.assertIsInstance(e, ValueError)
        self.assertEqual(e.node_index, 7)
        self.assertIn("node 7", str(e))

    def test_unregistered_op_lists_available(self):
        e = UnregisteredOp("conv", ("add", "mul"))
        self.assertIsInstance(e, RuntimeError)
        self.assertEqual(e.name, "conv")
        self.assertEqual(e.available, ("add", "mul"))
        self.assertIn("add, mul", str(e))

    def test_runtime_error_family(self):
        self.assertIsInstance(UninitializedParameter("w"), RuntimeError)
        self.assertIsInstance(StaleGradientError("w"), RuntimeError)
        e = BackwardError(3, "log", "boom")
        self.assertEqual((e.node_index, e.op_name), (3, "log"))

    def test_gradient_check_error_is_assertion(self):
        e = GradientCheckError(1, 4, 0.5, 0.25)
        self.assertIsInstance(e, AssertionError)
        self.assertEqual(e.element, 4)

    def test_stale_gradient_warning_is_user_warning(self):
        self.assertTrue(issubclass(StaleGradientWarning, UserWarning))


if __name__ == "__main__":
    unittest.main()
