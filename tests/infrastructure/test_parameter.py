from unittest import TestCase
import unittest

import numpy as np

from nodegrad.domain._errors import ShapeMismatch, UninitializedParameter
from nodegrad.domain._shape import Shape
from nodegrad.infrastructure._parameter import Parameter, zero_grad
from nodegrad.infrastructure.tensor import Tensor


class TestParameterInfrastructure(TestCase):
    def test_shape_only_parameter_is_uninitialized(self):
        p = Parameter((2, 3), name="w")
        self.assertFalse(p.is_initialized)
        self.assertEqual(p.shape, Shape((2, 3)))
        with self.assertRaises(UninitializedParameter) as cm:
            _ = p.value
        self.assertEqual(cm.exception.name, "w")

    def test_initialized_from_data(self):
        p = Parameter((2,), [1.0, 2.0])
        self.assertTrue(p.is_initialized)
        np.testing.assert_array_equal(p.to_numpy(), [1.0, 2.0])

    def test_copy_from_numpy_initializes(self):
        p = Parameter((2, 2))
        p.copy_from_numpy(np.eye(2))
        np.testing.assert_array_equal(p.to_numpy(), np.eye(2))
        with self.assertRaises(ShapeMismatch):
            p.copy_from_numpy([1.0])

    def test_from_tensor_copies(self):
        t = Tensor.from_numpy([1.0, 2.0])
        p = Parameter.from_tensor(t, name="b")
        t.fill(0.0)
        np.testing.assert_array_equal(p.to_numpy(), [1.0, 2.0])
        self.assertEqual(p.name, "b")

    def test_requires_grad_default_true_and_toggles(self):
        p = Parameter((2, 2))
        self.assertTrue(p.requires_grad)
        p.requires_grad = False
        self.assertFalse(p.requires_grad)

    def test_grad_starts_as_zeros(self):
        p = Parameter((2, 2))
        np.testing.assert_array_equal(p.grad.to_numpy(), np.zeros((2, 2)))

    def test_accumulate_then_zero_grad(self):
        p = Parameter((2,), [0.0, 0.0])
        p.accumulate_grad(Tensor.from_numpy([1.0, 2.0]))
        p.accumulate_grad(Tensor.from_numpy([1.0, 2.0]))
        np.testing.assert_array_equal(p.grad.to_numpy(), [2.0, 4.0])
        p.zero_grad()
        np.testing.assert_array_equal(p.grad.to_numpy(), [0.0, 0.0])

    def test_grad_tensor_is_persistent(self):
        p = Parameter((2,), [0.0, 0.0])
        g = p.grad
        p.zero_grad()
        self.assertIs(p.grad, g)

    def test_accumulate_rejects_wrong_shape(self):
        with self.assertRaises(ShapeMismatch):
            Parameter((2,)).accumulate_grad(Tensor.ones((3,)))

    def test_zero_grad_helper_and_idempotence(self):
        ps = [Parameter((1,), [1.0]), Parameter((2,), [1.0, 1.0])]
        for p in ps:
            p.grad.fill(3.0)
        zero_grad(ps)
        zero_grad(ps)
        for p in ps:
            self.assertFalse(p.grad.to_numpy().any())

    def test_stale_flag_tracks_step_and_reset(self):
        p = Parameter((1,), [1.0])
        p.grad.fill(0.5)
        self.assertFalse(p.has_stale_grad)
        p.mark_stepped()
        self.assertTrue(p.has_stale_grad)
        p.zero_grad()
        self.assertFalse(p.has_stale_grad)


if __name__ == "__main__":
    unittest.main()
