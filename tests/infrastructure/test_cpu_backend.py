import unittest

import numpy as np

from nodegrad.domain._errors import ShapeMismatch
from nodegrad.domain._shape import Shape
from nodegrad.infrastructure.backend import CpuBackend
from nodegrad.infrastructure.tensor import Tensor


def T(arr):
    return Tensor.from_numpy(np.asarray(arr, dtype=np.float64))


class TestCpuBackendLinearAlgebra(unittest.TestCase):
    def setUp(self):
        self.b = CpuBackend()

    def test_matmul_shape_and_values(self):
        a = np.arange(6.0).reshape(2, 3)
        c = np.arange(12.0).reshape(3, 4)
        out = self.b.matmul(T(a), T(c))
        self.assertEqual(out.shape, Shape((2, 4)))
        np.testing.assert_allclose(out.to_numpy(), a @ c)

    def test_matmul_inner_dim_mismatch(self):
        with self.assertRaises(ShapeMismatch) as cm:
            self.b.matmul(Tensor.zeros((2, 3)), Tensor.zeros((4, 2)))
        self.assertEqual(cm.exception.op, "matmul")
        self.assertEqual(cm.exception.actual, Shape((4, 2)))

    def test_matmul_requires_rank_two(self):
        with self.assertRaises(ShapeMismatch):
            self.b.matmul(Tensor.zeros((3,)), Tensor.zeros((3, 2)))

    def test_transpose(self):
        a = np.arange(6.0).reshape(2, 3)
        np.testing.assert_array_equal(self.b.transpose(T(a)).to_numpy(), a.T)


class TestCpuBackendElementwise(unittest.TestCase):
    def setUp(self):
        self.b = CpuBackend()

    def test_binary_ops(self):
        x, y = T([1.0, 2.0, 3.0]), T([4.0, 5.0, 6.0])
        np.testing.assert_array_equal(self.b.add(x, y).to_numpy(), [5, 7, 9])
        np.testing.assert_array_equal(self.b.sub(x, y).to_numpy(), [-3, -3, -3])
        np.testing.assert_array_equal(self.b.mul(x, y).to_numpy(), [4, 10, 18])
        np.testing.assert_allclose(self.b.div(x, y).to_numpy(), [0.25, 0.4, 0.5])
        np.testing.assert_array_equal(self.b.scale(x, 2.0).to_numpy(), [2, 4, 6])

    def test_binary_shape_mismatch(self):
        for fn in (self.b.add, self.b.sub, self.b.mul, self.b.div):
            with self.assertRaises(ShapeMismatch):
                fn(Tensor.zeros((2,)), Tensor.zeros((3,)))

    def test_add_broadcast(self):
        a = np.arange(6.0).reshape(2, 3)
        out = self.b.add_broadcast(T(a), T([10.0, 20.0, 30.0]))
        np.testing.assert_array_equal(out.to_numpy(), a + [10.0, 20.0, 30.0])
        with self.assertRaises(ShapeMismatch):
            self.b.add_broadcast(T(a), T([1.0, 2.0]))

    def test_relu_and_backward(self):
        x = T([-1.0, 0.0, 2.0])
        np.testing.assert_array_equal(self.b.relu(x).to_numpy(), [0.0, 0.0, 2.0])
        g = T([5.0, 5.0, 5.0])
        np.testing.assert_array_equal(
            self.b.relu_backward(g, x).to_numpy(), [0.0, 0.0, 5.0]
        )

    def test_sigmoid_is_stable_for_large_inputs(self):
        y = self.b.sigmoid(T([-1000.0, 0.0, 1000.0])).to_numpy()
        np.testing.assert_allclose(y, [0.0, 0.5, 1.0])
        self.assertTrue(np.all(np.isfinite(y)))

    def test_exp_log(self):
        x = T([0.5, 1.0, 2.0])
        np.testing.assert_allclose(self.b.log(self.b.exp(x)).to_numpy(), [0.5, 1.0, 2.0])


class TestCpuBackendReductions(unittest.TestCase):
    def setUp(self):
        self.b = CpuBackend()

    def test_sum_to_shape_one(self):
        out = self.b.sum(T([[1.0, 2.0], [3.0, 4.0]]))
        self.assertEqual(out.shape, Shape((1,)))
        self.assertEqual(out.item(), 10.0)

    def test_sum_empty_is_zero(self):
        self.assertEqual(self.b.sum(Tensor.zeros((0,))).item(), 0.0)

    def test_sum_dim_keeps_axis(self):
        a = np.arange(6.0).reshape(2, 3)
        out0 = self.b.sum_dim(T(a), 0)
        out1 = self.b.sum_dim(T(a), 1)
        self.assertEqual(out0.shape, Shape((1, 3)))
        self.assertEqual(out1.shape, Shape((2, 1)))
        np.testing.assert_array_equal(out0.to_numpy(), a.sum(axis=0, keepdims=True))
        np.testing.assert_array_equal(out1.to_numpy(), a.sum(axis=1, keepdims=True))

    def test_sum_dim_out_of_range(self):
        with self.assertRaises(ShapeMismatch):
            self.b.sum_dim(Tensor.zeros((2, 3)), 2)

    def test_sum_is_sequential_left_to_right(self):
        vals = np.array([1e16, 1.0, -1e16, 1.0])
        expected = 0.0
        for v in vals:
            expected += v
        self.assertEqual(self.b.sum(T(vals)).item(), expected)

    def test_softmax_rows_sum_to_one(self):
        x = T([[1.0, 2.0, 3.0], [1000.0, 1000.0, 1000.0]])
        y = self.b.softmax_last_dim(x).to_numpy()
        np.testing.assert_allclose(y.sum(axis=1), [1.0, 1.0])
        np.testing.assert_allclose(y[1], [1 / 3, 1 / 3, 1 / 3])

    def test_log_softmax_matches_log_of_softmax(self):
        x = T([[0.1, -2.0, 3.0]])
        np.testing.assert_allclose(
            self.b.log_softmax_last_dim(x).to_numpy(),
            np.log(self.b.softmax_last_dim(x).to_numpy()),
        )


class TestCpuBackendDeterminism(unittest.TestCase):
    def test_repeated_runs_are_bit_identical(self):
        rng = np.random.default_rng(7)
        a = T(rng.normal(size=(17, 33)))
        c = T(rng.normal(size=(33, 9)))
        b = CpuBackend()
        first = b.matmul(a, c).to_numpy()
        s_first = b.sum(a).item()
        for _ in range(5):
            np.testing.assert_array_equal(b.matmul(a, c).to_numpy(), first)
            self.assertEqual(b.sum(a).item(), s_first)

    def test_backend_is_flagged_deterministic(self):
        self.assertTrue(CpuBackend.deterministic)
        self.assertEqual(CpuBackend.name, "cpu")


if __name__ == "__main__":
    unittest.main()
