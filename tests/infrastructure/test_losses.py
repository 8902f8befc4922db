import unittest

import numpy as np

from nodegrad.domain._errors import ShapeMismatch
from nodegrad.domain._shape import Shape
from nodegrad.infrastructure import Tensor, cross_entropy, mse_loss
from nodegrad.infrastructure.autograd import Graph


class TestMSELoss(unittest.TestCase):
    def test_value_and_gradient(self):
        g = Graph()
        pred_np = np.array([[1.0, 2.0], [3.0, 4.0]])
        target_np = np.array([[0.0, 2.0], [5.0, 3.0]])
        pred = g.variable(Tensor.from_numpy(pred_np))
        loss = mse_loss(pred, Tensor.from_numpy(target_np))
        self.assertEqual(loss.shape, Shape((1,)))
        self.assertAlmostEqual(loss.item(), np.mean((pred_np - target_np) ** 2))
        loss.backward()
        np.testing.assert_allclose(
            pred.grad.to_numpy(), 2.0 * (pred_np - target_np) / pred_np.size
        )

    def test_target_tensor_becomes_constant(self):
        g = Graph()
        pred = g.variable(Tensor.ones((2,)))
        loss = mse_loss(pred, Tensor.zeros((2,)))
        target = loss.inputs[1]
        self.assertTrue(target.is_leaf)
        self.assertFalse(target.requires_grad)

    def test_shape_mismatch(self):
        g = Graph()
        pred = g.variable(Tensor.ones((2, 1)))
        with self.assertRaises(ShapeMismatch):
            mse_loss(pred, Tensor.ones((1, 2)))


class TestCrossEntropy(unittest.TestCase):
    def test_value_and_gradient(self):
        g = Graph()
        logits_np = np.array([[2.0, 1.0, 0.1], [0.5, 2.5, 0.3]])
        target_np = np.array([[1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
        logits = g.variable(Tensor.from_numpy(logits_np))
        loss = cross_entropy(logits, Tensor.from_numpy(target_np))

        shifted = logits_np - logits_np.max(axis=1, keepdims=True)
        log_p = shifted - np.log(np.exp(shifted).sum(axis=1, keepdims=True))
        expected = -(target_np * log_p).sum() / 2.0
        self.assertAlmostEqual(loss.item(), expected)

        loss.backward()
        np.testing.assert_allclose(
            logits.grad.to_numpy(), (np.exp(log_p) - target_np) / 2.0
        )

    def test_logits_gradient_scales_with_target_row_mass(self):
        g = Graph()
        logits_np = np.array([[0.2, -0.4, 1.1], [1.5, 0.0, -0.3]])
        target_np = np.array([[0.3, 0.3, 0.0], [0.9, 0.5, 0.2]])
        logits = g.variable(Tensor.from_numpy(logits_np))
        cross_entropy(logits, Tensor.from_numpy(target_np)).backward()

        e = np.exp(logits_np - logits_np.max(axis=1, keepdims=True))
        probs = e / e.sum(axis=1, keepdims=True)
        row_mass = target_np.sum(axis=1, keepdims=True)
        np.testing.assert_allclose(
            logits.grad.to_numpy(), (probs * row_mass - target_np) / 2.0
        )

    def test_extreme_logits_stay_finite(self):
        g = Graph()
        logits = g.variable(Tensor.from_numpy([[1000.0, -1000.0]]))
        loss = cross_entropy(logits, Tensor.from_numpy([[0.0, 1.0]]))
        self.assertTrue(np.isfinite(loss.item()))
        self.assertAlmostEqual(loss.item(), 2000.0)

    def test_requires_rank_two(self):
        g = Graph()
        logits = g.variable(Tensor.ones((3,)))
        with self.assertRaises(ShapeMismatch):
            cross_entropy(logits, Tensor.ones((3,)))


if __name__ == "__main__":
    unittest.main()
