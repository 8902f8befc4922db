import unittest

import numpy as np

from nodegrad.infrastructure import ReLU, Sigmoid, Softmax, Tensor
from nodegrad.infrastructure.autograd import Graph


class TestActivationModules(unittest.TestCase):
    def test_relu_forward_and_backward(self):
        g = Graph()
        x = g.variable(Tensor.from_numpy([[-1.0, 2.0, -3.0, 4.0]]))
        y = ReLU()(x)
        np.testing.assert_array_equal(y.value.to_numpy(), [[0.0, 2.0, 0.0, 4.0]])
        g.sum(y).backward()
        np.testing.assert_array_equal(x.grad.to_numpy(), [[0.0, 1.0, 0.0, 1.0]])

    def test_sigmoid_forward_and_backward(self):
        g = Graph()
        x_np = np.array([[-2.0, 0.0, 3.0]])
        x = g.variable(Tensor.from_numpy(x_np))
        y = Sigmoid()(x)
        s = 1.0 / (1.0 + np.exp(-x_np))
        np.testing.assert_allclose(y.value.to_numpy(), s)
        g.sum(y).backward()
        np.testing.assert_allclose(x.grad.to_numpy(), s * (1.0 - s))

    def test_softmax_module_rows_sum_to_one(self):
        y = Softmax()(Tensor.from_numpy([[1.0, 2.0], [0.0, 0.0]]))
        np.testing.assert_allclose(y.value.to_numpy().sum(axis=1), [1.0, 1.0])

    def test_activations_have_no_parameters(self):
        for m in (ReLU(), Sigmoid(), Softmax()):
            self.assertEqual(m.parameters(), [])

    def test_plain_tensor_input_is_a_constant(self):
        y = ReLU()(Tensor.ones((2,)))
        self.assertFalse(y.requires_grad)

    def test_rejects_other_inputs(self):
        with self.assertRaises(TypeError):
            ReLU()([1.0, 2.0])


if __name__ == "__main__":
    unittest.main()
