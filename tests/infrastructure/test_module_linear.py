import unittest

import numpy as np

from nodegrad.domain._errors import UninitializedParameter
from nodegrad.domain._shape import Shape
from nodegrad.infrastructure import (
    DeterminismContext,
    Linear,
    Module,
    Parameter,
    ReLU,
    Sequential,
    Sigmoid,
    Tensor,
)
from nodegrad.infrastructure.autograd import Graph, Node


class TestModuleRegistration(unittest.TestCase):
    def test_attribute_assignment_registers_parameters_and_children(self):
        class Block(Module):
            def __init__(self):
                super().__init__()
                self.scale = Parameter((1,), [2.0])
                self.inner = Linear(2, 2)

        b = Block()
        names = [n for n, _ in b.named_parameters()]
        self.assertEqual(names, ["scale", "inner.weight", "inner.bias"])
        self.assertEqual(len(b.parameters()), 3)

    def test_assigning_none_unregisters(self):
        class Block(Module):
            def __init__(self):
                super().__init__()
                self.p = Parameter((1,), [0.0])

        b = Block()
        b.p = None
        self.assertEqual(b.parameters(), [])

    def test_parameters_get_attribute_names(self):
        lin = Linear(2, 3)
        self.assertEqual(lin.weight.name, "weight")
        self.assertEqual(lin.bias.name, "bias")


class TestLinear(unittest.TestCase):
    def test_parameter_shapes_follow_in_out_layout(self):
        lin = Linear(4, 3)
        self.assertEqual(lin.weight.shape, Shape((4, 3)))
        self.assertEqual(lin.bias.shape, Shape((3,)))

    def test_uninitialized_until_reset(self):
        lin = Linear(2, 2)
        x = Tensor.ones((1, 2))
        with self.assertRaises(UninitializedParameter):
            lin(x)
        lin.reset_parameters(DeterminismContext(0))
        self.assertEqual(lin(x).shape, Shape((1, 2)))

    def test_forward_matches_numpy(self):
        lin = Linear(3, 2, rng=DeterminismContext(3))
        x_np = np.array([[1.0, 2.0, 3.0], [-1.0, 0.5, 0.0]])
        out = lin(Tensor.from_numpy(x_np))
        self.assertIsInstance(out, Node)
        expected = x_np @ lin.weight.to_numpy() + lin.bias.to_numpy()
        np.testing.assert_allclose(out.value.to_numpy(), expected)

    def test_bias_initialized_to_zero(self):
        lin = Linear(3, 2, rng=DeterminismContext(3))
        np.testing.assert_array_equal(lin.bias.to_numpy(), [0.0, 0.0])

    def test_backward_fills_parameter_grads(self):
        lin = Linear(2, 1, rng=DeterminismContext(0))
        x_np = np.array([[1.0, 2.0], [3.0, 4.0]])
        out = lin(Tensor.from_numpy(x_np))
        out.graph.sum(out).backward()
        np.testing.assert_allclose(lin.weight.grad.to_numpy(), x_np.T @ np.ones((2, 1)))
        np.testing.assert_allclose(lin.bias.grad.to_numpy(), [2.0])

    def test_forward_on_existing_node_stays_in_graph(self):
        g = Graph()
        x = g.variable(Tensor.ones((1, 2)))
        lin = Linear(2, 2, rng=DeterminismContext(0))
        out = lin(x)
        self.assertIs(out.graph, g)
        out.graph.sum(out).backward()
        self.assertTrue(x.grad.to_numpy().any())

    def test_invalid_sizes(self):
        with self.assertRaises(ValueError):
            Linear(0, 2)

    def test_unknown_initializer(self):
        with self.assertRaises(ValueError):
            Linear(2, 2, initializer="nope")


class TestSequential(unittest.TestCase):
    def test_layers_applied_in_order_on_one_graph(self):
        model = Sequential(Linear(2, 3), ReLU(), Linear(3, 1), Sigmoid())
        model.reset_parameters(DeterminismContext(5))
        out = model(Tensor.from_numpy([[0.5, -0.5]]))
        self.assertEqual(out.shape, Shape((1, 1)))
        self.assertEqual(out.op_name, "sigmoid")
        self.assertEqual(len(model), 4)
        self.assertIsInstance(model[1], ReLU)

    def test_parameters_in_layer_order(self):
        l1, l2 = Linear(2, 3), Linear(3, 1)
        model = Sequential(l1, ReLU(), l2)
        self.assertEqual(
            model.parameters(), [l1.weight, l1.bias, l2.weight, l2.bias]
        )
        self.assertEqual(
            [n for n, _ in model.named_parameters()],
            ["0.weight", "0.bias", "2.weight", "2.bias"],
        )

    def test_add_rejects_non_modules_and_duplicates(self):
        model = Sequential()
        with self.assertRaises(TypeError):
            model.add("relu")
        model.add(ReLU(), name="act")
        with self.assertRaises(ValueError):
            model.add(ReLU(), name="act")

    def test_module_zero_grad(self):
        model = Sequential(Linear(2, 1, rng=DeterminismContext(1)))
        out = model(Tensor.ones((3, 2)))
        out.graph.sum(out).backward()
        model.zero_grad()
        for p in model.parameters():
            self.assertFalse(p.grad.to_numpy().any())


if __name__ == "__main__":
    unittest.main()
