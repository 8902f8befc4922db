import math
import unittest

import numpy as np

from nodegrad.infrastructure import DeterminismContext, Tensor
from nodegrad.infrastructure.utils.weight_initializer import WeightInitializer


class TestXavierInitializers(unittest.TestCase):
    def test_xavier_uniform_respects_bound(self):
        t = Tensor((64, 32))
        WeightInitializer("xavier_uniform")(t, rng=DeterminismContext(0))
        bound = math.sqrt(6.0 / (64 + 32))
        x = t.to_numpy()
        self.assertLessEqual(float(np.abs(x).max()), bound)
        # Uniform variance is bound^2 / 3.
        self.assertAlmostEqual(float(x.std()), bound / math.sqrt(3.0), delta=0.1 * bound)

    def test_xavier_uniform_draws_exactly_numel_values(self):
        rng = DeterminismContext(4)
        t = Tensor((3, 5))
        WeightInitializer("xavier_uniform")(t, rng=rng)

        ref = DeterminismContext(4)
        bound = math.sqrt(6.0 / 8.0)
        expected = ref.uniform(-bound, bound, 15)
        np.testing.assert_array_equal(t.to_numpy().reshape(-1), expected)
        # Both streams are now at the same position.
        np.testing.assert_array_equal(rng.uniform(0.0, 1.0, 3), ref.uniform(0.0, 1.0, 3))

    def test_xavier_normal_std(self):
        t = Tensor((200, 100))
        WeightInitializer("xavier")(t, rng=DeterminismContext(1))
        x = t.to_numpy()
        expected_std = math.sqrt(2.0 / 300.0)
        self.assertLess(abs(float(x.mean())), 0.01)
        self.assertTrue(math.isclose(float(x.std()), expected_std, rel_tol=0.05))

    def test_same_seed_same_weights(self):
        a, b = Tensor((4, 4)), Tensor((4, 4))
        WeightInitializer("xavier_uniform")(a, rng=DeterminismContext(9))
        WeightInitializer("xavier_uniform")(b, rng=DeterminismContext(9))
        self.assertEqual(a, b)

    def test_one_dimensional_tensor(self):
        t = Tensor((10,))
        WeightInitializer("xavier_uniform")(t, rng=DeterminismContext(0))
        self.assertLessEqual(float(np.abs(t.to_numpy()).max()), math.sqrt(6.0 / 20.0))


if __name__ == "__main__":
    unittest.main()
