import unittest

from nodegrad.domain._optimizers import IOptimizer
from nodegrad.infrastructure._parameter import Parameter
from nodegrad.infrastructure.optimizers import SGD, Adam


class TestOptimizerProtocol(unittest.TestCase):
    def test_sgd_conforms_to_ioptimizer(self):
        p = Parameter((1,), [0.0])
        opt = SGD([p], lr=1e-3)
        self.assertIsInstance(opt, IOptimizer)

    def test_adam_conforms_to_ioptimizer(self):
        p = Parameter((1,), [0.0])
        opt = Adam([p], lr=1e-3)
        self.assertIsInstance(opt, IOptimizer)


if __name__ == "__main__":
    unittest.main()
