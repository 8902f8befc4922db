import unittest

from nodegrad.domain.utils._weight_initialization import (
    _calculate_fan_in,
    _calculate_fan_in_and_fan_out,
)


class TestFanComputation(unittest.TestCase):
    def test_linear_layout_is_in_by_out(self):
        self.assertEqual(_calculate_fan_in_and_fan_out((3, 5)), (3, 5))
        self.assertEqual(_calculate_fan_in((3, 5)), 3)

    def test_vector_and_scalar(self):
        self.assertEqual(_calculate_fan_in_and_fan_out((4,)), (4, 4))
        self.assertEqual(_calculate_fan_in_and_fan_out(()), (1, 1))
        self.assertEqual(_calculate_fan_in(()), 1)

    def test_receptive_field_multiplies_both(self):
        self.assertEqual(_calculate_fan_in_and_fan_out((2, 3, 4)), (8, 12))


if __name__ == "__main__":
    unittest.main()
