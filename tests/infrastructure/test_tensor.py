import unittest

import numpy as np

from nodegrad.domain._errors import ShapeMismatch
from nodegrad.domain._shape import Shape
from nodegrad.infrastructure.tensor import Tensor


class TestTensorConstruction(unittest.TestCase):
    def test_zeros_has_shape_and_numel(self):
        t = Tensor.zeros((2, 3))
        self.assertEqual(t.shape, Shape((2, 3)))
        self.assertEqual(t.numel, 6)
        self.assertEqual(t.rank, 2)
        np.testing.assert_array_equal(t.to_numpy(), np.zeros((2, 3)))

    def test_buffer_length_must_match_shape(self):
        with self.assertRaises(ShapeMismatch):
            Tensor((2, 3), [1.0, 2.0])

    def test_constructor_copies_input(self):
        src = np.array([1.0, 2.0, 3.0])
        t = Tensor.from_numpy(src)
        src[0] = 100.0
        self.assertEqual(t.to_numpy()[0], 1.0)

    def test_to_numpy_returns_copy(self):
        t = Tensor.from_numpy([[1.0, 2.0]])
        arr = t.to_numpy()
        arr[0, 0] = 9.0
        self.assertEqual(t.to_numpy()[0, 0], 1.0)

    def test_data_view_is_read_only(self):
        t = Tensor.ones((3,))
        with self.assertRaises(ValueError):
            t.data[0] = 5.0

    def test_storage_is_float64(self):
        t = Tensor.from_numpy(np.array([1, 2], dtype=np.int32))
        self.assertEqual(t.data.dtype, np.float64)

    def test_full_and_scalar(self):
        np.testing.assert_array_equal(Tensor.full((2,), 3.5).to_numpy(), [3.5, 3.5])
        s = Tensor.scalar(4.0)
        self.assertEqual(s.shape, Shape((1,)))
        self.assertEqual(s.item(), 4.0)

    def test_item_requires_single_element(self):
        with self.assertRaises(ValueError):
            Tensor.zeros((2,)).item()


class TestTensorMutation(unittest.TestCase):
    def test_copy_from_numpy_in_place(self):
        t = Tensor.zeros((2, 2))
        t.copy_from_numpy([[1.0, 2.0], [3.0, 4.0]])
        np.testing.assert_array_equal(t.to_numpy(), [[1.0, 2.0], [3.0, 4.0]])

    def test_copy_from_numpy_wrong_size(self):
        with self.assertRaises(ShapeMismatch):
            Tensor.zeros((2, 2)).copy_from_numpy([1.0, 2.0, 3.0])

    def test_add_accumulates(self):
        t = Tensor.ones((2,))
        t.add_(Tensor.full((2,), 2.0))
        t.add_(Tensor.full((2,), 2.0))
        np.testing.assert_array_equal(t.to_numpy(), [5.0, 5.0])

    def test_add_rejects_shape_mismatch(self):
        with self.assertRaises(ShapeMismatch):
            Tensor.ones((2,)).add_(Tensor.ones((3,)))

    def test_assign_and_fill(self):
        t = Tensor.zeros((3,))
        t.assign_(Tensor.from_numpy([1.0, 2.0, 3.0]))
        np.testing.assert_array_equal(t.to_numpy(), [1.0, 2.0, 3.0])
        t.fill(0.0)
        np.testing.assert_array_equal(t.to_numpy(), [0.0, 0.0, 0.0])

    def test_clone_is_independent(self):
        t = Tensor.ones((2,))
        c = t.clone()
        c.fill(7.0)
        np.testing.assert_array_equal(t.to_numpy(), [1.0, 1.0])
        self.assertNotEqual(t, c)
        self.assertEqual(t, Tensor.ones((2,)))


if __name__ == "__main__":
    unittest.main()
