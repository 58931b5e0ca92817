"""Tests for the grid module."""

import unittest

import numpy as np

from distmap.errors import DimensionMismatchError
from distmap.grid import Grid


class TestGrid(unittest.TestCase):
    """Test cases for the Grid class."""

    def test_initialization_2d(self):
        grid = Grid.zeros((12, 10), dtype=np.float32)

        # Extents are (x, y), the array is stored [y, x]
        self.assertEqual(grid.extents, (12, 10))
        self.assertEqual(grid.shape, (10, 12))
        self.assertEqual(grid.ndim, 2)
        self.assertEqual((grid.size_x, grid.size_y, grid.size_z), (12, 10, 1))
        self.assertEqual(grid.size, 120)
        self.assertEqual(grid.dtype, np.float32)

    def test_initialization_3d(self):
        grid = Grid.full((4, 5, 6), 255)
        self.assertEqual(grid.shape, (6, 5, 4))
        self.assertEqual((grid.size_x, grid.size_y, grid.size_z), (4, 5, 6))
        self.assertTrue(np.all(grid.array == 255))
        self.assertEqual(grid.dtype, np.uint8)

    def test_point_access(self):
        grid = Grid.zeros((5, 4, 3))
        grid.set(4, 1, 2, 17)
        self.assertEqual(grid.get(4, 1, 2), 17)
        self.assertEqual(grid.array[2, 1, 4], 17)

    def test_bounds(self):
        grid = Grid.zeros((5, 4))
        self.assertTrue(grid.contains(4, 3))
        self.assertFalse(grid.contains(5, 0))
        self.assertFalse(grid.contains(-1, 0))
        self.assertFalse(grid.contains(1, 1, 1))
        with self.assertRaises(IndexError):
            grid.get(0, 4)
        with self.assertRaises(IndexError):
            grid.set(-1, 0, 1)

    def test_from_array(self):
        array = np.arange(6, dtype=np.uint8).reshape(2, 3)
        view = Grid.from_array(array)
        copy = Grid.from_array(array, copy=True)
        array[0, 0] = 9
        self.assertEqual(view.get(0, 0), 9)
        self.assertEqual(copy.get(0, 0), 0)
        self.assertTrue(view.same_extents(copy))

    def test_invalid_arrays(self):
        with self.assertRaises(DimensionMismatchError):
            Grid(np.zeros(5))
        with self.assertRaises(DimensionMismatchError):
            Grid(np.zeros((2, 2, 2, 2)))
        with self.assertRaises(DimensionMismatchError):
            Grid.zeros((5,))
        with self.assertRaises(ValueError):
            Grid(np.zeros((0, 4)))


if __name__ == "__main__":
    unittest.main()
