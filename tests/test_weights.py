"""Tests for chamfer weight sets and presets."""

import unittest

import numpy as np

from distmap.errors import ConfigurationError
from distmap.weights import ChamferWeights, ChamferWeights3D, WeightSet, as_weight_set


class TestWeightSet(unittest.TestCase):
    """Validation and accessors of WeightSet."""

    def test_accessors(self):
        weights = WeightSet([3, 4, 7], "Borgefors")
        self.assertEqual(len(weights), 3)
        self.assertEqual(weights[2], 7)
        self.assertEqual(list(weights), [3, 4, 7])
        self.assertEqual(weights.unit, 3)
        self.assertEqual(weights.name, "Borgefors")
        self.assertTrue(weights.is_integral)
        self.assertEqual(weights.as_floats(), (3.0, 4.0, 7.0))

    def test_numpy_weights(self):
        weights = WeightSet(np.array([1.0, 1.5], dtype=np.float32))
        self.assertEqual(weights.weights, (1, 1.5))
        self.assertFalse(weights.is_integral)
        with self.assertRaises(ConfigurationError):
            weights.as_ints()

    def test_invalid_weights(self):
        for weights in ([], [1, -1], [1, float("nan")], [1, float("inf")], [1, "a"]):
            with self.assertRaises(ConfigurationError, msg=repr(weights)):
                WeightSet(weights)

    def test_zero_weight_is_legal(self):
        self.assertEqual(WeightSet([0, 1]).unit, 0)

    def test_equality(self):
        self.assertEqual(WeightSet([1, 2]), WeightSet((1.0, 2.0), "other name"))
        self.assertNotEqual(WeightSet([1, 2]), WeightSet([1, 2, 3]))
        self.assertEqual(len({WeightSet([1, 2]), WeightSet([1, 2])}), 1)


class TestPresets(unittest.TestCase):
    """Adaptation of the presets to neighborhood sizes."""

    def test_2d_presets_5x5(self):
        self.assertEqual(ChamferWeights.CITY_BLOCK.weight_set(2).weights, (1, 2, 3))
        self.assertEqual(ChamferWeights.CHESSBOARD.weight_set(2).weights, (1, 1, 2))
        self.assertEqual(ChamferWeights.WEIGHTS_23.weight_set(2).weights, (2, 3, 5))
        self.assertEqual(ChamferWeights.BORGEFORS.weight_set(2).weights, (3, 4, 7))
        self.assertEqual(ChamferWeights.CHESSKNIGHT.weight_set(2).weights, (5, 7, 11))

    def test_2d_presets_3x3(self):
        self.assertEqual(ChamferWeights.BORGEFORS.weight_set(1).weights, (3, 4))
        self.assertEqual(ChamferWeights.CHESSKNIGHT.weight_set(1).weights, (5, 7))

    def test_3d_presets(self):
        self.assertEqual(ChamferWeights3D.BORGEFORS.weight_set(1).weights, (3, 4, 5))
        self.assertEqual(ChamferWeights3D.BORGEFORS.weight_set(2).weights, (3, 4, 5, 8))
        self.assertEqual(ChamferWeights3D.WEIGHTS_3_4_5_7.weight_set(1).weights, (3, 4, 5))
        self.assertEqual(ChamferWeights3D.WEIGHTS_3_4_5_7.weight_set(2).weights, (3, 4, 5, 7))
        self.assertEqual(ChamferWeights3D.CHESSBOARD.weight_set(2).weights, (1, 1, 1, 2))

    def test_unsupported_radius(self):
        with self.assertRaises(ConfigurationError):
            ChamferWeights.BORGEFORS.weight_set(3)

    def test_labels(self):
        self.assertIs(ChamferWeights.from_label("Borgefors (3,4)"), ChamferWeights.BORGEFORS)
        self.assertIs(ChamferWeights3D.from_label("Weights (3,4,5,7)"), ChamferWeights3D.WEIGHTS_3_4_5_7)
        self.assertIn("Chessboard (1,1)", ChamferWeights.labels())
        with self.assertRaises(ConfigurationError):
            ChamferWeights.from_label("Euclidean")

    def test_dimensionality(self):
        self.assertEqual(ChamferWeights.CITY_BLOCK.ndim, 2)
        self.assertEqual(ChamferWeights3D.CITY_BLOCK.ndim, 3)

    def test_as_weight_set(self):
        self.assertEqual(as_weight_set(ChamferWeights.CITY_BLOCK).weights, (1, 2, 3))
        self.assertEqual(as_weight_set(ChamferWeights.CITY_BLOCK, radius=1).weights, (1, 2))
        self.assertEqual(as_weight_set([2, 3]).weights, (2, 3))
        weights = WeightSet([1, 2])
        self.assertIs(as_weight_set(weights), weights)
        with self.assertRaises(ConfigurationError):
            as_weight_set(ChamferWeights.CITY_BLOCK, ndim=3)


if __name__ == "__main__":
    unittest.main()
