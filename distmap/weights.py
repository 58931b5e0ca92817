"""
Chamfer weight sets and weight presets.

A weight set is an ordered list of non-negative weights, one per weight
class, ordered by increasing geometric distance: orthogonal, diagonal,
cube diagonal (3D only) and knight move. The presets reproduce the usual
chamfer metrics for 2D images and 3D volumes.
"""

import math
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from distmap.errors import ConfigurationError


class WeightSet:
    """
    Immutable ordered list of chamfer weights.

    Attributes:
        weights: Tuple of weights indexed by weight class
        name: Optional human readable label
    """

    __slots__ = ("_weights", "_name")

    def __init__(self, weights: Sequence[float], name: str = ""):
        weights = tuple(weights)
        if not weights:
            raise ConfigurationError("Weight set must contain at least one weight")
        for w in weights:
            try:
                value = float(w)
            except (TypeError, ValueError):
                raise ConfigurationError(f"Weights must be numbers, got {w!r}") from None
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"Weights must be finite and non-negative, got {w!r}")
        self._weights = tuple(_as_number(w) for w in weights)
        self._name = name

    @property
    def weights(self) -> Tuple[float, ...]:
        return self._weights

    @property
    def name(self) -> str:
        return self._name

    @property
    def unit(self) -> float:
        """Orthogonal weight, used to normalize distance maps."""
        return self._weights[0]

    @property
    def is_integral(self) -> bool:
        return all(float(w).is_integer() for w in self._weights)

    def as_ints(self) -> Tuple[int, ...]:
        if not self.is_integral:
            raise ConfigurationError(f"Weights {self._weights} are not integral")
        return tuple(int(w) for w in self._weights)

    def as_floats(self) -> Tuple[float, ...]:
        return tuple(float(w) for w in self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __getitem__(self, index: int):
        return self._weights[index]

    def __iter__(self) -> Iterator:
        return iter(self._weights)

    def __eq__(self, other) -> bool:
        if not isinstance(other, WeightSet):
            return NotImplemented
        return self._weights == other._weights

    def __hash__(self) -> int:
        return hash(self._weights)

    def __repr__(self) -> str:
        if self._name:
            return f"WeightSet({list(self._weights)}, name={self._name!r})"
        return f"WeightSet({list(self._weights)})"


def as_weight_set(
    weights: Union["WeightSet", "ChamferWeights", "ChamferWeights3D", Sequence[float]],
    radius: Optional[int] = None,
    ndim: Optional[int] = None,
) -> WeightSet:
    """
    Coerce a weight set, a preset or a plain sequence into a WeightSet.

    Presets are adapted to the neighborhood radius (5x5 or 5x5x5 when no
    radius is given); explicit weights are taken as they are.

    Raises:
        ConfigurationError: If a preset is used with the wrong dimensionality
    """
    if isinstance(weights, WeightSet):
        return weights
    if isinstance(weights, (ChamferWeights, ChamferWeights3D)):
        if ndim is not None and weights.ndim != ndim:
            raise ConfigurationError(f"{weights.label} weights are for {weights.ndim}D grids, not {ndim}D")
        return weights.weight_set(2 if radius is None else radius)
    return WeightSet(weights)


def _as_number(value):
    value = float(value)
    return int(value) if value.is_integer() else value


class _PresetMixin:
    """Behaviour shared by the 2D and 3D preset catalogs."""

    def __init__(self, label: str, weights: Tuple[int, ...]):
        self.label = label
        self.weights = weights

    @property
    def ndim(self) -> int:
        return 2

    def weight_set(self, radius: int = 2) -> WeightSet:
        """
        Adapt this preset to the class count of a neighborhood.

        Extra weights are dropped for radius 1. For radius 2, a missing knight
        weight is completed as the orthogonal weight plus the largest
        non-knight weight, which is the cost of the equivalent two-step path.

        Args:
            radius: Neighborhood radius (1 or 2)

        Returns:
            WeightSet with exactly the number of weights the neighborhood needs
        """
        # radius 1 uses one class per non-zero coordinate count
        base = self.ndim
        if radius == 1:
            count = base
        elif radius == 2:
            count = base + 1
        else:
            raise ConfigurationError(f"Unsupported neighborhood radius: {radius}")

        weights = list(self.weights[:count])
        if len(weights) == count - 1 and radius == 2:
            weights.append(weights[0] + weights[-1])
        return WeightSet(weights, self.label)

    @classmethod
    def from_label(cls, label: str):
        for preset in cls:
            if preset.label == label:
                return preset
        raise ConfigurationError(f"Unknown chamfer weights label: {label!r}")

    @classmethod
    def labels(cls) -> List[str]:
        return [preset.label for preset in cls]


class ChamferWeights(_PresetMixin, Enum):
    """Chamfer weight presets for 2D images."""

    CITY_BLOCK = ("City-Block (1,2)", (1, 2))
    CHESSBOARD = ("Chessboard (1,1)", (1, 1))
    WEIGHTS_23 = ("Weights (2,3)", (2, 3))
    BORGEFORS = ("Borgefors (3,4)", (3, 4))
    CHESSKNIGHT = ("Chessknight (5,7,11)", (5, 7, 11))


class ChamferWeights3D(_PresetMixin, Enum):
    """Chamfer weight presets for 3D volumes."""

    CITY_BLOCK = ("City-Block (1,2,3)", (1, 2, 3))
    CHESSBOARD = ("Chessboard (1,1,1)", (1, 1, 1))
    BORGEFORS = ("Borgefors (3,4,5)", (3, 4, 5))
    WEIGHTS_3_4_5_7 = ("Weights (3,4,5,7)", (3, 4, 5, 7))
    WEIGHTS_10_14_17_22 = ("Weights (10,14,17,22)", (10, 14, 17, 22))

    @property
    def ndim(self) -> int:
        return 3
