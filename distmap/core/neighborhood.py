"""
Chamfer neighborhoods for raster-scan distance transforms.

This module expands a weight set into the weighted offsets consulted by the
forward and backward sweeps. Offsets are generated from the symmetry of each
weight class instead of being listed by hand:

- every integer shift inside the (2r+1)^n cube is enumerated,
- its sorted absolute coordinates select the weight class it belongs to,
- shifts pointing to positions already visited in raster order (leading
  non-zero coordinate negative, in z, y, x order) form the forward list,
- the backward list is the point reflection of the forward list.
"""

import itertools
from functools import lru_cache
from typing import Dict, NamedTuple, Sequence, Tuple

from distmap.errors import ConfigurationError


# Weight classes, keyed by (ndim, radius). Each class is identified by the
# absolute values of its shift coordinates, sorted in decreasing order.
WEIGHT_CLASSES: Dict[Tuple[int, int], Tuple[Tuple[int, ...], ...]] = {
    (2, 1): ((1, 0), (1, 1)),
    (2, 2): ((1, 0), (1, 1), (2, 1)),
    (3, 1): ((1, 0, 0), (1, 1, 0), (1, 1, 1)),
    (3, 2): ((1, 0, 0), (1, 1, 0), (1, 1, 1), (2, 1, 1)),
}


class WeightedOffset(NamedTuple):
    """A neighbor shift, in array axis order, with the weight of its class."""

    shift: Tuple[int, ...]
    weight: float

    @property
    def dx(self) -> int:
        return self.shift[-1]

    @property
    def dy(self) -> int:
        return self.shift[-2]

    @property
    def dz(self) -> int:
        return self.shift[0] if len(self.shift) == 3 else 0

    def mirrored(self) -> "WeightedOffset":
        return WeightedOffset(tuple(-d for d in self.shift), self.weight)


class Neighborhood(NamedTuple):
    """Forward and backward offset tables of one chamfer configuration."""

    ndim: int
    radius: int
    weights: Tuple[float, ...]
    forward: Tuple[WeightedOffset, ...]
    backward: Tuple[WeightedOffset, ...]


def required_weight_count(ndim: int, radius: int) -> int:
    """
    Get the number of weight classes of a neighborhood.

    Args:
        ndim: Dimensionality of the grid (2 or 3)
        radius: Neighborhood radius (1 for 3x3, 2 for 5x5)

    Returns:
        Number of weights the neighborhood needs
    """
    try:
        return len(WEIGHT_CLASSES[(ndim, radius)])
    except KeyError:
        raise ConfigurationError(
            f"Unsupported neighborhood: {ndim}D with radius {radius}"
        ) from None


def infer_radius(ndim: int, weight_count: int) -> int:
    """Find the radius whose neighborhood uses exactly `weight_count` weights."""
    for (dims, radius), classes in WEIGHT_CLASSES.items():
        if dims == ndim and len(classes) == weight_count:
            return radius
    raise ConfigurationError(
        f"No {ndim}D neighborhood uses {weight_count} weights"
    )


def is_forward(shift: Sequence[int]) -> bool:
    """Check whether a shift points to a position already visited in raster order."""
    for d in shift:
        if d != 0:
            return d < 0
    return False


def build_neighborhood(weights: Sequence[float], ndim: int, radius: int) -> Neighborhood:
    """
    Expand chamfer weights into forward and backward offset tables.

    Args:
        weights: One weight per class, orthogonal first
        ndim: Dimensionality of the grid (2 or 3)
        radius: Neighborhood radius (1 or 2)

    Returns:
        Neighborhood with the forward and backward weighted offsets

    Raises:
        ConfigurationError: If the weight count does not match the neighborhood
    """
    weights = tuple(weights)
    # 3 and 3.0 compare equal, the weight types keep int and float tables apart
    return _build_neighborhood(weights, tuple(type(w) for w in weights), int(ndim), int(radius))


@lru_cache(maxsize=64)
def _build_neighborhood(weights: Tuple[float, ...], weight_types: Tuple[type, ...], ndim: int, radius: int) -> Neighborhood:
    count = required_weight_count(ndim, radius)
    if len(weights) != count:
        raise ConfigurationError(
            f"A {ndim}D neighborhood of radius {radius} needs {count} weights, "
            f"got {len(weights)}"
        )

    class_index = {signature: i for i, signature in enumerate(WEIGHT_CLASSES[(ndim, radius)])}

    forward = []
    for shift in itertools.product(range(-radius, radius + 1), repeat=ndim):
        if not is_forward(shift):
            continue
        signature = tuple(sorted((abs(d) for d in shift), reverse=True))
        index = class_index.get(signature)
        if index is None:
            continue
        forward.append(WeightedOffset(shift, weights[index]))

    backward = [offset.mirrored() for offset in forward]
    return Neighborhood(ndim, radius, weights, tuple(forward), tuple(backward))
