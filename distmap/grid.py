"""
Grid data structure for distance maps.

This module contains the Grid class, a thin owner of a dense 2D or 3D numpy
array used both for mask samples and for distance accumulators.
"""

from typing import Any, Sequence, Tuple, Union

import numpy as np

from distmap.errors import DimensionMismatchError


SUPPORTED_DIMENSIONS = (2, 3)


class Grid:
    """
    A dense 2D or 3D grid of samples.

    Important coordinate conventions:
    - Samples are stored in a [size_y, size_x] or [size_z, size_y, size_x] array,
      consistent with the ZYX ordering used for volumes
    - Public accessors take coordinates in (x, y) or (x, y, z) order
    - Extents are reported in (size_x, size_y[, size_z]) order
    """

    def __init__(self, array: np.ndarray):
        """
        Wrap an existing array.

        Args:
            array: 2D or 3D numpy array, stored in [y, x] or [z, y, x] order

        Raises:
            DimensionMismatchError: If the array is neither 2D nor 3D
            ValueError: If the array has a zero extent
        """
        array = np.asarray(array)
        if array.ndim not in SUPPORTED_DIMENSIONS:
            raise DimensionMismatchError(
                f"Grid must be 2D or 3D, got array with {array.ndim} dimensions"
            )
        if array.size == 0:
            raise ValueError(f"Grid must not be empty, got shape {array.shape}")
        self._array = array

    @classmethod
    def from_array(cls, array: Union[np.ndarray, Sequence], copy: bool = False) -> "Grid":
        """Create a grid from an array-like, optionally copying the samples."""
        array = np.array(array, copy=True) if copy else np.asarray(array)
        return cls(array)

    @classmethod
    def zeros(cls, extents: Sequence[int], dtype: Any = np.uint8) -> "Grid":
        """Create a grid filled with zeros from (size_x, size_y[, size_z]) extents."""
        return cls(np.zeros(_shape_from_extents(extents), dtype=dtype))

    @classmethod
    def full(cls, extents: Sequence[int], value, dtype: Any = np.uint8) -> "Grid":
        """Create a grid filled with a constant value."""
        return cls(np.full(_shape_from_extents(extents), value, dtype=dtype))

    @property
    def array(self) -> np.ndarray:
        return self._array

    @property
    def ndim(self) -> int:
        return self._array.ndim

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._array.shape

    @property
    def extents(self) -> Tuple[int, ...]:
        return tuple(reversed(self._array.shape))

    @property
    def size_x(self) -> int:
        return self._array.shape[-1]

    @property
    def size_y(self) -> int:
        return self._array.shape[-2]

    @property
    def size_z(self) -> int:
        return self._array.shape[0] if self.ndim == 3 else 1

    @property
    def size(self) -> int:
        return self._array.size

    @property
    def dtype(self) -> np.dtype:
        return self._array.dtype

    def contains(self, *coords: int) -> bool:
        """
        Check whether a position lies inside the grid.

        Args:
            *coords: Position in (x, y) or (x, y, z) order

        Returns:
            True if every coordinate is within its extent
        """
        if len(coords) != self.ndim:
            return False
        return all(0 <= c < s for c, s in zip(coords, self.extents))

    def get(self, *coords: int):
        """Get the sample at (x, y[, z]), raising IndexError outside the grid."""
        return self._array[self._index(coords)].item()

    def set(self, *args) -> None:
        """Set the sample at (x, y[, z]) to the value given as last argument."""
        *coords, value = args
        self._array[self._index(tuple(coords))] = value

    def same_extents(self, other: "Grid") -> bool:
        return self.shape == other.shape

    def copy(self) -> "Grid":
        return Grid(self._array.copy())

    def _index(self, coords: Tuple[int, ...]) -> Tuple[int, ...]:
        if not self.contains(*coords):
            raise IndexError(f"Position {coords} is outside grid with extents {self.extents}")
        return tuple(reversed(coords))

    def __repr__(self) -> str:
        return f"Grid(extents={self.extents}, dtype={self.dtype})"


def _shape_from_extents(extents: Sequence[int]) -> Tuple[int, ...]:
    if len(extents) not in SUPPORTED_DIMENSIONS:
        raise DimensionMismatchError(f"Extents must have 2 or 3 values, got {tuple(extents)}")
    return tuple(int(e) for e in reversed(extents))
